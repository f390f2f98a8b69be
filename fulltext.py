"""
Full-text links for canvases.

Checking every page of a large newspaper would take far too long, so we only ask
the Full-Text API about the start canvas. If that page has a full text, we assume
all pages have one and add a link to every canvas.
"""

import logging
from typing import Callable

from models import AnnotationPage, FullTextStatus, Manifest

logger = logging.getLogger(__name__)


def enrich(
    manifest: Manifest,
    probe: Callable[[int], FullTextStatus],
    fulltext_url: Callable[[str, int], str],
) -> bool:
    """
    Add a full-text annotation page to all canvases when `probe` reports that the start
    canvas has one. `probe` is called at most once. Returns True when links were added.
    """
    if not manifest.canvases or manifest.start_canvas is None:
        logger.debug("Not checking for fulltext because record doesn't have any canvases")
        return False

    status = probe(manifest.start_canvas.order)
    if status != FullTextStatus.EXISTS:
        logger.debug(
            "No full-text links added for %s (probe result: %s)",
            manifest.europeana_id,
            status.value,
        )
        return False

    for canvas in manifest.canvases:
        url = fulltext_url(manifest.europeana_id, canvas.order)
        canvas.annotation_pages.append(AnnotationPage(id=url))
    logger.debug(
        "Added full-text links to %d canvases of %s",
        len(manifest.canvases),
        manifest.europeana_id,
    )
    return True
