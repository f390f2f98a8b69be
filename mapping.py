"""
Derive a Manifest from a parsed EDM record.

All fields are derived once here; export.py only changes the shape for IIIF
Presentation v2 or v3.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from canvases import assemble_canvases, get_start_canvas
from exceptions import DataInconsistentError
from languagemap import DEFAULT_METADATA_KEY, LanguageMap, merge_language_maps
from mediatypes import MediaType, MediaTypes
from models import Canvas, DataSet, Manifest, MetadataEntry, WebResource
from record import (
    first_value,
    get_edm_type,
    get_entity_pref_labels,
    get_europeana_id,
    get_has_views,
    get_is_shown_at,
    get_is_shown_by,
    get_landing_page,
    get_license_text,
    get_nav_date,
    get_services,
    get_thumbnail_id,
    get_web_resources,
    is_euscreen_item,
    is_url,
    select,
)
from sequencing import filter_eligible, sort_web_resources
from settings import ManifestSettings

logger = logging.getLogger(__name__)

# (label, proxy field)
METADATA_FIELDS = [
    ("date", "dcDate"),
    ("format", "dcFormat"),
    ("relation", "dcRelation"),
    ("type", "dcType"),
    ("language", "dcLanguage"),
    ("source", "dcSource"),
]

DATASET_FORMATS = [
    (".json-ld", "application/ld+json"),
    (".json", "application/json"),
    (".rdf", "application/rdf+xml"),
]


def _proxy_maps(record: Dict[str, Any], field_name: str) -> List[LanguageMap]:
    return [
        LanguageMap.from_edm(m) for m in select(record, f"object.proxies[*].{field_name}")
    ]


def get_label(record: Dict[str, Any]) -> Optional[LanguageMap]:
    """Titles of all proxies, or the descriptions if there are no titles."""
    label = merge_language_maps(_proxy_maps(record, "dcTitle"))
    if label is None:
        label = merge_language_maps(_proxy_maps(record, "dcDescription"))
    return label


def get_description(record: Dict[str, Any]) -> Optional[LanguageMap]:
    """Descriptions, but only if they weren't used as label already."""
    if merge_language_maps(_proxy_maps(record, "dcTitle")) is None:
        return None
    return merge_language_maps(_proxy_maps(record, "dcDescription"))


def link_metadata_value(record: Dict[str, Any], value_map: LanguageMap) -> LanguageMap:
    """
    Wrap url values in an html anchor. When a url is also the about of a timespan,
    agent, concept or place, the prefLabels of that entity are merged in as well.
    """
    linked = LanguageMap()
    extra_labels: List[LanguageMap] = []
    for key, values in value_map.items():
        new_values = []
        for value in values:
            if not is_url(value):
                new_values.append(value)
                continue
            new_values.append(f"<a href='{value}'>{value}</a>")
            pref_labels = get_entity_pref_labels(record, value)
            if pref_labels:
                extra_labels.append(pref_labels)
        linked.put(key, new_values)
    if extra_labels:
        return merge_language_maps([linked] + extra_labels)
    return linked


def get_metadata(record: Dict[str, Any]) -> List[MetadataEntry]:
    """
    One entry per field in a fixed order, with the values of all proxies merged
    and url values linked. Both IIIF versions render this same list.
    """
    metadata = []
    for label, field_name in METADATA_FIELDS:
        merged = merge_language_maps(_proxy_maps(record, field_name))
        if not merged:
            continue
        metadata.append(
            MetadataEntry(
                label=LanguageMap(DEFAULT_METADATA_KEY, label),
                value=link_metadata_value(record, merged),
            )
        )
    return metadata


def get_attribution(
    record: Dict[str, Any], europeana_id: str, is_shown_by: Optional[str], snippet: str
) -> Optional[str]:
    """Attribution snippet of the web resource that is edmIsShownBy."""
    if not is_shown_by:
        return None
    values = select(
        record,
        f"object.aggregations[*].webResources[?].{snippet}",
        where=lambda wr: wr.get("about") == is_shown_by,
    )
    return first_value(snippet, europeana_id, values) or None


def get_datasets(settings: ManifestSettings, europeana_id: str) -> List[DataSet]:
    return [
        DataSet(id=settings.dataset_id(europeana_id, postfix), format=media_type)
        for postfix, media_type in DATASET_FORMATS
    ]


def get_euscreen_type(
    record: Dict[str, Any],
    europeana_id: str,
    is_shown_by: Optional[str],
    media_types: MediaTypes,
) -> Optional[MediaType]:
    """
    EUScreen audio and video has no edmIsShownBy, only an edmIsShownAt pointing to
    the EUScreen website. For those we force the media type based on edmType.
    """
    if is_shown_by:
        return None
    edm_type = get_edm_type(record, europeana_id)
    is_shown_at = get_is_shown_at(record, europeana_id)
    logger.debug("isShownAt = %s", is_shown_at)
    if not is_euscreen_item(edm_type, is_shown_by, is_shown_at):
        return None
    logger.debug("Item is EUScreen: edmType - %s, isShownAt - %s", edm_type, is_shown_at)
    return media_types.get_euscreen_type(edm_type)


def get_ordered_web_resources(
    record: Dict[str, Any],
    europeana_id: str,
    is_shown_by: Optional[str],
    settings: ManifestSettings,
) -> List[WebResource]:
    """Web resources that are edmIsShownBy or hasView, in page order."""
    resources = [WebResource.from_edm(wr) for wr in get_web_resources(record)]
    eligible = filter_eligible(resources, is_shown_by, get_has_views(record))
    try:
        return sort_web_resources(eligible)
    except DataInconsistentError as e:
        if not settings.suppress_parse_exception:
            raise
        logger.error(
            "Error trying to sort webresources for %s. Cause: %s", europeana_id, e.message
        )
        return []


def record_to_manifest(
    record: Dict[str, Any], settings: ManifestSettings, media_types: MediaTypes
) -> Manifest:
    """Build the Manifest for a parsed record."""
    europeana_id = get_europeana_id(record)
    if not europeana_id:
        raise DataInconsistentError("Record has no object.about value")

    is_shown_by = get_is_shown_by(record, europeana_id)
    euscreen_type = get_euscreen_type(record, europeana_id, is_shown_by, media_types)
    if euscreen_type is not None:
        is_shown_by = get_is_shown_at(record, europeana_id)

    manifest = Manifest(
        europeana_id=europeana_id,
        id=settings.manifest_id(europeana_id),
        is_shown_by=is_shown_by,
        label=get_label(record),
        description=get_description(record),
        metadata=get_metadata(record),
        thumbnail=get_thumbnail_id(record, europeana_id),
        nav_date=get_nav_date(record, europeana_id),
        homepage=get_landing_page(record, europeana_id),
        rights=get_license_text(record, europeana_id),
        attribution_text=get_attribution(
            record, europeana_id, is_shown_by, "textAttributionSnippet"
        ),
        attribution_html=get_attribution(
            record, europeana_id, is_shown_by, "htmlAttributionSnippet"
        ),
        datasets=get_datasets(settings, europeana_id),
        search_service=settings.content_search_url(europeana_id),
    )

    resources = get_ordered_web_resources(record, europeana_id, is_shown_by, settings)
    canvases: List[Canvas] = assemble_canvases(
        resources,
        europeana_id,
        settings,
        media_types,
        get_services(record),
        euscreen_type,
    )
    if canvases:
        manifest.canvases = canvases
        manifest.start_canvas = get_start_canvas(canvases, is_shown_by)
    else:
        logger.debug("No canvas generated for europeanaId %s", europeana_id)
    return manifest
