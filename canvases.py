"""
Canvas and annotation assembly: one canvas per (ordered) web resource.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mediatypes import MediaType, MediaTypes
from models import (
    Annotation,
    AnnotationBody,
    AnnotationPage,
    Canvas,
    Service,
    WebResource,
)
from record import find_service, get_service_profile
from settings import ManifestSettings

logger = logging.getLogger(__name__)

TIME_MODE_TRIM = "trim"
IMAGE = "Image"


def get_body_service(
    resource: WebResource, services: List[Dict[str, Any]], europeana_id: str
) -> Optional[Service]:
    """Service of a web resource, only if it is defined in the record's services."""
    if not resource.service_id:
        logger.debug("No serviceId for webresource %s", resource.id)
        return None
    service = find_service(services, resource.service_id)
    if service is None:
        logger.warning(
            "Record %s defined service %s in webresource, but no such service is defined",
            europeana_id,
            resource.service_id,
        )
        return None
    profile = get_service_profile(service, europeana_id)
    if not profile:
        logger.warning(
            "Record %s has service %s without a profile, service omitted",
            europeana_id,
            resource.service_id,
        )
        return None
    return Service(id=resource.service_id, profile=profile)


def get_annotation_body(
    resource: WebResource,
    canvas: Canvas,
    media_types: MediaTypes,
    euscreen_type: Optional[MediaType] = None,
) -> AnnotationBody:
    body = AnnotationBody(id=resource.id)
    if euscreen_type is not None:
        # the file itself is not available, so we don't trust its mime type
        logger.debug(
            "Override media type of %s with %s (EUScreen)", resource.id, euscreen_type.type
        )
        body.type = euscreen_type.type
        return body

    body.format = resource.mime_type
    media_type = media_types.get_media_type(resource.mime_type)
    if media_type is None:
        logger.debug(
            "No media category for webresource %s with mime type %s",
            resource.id,
            resource.mime_type,
        )
        return body

    body.type = media_type.type
    if media_type.is_browser_supported:
        body.height = canvas.height
        body.width = canvas.width
        if body.type != IMAGE:
            body.duration = canvas.duration
    return body


def is_time_based(body: AnnotationBody, euscreen_type: Optional[MediaType]) -> bool:
    if euscreen_type is not None:
        return True
    return body.type in ("Video", "Sound")


def assemble_canvas(
    order: int,
    resource: WebResource,
    europeana_id: str,
    settings: ManifestSettings,
    media_types: MediaTypes,
    services: List[Dict[str, Any]],
    euscreen_type: Optional[MediaType] = None,
) -> Canvas:
    canvas_id = settings.canvas_id(europeana_id, order)
    canvas = Canvas(
        id=canvas_id,
        order=order,
        label=f"p. {order}",
        width=resource.width,
        height=resource.height,
        duration=resource.duration_seconds,
        rights=resource.rights,
        attribution_text=resource.attribution_text or None,
        attribution_html=resource.attribution_html or None,
    )

    # resources with an image service describe themselves
    if not resource.service_id:
        canvas.thumbnail = settings.canvas_thumbnail_url(resource.id)

    body = get_annotation_body(resource, canvas, media_types, euscreen_type)
    body.service = get_body_service(resource, services, europeana_id)

    annotation = Annotation(target=canvas_id, body=body)
    if is_time_based(body, euscreen_type):
        annotation.time_mode = TIME_MODE_TRIM

    canvas.annotation_pages.append(AnnotationPage(items=[annotation]))
    return canvas


def assemble_canvases(
    resources: List[WebResource],
    europeana_id: str,
    settings: ManifestSettings,
    media_types: MediaTypes,
    services: List[Dict[str, Any]],
    euscreen_type: Optional[MediaType] = None,
) -> List[Canvas]:
    """Canvases p1..pN for the resources, which must already be in page order."""
    return [
        assemble_canvas(
            order, resource, europeana_id, settings, media_types, services, euscreen_type
        )
        for order, resource in enumerate(resources, start=1)
    ]


def get_start_canvas(canvases: List[Canvas], is_shown_by: Optional[str]) -> Optional[Canvas]:
    """The canvas that paints edmIsShownBy, or else the first canvas."""
    if not canvases:
        logger.debug("Start canvas = None (no canvases present)")
        return None
    if is_shown_by:
        for canvas in canvases:
            if canvas.painting.body.id == is_shown_by:
                logger.debug("Start canvas = %d (matches with edmIsShownBy)", canvas.order)
                return canvas
    logger.debug("Start canvas = 1 (no match with edmIsShownBy, select first)")
    return canvases[0]
