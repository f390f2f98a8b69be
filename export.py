"""
Export helpers: IIIF Presentation v2 and v3 JSON-LD for a derived Manifest.
Both functions only reshape the Manifest; no field is derived here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from languagemap import DEFAULT_METADATA_KEY, NO_LANGUAGE_KEY, to_language_objects
from models import AnnotationBody, Canvas, IiifVersion, Manifest, MetadataEntry

EUROPEANA_LOGO_URL = "https://style.europeana.eu/images/europeana-logo-default.png"
SEARCH_CONTEXT = "http://iiif.io/api/search/1/context.json"
SEARCH_PROFILE = "http://iiif.io/api/search/1/search"
IMAGE_CONTEXT_V2 = "http://iiif.io/api/image/2/context.json"
IMAGE_SERVICE_TYPE_3 = "ImageService3"

CONTEXT_V2 = "http://iiif.io/api/presentation/2/context.json"
CONTEXT_V3 = [
    "http://www.w3.org/ns/anno.jsonld",
    "http://iiif.io/api/presentation/3/context.json",
]

# v3 body type -> v2 dctypes class
DCTYPES_V2 = {
    "Image": "dctypes:Image",
    "Sound": "dctypes:Sound",
    "Video": "dctypes:MovingImage",
    "Text": "dctypes:Text",
}

PROVIDER_V3 = {
    "id": "https://www.europeana.eu/en/about-us",
    "type": "Agent",
    "homepage": [
        {
            "id": "https://www.europeana.eu",
            "type": "Text",
            "label": {DEFAULT_METADATA_KEY: ["Europeana"]},
        }
    ],
    "logo": [{"id": EUROPEANA_LOGO_URL, "type": "Image"}],
}


def _without_empty(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys without a value."""
    return {k: v for k, v in data.items() if v is not None and v != [] and v != {}}


def _language_map(value) -> Optional[Dict[str, List[str]]]:
    if not value:
        return None
    return {key: list(values) for key, values in value.items()}


def _required_statement(html: Optional[str]) -> Optional[Dict[str, Any]]:
    if not html:
        return None
    return {
        "label": {DEFAULT_METADATA_KEY: ["Attribution"]},
        "value": {DEFAULT_METADATA_KEY: [html]},
    }


# ---------------------------------------------------------------------------
# IIIF Presentation 3
# ---------------------------------------------------------------------------


def body_to_jsonld_v3(body: AnnotationBody) -> Dict[str, Any]:
    service = None
    if body.service is not None:
        service = _without_empty(
            {
                "id": body.service.id,
                "type": IMAGE_SERVICE_TYPE_3,
                "profile": body.service.profile,
            }
        )
    return _without_empty(
        {
            "id": body.id,
            "type": body.type,
            "format": body.format,
            "height": body.height,
            "width": body.width,
            "duration": body.duration,
            "service": service,
        }
    )


def canvas_to_jsonld_v3(canvas: Canvas) -> Dict[str, Any]:
    painting_pages = []
    for page in canvas.annotation_pages[:1]:
        painting_pages.append(
            _without_empty(
                {
                    "id": page.id,
                    "type": "AnnotationPage",
                    "items": [
                        _without_empty(
                            {
                                "type": "Annotation",
                                "motivation": annotation.motivation,
                                "timeMode": annotation.time_mode,
                                "body": body_to_jsonld_v3(annotation.body),
                                "target": annotation.target,
                            }
                        )
                        for annotation in page.items
                    ],
                }
            )
        )

    thumbnail = None
    if canvas.thumbnail:
        thumbnail = [{"id": canvas.thumbnail, "type": "Image"}]

    return _without_empty(
        {
            "id": canvas.id,
            "type": "Canvas",
            "label": {NO_LANGUAGE_KEY: [canvas.label]},
            "height": canvas.height,
            "width": canvas.width,
            "duration": canvas.duration,
            "rights": canvas.rights,
            "requiredStatement": _required_statement(canvas.attribution_html),
            "thumbnail": thumbnail,
            "items": painting_pages,
            "annotations": [
                {"id": page.id, "type": "AnnotationPage"}
                for page in canvas.full_text_pages
            ],
        }
    )


def metadata_to_jsonld_v3(entry: MetadataEntry) -> Dict[str, Any]:
    return {"label": _language_map(entry.label), "value": _language_map(entry.value)}


def manifest_to_jsonld_v3(manifest: Manifest) -> Dict[str, Any]:
    """
    Generate a IIIF Presentation 3.0 Manifest
    """
    thumbnail = None
    if manifest.thumbnail:
        thumbnail = [{"id": manifest.thumbnail, "type": "Image"}]

    homepage = None
    if manifest.homepage:
        homepage = [
            {
                "id": manifest.homepage,
                "type": "Text",
                "label": {DEFAULT_METADATA_KEY: ["Europeana"]},
                "format": "text/html",
            }
        ]

    start = None
    if manifest.start_canvas is not None:
        start = {"id": manifest.start_canvas.id, "type": "Canvas"}

    return _without_empty(
        {
            "@context": CONTEXT_V3,
            "id": manifest.id,
            "type": "Manifest",
            "label": _language_map(manifest.label),
            "summary": _language_map(manifest.description),
            "metadata": [metadata_to_jsonld_v3(m) for m in manifest.metadata],
            "thumbnail": thumbnail,
            "navDate": manifest.nav_date,
            "homepage": homepage,
            "requiredStatement": _required_statement(manifest.attribution_html),
            "rights": manifest.rights,
            "provider": [PROVIDER_V3],
            "seeAlso": [
                {
                    "id": dataset.id,
                    "type": "Dataset",
                    "format": dataset.format,
                    "profile": dataset.profile,
                }
                for dataset in manifest.datasets
            ],
            "service": [
                {
                    "@context": SEARCH_CONTEXT,
                    "id": manifest.search_service,
                    "profile": SEARCH_PROFILE,
                }
            ]
            if manifest.search_service
            else None,
            "start": start,
            "items": [canvas_to_jsonld_v3(c) for c in manifest.canvases],
        }
    )


# ---------------------------------------------------------------------------
# IIIF Presentation 2
# ---------------------------------------------------------------------------


def body_to_jsonld_v2(body: AnnotationBody) -> Dict[str, Any]:
    service = None
    if body.service is not None:
        service = _without_empty(
            {
                "@context": IMAGE_CONTEXT_V2,
                "@id": body.service.id,
                "profile": body.service.profile,
            }
        )
    return _without_empty(
        {
            "@id": body.id,
            "@type": DCTYPES_V2.get(body.type, "dctypes:Image"),
            "format": body.format,
            "service": service,
        }
    )


def canvas_to_jsonld_v2(canvas: Canvas, manifest: Manifest, annotation_ids) -> Dict[str, Any]:
    images = [
        {
            "@id": annotation_ids(manifest.europeana_id, canvas.order),
            "@type": "oa:Annotation",
            "motivation": "sc:painting",
            "resource": body_to_jsonld_v2(annotation.body),
            "on": annotation.target,
        }
        for page in canvas.annotation_pages[:1]
        for annotation in page.items
    ]
    other_content = [page.id for page in canvas.full_text_pages]
    return _without_empty(
        {
            "@id": canvas.id,
            "@type": "sc:Canvas",
            "label": canvas.label,
            "height": canvas.height,
            "width": canvas.width,
            "attribution": canvas.attribution_text,
            "license": canvas.rights,
            "images": images,
            "otherContent": other_content,
        }
    )


def metadata_to_jsonld_v2(entry: MetadataEntry) -> Dict[str, Any]:
    return {
        "label": entry.label.first_value(),
        "value": to_language_objects(entry.value),
    }


def manifest_to_jsonld_v2(manifest: Manifest, annotation_ids, sequence_id) -> Dict[str, Any]:
    """
    Generate a IIIF Presentation 2.1 Manifest. `annotation_ids` and `sequence_id` build
    the ids that only exist in v2 (see ManifestSettings).
    """
    sequences = None
    if manifest.canvases:
        sequences = [
            _without_empty(
                {
                    "@id": sequence_id(manifest.europeana_id),
                    "@type": "sc:Sequence",
                    "label": "Current Page Order",
                    "startCanvas": manifest.start_canvas.id
                    if manifest.start_canvas is not None
                    else None,
                    "canvases": [
                        canvas_to_jsonld_v2(c, manifest, annotation_ids)
                        for c in manifest.canvases
                    ],
                }
            )
        ]

    thumbnail = None
    if manifest.thumbnail:
        thumbnail = {"@id": manifest.thumbnail, "@type": "dctypes:Image"}

    return _without_empty(
        {
            "@context": CONTEXT_V2,
            "@id": manifest.id,
            "@type": "sc:Manifest",
            "label": to_language_objects(manifest.label),
            "description": to_language_objects(manifest.description),
            "metadata": [metadata_to_jsonld_v2(m) for m in manifest.metadata],
            "thumbnail": thumbnail,
            "navDate": manifest.nav_date,
            "attribution": manifest.attribution_text,
            "license": manifest.rights,
            "logo": EUROPEANA_LOGO_URL,
            "seeAlso": [
                {
                    "@id": dataset.id,
                    "@type": "sc:Dataset",
                    "format": dataset.format,
                    "profile": dataset.profile,
                }
                for dataset in manifest.datasets
            ],
            "service": {
                "@context": SEARCH_CONTEXT,
                "@id": manifest.search_service,
                "profile": SEARCH_PROFILE,
            }
            if manifest.search_service
            else None,
            "sequences": sequences,
        }
    )


def manifest_to_jsonld(manifest: Manifest, version: IiifVersion, settings) -> Dict[str, Any]:
    if version == IiifVersion.V3:
        return manifest_to_jsonld_v3(manifest)
    return manifest_to_jsonld_v2(manifest, settings.annotation_id, settings.sequence_id)
