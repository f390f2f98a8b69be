import logging

from canvases import assemble_canvas, assemble_canvases, get_start_canvas
from models import WebResource
from tests.conftest import EUROPEANA_ID

SERVICES = [{"about": "service3Id", "doapImplements": ["serviceProfile"]}]


def test_resource_without_service_gets_thumbnail(settings, media_types):
    resource = WebResource(id="https://example.org/a b.jpg", mime_type="image/jpeg")
    canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, SERVICES)
    assert canvas.thumbnail == (
        "https://thumbnails.test/url.json?uri=https%3A%2F%2Fexample.org%2Fa+b.jpg&type=TEXT"
    )
    assert canvas.painting.body.service is None


def test_resource_with_service_gets_service_and_no_thumbnail(settings, media_types):
    resource = WebResource(id="wr3Id", mime_type="image/webp", service_id="service3Id")
    canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, SERVICES)
    assert canvas.thumbnail is None
    service = canvas.painting.body.service
    assert service.id == "service3Id"
    assert service.profile == "serviceProfile"


def test_service_lookup_is_case_insensitive(settings, media_types):
    resource = WebResource(id="wr3Id", mime_type="image/webp", service_id="SERVICE3ID")
    canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, SERVICES)
    assert canvas.painting.body.service.profile == "serviceProfile"


def test_undefined_service_is_logged_and_omitted(settings, media_types, caplog):
    resource = WebResource(id="wr1Id", mime_type="image/jpeg", service_id="unknownService")
    with caplog.at_level(logging.WARNING):
        canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, SERVICES)
    assert canvas.painting.body.service is None
    # a declared service means no thumbnail, even when it can't be resolved
    assert canvas.thumbnail is None
    assert "unknownService" in caplog.text


def test_service_without_profile_is_logged_and_omitted(settings, media_types, caplog):
    services = [
        {"about": "emptyProfile", "doapImplements": []},
        {"about": "noProfile"},
    ]
    for service_id in ("emptyProfile", "noProfile"):
        resource = WebResource(id="wr4Id", mime_type="image/jpeg", service_id=service_id)
        with caplog.at_level(logging.WARNING):
            canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, services)
        assert canvas.painting.body.service is None
        assert canvas.thumbnail is None
        assert service_id in caplog.text


def test_canvas_fields(settings, media_types):
    resource = WebResource(
        id="wr2Id",
        mime_type="audio/mp4",
        duration_ms="98765",
        attribution_text="wr2Attribution",
        attribution_html="<span>wr2Attribution</span>",
        rights="wr2License",
    )
    canvas = assemble_canvas(2, resource, EUROPEANA_ID, settings, media_types, SERVICES)
    assert canvas.id == "https://iiif.test/presentation/9200001/book_1/canvas/p2"
    assert canvas.order == 2
    assert canvas.label == "p. 2"
    assert canvas.duration == 98.765
    assert canvas.rights == "wr2License"
    assert canvas.attribution_text == "wr2Attribution"
    assert canvas.attribution_html == "<span>wr2Attribution</span>"
    assert len(canvas.annotation_pages) == 1
    annotation = canvas.painting
    assert annotation.motivation == "painting"
    assert annotation.target == canvas.id
    assert annotation.time_mode == "trim"
    assert annotation.body.id == "wr2Id"
    assert annotation.body.type == "Sound"
    assert annotation.body.format == "audio/mp4"
    assert annotation.body.duration == 98.765


def test_image_has_no_time_mode(settings, media_types):
    resource = WebResource(id="img", mime_type="image/jpeg", width=800, height=600)
    canvas = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, [])
    assert canvas.painting.time_mode is None
    assert canvas.painting.body.type == "Image"
    assert (canvas.painting.body.width, canvas.painting.body.height) == (800, 600)
    assert canvas.painting.body.duration is None


def test_unknown_mime_type_keeps_format(settings, media_types):
    resource = WebResource(id="x", mime_type="application/x-unknown")
    body = assemble_canvas(1, resource, EUROPEANA_ID, settings, media_types, []).painting.body
    assert body.type is None
    assert body.format == "application/x-unknown"


def test_euscreen_override(settings, media_types):
    resource = WebResource(id="https://www.euscreen.eu/item.html?id=1", mime_type="text/html")
    euscreen_type = media_types.get_euscreen_type("VIDEO")
    canvas = assemble_canvas(
        1, resource, EUROPEANA_ID, settings, media_types, [], euscreen_type
    )
    assert canvas.painting.body.type == "Video"
    assert canvas.painting.body.format is None
    assert canvas.painting.time_mode == "trim"


def test_canvases_are_numbered_in_order(settings, media_types):
    resources = [WebResource(id=f"wr{i}", mime_type="image/jpeg") for i in range(1, 4)]
    canvases = assemble_canvases(resources, EUROPEANA_ID, settings, media_types, [])
    assert [c.order for c in canvases] == [1, 2, 3]
    assert [c.painting.body.id for c in canvases] == ["wr1", "wr2", "wr3"]


def test_start_canvas(settings, media_types):
    resources = [WebResource(id=f"wr{i}", mime_type="image/jpeg") for i in range(1, 4)]
    canvases = assemble_canvases(resources, EUROPEANA_ID, settings, media_types, [])
    assert get_start_canvas(canvases, "wr2").order == 2
    assert get_start_canvas(canvases, "unknown").order == 1
    assert get_start_canvas(canvases, None).order == 1
    assert get_start_canvas([], "wr2") is None
