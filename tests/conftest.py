"""Shared pytest fixtures: made up EDM records, settings and the media table."""

from __future__ import annotations

import copy

import pytest

from mediatypes import MediaTypes
from settings import ManifestSettings

EUROPEANA_ID = "/9200001/book_1"
PROVIDER_AGGREGATION = "/aggregation/provider/9200001/book_1"

IS_SHOWN_BY = "https://example.org/book_1/p1.jpg"
PAGE_2 = "https://example.org/book_1/p2.jpg"
PAGE_3 = "https://example.org/book_1/p3.jpg"
NOT_A_VIEW = "https://example.org/book_1/cover.pdf"
IMAGE_SERVICE = "https://iiif.example.org/images/book_1_p1"

BOOK_RECORD = {
    "object": {
        "about": EUROPEANA_ID,
        "timestamp_update": "2023-05-04T10:11:12.123Z",
        "proxies": [
            {
                "about": "/proxy/provider/9200001/book_1",
                "proxyIn": [PROVIDER_AGGREGATION],
                "europeanaProxy": False,
                "dcTitle": {"en": ["The book of pages"]},
                "dcDescription": {"def": ["A book with three pages"]},
                "dcDate": {"def": ["1922"]},
                "dcType": {"en": ["book"]},
                "dctermsIssued": {"def": ["1922-03-15"]},
                "edmType": "TEXT",
            },
            {
                "about": "/proxy/europeana/9200001/book_1",
                "proxyIn": ["/aggregation/europeana/9200001/book_1"],
                "lineage": ["/proxy/provider/9200001/book_1"],
                "europeanaProxy": True,
                "edmType": "TEXT",
            },
        ],
        "aggregations": [
            {
                "about": PROVIDER_AGGREGATION,
                "edmIsShownBy": IS_SHOWN_BY,
                "edmIsShownAt": "https://example.org/book_1",
                "edmRights": {"def": ["http://creativecommons.org/licenses/by/4.0/"]},
                "hasView": [PAGE_2, PAGE_3],
                "webResources": [
                    {
                        "about": PAGE_3,
                        "ebucoreHasMimeType": "image/jpeg",
                        "ebucoreWidth": 1000,
                        "ebucoreHeight": 1500,
                        "webResourceEdmRights": {"def": ["http://rightsstatements.org/vocab/InC/1.0/"]},
                    },
                    {
                        "about": NOT_A_VIEW,
                        "ebucoreHasMimeType": "application/pdf",
                    },
                    {
                        "about": IS_SHOWN_BY,
                        "isNextInSequence": PAGE_2,
                        "ebucoreHasMimeType": "image/jpeg",
                        "ebucoreWidth": 1000,
                        "ebucoreHeight": 1500,
                        "textAttributionSnippet": "The book of pages - Example Library",
                        "htmlAttributionSnippet": "<span>The book of pages - Example Library</span>",
                        "webResourceEdmRights": {"def": ["http://creativecommons.org/licenses/by/4.0/"]},
                        "svcsHasService": [IMAGE_SERVICE],
                    },
                    {
                        "about": PAGE_2,
                        "isNextInSequence": PAGE_3,
                        "ebucoreHasMimeType": "image/jpeg",
                        "ebucoreWidth": 1000,
                        "ebucoreHeight": 1500,
                    },
                ],
            }
        ],
        "europeanaAggregation": {
            "about": "/aggregation/europeana/9200001/book_1",
            "edmPreview": "https://api.europeana.eu/thumbnail/v2/url.json?uri=p1&type=TEXT",
            "edmLandingPage": "https://www.europeana.eu/item/9200001/book_1",
        },
        "services": [
            {
                "about": IMAGE_SERVICE,
                "doapImplements": ["http://iiif.io/api/image/2/level1.json"],
            }
        ],
    }
}


@pytest.fixture
def settings():
    return ManifestSettings(
        record_api_base_url="https://records.test",
        record_api_path="/record/v2",
        fulltext_api_base_url="https://fulltext.test",
        thumbnail_api_url="https://thumbnails.test/url.json?uri=",
        iiif_base_url="https://iiif.test",
        content_search_base_url="https://search.test",
        dataset_base_url="https://records.test/record",
    )


@pytest.fixture(scope="session")
def media_types():
    return MediaTypes.from_xml()


@pytest.fixture
def book_record():
    """Three pages linked p1 -> p2 -> p3, listed out of order, plus a resource that is no view."""
    return copy.deepcopy(BOOK_RECORD)


def make_record(proxies=None, aggregations=None, **extra):
    """Minimal record around a single provider proxy and aggregation."""
    obj = {
        "about": EUROPEANA_ID,
        "proxies": proxies
        if proxies is not None
        else [{"about": "/proxy/provider/1", "proxyIn": [PROVIDER_AGGREGATION]}],
        "aggregations": aggregations if aggregations is not None else [],
    }
    obj.update(extra)
    return {"object": obj}
