"""
Configuration, read from environment variables with sensible defaults.
Also builds all ids and urls that go into a manifest.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, quote_plus

from mediatypes import DEFAULT_MEDIA_CATEGORIES_FILE

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass(kw_only=True)
class ManifestSettings:
    record_api_base_url: str = "https://api.europeana.eu"
    record_api_path: str = "/record/v2"
    fulltext_api_base_url: str = "https://www.europeana.eu/api/fulltext"
    thumbnail_api_url: str = "https://api.europeana.eu/thumbnail/v2/url.json?size=w400&uri="
    iiif_base_url: str = "https://iiif.europeana.eu"
    content_search_base_url: str = "https://iiif.europeana.eu"
    dataset_base_url: str = "https://www.europeana.eu/api/v2/record"
    suppress_parse_exception: bool = False
    media_categories_file: str = DEFAULT_MEDIA_CATEGORIES_FILE

    @classmethod
    def from_env(cls) -> "ManifestSettings":
        defaults = cls()
        return cls(
            record_api_base_url=os.environ.get(
                "RECORD_API_BASE_URL", defaults.record_api_base_url
            ),
            record_api_path=os.environ.get("RECORD_API_PATH", defaults.record_api_path),
            fulltext_api_base_url=os.environ.get(
                "FULLTEXT_API_BASE_URL", defaults.fulltext_api_base_url
            ),
            thumbnail_api_url=os.environ.get(
                "THUMBNAIL_API_URL", defaults.thumbnail_api_url
            ),
            iiif_base_url=os.environ.get("IIIF_BASE_URL", defaults.iiif_base_url),
            content_search_base_url=os.environ.get(
                "CONTENT_SEARCH_BASE_URL", defaults.content_search_base_url
            ),
            dataset_base_url=os.environ.get("DATASET_BASE_URL", defaults.dataset_base_url),
            suppress_parse_exception=_env_bool(
                "SUPPRESS_PARSE_EXCEPTION", defaults.suppress_parse_exception
            ),
            media_categories_file=os.environ.get(
                "MEDIA_CATEGORIES_FILE", defaults.media_categories_file
            ),
        )

    def log_settings(self):
        logger.info("Manifest settings:")
        logger.info("  Record API url = %s%s", self.record_api_base_url, self.record_api_path)
        logger.info("  Full-Text API url = %s", self.fulltext_api_base_url)
        logger.info("  Suppress parse exceptions = %s", self.suppress_parse_exception)

    # Ids and urls. europeana_id is "/<dataset id>/<record id>" (leading slash, no trailing slash)

    def manifest_base(self, europeana_id: str) -> str:
        return f"{self.iiif_base_url}/presentation{europeana_id}"

    def manifest_id(self, europeana_id: str) -> str:
        return f"{self.manifest_base(europeana_id)}/manifest"

    def sequence_id(self, europeana_id: str, order: int = 1) -> str:
        return f"{self.manifest_base(europeana_id)}/sequence/s{order}"

    def canvas_id(self, europeana_id: str, order: int) -> str:
        return f"{self.manifest_base(europeana_id)}/canvas/p{order}"

    def annotation_id(self, europeana_id: str, order: int) -> str:
        return f"{self.manifest_base(europeana_id)}/annotation/p{order}"

    def dataset_id(self, europeana_id: str, postfix: str) -> str:
        return f"{self.dataset_base_url}{europeana_id}{postfix}"

    def content_search_url(self, europeana_id: str) -> str:
        return f"{self.content_search_base_url}/presentation{europeana_id}/search"

    def record_url(self, record_id: str, wskey: str, base_url: Optional[str] = None) -> str:
        base = (base_url or self.record_api_base_url).rstrip("/")
        return f"{base}{self.record_api_path}{record_id}.json?wskey={quote(wskey, safe='')}"

    def fulltext_url(
        self, europeana_id: str, page_nr: int, base_url: Optional[str] = None
    ) -> str:
        base = (base_url or self.fulltext_api_base_url).rstrip("/")
        return f"{base}/presentation{europeana_id}/annopage/{page_nr}"

    def canvas_thumbnail_url(self, web_resource_id: str) -> str:
        return f"{self.thumbnail_api_url}{quote_plus(web_resource_id)}&type=TEXT"
