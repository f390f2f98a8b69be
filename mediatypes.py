"""
Mime type -> media category table, loaded from data/media_categories.xml.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from lxml import etree as ET

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_CATEGORIES_FILE = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data", "media_categories.xml"
)

BROWSER = "Browser"
RENDERED = "Rendered"
EU_SCREEN = "EUScreen"

VIDEO = "Video"
SOUND = "Sound"


@dataclass(frozen=True)
class MediaType:
    mime_type: str
    label: str
    type: str
    support: str

    @property
    def is_browser_supported(self) -> bool:
        return self.support == BROWSER

    @property
    def is_rendered(self) -> bool:
        return self.support == RENDERED

    @property
    def is_euscreen(self) -> bool:
        return self.support == EU_SCREEN

    @property
    def is_video_or_sound(self) -> bool:
        return self.type in (VIDEO, SOUND)


class MediaTypes:
    """Read-only lookup table. EUScreen entries are kept apart from the mime type lookup."""

    def __init__(self, media_types: List[MediaType]):
        self._all = tuple(media_types)
        self._by_mime_type: Dict[str, MediaType] = {}
        for media_type in media_types:
            if media_type.is_euscreen:
                continue
            self._by_mime_type.setdefault(media_type.mime_type.lower(), media_type)

    @classmethod
    def from_xml(cls, path: str = DEFAULT_MEDIA_CATEGORIES_FILE) -> "MediaTypes":
        tree = ET.parse(path)
        media_types = []
        for element in tree.getroot().iter("format"):
            media_types.append(
                MediaType(
                    mime_type=element.get("mediaType", ""),
                    label=element.get("label", ""),
                    type=element.get("type", ""),
                    support=element.get("support", ""),
                )
            )
        logger.info("Loaded %d media categories from %s", len(media_types), path)
        return cls(media_types)

    def __len__(self):
        return len(self._all)

    def get_media_type(self, mime_type: Optional[str]) -> Optional[MediaType]:
        """
        Media category for a mime type. An exact match wins, otherwise the longest
        configured mime type contained in the given one (e.g. "image/jpeg; charset=binary").
        """
        if not mime_type:
            return None
        key = mime_type.lower().strip()
        if key in self._by_mime_type:
            return self._by_mime_type[key]
        candidates = [m for m in self._by_mime_type if m in key]
        if not candidates:
            return None
        return self._by_mime_type[max(candidates, key=len)]

    def get_euscreen_type(self, edm_type: Optional[str]) -> Optional[MediaType]:
        if not edm_type:
            return None
        for media_type in self._all:
            if media_type.is_euscreen and media_type.type.lower() == edm_type.lower():
                return media_type
        return None
