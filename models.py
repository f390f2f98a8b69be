"""
Data model for the derived manifest graph.
A Manifest is built once from a record and then projected to the IIIF v2 or v3
JSON-LD shape by export.py.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from languagemap import LanguageMap


class FullTextStatus(str, enum.Enum):
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"
    UNKNOWN = "unknown"


class IiifVersion(str, enum.Enum):
    V2 = "2"
    V3 = "3"


@dataclass(kw_only=True)
class WebResource:
    id: str
    next_in_sequence: Optional[str] = None
    mime_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration_ms: Optional[str] = None
    attribution_text: Optional[str] = None
    attribution_html: Optional[str] = None
    rights: Optional[str] = None
    service_id: Optional[str] = None

    @classmethod
    def from_edm(cls, data: Dict[str, Any]) -> "WebResource":
        """Read the fields we need from an EDM webResources entry."""
        width = data.get("ebucoreWidth")
        height = data.get("ebucoreHeight")
        rights = LanguageMap.from_edm(data.get("webResourceEdmRights")).first_value()
        services = data.get("svcsHasService") or []
        return cls(
            id=data.get("about"),
            next_in_sequence=data.get("isNextInSequence") or None,
            mime_type=data.get("ebucoreHasMimeType"),
            # booleans are ints in Python, skip them
            width=width if isinstance(width, int) and not isinstance(width, bool) else None,
            height=height if isinstance(height, int) and not isinstance(height, bool) else None,
            duration_ms=data.get("ebucoreDuration"),
            attribution_text=data.get("textAttributionSnippet"),
            attribution_html=data.get("htmlAttributionSnippet"),
            rights=rights,
            service_id=services[0] if services else None,
        )

    @property
    def has_next(self) -> bool:
        return bool(self.next_in_sequence)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.duration_ms is None:
            return None
        try:
            return int(self.duration_ms) / 1000
        except ValueError:
            return None


@dataclass(kw_only=True)
class MetadataEntry:
    label: LanguageMap
    value: LanguageMap


@dataclass(kw_only=True)
class Service:
    id: str
    profile: Optional[str] = None


@dataclass(kw_only=True)
class AnnotationBody:
    id: str
    type: Optional[str] = None
    format: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None
    duration: Optional[float] = None
    service: Optional[Service] = None


@dataclass(kw_only=True)
class Annotation:
    target: str
    body: AnnotationBody
    motivation: str = "painting"
    time_mode: Optional[str] = None


@dataclass(kw_only=True)
class AnnotationPage:
    id: Optional[str] = None
    items: List[Annotation] = field(default_factory=list)


@dataclass(kw_only=True)
class Canvas:
    id: str
    order: int
    label: str
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    rights: Optional[str] = None
    attribution_text: Optional[str] = None
    attribution_html: Optional[str] = None
    thumbnail: Optional[str] = None
    annotation_pages: List[AnnotationPage] = field(default_factory=list)

    @property
    def painting(self) -> Annotation:
        return self.annotation_pages[0].items[0]

    @property
    def full_text_pages(self) -> List[AnnotationPage]:
        """Annotation pages added after the painting page (full-text links)."""
        return self.annotation_pages[1:]


@dataclass(kw_only=True)
class DataSet:
    id: str
    format: str
    profile: str = "http://www.europeana.eu/schemas/edm/"


@dataclass(kw_only=True)
class Manifest:
    europeana_id: str
    id: str
    is_shown_by: Optional[str] = None
    label: Optional[LanguageMap] = None
    description: Optional[LanguageMap] = None
    metadata: List[MetadataEntry] = field(default_factory=list)
    thumbnail: Optional[str] = None
    nav_date: Optional[str] = None
    homepage: Optional[str] = None
    rights: Optional[str] = None
    attribution_text: Optional[str] = None
    attribution_html: Optional[str] = None
    datasets: List[DataSet] = field(default_factory=list)
    canvases: List[Canvas] = field(default_factory=list)
    start_canvas: Optional[Canvas] = None
    search_service: Optional[str] = None

    def __repr__(self):
        return f"<Manifest(id='{self.id}', canvases={len(self.canvases)})>"
