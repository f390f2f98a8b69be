"""
Multilingual text values.

A LanguageMap maps a language key to an ordered list of values, e.g.
``{"en": ["Title"], "@none": ["Titel"]}``. Values without a language (no key,
an empty key or the EDM ``def`` key) are stored under ``@none``. Putting a key
that already exists appends to its values instead of replacing them.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

NO_LANGUAGE_KEY = "@none"
DEFAULT_METADATA_KEY = "en"
EDM_DEFAULT_KEY = "def"


def normalize_key(key: Optional[str]) -> str:
    if key is None or key == "" or key.lower() == EDM_DEFAULT_KEY:
        return NO_LANGUAGE_KEY
    return key


class LanguageMap(dict):
    """Ordered language -> values mapping with append-on-put semantics."""

    def __init__(self, language: Optional[str] = None, value=None):
        super().__init__()
        if value is not None:
            self.put(language, value)

    @classmethod
    def from_edm(cls, data) -> "LanguageMap":
        """Build a LanguageMap from an EDM JSON language map like {"def": ["a"], "en": ["b"]}."""
        result = cls()
        if not data:
            return result
        for key, values in data.items():
            if not values:
                continue
            result.put(key, values)
        return result

    def put(self, language: Optional[str], values) -> None:
        key = normalize_key(language)
        if isinstance(values, str):
            values = [values]
        if key in self:
            super().__getitem__(key).extend(values)
        else:
            super().__setitem__(key, list(values))

    def __setitem__(self, language, values):
        self.put(language, values)

    def __getitem__(self, language):
        return super().__getitem__(normalize_key(language))

    def __contains__(self, language):
        return super().__contains__(normalize_key(language))

    def copy(self) -> "LanguageMap":
        result = LanguageMap()
        for key, values in self.items():
            result.put(key, list(values))
        return result

    def first_value(self) -> Optional[str]:
        """First value of the first key, or None for an empty map."""
        for values in self.values():
            if values:
                return values[0]
        return None

    def __str__(self) -> str:
        entries = ", ".join(
            "{" + key + "=[" + ", ".join(values) + "]}" for key, values in self.items()
        )
        return f"({entries})"


def merge_language_maps(maps: Iterable[Optional[Dict[str, List[str]]]]) -> Optional[LanguageMap]:
    """
    Merge language maps in order. The keys of earlier maps come first and values of a
    key that occurs in several maps are concatenated in map order.
    Returns None when there is nothing to merge.
    """
    maps = [m for m in maps if m and any(m.values())]
    if not maps:
        return None
    result = LanguageMap()
    for language_map in maps:
        for key, values in language_map.items():
            if values:
                result.put(key, list(values))
    return result


def to_language_objects(language_map: Optional[Dict[str, List[str]]]) -> List[Dict[str, str]]:
    """
    Flatten a LanguageMap into IIIF v2 language objects:
    [{"@language": "en", "@value": "Title"}, {"@value": "no language"}]
    """
    result: List[Dict[str, str]] = []
    if not language_map:
        return result
    for key, values in language_map.items():
        for value in values:
            obj = {}
            if normalize_key(key) != NO_LANGUAGE_KEY:
                obj["@language"] = key
            obj["@value"] = value
            result.append(obj)
    return result
