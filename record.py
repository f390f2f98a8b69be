"""
Read values from a parsed EDM record (the JSON returned by the Record API).

The record is never modified. Values are pulled out with `select`, a small path
query: segments are separated by dots, ``name[*]`` expands a list, ``name[0]``
picks one element and ``name[?]`` keeps only the elements (or the single object)
for which the ``where`` predicate holds. Missing keys simply produce no matches.

    select(record, "object.proxies[*].dcTitle")
    select(record, "object.aggregations[?].edmRights", where=lambda a: a.get("about") == x)
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from languagemap import LanguageMap

logger = logging.getLogger(__name__)

ABOUT = "about"
URL_PREFIXES = ("http://", "https://", "ftp://", "file://")
EUSCREEN_PREFIXES = (
    "http://www.euscreen.eu/item.html",
    "https://www.euscreen.eu/item.html",
)
ENTITY_TABLES = ["timespans", "agents", "concepts", "places"]
NAV_DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y"]

_SEGMENT = re.compile(r"^(?P<name>[^\[\]]*)(?:\[(?P<selector>\*|\?|\d+)\])?$")


def _parse_segment(segment: str):
    match = _SEGMENT.match(segment)
    if match is None:
        raise ValueError(f"Invalid path segment '{segment}'")
    return match.group("name"), match.group("selector")


def select(
    data: Any, path: str, where: Optional[Callable[[Any], bool]] = None
) -> List[Any]:
    """Return all non-null values matching `path` in document order."""
    nodes = [data]
    for segment in path.split("."):
        name, selector = _parse_segment(segment)
        matches: List[Any] = []
        for node in nodes:
            if name:
                if not isinstance(node, dict) or node.get(name) is None:
                    continue
                node = node[name]
            if selector is None:
                matches.append(node)
            elif selector == "*":
                if isinstance(node, list):
                    matches.extend(node)
                elif isinstance(node, dict):
                    matches.extend(node.values())
            elif selector == "?":
                if isinstance(node, list):
                    matches.extend(item for item in node if where is None or where(item))
                elif where is None or where(node):
                    matches.append(node)
            else:
                index = int(selector)
                if isinstance(node, list) and len(node) > index:
                    matches.append(node[index])
        nodes = matches
    return [node for node in nodes if node is not None]


def first_value(field_name: Optional[str], europeana_id: Optional[str], values: List[Any]):
    """
    Return the first of `values` (or None). Many EDM fields are expected to occur once;
    when there is more than one we log it and carry on with the first.
    """
    if not values:
        return None
    if field_name and len(values) > 1:
        logger.debug(
            "Multiple %s values found for record %s, returning first",
            field_name,
            europeana_id,
        )
    return values[0]


def is_url(value: Optional[str]) -> bool:
    return bool(value) and value.lower().startswith(URL_PREFIXES)


def get_europeana_id(record: Dict[str, Any]) -> Optional[str]:
    return first_value(None, None, select(record, "object.about"))


def _is_provider_proxy(proxy: Dict[str, Any]) -> bool:
    return not proxy.get("lineage") and proxy.get("europeanaProxy") is not True


def get_data_provider_aggregation_id(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    """proxyIn of the provider proxy (no lineage, not the europeana proxy)."""
    proxy_in = select(record, "object.proxies[?].proxyIn[0]", where=_is_provider_proxy)
    if len(proxy_in) > 1:
        logger.warning(
            "Multiple proxyIn values found in proxy w/o lineage for record %s, returning first",
            europeana_id,
        )
    return proxy_in[0] if proxy_in else None


def get_data_provider_value(record: Dict[str, Any], europeana_id: str, field_name: str):
    aggregation_id = get_data_provider_aggregation_id(record, europeana_id)
    if not aggregation_id:
        return None
    values = select(
        record,
        f"object.aggregations[?].{field_name}",
        where=lambda a: a.get(ABOUT) == aggregation_id,
    )
    return first_value(field_name, europeana_id, values)


def get_is_shown_by(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    return get_data_provider_value(record, europeana_id, "edmIsShownBy")


def get_is_shown_at(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    return get_data_provider_value(record, europeana_id, "edmIsShownAt")


def get_edm_type(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    """edmType of the europeana proxy."""
    values = select(
        record, "object.proxies[?].edmType", where=lambda p: p.get("europeanaProxy") is True
    )
    return first_value("edmType", europeana_id, values)


def is_euscreen_item(edm_type: Optional[str], is_shown_by: Optional[str], is_shown_at: Optional[str]) -> bool:
    """Audio or video that is only available on the EUScreen website."""
    shown = is_shown_by or is_shown_at
    if not shown or not edm_type:
        return False
    return edm_type.upper() in ("VIDEO", "SOUND") and shown.startswith(EUSCREEN_PREFIXES)


def get_has_views(record: Dict[str, Any]) -> List[str]:
    """All hasView ids of all aggregations, without duplicates, in declaration order."""
    result: List[str] = []
    for view in select(record, "object.aggregations[*].hasView[*]"):
        if view not in result:
            result.append(view)
    return result


def get_web_resources(record: Dict[str, Any]) -> List[Dict[str, Any]]:
    return select(record, "object.aggregations[*].webResources[*]")


def get_services(record: Dict[str, Any]) -> List[Dict[str, Any]]:
    return select(record, "object.services[*]")


def find_service(
    services: List[Dict[str, Any]], service_id: str
) -> Optional[Dict[str, Any]]:
    """Service entry whose about equals `service_id` (case-insensitive)."""
    for service in services:
        about = service.get(ABOUT)
        if about is not None and about.lower() == service_id.lower():
            return service
    return None


def get_service_profile(service: Dict[str, Any], europeana_id: str) -> Optional[str]:
    """
    The doapImplements value of a service. EDM defines it as a list, but some
    records have a plain string and many have an empty list.
    """
    implements = service.get("doapImplements")
    if isinstance(implements, list):
        if implements:
            return implements[0]
        logger.warning(
            "Record %s has service %s with empty doapImplements field value",
            europeana_id,
            service.get(ABOUT),
        )
        return None
    if isinstance(implements, str) and implements:
        return implements
    return None


def get_entity_pref_labels(record: Dict[str, Any], value: str) -> Optional[LanguageMap]:
    """prefLabel of the first timespan, agent, concept or place whose about equals `value`."""
    for table in ENTITY_TABLES:
        labels = select(
            record, f"object.{table}[?].prefLabel", where=lambda e: e.get(ABOUT) == value
        )
        if labels:
            return LanguageMap.from_edm(labels[0])
    return None


def get_thumbnail_id(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    values = select(record, "object.europeanaAggregation.edmPreview")
    return first_value("thumbnail ids", europeana_id, values)


def get_landing_page(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    values = select(record, "object.europeanaAggregation.edmLandingPage")
    return first_value("landingPage", europeana_id, values)


def get_license_text(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    """
    First edmRights value of the europeanaAggregation, or else of the data provider
    aggregation.
    """
    licenses = select(record, "object.europeanaAggregation.edmRights")
    license_map = LanguageMap.from_edm(first_value("licenseMap", europeana_id, licenses))
    if not license_map:
        aggregation_id = get_data_provider_aggregation_id(record, europeana_id)
        licenses = select(
            record,
            "object.aggregations[?].edmRights",
            where=lambda a: a.get(ABOUT) == aggregation_id,
        )
        license_map = LanguageMap.from_edm(first_value("license", europeana_id, licenses))
    return license_map.first_value()


def parse_edm_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    for date_format in NAV_DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), date_format)
        except ValueError:
            continue
    logger.debug("Unable to parse EDM date %s", value)
    return None


def get_nav_date(record: Dict[str, Any], europeana_id: str) -> Optional[str]:
    """First parsable proxies.dctermsIssued value as an xsd:dateTime (UTC midnight)."""
    for issued in select(record, "object.proxies[*].dctermsIssued"):
        for values in LanguageMap.from_edm(issued).values():
            nav_date = parse_edm_date(first_value("navDate", europeana_id, values))
            if nav_date is not None:
                return nav_date.strftime("%Y-%m-%dT00:00:00Z")
    return None


def get_timestamp_update(record: Dict[str, Any]) -> Optional[datetime]:
    """The record's timestamp_update (e.g. 2017-06-30T09:22:03.356Z), used for caching headers."""
    value = first_value(None, None, select(record, "object.timestamp_update"))
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unable to parse timestamp_update %s", value)
        return None
