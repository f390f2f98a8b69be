"""
Page order of web resources.

Web resources are linked by ``isNextInSequence`` pointers only. We rebuild the
order as follows:

1. every resource that has a next pointer, but that no other resource points to,
   is the start of a sequence
2. for every start we follow the pointers to the end of the sequence, removing the
   resources we visit so we know what was processed already
3. whatever remains must be an isolated resource (no next pointer) and is added last

The pointers must form separate, simple paths. Duplicate ids, pointers to unknown
resources, two sequences running into the same resource and cycles all raise a
DataInconsistentError.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from exceptions import DataInconsistentError
from models import WebResource

logger = logging.getLogger(__name__)


def _index(
    resources: Iterable[WebResource],
) -> Tuple[Dict[str, WebResource], Dict[str, Optional[str]]]:
    ids_resources: Dict[str, WebResource] = {}
    ids_next: Dict[str, Optional[str]] = {}
    for resource in resources:
        if resource.id in ids_resources:
            raise DataInconsistentError(f"Duplicate webresource id found {resource.id}")
        ids_resources[resource.id] = resource
        ids_next[resource.id] = resource.next_in_sequence or None
        logger.debug("    %s -> %s", resource.id, resource.next_in_sequence)
    return ids_resources, ids_next


def _start_nodes(ids_next: Dict[str, Optional[str]]) -> List[str]:
    targets = set()
    for resource_id, next_id in ids_next.items():
        if next_id is None:
            continue
        if next_id not in ids_next:
            raise DataInconsistentError(
                f"Inconsistent data: webresource {resource_id} hasNextInSequence "
                f"{next_id} but that webresource cannot be found!"
            )
        targets.add(next_id)
    return [
        resource_id
        for resource_id, next_id in ids_next.items()
        if next_id is not None and resource_id not in targets
    ]


def _follow(
    start_id: str,
    ids_resources: Dict[str, WebResource],
    ids_next: Dict[str, Optional[str]],
) -> List[WebResource]:
    """The sequence starting at `start_id`, last resource first."""
    sequence: List[WebResource] = []
    node_id = start_id
    while node_id is not None:
        resource = ids_resources.pop(node_id, None)
        if resource is None:
            raise DataInconsistentError(
                f"Unable to find webresource {node_id}. Most likely it's part of another sequence"
            )
        sequence.insert(0, resource)
        node_id = ids_next.pop(node_id)
    return sequence


def _split(resources: Iterable[WebResource]) -> Tuple[List[List[WebResource]], List[WebResource]]:
    """Return the sequences (each last resource first) and the isolated resources."""
    ids_resources, ids_next = _index(resources)

    sequences = []
    for start_id in _start_nodes(ids_next):
        sequence = _follow(start_id, ids_resources, ids_next)
        logger.debug("  Sequence = %s", [r.id for r in sequence])
        sequences.append(sequence)

    isolated = []
    for resource in ids_resources.values():
        if resource.has_next:
            raise DataInconsistentError(
                f"Expected webresource {resource.id} to not have a nextInSequence value"
            )
        isolated.append(resource)
    return sequences, isolated


def reconstruct(resources: Iterable[WebResource]) -> List[WebResource]:
    """
    All sequences first, each in reverse reading order (last page first), then the
    isolated resources in input order.
    """
    sequences, isolated = _split(resources)
    result: List[WebResource] = []
    for sequence in sequences:
        result.extend(sequence)
    result.extend(isolated)
    return result


def sort_web_resources(resources: Iterable[WebResource]) -> List[WebResource]:
    """
    Same as `reconstruct`, but every sequence is in reading order (first page first).
    Sequences keep the input order of their first resource; isolated resources
    follow in input order.
    """
    sequences, isolated = _split(resources)
    result: List[WebResource] = []
    for sequence in sequences:
        result.extend(reversed(sequence))
    result.extend(isolated)
    logger.debug("Webresources = %s", [r.id for r in result])
    return result


def filter_eligible(
    resources: Iterable[WebResource],
    primary_id: Optional[str],
    alternate_ids: Iterable[str],
) -> List[WebResource]:
    """
    Keep only the primary display resource and the declared alternate views.
    The result follows the eligibility order: primary first, then the alternate
    views in the order they are declared. Other resources are dropped.
    """
    eligible: List[str] = []
    if primary_id:
        eligible.append(primary_id)
    for view in alternate_ids:
        if view and view not in eligible:
            eligible.append(view)

    by_id: Dict[str, List[WebResource]] = {}
    for resource in resources:
        if resource.id in eligible:
            by_id.setdefault(resource.id, []).append(resource)
        else:
            logger.debug("Skipping webresource %s", resource.id)

    result: List[WebResource] = []
    for resource_id in eligible:
        # duplicates are kept so the sequencing step can report them
        result.extend(by_id.get(resource_id, []))
    return result
