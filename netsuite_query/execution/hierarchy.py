"""
Parent/child resolution over flat record lists.

Accounts and subsidiaries come back as flat lists where each record
points at its parent by internal id. These helpers resolve that link
to a human-readable parent number and collect whole subtrees.
"""

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def resolve_parent_numbers(
    records: List[Dict[str, Any]],
    number_key: str = "AccountNumber",
    id_key: str = "Id",
    parent_id_key: str = "ParentId",
    parent_number_key: str = "ParentNumber",
) -> List[Dict[str, Any]]:
    """
    Replace each record's parent id with the parent's number.

    The parent id field is removed from every record, whether or not
    the parent was found. Records are updated in place.

    Args:
        records: Records carrying ``id_key`` and optionally ``parent_id_key``
        number_key: Field copied from the parent record

    Returns:
        The same list, for chaining
    """
    by_id = {str(record.get(id_key)): record for record in records}
    unresolved = 0

    for record in records:
        if parent_id_key not in record:
            continue
        parent_id = record.pop(parent_id_key)
        if parent_id is None:
            continue
        parent = by_id.get(str(parent_id))
        if parent is not None and parent.get(number_key) is not None:
            record[parent_number_key] = parent[number_key]
        else:
            unresolved += 1

    if unresolved:
        logger.info("%d records reference a parent that was not returned", unresolved)
    return records


def expand_descendants(
    records: List[Dict[str, Any]],
    start: Any,
    key: str = "AccountNumber",
    parent_key: str = "ParentNumber",
    id_key: str = "Id",
) -> List[Any]:
    """
    Collect the ids of the record matching ``start`` and all its descendants.

    A record is a child of another when its ``parent_key`` equals the
    other's ``key``. Each key is visited at most once, so cyclic parent
    chains terminate.

    Args:
        records: Flat record list
        start: Value of ``key`` identifying the root record
        key: Field identifying a record to its children
        parent_key: Field referencing the parent's ``key``
        id_key: Field collected for each visited record

    Returns:
        Ids in visit order, root first; empty if nothing matches
    """
    children: Dict[str, List[Dict[str, Any]]] = {}
    for record in records:
        parent = record.get(parent_key)
        if parent is not None:
            children.setdefault(str(parent), []).append(record)

    ids: List[Any] = []
    visited = set()

    root = next((r for r in records if str(r.get(key)) == str(start)), None)
    if root is not None:
        ids.append(root.get(id_key))

    stack = [str(start)]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        for child in children.get(current, []):
            child_key = str(child.get(key))
            if child_key in visited:
                logger.warning("Cycle detected in hierarchy at %s=%s", key, child_key)
                continue
            ids.append(child.get(id_key))
            stack.append(child_key)

    return ids
