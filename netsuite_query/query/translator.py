"""
Backend-independent parts of query translation.

Ordering fallback and the result ceiling behave the same on both
backends, so both translators go through these helpers.
"""

import logging
from typing import Container, Optional, Tuple

from netsuite_query.core.errors import LimitExceeded
from netsuite_query.core.models import MAX_RESULTS, QueryParams, SortOrder, SortSpec

logger = logging.getLogger(__name__)


def resolve_order(
    params: QueryParams,
    columns: Container[str],
    default_sort: Optional[SortSpec],
) -> Optional[Tuple[str, SortOrder]]:
    """
    Pick the column and direction to sort on.

    Count-only queries are never sorted. A requested column unknown to
    the schema falls back to the tool's default sort; if that is unknown
    too, no ordering is applied.

    Args:
        params: Query envelope
        columns: Logical column names of the schema
        default_sort: Ordering declared by the tool

    Returns:
        (logical column, direction) or None
    """
    if params.count_only:
        return None

    if params.order_by is not None:
        if params.order_by.column in columns:
            return params.order_by.column, params.order_by.sort_order
        logger.info(
            "OrderBy column %s not in schema, using default sort", params.order_by.column
        )

    if default_sort is not None and default_sort.column in columns:
        return default_sort.column, default_sort.sort_order
    return None


def enforce_result_ceiling(requested: Optional[int], ceiling: int = MAX_RESULTS) -> None:
    """
    Reject result caps above the system-wide ceiling.

    Raises:
        LimitExceeded: If ``requested`` is above ``ceiling``
    """
    if requested is not None and requested > ceiling:
        raise LimitExceeded(requested, ceiling)
