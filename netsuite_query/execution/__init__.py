"""Query execution, result formatting and post-processing."""

from netsuite_query.execution.executor import QueryExecutor
from netsuite_query.execution.fuzzy import fuzzy_search
from netsuite_query.execution.hierarchy import expand_descendants, resolve_parent_numbers
from netsuite_query.execution.result_formatter import ResultFormatter

__all__ = [
    "QueryExecutor",
    "ResultFormatter",
    "expand_descendants",
    "fuzzy_search",
    "resolve_parent_numbers",
]
