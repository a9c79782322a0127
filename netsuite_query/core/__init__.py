"""Core interfaces, models and errors for the query gateway."""

from netsuite_query.core.errors import (
    BackendError,
    ConfigurationError,
    ErrorKind,
    GatewayError,
    InvalidDate,
    LimitExceeded,
    PagingLimitExceeded,
    UnsupportedOperator,
)
from netsuite_query.core.interfaces import ISearchExecutor, ISuiteQLExecutor
from netsuite_query.core.models import (
    MAX_RESULTS,
    DataType,
    FilterParam,
    Operator,
    OrderBy,
    QueryParams,
    SearchColumn,
    SearchDescriptor,
    SearchResponse,
    SearchSchema,
    SortOrder,
    SortSpec,
    SuiteQLColumn,
    SuiteQLPage,
    SuiteQLSchema,
)

__all__ = [
    "BackendError",
    "ConfigurationError",
    "ErrorKind",
    "GatewayError",
    "InvalidDate",
    "LimitExceeded",
    "PagingLimitExceeded",
    "UnsupportedOperator",
    "ISearchExecutor",
    "ISuiteQLExecutor",
    "MAX_RESULTS",
    "DataType",
    "FilterParam",
    "Operator",
    "OrderBy",
    "QueryParams",
    "SearchColumn",
    "SearchDescriptor",
    "SearchResponse",
    "SearchSchema",
    "SortOrder",
    "SortSpec",
    "SuiteQLColumn",
    "SuiteQLPage",
    "SuiteQLSchema",
]
