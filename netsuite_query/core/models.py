"""
Shared data models for the query gateway.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Hard ceiling on the number of rows a single tool invocation may request.
MAX_RESULTS = 10000


class DataType(str, Enum):
    """Semantic data type of a column."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    ID = "id"


class Operator(str, Enum):
    """Generic comparison operators accepted in filters."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "="
    NE = "!="
    LIKE = "Like"
    NOT_LIKE = "Not_Like"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


def _normalize_sort_order(value: Any) -> Any:
    if value is None or value == "":
        return SortOrder.ASC
    if isinstance(value, str):
        return value.strip().upper()
    return value


class OrderBy(BaseModel):
    """Requested ordering of the results."""

    model_config = ConfigDict(populate_by_name=True)

    column: str = Field(alias="Column", description="Name of the output property to sort on")
    sort_order: SortOrder = Field(
        default=SortOrder.ASC, alias="SortOrder", description="Order of the sorting"
    )

    @field_validator("sort_order", mode="before")
    @classmethod
    def coerce_order(cls, value: Any) -> Any:
        return _normalize_sort_order(value)


class SortSpec(BaseModel):
    """Default ordering declared by a tool."""

    column: str
    sort_order: SortOrder = SortOrder.ASC

    @field_validator("sort_order", mode="before")
    @classmethod
    def coerce_order(cls, value: Any) -> Any:
        return _normalize_sort_order(value)


class FilterParam(BaseModel):
    """Single filter on an output column."""

    model_config = ConfigDict(populate_by_name=True)

    column: str = Field(alias="Column", description="Name of the output property to filter on")
    operator: Operator = Field(alias="Operator", description="Operator of the filter")
    value: str = Field(alias="Value", description="Value of the filter")

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value: Any) -> Any:
        """Numbers and booleans arrive unquoted from some callers."""
        if isinstance(value, bool):
            return "T" if value else "F"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class QueryParams(BaseModel):
    """
    Generic query envelope shared by every list tool.

    The limit is not capped here; the ceiling is enforced centrally
    before a request is sent so it surfaces as LimitExceeded.
    """

    model_config = ConfigDict(populate_by_name=True)

    count_only: bool = Field(default=False, alias="CountOnly")
    order_by: Optional[OrderBy] = Field(default=None, alias="OrderBy")
    filters: List[FilterParam] = Field(default_factory=list, alias="Filters")
    limit: Optional[int] = Field(default=None, alias="Limit", ge=0)
    offset: Optional[int] = Field(default=None, alias="Offset", ge=0)

    @field_validator("count_only", mode="before")
    @classmethod
    def none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("filters", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def _check_date_pattern(value: Optional[str]) -> Optional[str]:
    # Imported here: the schema package depends on this module.
    from netsuite_query.schema.dates import validate_pattern

    return value if value is None else validate_pattern(value)


class SuiteQLColumn(BaseModel):
    """
    Column of a SuiteQL-backed tool.

    ``sql`` is the expression projected as the logical name; ``name``
    overrides the key looked up in result rows.
    """

    model_config = ConfigDict(frozen=True)

    sql: str
    type: DataType
    format: Optional[str] = None
    filter_only: bool = False
    name: Optional[str] = None

    @field_validator("format")
    @classmethod
    def check_format(cls, value: Optional[str]) -> Optional[str]:
        return _check_date_pattern(value)


class SearchColumn(BaseModel):
    """
    Column of a saved-search-backed tool.

    ``formula`` and ``filter_formula`` use the ``"<resultfield>: <expression>"``
    notation, e.g. ``"formulatext: {account.number}"``.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    type: DataType
    filter_type: Optional[DataType] = None
    format: Optional[str] = None
    filter_only: bool = False
    formula: Optional[str] = None
    filter_formula: Optional[str] = None
    txt: Optional[bool] = None
    join: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("format")
    @classmethod
    def check_format(cls, value: Optional[str]) -> Optional[str]:
        return _check_date_pattern(value)

    @model_validator(mode="after")
    def check_source(self) -> "SearchColumn":
        """A column needs a field name or a formula to select from."""
        if not self.name and not self.formula:
            raise ValueError("SearchColumn requires either name or formula")
        if self.formula is not None and ":" not in self.formula:
            raise ValueError(f"Formula '{self.formula}' must look like '<field>: <expression>'")
        return self


class _ColumnSchema(BaseModel):
    """Ordered, validated mapping of logical column names to descriptors."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_columns(self):
        columns = getattr(self, "columns")
        if not columns:
            raise ValueError("A column schema needs at least one column")
        for key in columns:
            if not key.isidentifier():
                raise ValueError(f"Column name '{key}' is not a valid identifier")
        if all(col.filter_only for col in columns.values()):
            raise ValueError("A column schema needs at least one output column")
        return self

    def __contains__(self, key: object) -> bool:
        return key in self.columns

    def get(self, key: str):
        return self.columns.get(key)

    def output_columns(self) -> Dict[str, Any]:
        """Columns projected to the caller, in declaration order."""
        return {k: c for k, c in self.columns.items() if not c.filter_only}


class SuiteQLSchema(_ColumnSchema):
    columns: Dict[str, SuiteQLColumn]


class SearchSchema(_ColumnSchema):
    columns: Dict[str, SearchColumn]


class SuiteQLPage(BaseModel):
    """One page returned by the SuiteQL endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(default=0, alias="totalResults")
    items: List[Dict[str, Any]] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")
    offset: int = 0
    count: int = 0

    @field_validator("total_count", "offset", "count", mode="before")
    @classmethod
    def none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


# Nested filter expression understood by the search backend:
# ["field", "operator", "value", ...] triples joined by "AND"/"OR" tokens.
FilterExpression = List[Union[str, List[Any]]]


class SearchDescriptor(BaseModel):
    """Structured search request sent to the search RESTlet."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    filters: FilterExpression = Field(default_factory=list)
    columns: List[Dict[str, Any]] = Field(default_factory=list)
    count_only: bool = Field(default=False, alias="countOnly")
    max_results: int = Field(default=0, alias="maxResults")
    settings: List[Dict[str, str]] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation with camelCase keys."""
        return self.model_dump(by_alias=True)


class SearchData(BaseModel):
    count: int = 0
    items: List[List[Any]] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Response envelope of the search RESTlet."""

    success: bool = True
    error: Optional[Any] = None
    data: Optional[SearchData] = None
