"""
Generic tool registration.

Every list tool is described by a ToolSpec and registered through
register_query_tool(), which builds a handler accepting the generic
query envelope and routes it to the right query path.
"""

import json
import logging
from typing import Annotated, Any, Callable, Dict, List, Optional, Union

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from netsuite_query.core import models
from netsuite_query.core.errors import ErrorKind, GatewayError
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.query.operators import Backend
from netsuite_query.query.validation import validate_param_filters

logger = logging.getLogger(__name__)

RecordProcessor = Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]]

# Advertised schema of the envelope arguments. The handler accepts any value
# and validates it through parse_envelope().
ORDER_BY_SCHEMA = {
    "type": "object",
    "properties": {
        "Column": {"type": "string"},
        "SortOrder": {"type": "string", "enum": [o.value for o in models.SortOrder]},
    },
    "required": ["Column"],
}

FILTERS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "Column": {"type": "string"},
            "Operator": {"type": "string", "enum": [o.value for o in models.Operator]},
            "Value": {"type": ["string", "number", "boolean"]},
        },
        "required": ["Column", "Operator", "Value"],
    },
}


class ToolSpec(BaseModel):
    """
    Declarative description of a list tool.

    ``source`` is the statement template for SuiteQL tools and the
    record type for search tools.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    title: str
    description: str
    backend: Backend
    source: str
    columns: Union[models.SuiteQLSchema, models.SearchSchema]
    inbuilt_filter: Union[str, models.FilterExpression, None] = None
    default_sort: Optional[models.SortSpec] = None
    settings: Optional[Dict[str, str]] = None
    validate_filters: bool = False
    check_period: bool = True
    check_date: bool = True
    post_process: Optional[RecordProcessor] = None

    def full_description(self) -> str:
        """Tool description followed by the output columns."""
        names = ", ".join(self.columns.output_columns())
        return f"{self.description}\n\nOutput columns: {names}"


def parse_envelope(arguments: Dict[str, Any]) -> models.QueryParams:
    """
    Validate raw tool arguments into a QueryParams.

    Raises:
        GatewayError: UserErr listing each invalid field, e.g.
            ``Filters.0.Operator: Input should be ...``
    """
    try:
        return models.QueryParams.model_validate(arguments)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
            for item in e.errors()
        ]
        raise GatewayError(
            "Invalid query parameters - " + "; ".join(problems), ErrorKind.USER
        ) from e


def tool_error(tool_name: str, error: Exception) -> ToolError:
    """
    Convert an exception into the error reported to the client.

    The message is the JSON error payload; the traceback stays in the log.
    """
    logger.error("Tool %s failed: %s", tool_name, error, exc_info=error)
    if not isinstance(error, GatewayError):
        error = GatewayError(str(error), ErrorKind.AI)
    return ToolError(json.dumps(error.to_payload()))


async def run_query_tool(
    spec: ToolSpec, orchestrator: QueryOrchestrator, params: models.QueryParams
) -> Dict[str, Any]:
    """
    Execute a list tool for an already parsed query envelope.

    Args:
        spec: Tool description
        orchestrator: Orchestrator running the query
        params: Query envelope

    Returns:
        ``{"Count": n}`` or ``{"items": [...]}``
    """
    if spec.validate_filters:
        validate_param_filters(params, period=spec.check_period, date=spec.check_date)

    if spec.backend == Backend.SUITEQL:
        result = await orchestrator.run_suiteql(
            spec.source,
            spec.columns,
            params,
            inbuilt_filter=spec.inbuilt_filter or "",
            default_sort=spec.default_sort,
        )
    else:
        result = await orchestrator.run_search(
            spec.source,
            spec.columns,
            params,
            inbuilt_filter=spec.inbuilt_filter or None,
            default_sort=spec.default_sort,
            settings=spec.settings,
        )

    if spec.post_process is not None and "items" in result:
        result["items"] = spec.post_process(result["items"])
    return result


def build_query_handler(spec: ToolSpec, orchestrator: QueryOrchestrator):
    """Build the async handler exposed for ``spec``."""

    async def handler(
        CountOnly: Annotated[
            Any,
            Field(
                description="If true, would return Count property only. If false, "
                "Count property is removed and array of results is returned. Default is false",
                json_schema_extra={"type": "boolean"},
            ),
        ] = None,
        OrderBy: Annotated[
            Any,
            Field(
                description="Sort the results by which output property. Use OrderBy as much as possible",
                json_schema_extra=ORDER_BY_SCHEMA,
            ),
        ] = None,
        Filters: Annotated[
            Any,
            Field(
                description="Filter the results by which output property. Use Filters as much as possible",
                json_schema_extra=FILTERS_SCHEMA,
            ),
        ] = None,
        Limit: Annotated[
            Any,
            Field(
                description="Limit the number of results. Max value is 10,000",
                json_schema_extra={"type": "integer", "minimum": 0},
            ),
        ] = None,
        Offset: Annotated[
            Any,
            Field(
                description="Number of results to skip",
                json_schema_extra={"type": "integer", "minimum": 0},
            ),
        ] = None,
    ) -> Dict[str, Any]:
        try:
            params = parse_envelope(
                {
                    "CountOnly": CountOnly,
                    "OrderBy": OrderBy,
                    "Filters": Filters,
                    "Limit": Limit,
                    "Offset": Offset,
                }
            )
            return await run_query_tool(spec, orchestrator, params)
        except Exception as e:
            raise tool_error(spec.name, e) from e

    handler.__name__ = spec.name.replace("-", "_")
    return handler


def register_query_tool(mcp: FastMCP, spec: ToolSpec, orchestrator: QueryOrchestrator) -> Tool:
    """
    Register a list tool on ``mcp``.

    Args:
        mcp: Server to register on
        spec: Tool description
        orchestrator: Orchestrator running the queries

    Returns:
        The registered Tool
    """
    tool = Tool.from_function(
        build_query_handler(spec, orchestrator),
        name=spec.name,
        title=spec.title,
        description=spec.full_description(),
    )
    mcp.add_tool(tool)
    logger.debug("Registered tool %s (%s)", spec.name, spec.backend.value)
    return tool
