"""
Customer lookup by name or internal id.
"""

import logging
from typing import Annotated, Any, Dict, List

from fastmcp import FastMCP
from fastmcp.tools import Tool
from pydantic import Field

from netsuite_query.core.errors import GatewayError
from netsuite_query.core.models import (
    DataType,
    FilterParam,
    Operator,
    QueryParams,
    SearchColumn,
    SearchSchema,
    SortOrder,
    SortSpec,
)
from netsuite_query.execution.fuzzy import fuzzy_search
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.tools.registry import tool_error

logger = logging.getLogger(__name__)

MAX_CUSTOMER_MATCHES = 5

CUSTOMER_LOOKUP_COLUMNS = SearchSchema(
    columns={
        "Id": SearchColumn(name="internalid", type=DataType.ID),
        "Name": SearchColumn(name="entityid", type=DataType.STRING),
    }
)


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _unique_by_id(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    unique: Dict[Any, Dict[str, Any]] = {}
    for record in records:
        unique.setdefault(record.get("Id"), record)
    return list(unique.values())


async def get_customer_details(orchestrator: QueryOrchestrator, search_value: str) -> Dict[str, Any]:
    """
    Find exactly one customer matching a name or internal id.

    Args:
        orchestrator: Orchestrator running the searches
        search_value: Customer name, part of it, or internal id

    Returns:
        ``{"customer": {"Id", "Name"}}``

    Raises:
        GatewayError: UserErr when nothing or more than one customer matches
    """
    value = (search_value or "").strip()
    if not value:
        raise GatewayError("searchValue cannot be empty.")

    numeric = _is_number(value)
    lookups = [FilterParam(column="Name", operator=Operator.LIKE, value=value)]
    if numeric:
        lookups.append(FilterParam(column="Id", operator=Operator.LIKE, value=value))

    found: List[Dict[str, Any]] = []
    for lookup in lookups:
        result = await orchestrator.run_search(
            "customer",
            CUSTOMER_LOOKUP_COLUMNS,
            QueryParams(filters=[lookup]),
            default_sort=SortSpec(column="Id", sort_order=SortOrder.ASC),
        )
        found.extend(result["items"])
    candidates = _unique_by_id(found)

    matches = fuzzy_search(candidates, value, "Name", True)
    if numeric:
        matches += fuzzy_search(candidates, value, "Id", True)
    matches = _unique_by_id(matches)

    exact = [
        m for m in matches
        if m.get("Name") == value or (numeric and str(m.get("Id")) == value)
    ]
    if exact:
        matches = exact

    logger.info("Customer lookup %r: %d candidates, %d matches", value, len(candidates), len(matches))

    if not matches:
        raise GatewayError("No customer record matches your input.")
    if len(matches) > MAX_CUSTOMER_MATCHES:
        raise GatewayError(
            f"{len(matches)} customer records match your request. Please give more specifics."
        )
    if len(matches) > 1:
        names = ", ".join(f'"{m.get("Name")}"' for m in matches)
        raise GatewayError(
            f"{len(matches)} customer records {names} match your request. "
            "Which one are you looking for?"
        )

    match = matches[0]
    return {"customer": {"Id": match.get("Id"), "Name": match.get("Name")}}


def register_customer_details_tool(mcp: FastMCP, orchestrator: QueryOrchestrator) -> Tool:
    """Register get-customer-details on ``mcp``."""

    async def get_customer_details_tool(
        searchValue: Annotated[str, Field(description="Customer name or ID to search for")],
    ) -> Dict[str, Any]:
        try:
            return await get_customer_details(orchestrator, searchValue)
        except Exception as e:
            raise tool_error("get-customer-details", e) from e

    tool = Tool.from_function(
        get_customer_details_tool,
        name="get-customer-details",
        title="Get Customer Details",
        description="Find a specific customer by name or ID with fuzzy search capabilities",
    )
    mcp.add_tool(tool)
    return tool
