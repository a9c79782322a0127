"""
Test the MCP tools against stub executors.
"""

import asyncio
import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from netsuite_query.config import Settings
from netsuite_query.core.errors import GatewayError
from netsuite_query.core.models import QueryParams, SearchResponse, SuiteQLPage
from netsuite_query.execution.fuzzy import fuzzy_search, match_score
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.server import create_server
from netsuite_query.tools.accounts import accounts_spec, find_subsidiaries, get_account_balance
from netsuite_query.tools.catalog import INVOICES_SPEC, build_catalog
from netsuite_query.tools.customers import get_customer_details
from netsuite_query.tools.registry import build_query_handler, run_query_tool, tool_error

ACCOUNT_ROWS = [
    {"id": "1", "accountnumber": "4000", "name": "Revenue"},
    {"id": "2", "accountnumber": "4010", "name": "Sales", "parentid": "1"},
    {"id": "3", "accountnumber": "4011", "name": "Online Sales", "parentid": "2"},
    {"id": "4", "accountnumber": "5000", "name": "Expenses"},
]

SUBSIDIARY_ROWS = [
    ["1", "Parent Co", ""],
    ["2", "Child Co", "1"],
    ["3", "Grandchild Co", "2"],
    ["4", "Other Inc", ""],
]


class StubSuiteQL:
    def __init__(self, items):
        self.items = items
        self.statements = []

    async def execute(self, statement, offset=0):
        self.statements.append(statement)
        return SuiteQLPage(items=self.items, has_more=False, offset=offset, count=len(self.items))


class StubSearch:
    """Answers each search with the rows registered for its record type."""

    def __init__(self, rows_by_type):
        self.rows_by_type = rows_by_type
        self.descriptors = []

    async def search(self, descriptor):
        self.descriptors.append(descriptor)
        rows = self.rows_by_type.get(descriptor.type, [])
        return SearchResponse.model_validate(
            {"success": True, "data": {"count": len(rows), "items": rows}}
        )


def _orchestrator(suiteql_rows=None, search_rows=None):
    suiteql = StubSuiteQL(suiteql_rows or [])
    search = StubSearch(search_rows or {})
    return QueryOrchestrator(suiteql, search, page_delay=0), suiteql, search


def test_catalog_registers_every_tool():
    orchestrator, _, _ = _orchestrator()
    mcp = create_server(orchestrator=orchestrator, settings=Settings())

    tools = asyncio.run(mcp.get_tools())

    assert len(tools) == 19
    for name in [
        "get-accounts",
        "get-accounting-periods",
        "get-subsidiaries",
        "get-invoices",
        "get-transactions",
        "get-account-balance",
        "get-customer-details",
    ]:
        assert name in tools
    assert "Output columns:" in tools["get-invoices"].description


def test_catalog_names_are_unique():
    names = [spec.name for spec in build_catalog(Settings())]
    assert len(names) == len(set(names))


def test_account_types_listed_in_description():
    spec = accounts_spec(Settings(account_types=["Bank", "Income"]))
    assert "Bank, Income" in spec.description


def test_accounts_tool_resolves_parent_numbers():
    orchestrator, suiteql, _ = _orchestrator(suiteql_rows=ACCOUNT_ROWS)

    result = asyncio.run(run_query_tool(accounts_spec(), orchestrator, QueryParams()))

    items = {item["AccountNumber"]: item for item in result["items"]}
    assert items["4010"]["ParentNumber"] == "4000"
    assert "ParentId" not in items["4010"]
    assert "ParentNumber" not in items["4000"]
    assert suiteql.statements[0].endswith("ORDER BY a.accountSearchDisplayNameCopy ASC")


def test_transaction_tools_require_date_filter():
    orchestrator, _, search = _orchestrator()

    with pytest.raises(GatewayError, match="Filters cannot be empty"):
        asyncio.run(run_query_tool(INVOICES_SPEC, orchestrator, QueryParams()))
    assert search.descriptors == []


def test_handler_reports_limit_as_tool_error():
    orchestrator, _, search = _orchestrator()
    handler = build_query_handler(build_catalog(Settings())[0], orchestrator)

    with pytest.raises(ToolError) as exc_info:
        asyncio.run(handler(Limit=20000))

    payload = json.loads(str(exc_info.value))
    assert payload["error"] == "AIErr"
    assert "10000" in payload["message"]
    assert search.descriptors == []


def test_unexpected_errors_are_reported_as_internal():
    payload = json.loads(str(tool_error("get-items", RuntimeError("boom"))))
    assert payload["error"] == "AIErr"
    assert payload["message"] == "boom"
    assert "timestamp" in payload


def test_account_balance_rolls_up_descendants():
    orchestrator, _, search = _orchestrator(
        suiteql_rows=ACCOUNT_ROWS,
        search_rows={"transaction": [["1", "100.25"], ["2", "50"], ["3", "0.5"]]},
    )

    result = asyncio.run(
        get_account_balance(orchestrator, ["4000", "4010"], "2024-01-15", "2024-03-10")
    )

    assert result == {
        "balances": [
            {"AccountNumber": "4000", "Name": "Revenue", "Balance": 150.75},
            {"AccountNumber": "4010", "Name": "Sales", "Balance": 50.5},
        ]
    }
    filters = search.descriptors[0].filters
    assert filters[-1] == ["account", "anyof", "1", "2", "3"]
    window = filters[0][0]
    assert window[2] == ["accountingperiod.startdate", "onorafter", "1/1/2024"]
    assert window[4] == ["accountingperiod.enddate", "onorbefore", "3/31/2024"]


def test_account_balance_errors():
    orchestrator, _, _ = _orchestrator(suiteql_rows=ACCOUNT_ROWS)

    with pytest.raises(GatewayError, match="Accounts cannot be Empty"):
        asyncio.run(get_account_balance(orchestrator, []))
    with pytest.raises(GatewayError, match="Accounts not found"):
        asyncio.run(get_account_balance(orchestrator, ["9999"]))


def test_consolidated_subsidiary_includes_children():
    orchestrator, _, _ = _orchestrator(search_rows={"subsidiary": SUBSIDIARY_ROWS})

    assert asyncio.run(find_subsidiaries(orchestrator, "Parent Co", consolidated=True)) == [
        "1", "2", "3",
    ]
    assert asyncio.run(find_subsidiaries(orchestrator, "Other Inc")) == ["4"]
    assert asyncio.run(find_subsidiaries(orchestrator, None)) == []

    with pytest.raises(GatewayError, match="No Subsidiaries match your request"):
        asyncio.run(find_subsidiaries(orchestrator, "Nowhere Ltd"))


def test_account_balance_filtered_by_subsidiary():
    orchestrator, _, search = _orchestrator(
        suiteql_rows=ACCOUNT_ROWS,
        search_rows={"subsidiary": SUBSIDIARY_ROWS, "transaction": [["4", "-12.5"]]},
    )

    result = asyncio.run(get_account_balance(orchestrator, ["5000"], subsidiary="Other Inc"))

    assert result["balances"][0]["Balance"] == -12.5
    balance_search = [d for d in search.descriptors if d.type == "transaction"][0]
    assert balance_search.filters[-1] == ["subsidiary", "anyof", "4"]


def test_customer_lookup_prefers_exact_match():
    orchestrator, _, _ = _orchestrator(
        search_rows={"customer": [["1", "Acme"], ["2", "Acme Corp"], ["3", "Beta"]]}
    )
    assert asyncio.run(get_customer_details(orchestrator, "acme")) == {
        "customer": {"Id": "1", "Name": "Acme"}
    }


def test_customer_lookup_ambiguous_and_missing():
    orchestrator, _, _ = _orchestrator(
        search_rows={"customer": [["1", "Acme Corp"], ["2", "Acme Inc"]]}
    )
    with pytest.raises(GatewayError) as exc_info:
        asyncio.run(get_customer_details(orchestrator, "Acme"))
    assert exc_info.value.message == (
        '2 customer records "Acme Corp", "Acme Inc" match your request. '
        "Which one are you looking for?"
    )

    empty, _, _ = _orchestrator()
    with pytest.raises(GatewayError, match="No customer record matches your input."):
        asyncio.run(get_customer_details(empty, "Zeta"))
    with pytest.raises(GatewayError, match="searchValue cannot be empty."):
        asyncio.run(get_customer_details(empty, "  "))


def test_customer_lookup_by_id():
    orchestrator, _, search = _orchestrator(search_rows={"customer": [["1042", "Globex"]]})

    assert asyncio.run(get_customer_details(orchestrator, "1042")) == {
        "customer": {"Id": "1042", "Name": "Globex"}
    }
    assert len(search.descriptors) == 2


def test_fuzzy_scores():
    assert match_score("Acme", "acme") == 0.0
    assert match_score("Acme", "Acme Corporation") == 0.0
    assert match_score("Acme", "Globex") > 0.2

    records = [{"Name": "Globex"}, {"Name": "Acme Corp"}, {"Name": "Acme"}]
    assert fuzzy_search(records, "acme", "Name") == [{"Name": "Acme Corp"}, {"Name": "Acme"}]
    assert fuzzy_search(records, "acme", "Name", exact_only_if_exists=True) == [{"Name": "Acme"}]


def _call_tool(mcp, name, arguments):
    async def call():
        async with Client(mcp) as client:
            return await client.call_tool(name, arguments)

    return asyncio.run(call())


@pytest.mark.parametrize(
    "arguments,field",
    [
        ({"Filters": [{"Column": "Name", "Operator": "contains", "Value": "x"}]}, "Filters.0.Operator"),
        ({"OrderBy": {"Column": "Name", "SortOrder": "sideways"}}, "OrderBy.SortOrder"),
        ({"Limit": -1}, "Limit"),
    ],
)
def test_invalid_envelope_reported_as_user_error(arguments, field):
    orchestrator, _, search = _orchestrator()
    mcp = create_server(orchestrator=orchestrator, settings=Settings())

    with pytest.raises(ToolError) as exc_info:
        _call_tool(mcp, "get-classes", arguments)

    payload = json.loads(str(exc_info.value))
    assert payload["error"] == "UserErr"
    assert field in payload["message"]
    assert "timestamp" in payload
    assert search.descriptors == []


def test_valid_envelope_through_client():
    orchestrator, _, search = _orchestrator(search_rows={"classification": [["1", "Retail"]]})
    mcp = create_server(orchestrator=orchestrator, settings=Settings())

    _call_tool(
        mcp,
        "get-classes",
        {
            "Filters": [{"Column": "Name", "Operator": "Like", "Value": "Ret"}],
            "OrderBy": {"Column": "Name", "SortOrder": "desc"},
            "Limit": 5,
        },
    )

    descriptor = search.descriptors[0]
    assert descriptor.filters == [["name", "CONTAINS", "Ret"]]
    assert descriptor.max_results == 5
    assert {"name": "name", "sort": "DESC"} in descriptor.columns


def test_envelope_schema_is_advertised():
    orchestrator, _, _ = _orchestrator()
    mcp = create_server(orchestrator=orchestrator, settings=Settings())

    parameters = asyncio.run(mcp.get_tools())["get-classes"].parameters["properties"]

    operators = parameters["Filters"]["items"]["properties"]["Operator"]["enum"]
    assert "Not_Like" in operators
    assert parameters["Limit"]["type"] == "integer"
