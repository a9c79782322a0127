"""
Account tools.

Accounts, accounting periods and subsidiaries, plus the account
balance roll-up that sums a parent account over all its descendants.
"""

import logging
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP
from fastmcp.tools import Tool
from pydantic import Field

from netsuite_query.config import Settings
from netsuite_query.core.errors import GatewayError
from netsuite_query.core.models import (
    DataType,
    FilterExpression,
    QueryParams,
    SearchColumn,
    SearchDescriptor,
    SearchSchema,
    SortOrder,
    SortSpec,
    SuiteQLColumn,
    SuiteQLSchema,
)
from netsuite_query.execution.fuzzy import fuzzy_search
from netsuite_query.execution.hierarchy import expand_descendants, resolve_parent_numbers
from netsuite_query.execution.result_formatter import ResultFormatter
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.query.operators import Backend
from netsuite_query.schema.dates import end_of_month, format_datetime, start_of_month
from netsuite_query.tools.registry import ToolSpec, tool_error

logger = logging.getLogger(__name__)

ACCOUNTS_TEMPLATE = "SELECT {Columns} FROM Account a {Filters} {OrderBy}"

ACCOUNT_COLUMNS = SuiteQLSchema(
    columns={
        "Id": SuiteQLColumn(sql="a.Id", type=DataType.ID),
        "Name": SuiteQLColumn(sql="a.accountSearchDisplayNameCopy", type=DataType.STRING),
        "AccountNumber": SuiteQLColumn(sql="a.acctNumber", type=DataType.STRING),
        "ParentId": SuiteQLColumn(sql="a.parent", type=DataType.ID),
        "Type": SuiteQLColumn(sql="BUILTIN.DF(a.acctType)", type=DataType.STRING),
    }
)

ACCOUNTING_PERIOD_COLUMNS = SuiteQLSchema(
    columns={
        "Id": SuiteQLColumn(sql="ap.Id", type=DataType.ID),
        "StartDate": SuiteQLColumn(sql="ap.startDate", type=DataType.DATE),
        "EndDate": SuiteQLColumn(sql="ap.endDate", type=DataType.DATE),
    }
)

SUBSIDIARY_COLUMNS = SearchSchema(
    columns={
        "Id": SearchColumn(name="internalid", type=DataType.ID),
        "Name": SearchColumn(name="namenohierarchy", type=DataType.STRING),
        "ParentId": SearchColumn(name="parent", type=DataType.ID),
    }
)

BALANCE_DATE_FORMAT = "M/d/yyyy"
INCOME_STATEMENT_TYPES = ["COGS", "Expense", "Income", "OthIncome", "OthExpense"]
MAX_SUBSIDIARY_MATCHES = 5

BALANCE_COLUMNS = SearchSchema(
    columns={
        "Id": SearchColumn(name="internalid", type=DataType.NUMBER),
        "Balance": SearchColumn(name="amount", type=DataType.NUMBER),
    }
)


def _resolve_account_parents(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return resolve_parent_numbers(records, number_key="AccountNumber")


def accounts_spec(settings: Optional[Settings] = None) -> ToolSpec:
    """get-accounts, with the configured account types listed for the Type filter."""
    description = (
        "Get List of Accounts, this can be used to get all Accounts or specific "
        "Accounts information. ParentNumber is the AccountNumber of the parent account."
    )
    if settings is not None and settings.account_types:
        description += " Type filter values: " + ", ".join(settings.account_types)

    return ToolSpec(
        name="get-accounts",
        title="Get Accounts",
        description=description,
        backend=Backend.SUITEQL,
        source=ACCOUNTS_TEMPLATE,
        columns=ACCOUNT_COLUMNS,
        default_sort=SortSpec(column="Name", sort_order=SortOrder.ASC),
        post_process=_resolve_account_parents,
    )


ACCOUNTING_PERIODS_SPEC = ToolSpec(
    name="get-accounting-periods",
    title="Get Accounting Periods",
    description="Get List of all accounting periods",
    backend=Backend.SUITEQL,
    source="SELECT {Columns} FROM AccountingPeriod ap {Filters} {OrderBy}",
    columns=ACCOUNTING_PERIOD_COLUMNS,
    inbuilt_filter="ap.isQuarter = 'F' AND ap.isYear = 'F'",
    default_sort=SortSpec(column="StartDate", sort_order=SortOrder.DESC),
)

SUBSIDIARIES_SPEC = ToolSpec(
    name="get-subsidiaries",
    title="Get Subsidiaries",
    description="Get List of all Subsidiaries",
    backend=Backend.SEARCH,
    source="subsidiary",
    columns=SUBSIDIARY_COLUMNS,
    default_sort=SortSpec(column="Id", sort_order=SortOrder.ASC),
)


def balance_search(
    account_ids: List[Any],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    subsidiary_ids: Optional[List[Any]] = None,
) -> SearchDescriptor:
    """
    Build the transaction summary search behind an account balance.

    Income statement accounts are summed over the period window;
    balance sheet accounts over everything up to its end.

    Args:
        account_ids: Internal ids of the accounts to sum
        start_date: ISO date inside the first month (default: this month)
        end_date: ISO date inside the last month (default: this month)
        subsidiary_ids: Restrict to these subsidiaries

    Returns:
        SearchDescriptor grouped by account id with the summed amount
    """
    start = format_datetime(start_of_month(start_date), BALANCE_DATE_FORMAT)
    end = format_datetime(end_of_month(end_date), BALANCE_DATE_FORMAT)

    filters: FilterExpression = [
        [
            [
                ["accounttype", "anyof", *INCOME_STATEMENT_TYPES],
                "AND",
                ["accountingperiod.startdate", "onorafter", start],
                "AND",
                ["accountingperiod.enddate", "onorbefore", end],
            ],
            "OR",
            [
                ["accounttype", "noneof", *INCOME_STATEMENT_TYPES],
                "AND",
                ["accountingperiod.enddate", "onorbefore", end],
            ],
        ],
        "AND",
        ["posting", "is", "T"],
        "AND",
        ["account", "anyof", *[str(i) for i in account_ids]],
    ]
    if subsidiary_ids:
        filters.extend(["AND", ["subsidiary", "anyof", *[str(i) for i in subsidiary_ids]]])

    return SearchDescriptor(
        type="transaction",
        filters=filters,
        columns=[
            {"name": "internalid", "join": "account", "summary": "GROUP", "txt": True},
            {"name": "amount", "summary": "SUM"},
        ],
    )


async def find_subsidiaries(
    orchestrator: QueryOrchestrator,
    subsidiary: Optional[str],
    consolidated: bool = False,
) -> List[Any]:
    """
    Resolve a subsidiary name to the internal ids to filter on.

    Consolidated requests match among parent subsidiaries first and
    include every descendant of the match.

    Returns:
        Subsidiary ids; empty when no subsidiary was given

    Raises:
        GatewayError: UserErr when the name matches no or several subsidiaries
    """
    if not subsidiary or not str(subsidiary).strip():
        return []

    result = await orchestrator.run_search(
        SUBSIDIARIES_SPEC.source,
        SUBSIDIARY_COLUMNS,
        QueryParams(),
        default_sort=SUBSIDIARIES_SPEC.default_sort,
    )
    subsidiaries = result["items"]
    parent_ids = {s.get("ParentId") for s in subsidiaries if s.get("ParentId") is not None}
    parents = [s for s in subsidiaries if s.get("Id") in parent_ids]

    matches = fuzzy_search(parents if consolidated else subsidiaries, subsidiary, "Name", True)
    if not matches and consolidated:
        matches = fuzzy_search(subsidiaries, subsidiary, "Name", True)

    if len(matches) > MAX_SUBSIDIARY_MATCHES:
        raise GatewayError(
            f"{len(matches)} subsidiaries matched your request. Please give more specifics."
        )
    if len(matches) > 1:
        names = ", ".join(f'"{m.get("Name")}"' for m in matches)
        raise GatewayError(
            f"{len(matches)} Subsidiaries {names} match your request, "
            "which subsidiary data are you looking for"
        )
    if not matches:
        raise GatewayError("No Subsidiaries match your request")

    selected = matches[0]["Id"]
    if not consolidated:
        return [selected]
    return expand_descendants(subsidiaries, selected, key="Id", parent_key="ParentId")


async def get_account_balance(
    orchestrator: QueryOrchestrator,
    account_numbers: List[str],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    subsidiary: Optional[str] = None,
    consolidated: bool = False,
) -> Dict[str, Any]:
    """
    Balance of each requested account, rolled up over its descendants.

    Args:
        orchestrator: Orchestrator running the queries
        account_numbers: Account numbers to report
        start_date: ISO date inside the first month
        end_date: ISO date inside the last month
        subsidiary: Subsidiary name to filter on
        consolidated: Include the subsidiary's child subsidiaries

    Returns:
        ``{"balances": [{"AccountNumber", "Name", "Balance"}, ...]}``
    """
    numbers = [str(n).strip() for n in account_numbers or [] if n and str(n).strip()]
    if not numbers:
        raise GatewayError("Accounts cannot be Empty")

    columns = SuiteQLSchema(
        columns={k: v for k, v in ACCOUNT_COLUMNS.columns.items() if k != "Type"}
    )
    accounts = await orchestrator.fetch_suiteql(
        ACCOUNTS_TEMPLATE,
        columns,
        default_sort=SortSpec(column="Name", sort_order=SortOrder.ASC),
    )
    resolve_parent_numbers(accounts, number_key="AccountNumber")
    logger.info("Fetched %d accounts for balance roll-up", len(accounts))

    descendants = {n: expand_descendants(accounts, n) for n in numbers}
    account_ids = list(dict.fromkeys(i for ids in descendants.values() for i in ids))
    if not account_ids:
        raise GatewayError("Accounts not found")

    subsidiary_ids = await find_subsidiaries(orchestrator, subsidiary, consolidated)

    response = await orchestrator.execute_search(
        balance_search(account_ids, start_date, end_date, subsidiary_ids)
    )
    rows = response.data.items if response.data else []
    amounts: Dict[str, float] = {}
    for row in ResultFormatter.normalize_positional_rows(rows, BALANCE_COLUMNS.columns):
        if "Id" in row:
            key = str(row["Id"])
            amounts[key] = amounts.get(key, 0.0) + float(row.get("Balance", 0) or 0)

    names = {a.get("AccountNumber"): a.get("Name") for a in accounts}
    balances = [
        {
            "AccountNumber": number,
            "Name": names.get(number),
            "Balance": round(sum(amounts.get(str(i), 0.0) for i in descendants[number]), 2),
        }
        for number in numbers
    ]
    return {"balances": balances}


def register_account_balance_tool(mcp: FastMCP, orchestrator: QueryOrchestrator) -> Tool:
    """Register get-account-balance on ``mcp``."""

    async def get_account_balance_tool(
        AccountNumbers: Annotated[
            List[str], Field(description="Array of Account Numbers to get the balance")
        ],
        StartDate: Annotated[
            Optional[str],
            Field(
                description="Start Date for calculating Balance. This is always first of "
                "the Month. Default is this Month"
            ),
        ] = None,
        EndDate: Annotated[
            Optional[str],
            Field(
                description="End Date for calculating Balance. This is always End of the "
                "Month. Default is this Month"
            ),
        ] = None,
        Subsidiary: Annotated[
            Optional[str],
            Field(
                description="Subsidiary name to be filtered. Remove consolidated from the "
                "name if it exists"
            ),
        ] = None,
        IsSubConsolidated: Annotated[
            Optional[bool],
            Field(
                description="Is Subsidiary consolidated filter, based on the Consolidated "
                "word in the Subsidiary name. Default is false"
            ),
        ] = None,
    ) -> Dict[str, Any]:
        try:
            return await get_account_balance(
                orchestrator,
                AccountNumbers,
                start_date=StartDate,
                end_date=EndDate,
                subsidiary=Subsidiary,
                consolidated=bool(IsSubConsolidated),
            )
        except Exception as e:
            raise tool_error("get-account-balance", e) from e

    tool = Tool.from_function(
        get_account_balance_tool,
        name="get-account-balance",
        title="Get Account Balance",
        description=(
            "Get Balance of Accounts based on Input Parameters. When retrieving balances "
            "for all accounts, do NOT invoke this function separately for each account. "
            "Instead, call this function **once** by passing all account numbers together "
            "as an array."
        ),
    )
    mcp.add_tool(tool)
    return tool

