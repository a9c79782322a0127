"""
Tool catalog.

Each list tool is plain data: a ToolSpec naming its record type or
statement, its columns, its inbuilt filter and its default sort.
"""

import logging
from typing import List, Optional

from fastmcp import FastMCP

from netsuite_query.config import Settings
from netsuite_query.core.models import DataType, SearchColumn, SearchSchema, SortOrder, SortSpec
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.query.operators import Backend
from netsuite_query.tools.accounts import (
    ACCOUNTING_PERIODS_SPEC,
    SUBSIDIARIES_SPEC,
    accounts_spec,
    register_account_balance_tool,
)
from netsuite_query.tools.customers import register_customer_details_tool
from netsuite_query.tools.registry import ToolSpec, register_query_tool

logger = logging.getLogger(__name__)

STRING = DataType.STRING
NUMBER = DataType.NUMBER
DATE = DataType.DATE
ID = DataType.ID

DATE_FORMAT = "M/d/yyyy"

NEWEST_FIRST = SortSpec(column="Date", sort_order=SortOrder.DESC)
BY_ID = SortSpec(column="Id", sort_order=SortOrder.ASC)


def _schema(**columns: SearchColumn) -> SearchSchema:
    return SearchSchema(columns=columns)


def _text(name: str, formula: Optional[str] = None) -> SearchColumn:
    """String column rendered as display text, filtered through ``formula``."""
    return SearchColumn(name=name, type=STRING, txt=True, filter_formula=formula)


def _list_spec(name: str, title: str, description: str, record_type: str, **columns) -> ToolSpec:
    return ToolSpec(
        name=name,
        title=title,
        description=description,
        backend=Backend.SEARCH,
        source=record_type,
        columns=_schema(**columns),
        default_sort=BY_ID,
    )


def _contact_columns(**extra: SearchColumn):
    columns = dict(
        Id=SearchColumn(name="internalid", type=ID),
        Name=SearchColumn(name="entityid", type=STRING),
        Email=SearchColumn(name="email", type=STRING),
        Phone=SearchColumn(name="phone", type=STRING),
        OfficePhone=SearchColumn(name="altphone", type=STRING),
        Fax=SearchColumn(name="fax", type=STRING),
    )
    columns.update(extra)
    columns["AltEmail"] = SearchColumn(name="altemail", type=STRING)
    return columns


VENDORS_SPEC = _list_spec(
    "get-vendors", "Get Vendors", "Get List of all Vendors with contact information",
    "vendor", **_contact_columns(),
)

CUSTOMERS_SPEC = _list_spec(
    "get-customers", "Get Customers", "Get List of all Customers with contact information",
    "customer", **_contact_columns(PrimaryContact=SearchColumn(name="contact", type=STRING)),
)

CLASSES_SPEC = _list_spec(
    "get-classes", "Get Classes", "Get List of all Classes (Classifications)", "classification",
    Id=SearchColumn(name="internalid", type=ID),
    Name=SearchColumn(name="name", type=STRING),
)

DEPARTMENTS_SPEC = _list_spec(
    "get-departments", "Get Departments", "Get List of all Departments", "department",
    Id=SearchColumn(name="internalid", type=ID),
    Name=SearchColumn(name="name", type=STRING),
)

LOCATIONS_SPEC = _list_spec(
    "get-locations", "Get Locations", "Get List of all Locations", "location",
    Id=SearchColumn(name="internalid", type=ID),
    Name=SearchColumn(name="name", type=STRING),
)

ITEMS_SPEC = ToolSpec(
    name="get-items",
    title="Get Items",
    description="Get List of all sellable Items with details",
    backend=Backend.SEARCH,
    source="item",
    columns=_schema(
        InternalId=SearchColumn(name="internalid", type=ID),
        Name=SearchColumn(name="itemid", type=STRING),
        DisplayName=SearchColumn(name="displayname", type=STRING),
        Description=SearchColumn(name="salesdescription", type=STRING),
        Type=SearchColumn(name="type", type=STRING),
        BasePrice=SearchColumn(name="baseprice", type=STRING),
    ),
    default_sort=SortSpec(column="Name", sort_order=SortOrder.ASC),
)

POSTING_PERIOD_SPEC = _list_spec(
    "get-posting-period", "Get Posting Periods", "Get List of all posting periods",
    "accountingperiod",
    Id=SearchColumn(name="internalid", type=ID),
    Name=SearchColumn(name="periodname", type=STRING),
)

INVOICES_SPEC = ToolSpec(
    name="get-invoices",
    title="Get Invoices",
    description=(
        "Get List of Open Invoices with detailed information. A Date or DueDate filter "
        "is required. Do not use Period for filter, use Date column. For filters, "
        "Account is the AccountNumber."
    ),
    backend=Backend.SEARCH,
    source="invoice",
    columns=_schema(
        Id=SearchColumn(name="internalid", type=ID),
        Number=SearchColumn(name="tranid", type=STRING),
        Date=SearchColumn(name="trandate", type=DATE, format=DATE_FORMAT),
        Period=SearchColumn(name="postingperiod", type=STRING, txt=True),
        Customer=SearchColumn(name="entityid", join="customer", type=STRING),
        Account=_text("account", "formulatext: {account.number}"),
        Status=_text("status", "formulatext: {status}"),
        Amount=SearchColumn(name="amount", type=NUMBER),
        AmountRemaining=SearchColumn(name="amountremaining", type=NUMBER),
        DueDate=SearchColumn(name="duedate", type=DATE, format=DATE_FORMAT),
        Memo=SearchColumn(name="memo", type=STRING),
    ),
    inbuilt_filter=[
        ["type", "anyof", "CustInvc"], "AND",
        ["mainline", "is", "T"], "AND",
        ["memorized", "is", "F"],
    ],
    default_sort=NEWEST_FIRST,
    validate_filters=True,
)


def _payment_columns() -> SearchSchema:
    return _schema(
        Id=SearchColumn(name="internalid", type=ID),
        CustomerName=SearchColumn(name="custbody_ava_customercompanyname", type=STRING),
        Amount=SearchColumn(name="amount", type=STRING),
        Date=SearchColumn(name="trandate", type=DATE),
    )


PAYMENTS_SPEC = ToolSpec(
    name="get-payments",
    title="Get Payments",
    description="Get List of Customer Payments. A Date filter is required.",
    backend=Backend.SEARCH,
    source="customerpayment",
    columns=_payment_columns(),
    default_sort=BY_ID,
    validate_filters=True,
)

CREDIT_MEMOS_SPEC = ToolSpec(
    name="get-credit-memos",
    title="Get Credit Memos",
    description="Get List of Credit Memos. A Date filter is required.",
    backend=Backend.SEARCH,
    source="creditmemo",
    columns=_payment_columns(),
    default_sort=BY_ID,
    validate_filters=True,
)

INVOICE_ITEMS_SPEC = ToolSpec(
    name="get-invoice-items",
    title="Get Invoice Items",
    description="Get List of Items of the invoice",
    backend=Backend.SEARCH,
    source="invoice",
    columns=_schema(
        Id=SearchColumn(name="internalid", type=ID),
        TranId=SearchColumn(name="tranid", type=STRING),
        Amount=SearchColumn(name="amount", type=NUMBER),
        Item=SearchColumn(name="item", type=STRING),
    ),
    inbuilt_filter=[
        ["type", "anyof", "CustInvc"], "AND",
        ["item.type", "anyof", "InvtPart", "NonInvtPart"],
    ],
    default_sort=NEWEST_FIRST,
)

TRANSACTIONS_SPEC = ToolSpec(
    name="get-transactions",
    title="Get Transactions",
    description=(
        "Get List of Entries or Transactions (vendor bills, vendor credits, vendor "
        "payments and journals). A Date filter is required; do not filter on Period."
    ),
    backend=Backend.SEARCH,
    source="transaction",
    columns=_schema(
        Id=SearchColumn(name="internalid", type=ID),
        Date=SearchColumn(name="trandate", type=DATE, format=DATE_FORMAT),
        Period=SearchColumn(name="postingperiod", type=STRING, txt=True),
        Type=_text("type", "formulatext: {type}"),
        DocumentNumber=SearchColumn(name="tranid", type=STRING),
        Name=SearchColumn(name="entity", type=STRING, filter_formula="formulatext: {entity}"),
        Account=_text("account", "formulatext: {account.number}"),
        Product=SearchColumn(name="name", join="class", type=STRING),
        Location=SearchColumn(name="name", join="location", type=STRING),
        Memo=SearchColumn(name="memo", type=STRING),
        Amount=SearchColumn(name="amount", type=NUMBER),
        Department=_text("department", "formulatext: {department}"),
        Status=_text("status", "formulatext: {status}"),
        Subsidiary=_text("subsidiary", "formulatext: {subsidiary}"),
    ),
    inbuilt_filter=[["type", "anyof", "VendBill", "VendCred", "VendPymt", "Journal"]],
    default_sort=NEWEST_FIRST,
    validate_filters=True,
)

BILLS_SPEC = ToolSpec(
    name="get-bills",
    title="Get Bills",
    description="Get List of Bills of Vendors. A Date filter is required; do not filter on Period.",
    backend=Backend.SEARCH,
    source="transaction",
    columns=_schema(
        Id=SearchColumn(name="internalid", type=ID),
        Date=SearchColumn(name="trandate", type=DATE, format=DATE_FORMAT),
        Period=SearchColumn(name="postingperiod", type=STRING, txt=True),
        LastBillPaymentDate=SearchColumn(name="closedate", type=DATE, format=DATE_FORMAT),
        Type=_text("type", "formulatext: {type}"),
        DocumentNumber=SearchColumn(name="tranid", type=STRING),
        TransactionNumber=SearchColumn(name="transactionnumber", type=STRING),
        Amount=SearchColumn(name="amount", type=NUMBER),
        Account=_text("account", "formulatext: {account.number}"),
        Memo=SearchColumn(name="memomain", type=STRING),
        Vendor=SearchColumn(name="entityid", join="vendor", type=STRING),
        Department=_text("department", "formulatext: {department}"),
        Subsidiary=_text("subsidiary", "formulatext: {subsidiary}"),
        AmortScheduleName=SearchColumn(name="name", join="amortizationSchedule", type=STRING),
        AmortStartDate=SearchColumn(name="revrecstartdate", type=DATE, format=DATE_FORMAT),
        AmortEndDate=SearchColumn(name="revrecenddate", type=DATE, format=DATE_FORMAT),
        Status=_text("status", "formulatext: {status}"),
    ),
    inbuilt_filter=[["type", "anyof", "VendBill", "VendCred", "VendPymt"]],
    default_sort=NEWEST_FIRST,
    validate_filters=True,
)

JOURNALS_SPEC = ToolSpec(
    name="get-journals",
    title="Get Journals",
    description="Get List of Journal Entries. A Date filter is required; do not filter on Period.",
    backend=Backend.SEARCH,
    source="transaction",
    columns=_schema(
        Id=SearchColumn(name="internalid", type=ID),
        Date=SearchColumn(name="trandate", type=DATE, format=DATE_FORMAT),
        Period=SearchColumn(name="postingperiod", type=STRING, txt=True),
        Name=SearchColumn(name="entity", type=STRING, filter_formula="formulatext: {entity}"),
        DocumentNumber=SearchColumn(name="tranid", type=STRING),
        Memo=SearchColumn(name="memo", type=STRING),
        Account=_text("account", "formulatext: {account.number}"),
        Subsidiary=_text("subsidiary", "formulatext: {subsidiary}"),
        Amount=SearchColumn(name="amount", type=NUMBER),
        Status=_text("status", "formulatext: {status}"),
    ),
    inbuilt_filter=[["type", "anyof", "Journal"]],
    default_sort=NEWEST_FIRST,
    validate_filters=True,
)


def build_catalog(settings: Optional[Settings] = None) -> List[ToolSpec]:
    """Every list tool, in registration order."""
    return [
        accounts_spec(settings),
        ACCOUNTING_PERIODS_SPEC,
        SUBSIDIARIES_SPEC,
        VENDORS_SPEC,
        CUSTOMERS_SPEC,
        CLASSES_SPEC,
        DEPARTMENTS_SPEC,
        LOCATIONS_SPEC,
        ITEMS_SPEC,
        INVOICES_SPEC,
        PAYMENTS_SPEC,
        CREDIT_MEMOS_SPEC,
        INVOICE_ITEMS_SPEC,
        POSTING_PERIOD_SPEC,
        TRANSACTIONS_SPEC,
        BILLS_SPEC,
        JOURNALS_SPEC,
    ]


def register_catalog(
    mcp: FastMCP, orchestrator: QueryOrchestrator, settings: Optional[Settings] = None
) -> List[str]:
    """
    Register every tool on ``mcp``.

    Returns:
        Names of the registered tools
    """
    names = []
    for spec in build_catalog(settings):
        register_query_tool(mcp, spec, orchestrator)
        names.append(spec.name)

    register_account_balance_tool(mcp, orchestrator)
    names.append("get-account-balance")
    register_customer_details_tool(mcp, orchestrator)
    names.append("get-customer-details")

    logger.info("Registered %d tools", len(names))
    return names
