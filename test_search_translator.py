"""
Test saved-search descriptor generation.
"""

import asyncio

import pytest

from netsuite_query.core.errors import LimitExceeded
from netsuite_query.core.models import (
    DataType,
    QueryParams,
    SearchColumn,
    SearchResponse,
    SearchSchema,
    SortOrder,
    SortSpec,
)
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.query.search import SearchTranslator, field_reference, split_formula

SCHEMA = SearchSchema(
    columns={
        "Id": SearchColumn(name="internalid", type=DataType.ID),
        "Date": SearchColumn(name="trandate", type=DataType.DATE, format="M/d/yyyy"),
        "Customer": SearchColumn(name="entityid", join="customer", type=DataType.STRING),
        "Status": SearchColumn(
            name="status", type=DataType.STRING, txt=True, filter_formula="formulatext: {status}"
        ),
        "Amount": SearchColumn(name="amount", type=DataType.NUMBER),
        "Upper": SearchColumn(formula="formulatext: UPPER({memo})", type=DataType.STRING),
    }
)

INBUILT = [["type", "anyof", "CustInvc"], "AND", ["mainline", "is", "T"]]
DEFAULT_SORT = SortSpec(column="Date", sort_order=SortOrder.DESC)


def _translate(params, inbuilt_filter=None, default_sort=DEFAULT_SORT, settings=None):
    return SearchTranslator().translate(
        "invoice", SCHEMA, QueryParams.model_validate(params), inbuilt_filter, default_sort, settings
    )


class NeverCalledExecutor:
    """Search executor that fails the test if a request is sent."""

    async def search(self, descriptor):
        raise AssertionError("no request expected")

    async def execute(self, statement, offset=0):
        raise AssertionError("no request expected")


class RecordingSearchExecutor:
    def __init__(self, response):
        self.response = response
        self.descriptors = []

    async def search(self, descriptor):
        self.descriptors.append(descriptor)
        return SearchResponse.model_validate(self.response)


def test_columns_carry_field_join_and_sort():
    descriptor = _translate({})
    columns = descriptor.columns
    assert columns[0] == {"name": "internalid"}
    assert columns[1] == {"name": "trandate", "sort": "DESC"}
    assert columns[2] == {"name": "entityid", "join": "customer"}
    assert columns[3] == {"name": "status", "txt": True}


def test_formula_column_is_split():
    descriptor = _translate({})
    assert descriptor.columns[5] == {"name": "formulatext", "formula": "UPPER({memo})"}
    assert split_formula("formulanumeric: {amount} * 2") == ("formulanumeric", "{amount} * 2")


def test_filter_expression_with_inbuilt_filter():
    descriptor = _translate(
        {
            "Filters": [
                {"Column": "Date", "Operator": ">=", "Value": "2024-01-05"},
                {"Column": "Amount", "Operator": ">", "Value": "100"},
            ]
        },
        inbuilt_filter=INBUILT,
    )
    assert descriptor.filters == [
        ["type", "anyof", "CustInvc"],
        "AND",
        ["mainline", "is", "T"],
        "AND",
        ["trandate", "ONORAFTER", "1/5/2024"],
        "AND",
        ["amount", "GREATERTHAN", "100"],
    ]


def test_inbuilt_filter_alone_has_no_dangling_and():
    descriptor = _translate({}, inbuilt_filter=INBUILT)
    assert descriptor.filters == INBUILT


def test_field_references():
    assert field_reference(SCHEMA.columns["Status"]) == "formulatext: {status}"
    assert field_reference(SCHEMA.columns["Customer"]) == "customer.entityid"
    assert field_reference(SCHEMA.columns["Upper"]) == "formulatext: UPPER({memo})"
    assert field_reference(SCHEMA.columns["Id"]) == "internalid"


def test_string_and_id_filters():
    descriptor = _translate(
        {
            "Filters": [
                {"Column": "Customer", "Operator": "Like", "Value": "Acme"},
                {"Column": "Id", "Operator": "!=", "Value": "12"},
                {"Column": "Unknown", "Operator": "=", "Value": "x"},
            ]
        }
    )
    assert descriptor.filters == [
        ["customer.entityid", "CONTAINS", "Acme"],
        "AND",
        ["internalid", "NONEOF", "12"],
    ]


def test_result_cap():
    assert _translate({}).max_results == 0
    assert _translate({"Limit": 50}).max_results == 50
    count = _translate({"CountOnly": True, "Limit": 50})
    assert count.max_results == 1
    assert count.count_only is True
    assert all("sort" not in c for c in count.columns)


def test_order_fallback_to_default():
    descriptor = _translate({"OrderBy": {"Column": "Nonexistent", "SortOrder": "ASC"}})
    sorted_columns = [c for c in descriptor.columns if "sort" in c]
    assert sorted_columns == [{"name": "trandate", "sort": "DESC"}]


def test_settings_become_name_value_pairs():
    descriptor = _translate({}, settings={"consolidationtype": "ACCTTYPE"})
    assert descriptor.settings == [{"name": "consolidationtype", "value": "ACCTTYPE"}]


def test_payload_uses_wire_names():
    payload = _translate({"CountOnly": True}).to_payload()
    assert payload["countOnly"] is True
    assert payload["maxResults"] == 1
    assert payload["type"] == "invoice"


def test_translation_is_deterministic():
    params = {
        "Filters": [{"Column": "Status", "Operator": "=", "Value": "Open"}],
        "OrderBy": {"Column": "Amount", "SortOrder": "DESC"},
    }
    assert _translate(params, INBUILT).to_payload() == _translate(params, INBUILT).to_payload()


def test_limit_above_ceiling_rejected_before_request():
    orchestrator = QueryOrchestrator(NeverCalledExecutor(), NeverCalledExecutor(), page_delay=0)
    with pytest.raises(LimitExceeded):
        asyncio.run(orchestrator.run_search("invoice", SCHEMA, QueryParams(limit=20000)))


def test_run_search_normalizes_positional_rows():
    executor = RecordingSearchExecutor(
        {
            "success": True,
            "data": {
                "count": 1,
                "items": [["7", "3/15/2024", "Acme", "Open", "250.5", "X"]],
            },
        }
    )
    orchestrator = QueryOrchestrator(NeverCalledExecutor(), executor, page_delay=0)

    result = asyncio.run(orchestrator.run_search("invoice", SCHEMA, QueryParams()))

    assert result == {
        "items": [
            {
                "Id": "7",
                "Date": "2024-03-15T00:00:00.000Z",
                "Customer": "Acme",
                "Status": "Open",
                "Amount": 250.5,
                "Upper": "X",
            }
        ]
    }
    assert executor.descriptors[0].max_results == 10000


def test_run_search_count_only():
    executor = RecordingSearchExecutor({"success": True, "data": {"count": 42, "items": []}})
    orchestrator = QueryOrchestrator(NeverCalledExecutor(), executor, page_delay=0)

    result = asyncio.run(orchestrator.run_search("invoice", SCHEMA, QueryParams(count_only=True)))

    assert result == {"Count": 42}
    assert executor.descriptors[0].max_results == 1


def test_order_on_filter_only_column_falls_back_to_default():
    schema = SearchSchema(
        columns={
            "Id": SearchColumn(name="internalid", type=DataType.ID),
            "Inactive": SearchColumn(name="isinactive", type=DataType.BOOLEAN, filter_only=True),
        }
    )
    descriptor = SearchTranslator().translate(
        "customer",
        schema,
        QueryParams.model_validate({"OrderBy": {"Column": "Inactive", "SortOrder": "ASC"}}),
        default_sort=SortSpec(column="Id", sort_order=SortOrder.DESC),
    )
    assert descriptor.columns == [{"name": "internalid", "sort": "DESC"}]
