"""
Test SuiteQL statement generation.
"""

import pytest

from netsuite_query.core.errors import LimitExceeded
from netsuite_query.core.models import (
    DataType,
    QueryParams,
    SortOrder,
    SortSpec,
    SuiteQLColumn,
    SuiteQLSchema,
)
from netsuite_query.query.suiteql import SuiteQLTranslator

TEMPLATE = "SELECT {Columns} FROM Account a {Filters} {OrderBy}"

SCHEMA = SuiteQLSchema(
    columns={
        "Id": SuiteQLColumn(sql="a.Id", type=DataType.NUMBER),
        "Name": SuiteQLColumn(sql="a.Name", type=DataType.STRING),
    }
)

DEFAULT_SORT = SortSpec(column="Name", sort_order=SortOrder.ASC)


def _translate(params, schema=SCHEMA, inbuilt_filter="", default_sort=DEFAULT_SORT):
    return SuiteQLTranslator().translate(
        TEMPLATE, schema, QueryParams.model_validate(params), inbuilt_filter, default_sort
    )


def test_string_equality_renders_containment():
    sql = _translate({"Filters": [{"Column": "Name", "Operator": "=", "Value": "Acme"}]})
    assert "a.Name LIKE '%Acme%'" in sql
    assert "WHERE" in sql


def test_full_statement_layout():
    sql = _translate({"Limit": 50})
    assert sql == "SELECT TOP 50 a.Id AS Id, a.Name AS Name FROM Account a ORDER BY a.Name ASC"


def test_count_only_has_no_order_and_single_aggregate():
    sql = _translate(
        {
            "CountOnly": True,
            "Limit": 10,
            "OrderBy": {"Column": "Id", "SortOrder": "DESC"},
        }
    )
    assert "COUNT(*) AS Count" in sql
    assert "ORDER BY" not in sql
    assert "TOP" not in sql
    assert "a.Id AS Id" not in sql


def test_no_placeholders_survive():
    sql = _translate({}, default_sort=None)
    assert "{" not in sql and "}" not in sql
    assert sql == "SELECT a.Id AS Id, a.Name AS Name FROM Account a"


def test_order_fallback_to_default():
    sql = _translate(
        {"OrderBy": {"Column": "Nonexistent", "SortOrder": "DESC"}},
        default_sort=SortSpec(column="Id", sort_order=SortOrder.DESC),
    )
    assert sql.endswith("ORDER BY a.Id DESC")


def test_requested_order_wins():
    sql = _translate({"OrderBy": {"Column": "Id", "SortOrder": ""}})
    assert sql.endswith("ORDER BY a.Id ASC")


def test_unknown_filter_column_is_skipped():
    sql = _translate(
        {
            "Filters": [
                {"Column": "Missing", "Operator": "=", "Value": "x"},
                {"Column": "Id", "Operator": ">", "Value": "5"},
            ]
        }
    )
    assert "Missing" not in sql
    assert "WHERE a.Id > '5'" in sql


def test_inbuilt_filter_joined_with_generated_filters():
    sql = _translate(
        {"Filters": [{"Column": "Id", "Operator": "<=", "Value": "9"}]},
        inbuilt_filter="a.isInactive = 'F'",
    )
    assert "WHERE a.isInactive = 'F' AND a.Id <= '9'" in sql


def test_date_filter_uses_date_literal():
    schema = SuiteQLSchema(
        columns={
            "Id": SuiteQLColumn(sql="ap.Id", type=DataType.ID),
            "StartDate": SuiteQLColumn(sql="ap.startDate", type=DataType.DATE),
        }
    )
    sql = _translate(
        {"Filters": [{"Column": "StartDate", "Operator": ">=", "Value": "2024-03-05"}]},
        schema=schema,
        default_sort=None,
    )
    assert "ap.startDate >= TO_DATE('20240305', 'YYYYMMDD')" in sql


def test_single_quotes_are_escaped():
    sql = _translate({"Filters": [{"Column": "Name", "Operator": "Like", "Value": "O'Brien"}]})
    assert "'%O''Brien%'" in sql


def test_filter_only_columns_are_not_projected():
    schema = SuiteQLSchema(
        columns={
            "Id": SuiteQLColumn(sql="a.Id", type=DataType.ID),
            "Inactive": SuiteQLColumn(sql="a.isInactive", type=DataType.BOOLEAN, filter_only=True),
        }
    )
    sql = _translate(
        {"Filters": [{"Column": "Inactive", "Operator": "=", "Value": "F"}]},
        schema=schema,
        default_sort=None,
    )
    assert "AS Inactive" not in sql
    assert "a.isInactive = 'F'" in sql


def test_limit_above_ceiling_raises():
    with pytest.raises(LimitExceeded):
        _translate({"Limit": 20000})


def test_translation_is_deterministic():
    params = {
        "Filters": [
            {"Column": "Name", "Operator": "Like", "Value": "Acme"},
            {"Column": "Id", "Operator": ">", "Value": "3"},
        ],
        "OrderBy": {"Column": "Id", "SortOrder": "DESC"},
        "Limit": 25,
    }
    assert _translate(params) == _translate(params)
