"""
SuiteQL query translator.

Fills a statement template with the projected columns, the WHERE clause
and the ORDER BY clause built from a generic query envelope.
"""

import logging
import re
from typing import List, Optional

from netsuite_query.core.models import (
    DataType,
    FilterParam,
    QueryParams,
    SortSpec,
    SuiteQLColumn,
    SuiteQLSchema,
)
from netsuite_query.query.operators import Backend, translate_operator
from netsuite_query.query.translator import enforce_result_ceiling, resolve_order
from netsuite_query.schema.dates import iso_to_format

logger = logging.getLogger(__name__)

COLUMNS_PLACEHOLDER = "{Columns}"
FILTERS_PLACEHOLDER = "{Filters}"
ORDER_BY_PLACEHOLDER = "{OrderBy}"

COUNT_COLUMN = "COUNT(*) AS Count"


def _quote(value: str) -> str:
    return value.replace("'", "''")


class SuiteQLTranslator:
    """
    Translates a query envelope into a SuiteQL statement.

    Templates look like ``SELECT {Columns} FROM Account a {Filters} {OrderBy}``.
    An empty clause removes its placeholder together with the whitespace
    in front of it, so no placeholder survives in the output.
    """

    def translate(
        self,
        template: str,
        schema: SuiteQLSchema,
        params: QueryParams,
        inbuilt_filter: str = "",
        default_sort: Optional[SortSpec] = None,
    ) -> str:
        """
        Build the SuiteQL statement.

        Args:
            template: Statement with ``{Columns}``, ``{Filters}`` and ``{OrderBy}``
            schema: Column schema of the tool
            params: Generic query envelope
            inbuilt_filter: Condition always applied, without ``WHERE``
            default_sort: Ordering used when the request names none

        Returns:
            Statement string ready for the SuiteQL endpoint

        Raises:
            LimitExceeded: If the requested limit is above the ceiling
            UnsupportedOperator: If a filter operator does not apply to its column
        """
        if not params.count_only:
            enforce_result_ceiling(params.limit)

        sql = template.replace(COLUMNS_PLACEHOLDER, self.build_columns(schema, params))
        sql = self._substitute(sql, ORDER_BY_PLACEHOLDER, self.build_order_by(schema, params, default_sort))
        sql = self._substitute(sql, FILTERS_PLACEHOLDER, self.build_where(schema, params, inbuilt_filter))

        logger.debug("Generated SuiteQL: %s", sql)
        return sql

    def build_columns(self, schema: SuiteQLSchema, params: QueryParams) -> str:
        """Projected column list, or a single count aggregate in count mode."""
        if params.count_only:
            return COUNT_COLUMN

        columns = ", ".join(
            f"{column.sql} AS {key}" for key, column in schema.output_columns().items()
        )
        if params.limit:
            return f"TOP {params.limit} {columns}"
        return columns

    def build_order_by(
        self,
        schema: SuiteQLSchema,
        params: QueryParams,
        default_sort: Optional[SortSpec] = None,
    ) -> str:
        """ORDER BY clause, empty in count mode or when nothing resolves."""
        resolved = resolve_order(params, schema.columns, default_sort)
        if resolved is None:
            return ""
        key, direction = resolved
        return f"ORDER BY {schema.columns[key].sql} {direction.value}"

    def build_where(
        self,
        schema: SuiteQLSchema,
        params: QueryParams,
        inbuilt_filter: str = "",
    ) -> str:
        """WHERE clause combining the inbuilt filter and the generic filters."""
        conditions: List[str] = []
        if inbuilt_filter and inbuilt_filter.strip():
            conditions.append(inbuilt_filter.strip())

        generated = self.build_filters(schema, params.filters)
        if generated:
            conditions.append(generated)

        if not conditions:
            return ""
        return "WHERE " + " AND ".join(conditions)

    def build_filters(self, schema: SuiteQLSchema, filters: List[FilterParam]) -> str:
        """Render the generic filters joined with AND, skipping unknown columns."""
        rendered: List[str] = []
        skipped = 0

        for param in filters:
            column = schema.get(param.column)
            if column is None:
                logger.info(
                    "Column %s not in schema, skipping filter (available: %s)",
                    param.column, ", ".join(schema.columns),
                )
                skipped += 1
                continue

            operator = translate_operator(Backend.SUITEQL, column.type, param.operator)
            rendered.append(f"{column.sql} {operator} {self._format_value(column, param.value)}")

        if filters:
            logger.debug("Rendered %d filters, skipped %d", len(rendered), skipped)
        return " AND ".join(rendered)

    @staticmethod
    def _format_value(column: SuiteQLColumn, value: str) -> str:
        if column.type == DataType.DATE:
            return f"TO_DATE('{iso_to_format(value, 'yyyyMMdd')}', 'YYYYMMDD')"
        if column.type == DataType.STRING:
            return f"'%{_quote(value)}%'"
        return f"'{_quote(value)}'"

    @staticmethod
    def _substitute(sql: str, placeholder: str, clause: str) -> str:
        if clause:
            return sql.replace(placeholder, clause)
        return re.sub(r"\s*" + re.escape(placeholder), "", sql)
