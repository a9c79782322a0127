"""
Saved-search query translator.

Builds the descriptor posted to the search RESTlet: projected columns,
a nested filter expression and the result cap.
"""

import logging
from typing import Any, Dict, List, Optional

from netsuite_query.core.models import (
    DataType,
    FilterExpression,
    FilterParam,
    QueryParams,
    SearchColumn,
    SearchDescriptor,
    SearchSchema,
    SortSpec,
)
from netsuite_query.query.operators import Backend, translate_operator
from netsuite_query.query.translator import resolve_order
from netsuite_query.schema.dates import iso_to_format

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "M/d/yyyy"


def split_formula(formula: str):
    """Split ``"formulatext: {status}"`` into ``("formulatext", "{status}")``."""
    name, _, expression = formula.partition(":")
    return name.strip(), expression.strip()


def field_reference(column: SearchColumn) -> str:
    """Field reference used when filtering on ``column``."""
    if column.filter_formula:
        return column.filter_formula
    if column.formula:
        return column.formula
    if column.join:
        return f"{column.join}.{column.name}"
    return column.name


class SearchTranslator:
    """
    Translates a query envelope into a search RESTlet descriptor.

    The result cap is 1 in count mode and the requested limit otherwise
    (0 when none was given). Applying the system-wide ceiling is left to
    the caller that sends the descriptor.
    """

    def translate(
        self,
        record_type: str,
        schema: SearchSchema,
        params: QueryParams,
        inbuilt_filter: Optional[FilterExpression] = None,
        default_sort: Optional[SortSpec] = None,
        settings: Optional[Dict[str, str]] = None,
    ) -> SearchDescriptor:
        """
        Build the search descriptor.

        Args:
            record_type: Record type searched, e.g. ``invoice``
            schema: Column schema of the tool
            params: Generic query envelope
            inbuilt_filter: Filter expression always applied
            default_sort: Ordering used when the request names none
            settings: Search settings as name/value pairs

        Returns:
            SearchDescriptor ready to post

        Raises:
            UnsupportedOperator: If a filter operator does not apply to its column
        """
        descriptor = SearchDescriptor(
            type=record_type,
            columns=self.build_columns(schema, params, default_sort),
            filters=self.build_filter_expression(schema, params.filters, inbuilt_filter),
            count_only=params.count_only,
            max_results=1 if params.count_only else (params.limit or 0),
            settings=[{"name": k, "value": v} for k, v in (settings or {}).items()],
        )
        logger.debug("Generated search descriptor: %s", descriptor.to_payload())
        return descriptor

    def build_columns(
        self,
        schema: SearchSchema,
        params: QueryParams,
        default_sort: Optional[SortSpec] = None,
    ) -> List[Dict[str, Any]]:
        """Column descriptors for every output column, with the sort marker."""
        output = schema.output_columns()
        # Only projected columns can carry the sort marker.
        resolved = resolve_order(params, output, default_sort)

        columns: List[Dict[str, Any]] = []
        for key, column in output.items():
            entry: Dict[str, Any] = {
                "name": column.name,
                "txt": column.txt,
                "join": column.join,
                "summary": column.summary,
            }
            if column.formula:
                entry["name"], entry["formula"] = split_formula(column.formula)
            if resolved is not None and resolved[0] == key:
                entry["sort"] = resolved[1].value
            columns.append({k: v for k, v in entry.items() if v is not None})
        return columns

    def build_filter_expression(
        self,
        schema: SearchSchema,
        filters: List[FilterParam],
        inbuilt_filter: Optional[FilterExpression] = None,
    ) -> FilterExpression:
        """Inbuilt filter followed by the generic filters, joined with ``AND``."""
        expression: FilterExpression = list(inbuilt_filter or [])
        generated = self.build_filters(schema, filters)
        if expression and generated:
            expression.append("AND")
        expression.extend(generated)
        return expression

    def build_filters(self, schema: SearchSchema, filters: List[FilterParam]) -> FilterExpression:
        """Render generic filters as ``[field, operator, value]`` triples."""
        expression: FilterExpression = []
        for param in filters:
            column = schema.get(param.column)
            if column is None:
                logger.info(
                    "Column %s not in schema, skipping filter (available: %s)",
                    param.column, ", ".join(schema.columns),
                )
                continue

            operator = translate_operator(
                Backend.SEARCH, column.filter_type or column.type, param.operator
            )
            value = param.value
            if column.type == DataType.DATE:
                value = iso_to_format(value, column.format or DEFAULT_DATE_FORMAT)

            if expression:
                expression.append("AND")
            expression.append([field_reference(column), operator, value])
        return expression
