"""
Result formatting utilities.

Normalizes raw backend rows into records keyed by logical column name
with values coerced to their declared semantic type.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from netsuite_query.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)


class ResultFormatter:
    """
    Formats backend rows into normalized records.

    Column maps are ``{logical name: descriptor}`` where the descriptor
    exposes ``type``, ``format`` and optionally ``name``. A value that
    is absent, None or an empty string leaves its column out of the
    record; ``0`` and ``False`` are kept.
    """

    @staticmethod
    def normalize_row(row: Mapping[str, Any], columns: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Normalize a row keyed by backend field names.

        Keys are matched case-insensitively against the column's
        ``name`` when it has one, else against the logical name.

        Args:
            row: Raw row from the backend
            columns: Declared column map

        Returns:
            Record keyed by logical column name
        """
        lowered = {str(key).lower(): value for key, value in row.items()}
        record: Dict[str, Any] = {}
        for key, column in columns.items():
            source = (getattr(column, "name", None) or key).lower()
            if source not in lowered:
                continue
            value = lowered[source]
            if TypeMapper.is_missing(value):
                continue
            record[key] = TypeMapper.coerce(value, column.type, column.format)
        return record

    @staticmethod
    def normalize_positional(row: Sequence[Any], columns: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Normalize a row whose values follow the column declaration order.

        Args:
            row: Raw row, one value per requested column
            columns: Declared column map, in request order

        Returns:
            Record keyed by logical column name
        """
        record: Dict[str, Any] = {}
        for index, (key, column) in enumerate(columns.items()):
            if index >= len(row):
                break
            value = row[index]
            if TypeMapper.is_missing(value):
                continue
            record[key] = TypeMapper.coerce(value, column.type, column.format)
        return record

    @classmethod
    def normalize_rows(
        cls, rows: List[Mapping[str, Any]], columns: Mapping[str, Any]
    ) -> List[Dict[str, Any]]:
        """Normalize a list of name-keyed rows."""
        return [cls.normalize_row(row, columns) for row in rows]

    @classmethod
    def normalize_positional_rows(
        cls, rows: List[Sequence[Any]], columns: Mapping[str, Any]
    ) -> List[Dict[str, Any]]:
        """Normalize a list of positional rows."""
        if rows and len(rows[0]) != len(columns):
            logger.warning(
                "Row has %d values for %d columns; extra values are ignored",
                len(rows[0]), len(columns),
            )
        return [cls.normalize_positional(row, columns) for row in rows]

    @staticmethod
    def format_items(items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Tool output for a list query."""
        return {"items": items}

    @staticmethod
    def format_count(count: Optional[int]) -> Dict[str, Any]:
        """Tool output for a count-only query."""
        return {"Count": int(count or 0)}
