"""
Type mapping utilities for converting backend values to typed Python values.
"""

import logging
from typing import Any, Optional, Type, Union

from netsuite_query.core.errors import InvalidDate
from netsuite_query.core.models import DataType
from netsuite_query.schema.dates import format_to_iso

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1"}
_FALSE_VALUES = {"0"}


class TypeMapper:
    """Maps semantic column types to Python types and coerces raw values."""

    PYTHON_TYPE_MAP = {
        DataType.STRING: str,
        DataType.NUMBER: float,
        DataType.DATE: str,
        DataType.BOOLEAN: bool,
        DataType.ID: str,
    }

    @classmethod
    def get_python_type(cls, data_type: Union[DataType, str]) -> Type:
        """
        Get the Python type a normalized value of ``data_type`` has.

        Args:
            data_type: Semantic column type

        Returns:
            Python type class
        """
        return cls.PYTHON_TYPE_MAP.get(DataType(data_type), object)

    @staticmethod
    def is_missing(value: Any) -> bool:
        """
        Whether a raw value counts as absent.

        ``0`` and ``False`` are real values and are kept.
        """
        return value is None or (isinstance(value, str) and value == "")

    @classmethod
    def coerce(
        cls,
        value: Any,
        data_type: Union[DataType, str],
        date_format: Optional[str] = None,
    ) -> Any:
        """
        Coerce a raw backend value to its declared semantic type.

        Args:
            value: Raw value from a result row
            data_type: Declared column type
            date_format: Pattern the backend renders dates with

        Returns:
            float for numbers, ISO-8601 string for formatted dates,
            bool for "1"/"0" booleans, str for ids, the value otherwise
        """
        data_type = DataType(data_type)

        if data_type == DataType.NUMBER:
            return cls._to_number(value)
        if data_type == DataType.DATE and date_format:
            try:
                return format_to_iso(str(value), date_format)
            except InvalidDate:
                logger.warning("Could not parse date %r with format %s", value, date_format)
                return value
        if data_type == DataType.BOOLEAN:
            text = str(value)
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            return value
        if data_type == DataType.ID:
            return cls.stringify_id(value)
        return value

    @staticmethod
    def stringify_id(value: Any) -> str:
        """Render an identifier as a string, dropping a ``.0`` float suffix."""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    @staticmethod
    def _to_number(value: Any) -> Any:
        if isinstance(value, bool):
            return float(value)
        if isinstance(value, (int, float)):
            return value
        try:
            number = float(str(value))
        except ValueError:
            logger.warning("Could not parse number %r", value)
            return value
        return int(number) if number.is_integer() and "." not in str(value) else number
