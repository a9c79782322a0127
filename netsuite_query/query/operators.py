"""
Operator translation.

Maps the generic filter operators to the operator tokens understood by
each backend, per column data type.
"""

import logging
from enum import Enum
from typing import Dict, Union

from netsuite_query.core.errors import ErrorKind, UnsupportedOperator
from netsuite_query.core.models import DataType, Operator

logger = logging.getLogger(__name__)


class Backend(str, Enum):
    """Query backends a filter can be compiled for."""

    SUITEQL = "sql"
    SEARCH = "script"


_SUITEQL_PATTERN_OPERATORS: Dict[Operator, str] = {
    Operator.LIKE: "LIKE",
    Operator.NOT_LIKE: "NOT LIKE",
}

# String equality is substring containment on the SuiteQL path.
_SUITEQL_STRING_OPERATORS: Dict[Operator, str] = {
    Operator.EQ: "LIKE",
    Operator.NE: "NOT LIKE",
}

_SEARCH_OPERATORS: Dict[DataType, Dict[Operator, str]] = {
    DataType.BOOLEAN: {op: "is" for op in Operator},
    DataType.NUMBER: {
        Operator.EQ: "EQUALTO",
        Operator.NE: "NOTEQUALTO",
        Operator.LT: "LESSTHAN",
        Operator.LE: "LESSTHANOREQUALTO",
        Operator.GT: "GREATERTHAN",
        Operator.GE: "GREATERTHANOREQUALTO",
    },
    DataType.DATE: {
        Operator.EQ: "ON",
        Operator.NE: "NOTON",
        Operator.LT: "BEFORE",
        Operator.LE: "ONORBEFORE",
        Operator.GT: "AFTER",
        Operator.GE: "ONORAFTER",
    },
    DataType.STRING: {
        Operator.EQ: "CONTAINS",
        Operator.LIKE: "CONTAINS",
        Operator.NE: "DOESNOTCONTAIN",
        Operator.NOT_LIKE: "DOESNOTCONTAIN",
    },
    DataType.ID: {
        Operator.EQ: "ANYOF",
        Operator.LIKE: "ANYOF",
        Operator.NE: "NONEOF",
        Operator.NOT_LIKE: "NONEOF",
    },
}


class OperatorTranslator:
    """Translates generic operators into backend operator tokens."""

    @staticmethod
    def translate(
        backend: Union[Backend, str],
        data_type: Union[DataType, str],
        operator: Union[Operator, str],
    ) -> str:
        """
        Resolve the backend operator for a filter.

        Args:
            backend: Target backend
            data_type: Declared data type of the filtered column
            operator: Generic operator from the request

        Returns:
            Operator token for the backend

        Raises:
            UnsupportedOperator: If the combination has no mapping
        """
        try:
            backend = Backend(backend)
            operator = Operator(operator)
            data_type = DataType(data_type)
        except ValueError:
            raise UnsupportedOperator(str(backend), str(data_type), str(operator), ErrorKind.AI)

        if backend == Backend.SUITEQL:
            token = _SUITEQL_PATTERN_OPERATORS.get(operator)
            if token is None and data_type == DataType.STRING:
                token = _SUITEQL_STRING_OPERATORS.get(operator)
            if token is None:
                token = operator.value
        else:
            token = _SEARCH_OPERATORS[data_type].get(operator)
            if token is None:
                raise UnsupportedOperator(backend.value, data_type.value, operator.value)

        logger.debug(
            "Operator %s on %s for %s -> %s",
            operator.value, data_type.value, backend.value, token,
        )
        return token


def translate_operator(
    backend: Union[Backend, str],
    data_type: Union[DataType, str],
    operator: Union[Operator, str],
) -> str:
    """Module-level shortcut for OperatorTranslator.translate."""
    return OperatorTranslator.translate(backend, data_type, operator)
