"""
Error taxonomy for the query gateway.

Every failure raised by the compilers, executors and tools is a
GatewayError tagged with the party expected to correct it.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Who is expected to fix the condition."""

    USER = "UserErr"
    AI = "AIErr"
    API = "APIErr"


class GatewayError(Exception):
    """
    Base error carrying a kind tag and a human-readable message.

    Rendered as ``"<kind>:<message>"`` so the tag survives when the
    error is flattened to a string by an outer layer.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.USER,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.message}"

    def to_payload(self) -> Dict[str, Any]:
        """Error payload returned to tool callers."""
        return {
            "error": self.kind.value,
            "message": self.message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class UnsupportedOperator(GatewayError):
    """No backend operator exists for a (backend, data type, operator) triple."""

    def __init__(self, backend: str, data_type: str, operator: str, kind: ErrorKind = ErrorKind.USER):
        super().__init__(
            f"Operator {operator} for datatype {data_type} not found for {backend}",
            kind,
        )
        self.backend = backend
        self.data_type = data_type
        self.operator = operator


class LimitExceeded(GatewayError):
    """Requested result cap is above the system-wide ceiling."""

    def __init__(self, requested: int, ceiling: int):
        super().__init__(
            f"Cannot fetch more than {ceiling} in a single request (requested {requested})",
            ErrorKind.AI,
        )
        self.requested = requested
        self.ceiling = ceiling


class ConfigurationError(GatewayError):
    """Endpoint or credential configuration is missing."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.AI)


class BackendError(GatewayError):
    """The backend answered but reported a failure."""

    def __init__(self, payload: Any):
        super().__init__(json.dumps(payload, default=str), ErrorKind.API)
        self.payload = payload


class PagingLimitExceeded(GatewayError):
    """The backend kept reporting more pages past the iteration guard."""

    def __init__(self, max_pages: int):
        super().__init__(
            f"Backend still reports more data after {max_pages} pages; aborting",
            ErrorKind.AI,
        )
        self.max_pages = max_pages


class InvalidDate(GatewayError):
    """A date value could not be parsed with the expected pattern."""

    def __init__(self, value: str, pattern: str = "ISO-8601"):
        super().__init__(f"Invalid date value '{value}' (expected {pattern})", ErrorKind.USER)
        self.value = value
        self.pattern = pattern
