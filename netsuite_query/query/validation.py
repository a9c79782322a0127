"""
Filter requirements for high-volume transaction tools.
"""

from netsuite_query.core.errors import ErrorKind, GatewayError
from netsuite_query.core.models import QueryParams

PERIOD_COLUMN = "Period"
DATE_COLUMNS = ("Date", "DueDate")


def validate_param_filters(params: QueryParams, period: bool = True, date: bool = True) -> None:
    """
    Reject filter sets that would scan too much transaction data.

    Args:
        params: Query envelope to check
        period: Reject filters on the ``Period`` column
        date: Require a filter on ``Date`` or ``DueDate``

    Raises:
        GatewayError: AIErr describing the first violated rule
    """
    if not params.filters:
        raise GatewayError("Filters cannot be empty", ErrorKind.AI)

    columns = {f.column for f in params.filters}

    if period and PERIOD_COLUMN in columns:
        raise GatewayError("Period cannot be used as filter, use Date column", ErrorKind.AI)

    if date and not columns.intersection(DATE_COLUMNS):
        raise GatewayError("Date filter is required, as data is too much otherwise", ErrorKind.AI)
