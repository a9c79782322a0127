"""
Date pattern conversion.

Backends describe date layouts with token patterns such as ``M/d/yyyy``
or ``yyyyMMdd``. These helpers convert between such patterns and
ISO-8601 strings without depending on the process locale.
"""

import re
from calendar import monthrange
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from netsuite_query.core.errors import InvalidDate

# Longest tokens first so "yyyy" wins over "yy" and "MM" over "M".
_TOKEN_RE = re.compile(r"'[^']*'|yyyy|yy|MM|M|dd|d|HH|H|mm|m|ss|s")

_PARSE_GROUPS = {
    "yyyy": r"(?P<year>\d{4})",
    "yy": r"(?P<year2>\d{2})",
    "MM": r"(?P<month>\d{2})",
    "M": r"(?P<month>\d{1,2})",
    "dd": r"(?P<day>\d{2})",
    "d": r"(?P<day>\d{1,2})",
    "HH": r"(?P<hour>\d{2})",
    "H": r"(?P<hour>\d{1,2})",
    "mm": r"(?P<minute>\d{2})",
    "m": r"(?P<minute>\d{1,2})",
    "ss": r"(?P<second>\d{2})",
    "s": r"(?P<second>\d{1,2})",
}


def _tokenize(pattern: str) -> List[Tuple[bool, str]]:
    """Split a pattern into (is_token, text) parts."""
    parts: List[Tuple[bool, str]] = []
    pos = 0
    for match in _TOKEN_RE.finditer(pattern):
        if match.start() > pos:
            parts.append((False, pattern[pos:match.start()]))
        text = match.group(0)
        if text.startswith("'"):
            parts.append((False, text[1:-1]))
        else:
            parts.append((True, text))
        pos = match.end()
    if pos < len(pattern):
        parts.append((False, pattern[pos:]))
    return parts


_FIELDS = {
    "yyyy": "year", "yy": "year",
    "MM": "month", "M": "month",
    "dd": "day", "d": "day",
    "HH": "hour", "H": "hour",
    "mm": "minute", "m": "minute",
    "ss": "second", "s": "second",
}


def validate_pattern(pattern: str) -> str:
    """
    Reject patterns that set the same field twice.

    ``MMM`` (month names) tokenizes as ``MM`` plus ``M`` and is not supported.

    Raises:
        ValueError: If a field appears more than once
    """
    seen = set()
    for is_token, text in _tokenize(pattern):
        if not is_token:
            continue
        field = _FIELDS[text]
        if field in seen:
            raise ValueError(f"Unsupported date pattern '{pattern}': {field} appears twice")
        seen.add(field)
    return pattern


@lru_cache(maxsize=64)
def _parser_for(pattern: str) -> Pattern[str]:
    validate_pattern(pattern)
    regex = "".join(
        _PARSE_GROUPS[text] if is_token else re.escape(text)
        for is_token, text in _tokenize(pattern)
    )
    return re.compile(rf"^\s*{regex}\s*$")


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime string.

    Naive values are taken as UTC.
    """
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(text), time())
        except ValueError as e:
            raise InvalidDate(value) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: datetime, pattern: str) -> str:
    """Render ``value`` with a token pattern."""
    rendered = []
    for is_token, text in _tokenize(pattern):
        if not is_token:
            rendered.append(text)
        elif text == "yyyy":
            rendered.append(f"{value.year:04d}")
        elif text == "yy":
            rendered.append(f"{value.year % 100:02d}")
        elif text == "MM":
            rendered.append(f"{value.month:02d}")
        elif text == "M":
            rendered.append(str(value.month))
        elif text == "dd":
            rendered.append(f"{value.day:02d}")
        elif text == "d":
            rendered.append(str(value.day))
        elif text == "HH":
            rendered.append(f"{value.hour:02d}")
        elif text == "H":
            rendered.append(str(value.hour))
        elif text == "mm":
            rendered.append(f"{value.minute:02d}")
        elif text == "m":
            rendered.append(str(value.minute))
        elif text == "ss":
            rendered.append(f"{value.second:02d}")
        elif text == "s":
            rendered.append(str(value.second))
    return "".join(rendered)


def parse_with_pattern(value: str, pattern: str) -> datetime:
    """Parse ``value`` laid out as ``pattern``; the result is UTC."""
    try:
        parser = _parser_for(pattern)
    except ValueError as e:
        raise InvalidDate(value, pattern) from e
    match = parser.match(str(value))
    if not match:
        raise InvalidDate(value, pattern)
    groups = match.groupdict()
    if groups.get("year") is not None:
        year = int(groups["year"])
    elif groups.get("year2") is not None:
        year = 2000 + int(groups["year2"])
    else:
        year = 1970
    try:
        return datetime(
            year,
            int(groups.get("month") or 1),
            int(groups.get("day") or 1),
            int(groups.get("hour") or 0),
            int(groups.get("minute") or 0),
            int(groups.get("second") or 0),
            tzinfo=timezone.utc,
        )
    except ValueError as e:
        raise InvalidDate(value, pattern) from e


def to_iso(value: datetime) -> str:
    """ISO-8601 with millisecond precision, UTC as ``Z``, e.g. ``2024-03-05T00:00:00.000Z``."""
    text = value.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        return text[:-6] + "Z"
    return text


def iso_to_format(value: str, pattern: str) -> str:
    """Convert an ISO-8601 string into ``pattern``."""
    return format_datetime(parse_iso(value), pattern)


def format_to_iso(value: str, pattern: str) -> str:
    """Convert a ``pattern``-formatted string into ISO-8601."""
    return to_iso(parse_with_pattern(value, pattern))


def start_of_month(value: Optional[str] = None) -> datetime:
    """First instant of the month containing ``value`` (default: now, UTC)."""
    moment = parse_iso(value) if value else datetime.now(timezone.utc)
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def end_of_month(value: Optional[str] = None) -> datetime:
    """Last instant of the month containing ``value`` (default: now, UTC)."""
    moment = parse_iso(value) if value else datetime.now(timezone.utc)
    last_day = monthrange(moment.year, moment.month)[1]
    return moment.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999000)
