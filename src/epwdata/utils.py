"""
Internal utility functions for epwdata.
"""

import re
from typing import Optional, Tuple

from .exceptions import InvalidFieldValueError
from .scanner import RawField

# float() also accepts "nan", "inf" and "1_000", none of which are valid EPW numbers
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"[+-]?\d+")

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def parse_float(
    field: RawField, name: str, position: Optional[Tuple[int, int]] = None
) -> float:
    """Parse a field as a decimal number or raise InvalidFieldValueError."""
    if not _FLOAT_RE.fullmatch(field.text):
        raise InvalidFieldValueError(
            "Expected a number",
            line=field.line,
            field=name,
            raw=field.text,
            position=position,
        )
    return float(field.text)


def parse_optional_float(
    field: RawField, name: str, position: Optional[Tuple[int, int]] = None
) -> Optional[float]:
    """Like parse_float, but an empty field yields None."""
    if field.is_empty():
        return None
    return parse_float(field, name, position)


def parse_int(field: RawField, name: str) -> int:
    """Parse a field as an integer or raise InvalidFieldValueError."""
    if not _INT_RE.fullmatch(field.text):
        raise InvalidFieldValueError(
            "Expected an integer", line=field.line, field=name, raw=field.text
        )
    return int(field.text)


def format_number(value: float) -> str:
    """Format a number the way EPW files write it, without a trailing .0."""
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(month: int, leap: bool) -> int:
    """Number of days in a month (1-12)."""
    if month == 2 and leap:
        return 29
    return _DAYS_IN_MONTH[month - 1]


def day_of_year(month: int, day: int, leap: bool) -> int:
    """1-based day of the year."""
    return sum(days_in_month(m, leap) for m in range(1, month)) + day
