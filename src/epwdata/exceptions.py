"""
Exceptions for EPW parsing.

Every error carries enough context (line number, field name or position,
raw offending text) to locate the problem in the source file.
"""

from typing import Any, List, Optional, Sequence, Tuple


class EPWError(Exception):
    """Base exception for EPW-related errors."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        field: Optional[str] = None,
        raw: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.field = field
        self.raw = raw
        super().__init__(self._format())

    def _format(self) -> str:
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.field is not None:
            parts.append(f"field '{self.field}'")
        if self.raw is not None:
            parts.append(f"raw '{self.raw}'")
        if parts:
            return f"{self.message} ({', '.join(parts)})"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._format()!r})"


class MalformedLineError(EPWError):
    """A line could not be decoded or tokenized as text."""

    pass


class MalformedHeaderError(EPWError):
    """A header record is missing, out of canonical order, or unreadable."""

    pass


class InvalidCountError(MalformedHeaderError):
    """A count-prefixed header block declares an unusable count."""

    pass


class TruncatedRecordError(MalformedHeaderError):
    """A count-prefixed header block has fewer fields than its count requires."""

    pass


class InvalidFieldValueError(EPWError):
    """A field value could not be parsed.

    ``position`` is set for ground temperature values as
    ``(group index, offset within group)``.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        field: Optional[str] = None,
        raw: Optional[str] = None,
        position: Optional[Tuple[int, int]] = None,
    ):
        self.position = position
        super().__init__(message, line=line, field=field, raw=raw)

    def _format(self) -> str:
        text = super()._format()
        if self.position is not None:
            group, offset = self.position
            text = f"{text} [group {group}, offset {offset}]"
        return text


class WrongFieldCountError(EPWError):
    """A data record has fewer fields than the hourly schema requires."""

    pass


class InvalidDateError(EPWError):
    """A data record names a month or day that does not exist."""

    pass


class InvalidHourError(EPWError):
    """A data record has an hour outside 1-24."""

    pass


class RecordCountMismatchError(EPWError):
    """The number of parsed records differs from the declared count."""

    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Data periods declare {expected} records but {found} were parsed"
        )


class NonSequentialTimestampError(EPWError):
    """A record does not follow its predecessor by exactly one time step."""

    pass


class LeapYearMismatchError(EPWError):
    """February 29 records disagree with the header's leap year flag."""

    pass


class UnexpectedEofError(EPWError):
    """The source ended before all header records were read."""

    pass


class NotFoundError(EPWError, LookupError):
    """No record matches the requested timestamp."""

    pass


class GroundTemperatureError(MalformedHeaderError):
    """One or more ground temperature values could not be parsed."""

    def __init__(self, errors: Sequence[InvalidFieldValueError], line: Optional[int] = None):
        self.errors: List[InvalidFieldValueError] = list(errors)
        super().__init__(
            f"{len(self.errors)} invalid value(s) in GROUND TEMPERATURES", line=line
        )


class DataSectionError(EPWError):
    """Raised when a caller refuses a parse result that has problems."""

    def __init__(self, errors: Sequence[Any]):
        self.errors: List[Any] = list(errors)
        preview = "; ".join(str(e) for e in self.errors[:3])
        more = f" (and {len(self.errors) - 3} more)" if len(self.errors) > 3 else ""
        super().__init__(f"{len(self.errors)} problem(s) in EPW data: {preview}{more}")
