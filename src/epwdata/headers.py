"""
EPW header records other than GROUND TEMPERATURES.

Each record is one line starting with its keyword. The parsers here receive
the fields after the keyword. Header problems are always fatal, so every
failure is raised as a MalformedHeaderError (or one of its subclasses).
"""

import logging
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Sequence, Tuple

from .exceptions import (
    InvalidCountError,
    InvalidFieldValueError,
    MalformedHeaderError,
    TruncatedRecordError,
)
from .scanner import RawField
from .utils import day_of_year, days_in_month, format_number, parse_float, parse_int

logger = logging.getLogger(__name__)

WEEKDAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def _join(keyword: str, fields: Sequence[str]) -> str:
    return ",".join([keyword, *fields])


def _trim_trailing(fields: Sequence[RawField]) -> List[RawField]:
    """Drop empty fields left by trailing delimiters."""
    trimmed = list(fields)
    while trimmed and trimmed[-1].is_empty():
        trimmed.pop()
    return trimmed


def _require(fields: Sequence[RawField], count: int, keyword: str, line: Optional[int]) -> None:
    if len(fields) < count:
        raise MalformedHeaderError(
            f"{keyword} needs at least {count} fields, found {len(fields)}", line=line
        )


def _header_float(raw: RawField, name: str, keyword: str) -> float:
    try:
        return parse_float(raw, name)
    except InvalidFieldValueError as e:
        raise MalformedHeaderError(
            f"{keyword} {name} is not a number", line=raw.line, field=name, raw=raw.text
        ) from e


def _header_count(raw: RawField, name: str, keyword: str) -> int:
    try:
        count = parse_int(raw, name)
    except InvalidFieldValueError as e:
        raise InvalidCountError(
            f"{keyword} {name} is not an integer", line=raw.line, field=name, raw=raw.text
        ) from e
    if count < 0:
        raise InvalidCountError(
            f"{keyword} {name} is negative", line=raw.line, field=name, raw=raw.text
        )
    return count


def _read_groups(
    fields: Sequence[RawField],
    count: int,
    width: int,
    keyword: str,
    line: Optional[int],
) -> List[List[RawField]]:
    """Read exactly ``count`` groups of ``width`` fields."""
    required = count * width
    if len(fields) < required:
        raise TruncatedRecordError(
            f"{keyword} declares {count} group(s) needing {required} fields, "
            f"found {len(fields)}",
            line=line,
        )
    trailing = [f for f in fields[required:] if not f.is_empty()]
    if trailing:
        raise InvalidCountError(
            f"{keyword} count {count} leaves {len(trailing)} value(s) unaccounted for",
            line=trailing[0].line,
            raw=trailing[0].text,
        )
    return [list(fields[i * width : (i + 1) * width]) for i in range(count)]


def parse_month_day(raw: RawField, name: str, keyword: str) -> Tuple[int, int]:
    """Parse an ``M/D`` date such as ``12/31`` or `` 1/ 1``.

    A trailing ``/YYYY`` is accepted and ignored.
    """
    parts = [p.strip() for p in raw.text.split("/")]
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise MalformedHeaderError(
            f"{keyword} {name} is not a M/D date", line=raw.line, field=name, raw=raw.text
        )
    month, day = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12 or not 1 <= day <= days_in_month(month, leap=True):
        raise MalformedHeaderError(
            f"{keyword} {name} is not a calendar date",
            line=raw.line,
            field=name,
            raw=raw.text,
        )
    return month, day


def _format_month_day(month_day: Tuple[int, int]) -> str:
    return f"{month_day[0]}/{month_day[1]}"


@dataclass(frozen=True)
class Location:
    """The LOCATION record."""

    KEYWORD: ClassVar[str] = "LOCATION"

    city: str
    state: str
    country: str
    source: str
    wmo: str
    latitude: float  # degrees, north positive
    longitude: float  # degrees, east positive
    utc_offset: float  # hours
    elevation: float  # m

    @classmethod
    def from_fields(cls, fields: Sequence[RawField], line: Optional[int] = None) -> "Location":
        _require(fields, 9, cls.KEYWORD, line)
        latitude = _header_float(fields[5], "latitude", cls.KEYWORD)
        longitude = _header_float(fields[6], "longitude", cls.KEYWORD)
        utc_offset = _header_float(fields[7], "utc_offset", cls.KEYWORD)
        elevation = _header_float(fields[8], "elevation", cls.KEYWORD)

        for name, value, low, high, raw in (
            ("latitude", latitude, -90.0, 90.0, fields[5]),
            ("longitude", longitude, -180.0, 180.0, fields[6]),
            ("utc_offset", utc_offset, -12.0, 14.0, fields[7]),
            ("elevation", elevation, -1000.0, 9999.9, fields[8]),
        ):
            if not low <= value <= high:
                raise MalformedHeaderError(
                    f"LOCATION {name} outside {low} to {high}",
                    line=raw.line,
                    field=name,
                    raw=raw.text,
                )

        return cls(
            city=fields[0].text,
            state=fields[1].text,
            country=fields[2].text,
            source=fields[3].text,
            wmo=fields[4].text,
            latitude=latitude,
            longitude=longitude,
            utc_offset=utc_offset,
            elevation=elevation,
        )

    def to_fields(self) -> List[str]:
        return [
            self.city,
            self.state,
            self.country,
            self.source,
            self.wmo,
            format_number(self.latitude),
            format_number(self.longitude),
            format_number(self.utc_offset),
            format_number(self.elevation),
        ]

    def to_line(self) -> str:
        return _join(self.KEYWORD, self.to_fields())


@dataclass(frozen=True)
class DesignConditions:
    """The DESIGN CONDITIONS record, kept as raw positional values."""

    KEYWORD: ClassVar[str] = "DESIGN CONDITIONS"

    count: int = 0
    values: Tuple[str, ...] = ()

    @property
    def source(self) -> Optional[str]:
        """Name of the design condition source, if any."""
        return self.values[0] if self.count and self.values else None

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "DesignConditions":
        fields = _trim_trailing(fields)
        if not fields:
            return cls()
        count = _header_count(fields[0], "count", cls.KEYWORD)
        values = tuple(f.text for f in fields[1:])
        if count and not values:
            raise TruncatedRecordError(
                f"DESIGN CONDITIONS declares {count} condition(s) but has no values",
                line=line,
            )
        return cls(count=count, values=values)

    def to_fields(self) -> List[str]:
        return [str(self.count), *self.values]

    def to_line(self) -> str:
        return _join(self.KEYWORD, self.to_fields())


@dataclass(frozen=True)
class TypicalExtremePeriod:
    name: str
    period_type: str  # "Typical" or "Extreme"
    start: Tuple[int, int]  # (month, day)
    end: Tuple[int, int]


@dataclass(frozen=True)
class TypicalExtremePeriods:
    """The TYPICAL/EXTREME PERIODS record."""

    KEYWORD: ClassVar[str] = "TYPICAL/EXTREME PERIODS"

    periods: Tuple[TypicalExtremePeriod, ...] = ()

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "TypicalExtremePeriods":
        if not fields or fields[0].is_empty():
            return cls()
        count = _header_count(fields[0], "count", cls.KEYWORD)
        periods = []
        for group in _read_groups(fields[1:], count, 4, cls.KEYWORD, line):
            name, period_type, start, end = group
            periods.append(
                TypicalExtremePeriod(
                    name=name.text,
                    period_type=period_type.text,
                    start=parse_month_day(start, "start", cls.KEYWORD),
                    end=parse_month_day(end, "end", cls.KEYWORD),
                )
            )
        return cls(periods=tuple(periods))

    def to_fields(self) -> List[str]:
        fields = [str(len(self.periods))]
        for p in self.periods:
            fields.extend(
                [p.name, p.period_type, _format_month_day(p.start), _format_month_day(p.end)]
            )
        return fields

    def to_line(self) -> str:
        return _join(self.KEYWORD, self.to_fields())


@dataclass(frozen=True)
class Holiday:
    name: str
    date: str  # e.g. "1/1" or "4th Thursday in November"


@dataclass(frozen=True)
class HolidaysDaylightSavings:
    """The HOLIDAYS/DAYLIGHT SAVINGS record."""

    KEYWORD: ClassVar[str] = "HOLIDAYS/DAYLIGHT SAVINGS"
    # Some producers drop the final S
    ALIASES: ClassVar[Tuple[str, ...]] = ("HOLIDAYS/DAYLIGHT SAVINGS", "HOLIDAYS/DAYLIGHT SAVING")

    leap_year_observed: bool = False
    daylight_saving_start: str = "0"
    daylight_saving_end: str = "0"
    holidays: Tuple[Holiday, ...] = ()

    @property
    def observes_daylight_saving(self) -> bool:
        return self.daylight_saving_start not in ("", "0")

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "HolidaysDaylightSavings":
        _require(fields, 4, cls.KEYWORD, line)
        flag = fields[0].text.lower()
        if flag in ("yes", "y"):
            leap = True
        elif flag in ("no", "n"):
            leap = False
        else:
            raise MalformedHeaderError(
                "Leap year flag must be Yes or No",
                line=fields[0].line,
                field="leap_year_observed",
                raw=fields[0].text,
            )

        count = _header_count(fields[3], "holiday count", cls.KEYWORD)
        holidays = tuple(
            Holiday(name=name.text, date=date.text)
            for name, date in _read_groups(fields[4:], count, 2, cls.KEYWORD, line)
        )
        return cls(
            leap_year_observed=leap,
            daylight_saving_start=fields[1].text,
            daylight_saving_end=fields[2].text,
            holidays=holidays,
        )

    def to_fields(self) -> List[str]:
        fields = [
            "Yes" if self.leap_year_observed else "No",
            self.daylight_saving_start,
            self.daylight_saving_end,
            str(len(self.holidays)),
        ]
        for holiday in self.holidays:
            fields.extend([holiday.name, holiday.date])
        return fields

    def to_line(self) -> str:
        return _join(self.KEYWORD, self.to_fields())


@dataclass(frozen=True)
class Comments:
    """A COMMENTS 1 or COMMENTS 2 record."""

    index: int
    text: str = ""

    @property
    def keyword(self) -> str:
        return f"COMMENTS {self.index}"

    @classmethod
    def from_fields(cls, index: int, fields: Sequence[RawField]) -> "Comments":
        return cls(index=index, text=",".join(f.text for f in _trim_trailing(fields)))

    def to_line(self) -> str:
        text = self.text
        if "," in text or '"' in text:
            text = '"' + text.replace('"', '""') + '"'
        return _join(self.keyword, [text])


@dataclass(frozen=True)
class DataPeriod:
    name: str
    start_weekday: str
    start: Tuple[int, int]  # (month, day)
    end: Tuple[int, int]

    def day_count(self, leap: bool) -> int:
        """Number of days covered, inclusive, wrapping over year end."""
        first = day_of_year(*self.start, leap=leap)
        last = day_of_year(*self.end, leap=leap)
        if last >= first:
            return last - first + 1
        year_length = 366 if leap else 365
        return year_length - first + 1 + last


@dataclass(frozen=True)
class DataPeriods:
    """The DATA PERIODS record."""

    KEYWORD: ClassVar[str] = "DATA PERIODS"

    records_per_hour: int = 1
    periods: Tuple[DataPeriod, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.periods)

    @property
    def minutes_per_record(self) -> int:
        return 60 // self.records_per_hour

    def expected_record_count(self, leap: bool) -> int:
        """Number of data records the declared periods call for."""
        days = sum(p.day_count(leap) for p in self.periods)
        return days * 24 * self.records_per_hour

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "DataPeriods":
        _require(fields, 2, cls.KEYWORD, line)
        count = _header_count(fields[0], "count", cls.KEYWORD)
        if count < 1:
            raise InvalidCountError(
                "DATA PERIODS must declare at least one period",
                line=fields[0].line,
                field="count",
                raw=fields[0].text,
            )

        rph_field = fields[1]
        records_per_hour = _header_count(rph_field, "records per hour", cls.KEYWORD)
        if not 1 <= records_per_hour <= 60 or 60 % records_per_hour:
            raise MalformedHeaderError(
                "DATA PERIODS records per hour must divide 60",
                line=rph_field.line,
                field="records_per_hour",
                raw=rph_field.text,
            )

        periods = []
        for name, weekday, start, end in _read_groups(fields[2:], count, 4, cls.KEYWORD, line):
            matched = [d for d in WEEKDAYS if d.lower() == weekday.text.lower()]
            if not matched:
                raise MalformedHeaderError(
                    "DATA PERIODS start day is not a weekday name",
                    line=weekday.line,
                    field="start_weekday",
                    raw=weekday.text,
                )
            periods.append(
                DataPeriod(
                    name=name.text,
                    start_weekday=matched[0],
                    start=parse_month_day(start, "start", cls.KEYWORD),
                    end=parse_month_day(end, "end", cls.KEYWORD),
                )
            )

        logger.debug(
            f"Data periods: {count} period(s), {records_per_hour} record(s) per hour"
        )
        return cls(records_per_hour=records_per_hour, periods=tuple(periods))

    def to_fields(self) -> List[str]:
        fields = [str(self.count), str(self.records_per_hour)]
        for p in self.periods:
            fields.extend(
                [
                    p.name,
                    p.start_weekday,
                    _format_month_day(p.start),
                    _format_month_day(p.end),
                ]
            )
        return fields

    def to_line(self) -> str:
        return _join(self.KEYWORD, self.to_fields())
