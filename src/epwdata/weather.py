"""
The Weather aggregate: a whole EPW file.
"""

import logging
from dataclasses import dataclass, field
from typing import IO, Any, Dict, Iterator, List, Optional, Tuple

from .config import ParserConfig
from .exceptions import (
    EPWError,
    LeapYearMismatchError,
    MalformedHeaderError,
    NonSequentialTimestampError,
    NotFoundError,
    RecordCountMismatchError,
    UnexpectedEofError,
)
from .fields import COLUMN_NAMES, FIELDS_BY_NAME, NUMERIC_FIELDS
from .ground_temperature import KEYWORD as GROUND_TEMPERATURES
from .ground_temperature import GroundTemperature
from .headers import (
    Comments,
    DataPeriods,
    DesignConditions,
    HolidaysDaylightSavings,
    Location,
    TypicalExtremePeriods,
)
from .result import ParseResult
from .scanner import Line, RawField, Scanner, Source
from .utils import day_of_year, days_in_month
from .weather_line import Timestamp, WeatherLine

logger = logging.getLogger(__name__)

# Header keywords in the order EPW files must list them
HEADER_ORDER = (
    Location.KEYWORD,
    DesignConditions.KEYWORD,
    TypicalExtremePeriods.KEYWORD,
    GROUND_TEMPERATURES,
    HolidaysDaylightSavings.KEYWORD,
    "COMMENTS 1",
    "COMMENTS 2",
    DataPeriods.KEYWORD,
)

_KNOWN_KEYWORDS = set(HEADER_ORDER) | set(HolidaysDaylightSavings.ALIASES)


def _next_header(lines: Iterator[Line], keyword: str) -> Tuple[Line, List[RawField]]:
    """Read the next line and check that it is the expected header record."""
    try:
        line = next(lines)
    except StopIteration:
        raise UnexpectedEofError(
            f"Source ended before the {keyword} header", field=keyword
        ) from None

    fields = line.fields()
    found = fields[0].text.upper() if fields else ""
    accepted = (
        HolidaysDaylightSavings.ALIASES
        if keyword == HolidaysDaylightSavings.KEYWORD
        else (keyword,)
    )
    if found not in accepted:
        if found in _KNOWN_KEYWORDS:
            message = f"Header {found} is out of order, expected {keyword}"
        else:
            message = f"Expected the {keyword} header"
        raise MalformedHeaderError(
            message,
            line=line.number,
            field="keyword",
            raw=fields[0].text if fields else "",
        )

    logger.debug(f"Reading {keyword} header on line {line.number}")
    return line, fields[1:]


@dataclass(frozen=True)
class Weather:
    """
    A parsed EPW file: the eight header records plus the data records.

    Records are kept in file order, which is chronological order for a
    well-formed file.
    """

    location: Location
    design_conditions: DesignConditions
    typical_extreme_periods: TypicalExtremePeriods
    ground_temperature: GroundTemperature
    holidays_daylight_savings: HolidaysDaylightSavings
    comments_1: Comments
    comments_2: Comments
    data_periods: DataPeriods
    records: Tuple[WeatherLine, ...] = ()
    _index: Dict[Tuple[int, int, int], List[int]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: Dict[Tuple[int, int, int], List[int]] = {}
        for i, record in enumerate(self.records):
            index.setdefault((record.month, record.day, record.hour), []).append(i)
        object.__setattr__(self, "_index", index)

    @classmethod
    def parse(cls, source: Source, config: Optional[ParserConfig] = None) -> ParseResult:
        """
        Parse an EPW file.

        Args:
            source: EPW text as ``str`` or ``bytes``, or an open text or binary
                stream.
            config: Parser options. Defaults to ``ParserConfig()``.

        Returns:
            ParseResult holding the Weather, the data records that failed to
            parse, and any whole-file consistency warnings.

        Raises:
            MalformedHeaderError: A header record is missing, out of order or
                invalid (including InvalidCountError, TruncatedRecordError and
                GroundTemperatureError).
            UnexpectedEofError: The source ended inside the header block.
            MalformedLineError: A header line, or any line of a text stream,
                could not be decoded.
        """
        config = config or ParserConfig()
        lines = Scanner(source, encoding=config.encoding).lines()

        line, fields = _next_header(lines, Location.KEYWORD)
        location = Location.from_fields(fields, line.number)
        line, fields = _next_header(lines, DesignConditions.KEYWORD)
        design_conditions = DesignConditions.from_fields(fields, line.number)
        line, fields = _next_header(lines, TypicalExtremePeriods.KEYWORD)
        typical_extreme_periods = TypicalExtremePeriods.from_fields(fields, line.number)
        line, fields = _next_header(lines, GROUND_TEMPERATURES)
        ground_temperature = GroundTemperature.from_fields(fields, line.number)
        line, fields = _next_header(lines, HolidaysDaylightSavings.KEYWORD)
        holidays = HolidaysDaylightSavings.from_fields(fields, line.number)
        line, fields = _next_header(lines, "COMMENTS 1")
        comments_1 = Comments.from_fields(1, fields)
        line, fields = _next_header(lines, "COMMENTS 2")
        comments_2 = Comments.from_fields(2, fields)
        line, fields = _next_header(lines, DataPeriods.KEYWORD)
        data_periods = DataPeriods.from_fields(fields, line.number)

        result = ParseResult()
        records: List[WeatherLine] = []
        for line in lines:
            try:
                records.append(WeatherLine.from_fields(line.fields(), line.number))
            except EPWError as e:
                result.add_error(e)
                if config.max_errors is not None and len(result.errors) >= config.max_errors:
                    logger.error(
                        f"Stopped parsing at line {line.number} after "
                        f"{len(result.errors)} bad data record(s)"
                    )
                    break

        weather = cls(
            location=location,
            design_conditions=design_conditions,
            typical_extreme_periods=typical_extreme_periods,
            ground_temperature=ground_temperature,
            holidays_daylight_savings=holidays,
            comments_1=comments_1,
            comments_2=comments_2,
            data_periods=data_periods,
            records=tuple(records),
        )
        for warning in weather.validate(config):
            result.add_warning(warning)
        result.weather = weather

        if result.errors:
            logger.warning(f"{len(result.errors)} data record(s) could not be parsed")
        if result.warnings:
            logger.warning(f"{len(result.warnings)} consistency warning(s)")
        logger.info(
            f"Parsed {len(records)} record(s) for {location.city}, {location.country}"
        )
        return result

    @property
    def is_leap_year(self) -> bool:
        """Whether the file observes February 29."""
        return self.holidays_daylight_savings.leap_year_observed

    @property
    def records_per_hour(self) -> int:
        return self.data_periods.records_per_hour

    def validate(self, config: Optional[ParserConfig] = None) -> List[EPWError]:
        """
        Run whole-file consistency checks.

        Returns:
            List of RecordCountMismatchError, NonSequentialTimestampError and
            LeapYearMismatchError problems, in that order. Each check can be
            turned off in ``config``.
        """
        config = config or ParserConfig()
        problems: List[EPWError] = []

        if config.check_record_count:
            expected = self.data_periods.expected_record_count(self.is_leap_year)
            if expected != len(self.records):
                problems.append(RecordCountMismatchError(expected, len(self.records)))

        if config.check_timestamps:
            problems.extend(self._check_timestamps())

        if config.check_leap_year and not self.is_leap_year:
            for record in self.records:
                if record.month == 2 and record.day == 29:
                    problems.append(
                        LeapYearMismatchError(
                            "February 29 record in a file that does not observe leap years",
                            line=record.line,
                            field="day",
                            raw="2/29",
                        )
                    )
                    break

        return problems

    def _calendar_leap(self) -> bool:
        # Position Feb 29 records on a leap calendar even when the flag says
        # otherwise; that disagreement is reported by the leap year check.
        return self.is_leap_year or any(r.month == 2 and r.day == 29 for r in self.records)

    def _minute_of_year(self, record: WeatherLine, leap: bool) -> int:
        """Minutes from Jan 1 00:00 to the end of the record's interval."""
        days = day_of_year(record.month, record.day, leap) - 1
        start = days * 1440 + (record.hour - 1) * 60
        if self.records_per_hour == 1:
            return start + 60
        return start + record.minute

    def _check_timestamps(self) -> List[NonSequentialTimestampError]:
        rph = self.records_per_hour
        step = 60 // rph
        leap = self._calendar_leap()
        periods = self.data_periods.periods
        # Sub-hourly files number their steps either 15/30/45/60 or 0/15/30/45
        ends_on_60 = any(r.minute == 60 for r in self.records)

        def first_step(record: WeatherLine) -> bool:
            return record.hour == 1 and (
                rph == 1 or record.minute == (step if ends_on_60 else 0)
            )

        def last_step(record: WeatherLine) -> bool:
            return record.hour == 24 and (
                rph == 1 or record.minute == (60 if ends_on_60 else 60 - step)
            )

        def wraps(index: int) -> bool:
            period = periods[index]
            return day_of_year(*period.end, leap) < day_of_year(*period.start, leap)

        current = 0
        wrapped = False
        problems = []
        for prev, record in zip(self.records, self.records[1:]):
            if self._minute_of_year(record, leap) - self._minute_of_year(prev, leap) == step:
                continue
            date = (record.month, record.day)
            if first_step(record):
                later = [k for k in range(current + 1, len(periods)) if periods[k].start == date]
                if later:
                    current = later[0]
                    wrapped = False
                    continue
                if (
                    date == (1, 1)
                    and (prev.month, prev.day) == (12, 31)
                    and last_step(prev)
                    and wraps(current)
                    and not wrapped
                ):
                    wrapped = True
                    continue
            problems.append(
                NonSequentialTimestampError(
                    f"Record at {record.timestamp} does not follow {prev.timestamp} "
                    f"by {step} minute(s)",
                    line=record.line,
                )
            )

        if problems:
            logger.debug(f"{len(problems)} non-sequential timestamp(s)")
        return problems

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[WeatherLine]:
        return iter(self.records)

    def __getitem__(self, index: int) -> WeatherLine:
        return self.records[index]

    def _hour_indices(self, month: int, day: int, hour: int) -> List[int]:
        return self._index.get((month, day, hour), [])

    def get(
        self, month: int, day: int, hour: int, minute: Optional[int] = None
    ) -> Optional[WeatherLine]:
        """
        Look up a record by timestamp.

        With ``minute`` omitted the first record of the hour is returned.
        Returns None when no record matches.
        """
        for i in self._hour_indices(month, day, hour):
            record = self.records[i]
            if minute is None or record.minute == minute:
                return record
        return None

    def find(
        self, month: int, day: int, hour: int, minute: Optional[int] = None
    ) -> WeatherLine:
        """
        Like get(), but raise NotFoundError when no record matches.
        """
        record = self.get(month, day, hour, minute)
        if record is None:
            stamp = Timestamp(month, day, hour, minute or 0)
            raise NotFoundError(
                f"No record at {stamp}",
                field="timestamp",
                raw=f"{month}/{day} {hour}" + ("" if minute is None else f":{minute}"),
            )
        return record

    def interpolate(self, month: int, day: int, hour: float) -> Dict[str, Optional[float]]:
        """
        Numeric values at a fractional hour, linearly interpolated.

        ``hour`` is in 1-24 like the records' own hour field, so 3.5 means
        03:30. A record stamped at that time is returned as is. Otherwise the
        two consecutive records around it are blended by how far the time lies
        between them. Records more than one step apart are not blended, and a
        period running past Dec 31 blends across the year end. A field missing
        from either record is None in the result.

        Raises:
            ValueError: Invalid date or hour outside 1-24.
            NotFoundError: No pair of consecutive records around the time.
        """
        if not 1 <= hour <= 24:
            raise ValueError(f"Hour must be in 1-24, got {hour}")
        leap = self._calendar_leap()
        if not 1 <= month <= 12 or not 1 <= day <= days_in_month(month, leap):
            raise ValueError(f"Invalid date {month}/{day}")

        step = 60 // self.records_per_hour
        year = (366 if leap else 365) * 1440
        target = (day_of_year(month, day, leap) - 1) * 1440 + hour * 60
        times = [self._minute_of_year(r, leap) for r in self.records]

        for i, t in enumerate(times):
            if t == target:
                record = self.records[i]
                return {spec.name: getattr(record, spec.name) for spec in NUMERIC_FIELDS}

        for i in range(len(times) - 1):
            span = (times[i + 1] - times[i]) % year
            if span == 0 or span > step:
                continue
            offset = (target - times[i]) % year
            if offset < span:
                return self._blend(self.records[i], self.records[i + 1], offset / span)

        raise NotFoundError(
            f"No records around {month}/{day} hour {hour}",
            field="timestamp",
            raw=f"{month}/{day} {hour}",
        )

    @staticmethod
    def _blend(
        before: WeatherLine, after: WeatherLine, fraction: float
    ) -> Dict[str, Optional[float]]:
        values: Dict[str, Optional[float]] = {}
        for spec in NUMERIC_FIELDS:
            a = getattr(before, spec.name)
            b = getattr(after, spec.name)
            if a is None or b is None:
                values[spec.name] = None
            else:
                values[spec.name] = a + (b - a) * fraction
        return values

    def records_for_month(self, month: int) -> Tuple[WeatherLine, ...]:
        """All records of a month (1-12), in file order."""
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1-12, got {month}")
        return tuple(r for r in self.records if r.month == month)

    def missing_value_summary(self) -> Dict[str, int]:
        """Number of missing values per numeric field."""
        summary = {spec.name: 0 for spec in NUMERIC_FIELDS}
        for record in self.records:
            for name in record.missing_fields():
                summary[name] += 1
        return summary

    def range_violations(self) -> List[Tuple[int, str, float]]:
        """``(record index, field, value)`` for present values outside their range."""
        return [
            (i, name, value)
            for i, record in enumerate(self.records)
            for name, value in record.range_violations()
        ]

    def header_lines(self) -> List[str]:
        return [
            self.location.to_line(),
            self.design_conditions.to_line(),
            self.typical_extreme_periods.to_line(),
            self.ground_temperature.to_line(),
            self.holidays_daylight_savings.to_line(),
            self.comments_1.to_line(),
            self.comments_2.to_line(),
            self.data_periods.to_line(),
        ]

    def dumps(self, newline: str = "\n") -> str:
        """Serialize to EPW text. Missing values are written as sentinels."""
        lines = self.header_lines() + [r.to_line() for r in self.records]
        return newline.join(lines) + newline

    def dump(self, stream: IO[str], newline: str = "\n") -> None:
        """Write EPW text to an open text stream."""
        stream.write(self.dumps(newline))

    def to_dict(self) -> Dict[str, List[Any]]:
        """Column name to list of values, one entry per record."""
        return {name: [getattr(r, name) for r in self.records] for name in COLUMN_NAMES}

    def to_dataframe(self, library: str = "pandas") -> Any:
        """Convert the data records to a pandas or polars DataFrame.

        Missing values become NaN (pandas) or null (polars).
        """
        data = self.to_dict()

        if library.lower() == "pandas":
            try:
                import pandas as pd
            except ImportError:
                raise ImportError(
                    "pandas is required for DataFrame conversion. Install with: pip install pandas"
                ) from None

            df = pd.DataFrame(data, columns=list(COLUMN_NAMES))
            for name in COLUMN_NAMES:
                if name in FIELDS_BY_NAME:
                    df[name] = pd.to_numeric(df[name], errors="coerce").astype("float64")
                elif name in ("year", "month", "day", "hour", "minute"):
                    df[name] = df[name].astype("int64")
                elif name == "present_weather_observation":
                    df[name] = pd.to_numeric(df[name], errors="coerce").astype("Int64")
            return df

        elif library.lower() == "polars":
            try:
                import polars as pl
            except ImportError:
                raise ImportError(
                    "polars is required for DataFrame conversion. Install with: pip install polars"
                ) from None

            schema: Dict[str, Any] = {}
            for name in COLUMN_NAMES:
                if name in FIELDS_BY_NAME:
                    schema[name] = pl.Float64
                elif name in ("data_source_flags", "present_weather_codes"):
                    schema[name] = pl.Utf8
                else:
                    schema[name] = pl.Int64
            return pl.DataFrame(data, schema=schema)

        else:
            raise ValueError(
                f"Unsupported library: {library}. Choose 'pandas' or 'polars'."
            )

    def to_pandas(self) -> Any:
        """Convert to a pandas DataFrame."""
        return self.to_dataframe("pandas")

    def to_polars(self) -> Any:
        """Convert to a polars DataFrame."""
        return self.to_dataframe("polars")

    def __str__(self) -> str:
        loc = self.location
        return (
            f"Weather({loc.city}, {loc.country}, {len(self.records)} records, "
            f"{self.records_per_hour}/hour)"
        )
