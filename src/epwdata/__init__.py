"""
Reader for EnergyPlus Weather (EPW) files.

Parse EPW text into validated, immutable records and export to DataFrames.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("py-epwdata")
except Exception:
    __version__ = "unknown"

from typing import Optional

from .config import ParserConfig
from .exceptions import (
    DataSectionError,
    EPWError,
    GroundTemperatureError,
    InvalidCountError,
    InvalidDateError,
    InvalidFieldValueError,
    InvalidHourError,
    LeapYearMismatchError,
    MalformedHeaderError,
    MalformedLineError,
    NonSequentialTimestampError,
    NotFoundError,
    RecordCountMismatchError,
    TruncatedRecordError,
    UnexpectedEofError,
    WrongFieldCountError,
)
from .fields import COLUMN_NAMES, FIELDS_BY_NAME, NUMERIC_FIELDS, FieldSpec
from .ground_temperature import GroundTemperature, GroundTemperatureDepth
from .headers import (
    Comments,
    DataPeriod,
    DataPeriods,
    DesignConditions,
    Holiday,
    HolidaysDaylightSavings,
    Location,
    TypicalExtremePeriod,
    TypicalExtremePeriods,
)
from .result import ParseResult
from .scanner import Line, RawField, Scanner, Source
from .weather import Weather
from .weather_line import Timestamp, WeatherLine


def parse_epw(source: Source, config: Optional[ParserConfig] = None) -> ParseResult:
    """
    Parse an EPW file from text, bytes or an open stream.

    Example:
        >>> with open("santiago.epw", "rb") as f:
        ...     weather = parse_epw(f).unwrap()
        >>> weather.find(1, 1, 1).dry_bulb_temperature
        16.7
    """
    return Weather.parse(source, config)


__all__ = [
    # Entry point
    "parse_epw",
    "ParserConfig",
    "ParseResult",
    # Model
    "Weather",
    "WeatherLine",
    "Timestamp",
    "GroundTemperature",
    "GroundTemperatureDepth",
    "Location",
    "DesignConditions",
    "TypicalExtremePeriod",
    "TypicalExtremePeriods",
    "Holiday",
    "HolidaysDaylightSavings",
    "Comments",
    "DataPeriod",
    "DataPeriods",
    # Field table
    "FieldSpec",
    "NUMERIC_FIELDS",
    "FIELDS_BY_NAME",
    "COLUMN_NAMES",
    # Scanning
    "Scanner",
    "Line",
    "RawField",
    "Source",
    # Exceptions
    "EPWError",
    "MalformedLineError",
    "MalformedHeaderError",
    "InvalidCountError",
    "TruncatedRecordError",
    "GroundTemperatureError",
    "InvalidFieldValueError",
    "WrongFieldCountError",
    "InvalidDateError",
    "InvalidHourError",
    "RecordCountMismatchError",
    "NonSequentialTimestampError",
    "LeapYearMismatchError",
    "UnexpectedEofError",
    "NotFoundError",
    "DataSectionError",
]
