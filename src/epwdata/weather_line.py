"""
Hourly (or sub-hourly) EPW data records.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .exceptions import (
    InvalidDateError,
    InvalidFieldValueError,
    InvalidHourError,
    WrongFieldCountError,
)
from .fields import COLUMN_NAMES, FIELDS_BY_NAME, NUMERIC_FIELDS, SCHEMA_FIELD_COUNT
from .scanner import RawField
from .utils import days_in_month, format_number, is_leap_year, parse_float, parse_int


@dataclass(frozen=True, order=True)
class Timestamp:
    """Position of a record within the year.

    The year is left out on purpose: typical-year files splice months taken
    from different calendar years.
    """

    month: int
    day: int
    hour: int  # 1-24, the hour ending at this record
    minute: int = 0

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.day:02d} {self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class WeatherLine:
    """One data record. Numeric quantities are None when missing."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    data_source_flags: str
    dry_bulb_temperature: Optional[float]  # C
    dew_point_temperature: Optional[float]  # C
    relative_humidity: Optional[float]  # %
    atmospheric_station_pressure: Optional[float]  # Pa
    extraterrestrial_horizontal_radiation: Optional[float]  # Wh/m2
    extraterrestrial_direct_normal_radiation: Optional[float]  # Wh/m2
    horizontal_infrared_radiation_intensity: Optional[float]  # Wh/m2
    global_horizontal_radiation: Optional[float]  # Wh/m2
    direct_normal_radiation: Optional[float]  # Wh/m2
    diffuse_horizontal_radiation: Optional[float]  # Wh/m2
    global_horizontal_illuminance: Optional[float]  # lux
    direct_normal_illuminance: Optional[float]  # lux
    diffuse_horizontal_illuminance: Optional[float]  # lux
    zenith_luminance: Optional[float]  # Cd/m2
    wind_direction: Optional[float]  # degrees
    wind_speed: Optional[float]  # m/s
    total_sky_cover: Optional[float]  # tenths
    opaque_sky_cover: Optional[float]  # tenths
    visibility: Optional[float]  # km
    ceiling_height: Optional[float]  # m
    present_weather_observation: int
    present_weather_codes: str
    precipitable_water: Optional[float]  # mm
    aerosol_optical_depth: Optional[float]  # thousandths
    snow_depth: Optional[float]  # cm
    days_since_last_snowfall: Optional[float]
    albedo: Optional[float]
    liquid_precipitation_depth: Optional[float]  # mm
    liquid_precipitation_quantity: Optional[float]  # hr
    extra_fields: Tuple[str, ...] = ()
    line: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "WeatherLine":
        """
        Parse one data line.

        Values at or above a field's missing sentinel are stored as None.
        Fields beyond the 35 schema columns are kept in ``extra_fields``.

        Raises:
            WrongFieldCountError: Fewer than 35 fields.
            InvalidDateError: Month or day does not exist.
            InvalidHourError: Hour outside 1-24.
            InvalidFieldValueError: A value is not a number, or the minute is
                outside 0-60.
        """
        if line is None and fields:
            line = fields[0].line
        if len(fields) < SCHEMA_FIELD_COUNT:
            raise WrongFieldCountError(
                f"Expected at least {SCHEMA_FIELD_COUNT} fields, found {len(fields)}",
                line=line,
            )

        year = parse_int(fields[0], "year")

        month = parse_int(fields[1], "month")
        if not 1 <= month <= 12:
            raise InvalidDateError(
                "Month must be in 1-12", line=line, field="month", raw=fields[1].text
            )

        day = parse_int(fields[2], "day")
        if not 1 <= day <= days_in_month(month, is_leap_year(year)):
            raise InvalidDateError(
                f"Day {day} does not exist in {year}-{month:02d}",
                line=line,
                field="day",
                raw=fields[2].text,
            )

        hour = parse_int(fields[3], "hour")
        if not 1 <= hour <= 24:
            raise InvalidHourError(
                "Hour must be in 1-24", line=line, field="hour", raw=fields[3].text
            )

        minute = parse_int(fields[4], "minute")
        if not 0 <= minute <= 60:
            raise InvalidFieldValueError(
                "Minute must be in 0-60", line=line, field="minute", raw=fields[4].text
            )

        values: Dict[str, Optional[float]] = {}
        for spec in NUMERIC_FIELDS:
            value = parse_float(fields[spec.column], spec.name)
            values[spec.name] = None if spec.is_missing(value) else value

        return cls(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            data_source_flags=fields[5].text,
            present_weather_observation=parse_int(fields[26], "present_weather_observation"),
            present_weather_codes=fields[27].text,
            extra_fields=tuple(f.text for f in fields[SCHEMA_FIELD_COUNT:]),
            line=line,
            **values,
        )

    @property
    def timestamp(self) -> Timestamp:
        return Timestamp(self.month, self.day, self.hour, self.minute)

    def is_missing(self, name: str) -> bool:
        """Check whether a numeric field was recorded as missing."""
        if name not in FIELDS_BY_NAME:
            raise KeyError(f"Unknown numeric field: {name}")
        return getattr(self, name) is None

    def missing_fields(self) -> List[str]:
        return [spec.name for spec in NUMERIC_FIELDS if getattr(self, spec.name) is None]

    def range_violations(self) -> List[Tuple[str, float]]:
        """Present values outside their field's documented range."""
        violations = []
        for spec in NUMERIC_FIELDS:
            value = getattr(self, spec.name)
            if value is not None and not spec.in_range(value):
                violations.append((spec.name, value))
        return violations

    def to_dict(self) -> Dict[str, Any]:
        """Schema columns by name, missing values as None."""
        return {name: getattr(self, name) for name in COLUMN_NAMES}

    def to_fields(self) -> List[str]:
        """Serialize back to EPW fields, writing missing values as sentinels."""
        fields = []
        for name in COLUMN_NAMES:
            value = getattr(self, name)
            if name in FIELDS_BY_NAME:
                fields.append(
                    FIELDS_BY_NAME[name].sentinel_text if value is None else format_number(value)
                )
            elif value is None:
                fields.append("")
            else:
                fields.append(str(value))
        fields.extend(self.extra_fields)
        return fields

    def to_line(self) -> str:
        return ",".join(self.to_fields())
