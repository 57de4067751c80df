"""
Field definitions for EPW hourly data records.

Reference: EnergyPlus Auxiliary Programs, "Weather Converter Program",
section "Data Field Descriptions".
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Number of comma-separated fields in a data record
SCHEMA_FIELD_COUNT = 35


@dataclass(frozen=True)
class FieldSpec:
    """Definition of one numeric field in a data record."""

    name: str
    column: int  # 0-based position in the data line
    label: str
    units: str
    missing: float  # values at or above this mean "no reading"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    # False when only the exact sentinel is missing and larger values are readings
    missing_at_or_above: bool = True

    def is_missing(self, value: float) -> bool:
        """Check whether a parsed value is this field's missing sentinel."""
        if self.missing_at_or_above:
            return value >= self.missing
        return value == self.missing

    def in_range(self, value: float) -> bool:
        """Check a present value against the documented valid range."""
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True

    @property
    def sentinel_text(self) -> str:
        """The missing sentinel as it is written in EPW files."""
        if float(self.missing).is_integer():
            return str(int(self.missing))
        return repr(float(self.missing))


# Numeric physical quantities, in file order
NUMERIC_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("dry_bulb_temperature", 6, "Dry Bulb Temperature", "C", 99.9, -70, 70),
    FieldSpec("dew_point_temperature", 7, "Dew Point Temperature", "C", 99.9, -70, 70),
    FieldSpec("relative_humidity", 8, "Relative Humidity", "%", 999, 0, 110),
    FieldSpec(
        "atmospheric_station_pressure",
        9,
        "Atmospheric Station Pressure",
        "Pa",
        999999,
        31000,
        120000,
    ),
    FieldSpec(
        "extraterrestrial_horizontal_radiation",
        10,
        "Extraterrestrial Horizontal Radiation",
        "Wh/m2",
        9999,
        0,
    ),
    FieldSpec(
        "extraterrestrial_direct_normal_radiation",
        11,
        "Extraterrestrial Direct Normal Radiation",
        "Wh/m2",
        9999,
        0,
    ),
    FieldSpec(
        "horizontal_infrared_radiation_intensity",
        12,
        "Horizontal Infrared Radiation Intensity",
        "Wh/m2",
        9999,
        0,
    ),
    FieldSpec(
        "global_horizontal_radiation", 13, "Global Horizontal Radiation", "Wh/m2", 9999, 0
    ),
    FieldSpec("direct_normal_radiation", 14, "Direct Normal Radiation", "Wh/m2", 9999, 0),
    FieldSpec(
        "diffuse_horizontal_radiation", 15, "Diffuse Horizontal Radiation", "Wh/m2", 9999, 0
    ),
    FieldSpec(
        "global_horizontal_illuminance", 16, "Global Horizontal Illuminance", "lux", 999999, 0
    ),
    FieldSpec(
        "direct_normal_illuminance", 17, "Direct Normal Illuminance", "lux", 999999, 0
    ),
    FieldSpec(
        "diffuse_horizontal_illuminance",
        18,
        "Diffuse Horizontal Illuminance",
        "lux",
        999999,
        0,
    ),
    FieldSpec("zenith_luminance", 19, "Zenith Luminance", "Cd/m2", 9999, 0),
    FieldSpec("wind_direction", 20, "Wind Direction", "deg", 999, 0, 360),
    FieldSpec("wind_speed", 21, "Wind Speed", "m/s", 999, 0, 40),
    FieldSpec("total_sky_cover", 22, "Total Sky Cover", "tenths", 99, 0, 10),
    FieldSpec("opaque_sky_cover", 23, "Opaque Sky Cover", "tenths", 99, 0, 10),
    FieldSpec("visibility", 24, "Visibility", "km", 9999),
    FieldSpec("ceiling_height", 25, "Ceiling Height", "m", 99999),
    FieldSpec("precipitable_water", 28, "Precipitable Water", "mm", 999),
    FieldSpec(
        "aerosol_optical_depth",
        29,
        "Aerosol Optical Depth",
        "thousandths",
        0.999,
        missing_at_or_above=False,
    ),
    FieldSpec("snow_depth", 30, "Snow Depth", "cm", 999),
    FieldSpec("days_since_last_snowfall", 31, "Days Since Last Snowfall", "days", 99),
    FieldSpec("albedo", 32, "Albedo", "", 999),
    FieldSpec("liquid_precipitation_depth", 33, "Liquid Precipitation Depth", "mm", 999),
    FieldSpec(
        "liquid_precipitation_quantity", 34, "Liquid Precipitation Quantity", "hr", 99
    ),
)

FIELDS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in NUMERIC_FIELDS}

# Column names of a data record, in file order
COLUMN_NAMES: Tuple[str, ...] = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "data_source_flags",
    *(spec.name for spec in NUMERIC_FIELDS[:20]),
    "present_weather_observation",
    "present_weather_codes",
    *(spec.name for spec in NUMERIC_FIELDS[20:]),
)
