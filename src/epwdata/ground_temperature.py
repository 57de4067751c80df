"""
GROUND TEMPERATURES header record.

The record is count-prefixed: a depth count N followed by N groups of 16
fields (depth, soil conductivity, soil density, soil specific heat, then
twelve monthly average temperatures).
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .exceptions import (
    GroundTemperatureError,
    InvalidCountError,
    InvalidFieldValueError,
    TruncatedRecordError,
)
from .scanner import RawField
from .utils import format_number, parse_float, parse_int, parse_optional_float

logger = logging.getLogger(__name__)

KEYWORD = "GROUND TEMPERATURES"
GROUP_WIDTH = 16

MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

# Name of each value within a group, by offset
GROUP_LABELS = (
    "depth",
    "soil_conductivity",
    "soil_density",
    "soil_specific_heat",
) + tuple(f"temperature_{month}" for month in MONTHS)


def _optional_text(value: Optional[float]) -> str:
    return "" if value is None else format_number(value)


@dataclass(frozen=True)
class GroundTemperatureDepth:
    """Soil properties and monthly temperatures at one depth."""

    depth: float  # m
    soil_conductivity: Optional[float]  # W/m-K
    soil_density: Optional[float]  # kg/m3
    soil_specific_heat: Optional[float]  # J/kg-K
    monthly_temperatures: Tuple[float, ...]  # C, January first

    def __post_init__(self) -> None:
        if len(self.monthly_temperatures) != 12:
            raise ValueError(
                f"Expected 12 monthly temperatures, got {len(self.monthly_temperatures)}"
            )

    def temperature(self, month: int) -> float:
        """Average ground temperature for a month (1-12)."""
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1-12, got {month}")
        return self.monthly_temperatures[month - 1]

    def to_fields(self) -> List[str]:
        return [
            format_number(self.depth),
            _optional_text(self.soil_conductivity),
            _optional_text(self.soil_density),
            _optional_text(self.soil_specific_heat),
            *(format_number(t) for t in self.monthly_temperatures),
        ]


@dataclass(frozen=True)
class GroundTemperature:
    """The GROUND TEMPERATURES block: one entry per declared depth."""

    depths: Tuple[GroundTemperatureDepth, ...] = ()

    @property
    def depth_count(self) -> int:
        return len(self.depths)

    def __len__(self) -> int:
        return len(self.depths)

    def __iter__(self) -> Iterator[GroundTemperatureDepth]:
        return iter(self.depths)

    @classmethod
    def from_fields(
        cls, fields: Sequence[RawField], line: Optional[int] = None
    ) -> "GroundTemperature":
        """
        Parse the fields that follow the GROUND TEMPERATURES keyword.

        Exactly the declared number of groups is read. Unparseable values are
        collected for the whole block and raised together.

        Raises:
            InvalidCountError: The depth count is missing, not an integer,
                negative, or does not account for trailing values.
            TruncatedRecordError: Fewer fields than the count requires.
            GroundTemperatureError: One or more values are not numbers.
        """
        if not fields or fields[0].is_empty():
            raise InvalidCountError("Missing ground temperature depth count", line=line)

        count_field = fields[0]
        try:
            count = parse_int(count_field, "depth_count")
        except InvalidFieldValueError:
            raise InvalidCountError(
                "Ground temperature depth count is not an integer",
                line=count_field.line,
                field="depth_count",
                raw=count_field.text,
            ) from None
        if count < 0:
            raise InvalidCountError(
                "Ground temperature depth count is negative",
                line=count_field.line,
                field="depth_count",
                raw=count_field.text,
            )

        body = fields[1:]
        required = count * GROUP_WIDTH
        if len(body) < required:
            raise TruncatedRecordError(
                f"{count} ground temperature depth(s) need {required} fields, "
                f"found {len(body)}",
                line=count_field.line,
                field="depth_count",
                raw=count_field.text,
            )

        trailing = [f for f in body[required:] if not f.is_empty()]
        if trailing:
            raise InvalidCountError(
                f"Ground temperature depth count {count} leaves "
                f"{len(trailing)} value(s) unaccounted for",
                line=trailing[0].line,
                field="depth_count",
                raw=trailing[0].text,
            )

        depths = []
        errors: List[InvalidFieldValueError] = []
        for group in range(count):
            window = body[group * GROUP_WIDTH : (group + 1) * GROUP_WIDTH]
            values: List[Optional[float]] = []
            for offset, field in enumerate(window):
                name = GROUP_LABELS[offset]
                try:
                    if offset in (1, 2, 3):
                        values.append(parse_optional_float(field, name, (group, offset)))
                    else:
                        values.append(parse_float(field, name, (group, offset)))
                except InvalidFieldValueError as e:
                    errors.append(e)
                    values.append(None)

            if not errors:
                depths.append(
                    GroundTemperatureDepth(
                        depth=values[0],  # type: ignore[arg-type]
                        soil_conductivity=values[1],
                        soil_density=values[2],
                        soil_specific_heat=values[3],
                        monthly_temperatures=tuple(values[4:]),  # type: ignore[arg-type]
                    )
                )

        if errors:
            logger.warning(
                f"Found {len(errors)} invalid ground temperature value(s) on line {line}"
            )
            raise GroundTemperatureError(errors, line=line)

        logger.debug(f"Parsed ground temperatures at {count} depth(s)")
        return cls(depths=tuple(depths))

    def to_fields(self) -> List[str]:
        """Serialize to the count-prefixed field list (1 + 16 x N values)."""
        fields = [str(self.depth_count)]
        for depth in self.depths:
            fields.extend(depth.to_fields())
        return fields

    def to_line(self) -> str:
        return ",".join([KEYWORD, *self.to_fields()])
