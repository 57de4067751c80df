"""
Parser configuration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParserConfig:
    """
    Options controlling how an EPW file is parsed and validated.

    Attributes:
        max_errors: Stop parsing the data section after this many bad records.
            None means no limit.
        check_record_count: Compare the parsed record count with DATA PERIODS.
        check_timestamps: Check that records advance by one time step.
        check_leap_year: Check February 29 records against the leap year flag.
        encoding: Text encoding used for bytes and binary stream sources.
    """

    max_errors: Optional[int] = 1000
    check_record_count: bool = True
    check_timestamps: bool = True
    check_leap_year: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.max_errors is not None and self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Config that stops at the first bad data record."""
        return cls(max_errors=1)
