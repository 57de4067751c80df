"""
Parse result combining the weather model with collected problems.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .exceptions import DataSectionError, EPWError

if TYPE_CHECKING:
    from .weather import Weather


@dataclass
class ParseResult:
    """
    Outcome of parsing an EPW file.

    Header problems are raised, never returned here. ``errors`` holds data
    records that could not be parsed (they are left out of ``weather``).
    ``warnings`` holds whole-file consistency problems; the records are still
    all present.
    """

    weather: Optional["Weather"] = None
    errors: List[EPWError] = field(default_factory=list)
    warnings: List[EPWError] = field(default_factory=list)

    def add_error(self, error: EPWError) -> None:
        """Add a data record error."""
        self.errors.append(error)

    def add_warning(self, warning: EPWError) -> None:
        """Add a consistency warning."""
        self.warnings.append(warning)

    def is_valid(self) -> bool:
        """Check if every data record parsed (no errors)."""
        return len(self.errors) == 0

    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    def unwrap(self, allow_warnings: bool = True) -> "Weather":
        """
        Return the parsed Weather, or raise if there were problems.

        Args:
            allow_warnings: When False, warnings are treated like errors.

        Raises:
            DataSectionError: Carrying every error (and warning, when not
                allowed) in ``.errors``.
        """
        problems: List[EPWError] = list(self.errors)
        if not allow_warnings:
            problems.extend(self.warnings)
        if problems or self.weather is None:
            raise DataSectionError(problems)
        return self.weather

    def summary(self) -> Dict[str, Any]:
        """Counts of records, errors and warnings by type."""
        by_type: Dict[str, int] = {}
        for problem in self.errors + self.warnings:
            name = type(problem).__name__
            by_type[name] = by_type.get(name, 0) + 1
        return {
            "records": len(self.weather) if self.weather is not None else 0,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "by_type": by_type,
        }

    def __str__(self) -> str:
        parts = [f"Records: {len(self.weather) if self.weather is not None else 0}"]
        if self.errors:
            parts.append(f"Errors: {len(self.errors)}")
        if self.warnings:
            parts.append(f"Warnings: {len(self.warnings)}")
        return f"ParseResult({', '.join(parts)})"
