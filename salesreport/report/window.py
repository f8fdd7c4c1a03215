"""Month window resolution shared by every aggregate query."""
from dataclasses import dataclass
from datetime import date
from typing import Any

from salesreport.errors import InvalidWindow

# Literal end day, not clamped to the month's length
END_DAY = 31


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive [day 1, day 31] range of one month, as store date keys."""

    year: int
    month: int

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end_day(self) -> int:
        return END_DAY

    @property
    def start(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-01T00:00:00"

    @property
    def end(self) -> str:
        # Not a real date for short months; only compared lexicographically.
        return f"{self.year:04d}-{self.month:02d}-{END_DAY:02d}T00:00:00"

    def bounds(self) -> tuple[str, str]:
        return self.start, self.end

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def _parse_component(value: Any, name: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidWindow("Month and year are required")
    if isinstance(value, bool):
        raise InvalidWindow(f"{name} must be numeric", error=repr(value))
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidWindow(f"{name} must be numeric", error=repr(value)) from None


def resolve_window(month: Any, year: Any) -> MonthWindow:
    """Turn a caller-supplied (month, year) pair into a MonthWindow.

    Accepts ints or numeric strings (``3``, ``"3"``, ``"03"``). Raises
    InvalidWindow when either part is missing, non-numeric or out of range.
    """
    month_int = _parse_component(month, "month")
    year_int = _parse_component(year, "year")
    if not 1 <= month_int <= 12:
        raise InvalidWindow("month must be between 1 and 12", error=str(month_int))
    if not 1 <= year_int <= 9999:
        raise InvalidWindow("year must be between 1 and 9999", error=str(year_int))
    return MonthWindow(year=year_int, month=month_int)
