"""Filter predicates for record store queries."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Public field name -> column
COLUMNS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "image": "image",
    "price": "price",
    "sold": "sold",
    "dateOfSale": "date_of_sale",
    "date_of_sale": "date_of_sale",
}
NUMERIC_FIELDS = {"id", "price"}


def column_for(field: str) -> str:
    """Map a record field name to its column, rejecting unknown fields."""
    try:
        return COLUMNS[field]
    except KeyError:
        raise ValueError(f"Unknown record field: {field!r}") from None


def to_date_key(value: datetime) -> str:
    """Normalize a datetime to naive UTC and format it as a fixed-width key.

    Keys compare as text against MonthWindow bounds.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    # Years below 1000 stay four digits wide
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def contains_ci(haystack: Optional[str], needle: Optional[str]) -> int:
    """SQL function: case-insensitive substring test (needle pre-folded)."""
    if haystack is None or needle is None:
        return 0
    return int(needle in str(haystack).casefold())


@dataclass(frozen=True)
class RecordFilter:
    """Conjunction of optional conditions over sale records.

    ``text`` matches when it is a case-insensitive substring of any of
    ``text_fields``. Numeric fields never match text.
    """

    text: str = ""
    text_fields: tuple[str, ...] = ("title", "description")
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    sold: Optional[bool] = None

    @classmethod
    def for_window(cls, window, sold: Optional[bool] = None) -> "RecordFilter":
        date_from, date_to = window.bounds()
        return cls(date_from=date_from, date_to=date_to, sold=sold)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Build a parameterised WHERE clause (without the keyword)."""
        clauses: list[str] = []
        params: list[Any] = []

        if self.text:
            alternatives = []
            for field in self.text_fields:
                if field in NUMERIC_FIELDS:
                    logger.debug(f"Skipping text match on numeric field {field!r}")
                    continue
                alternatives.append(f"contains_ci({column_for(field)}, ?)")
                params.append(self.text.casefold())
            clauses.append(f"({' OR '.join(alternatives)})" if alternatives else "0")

        if self.date_from is not None:
            clauses.append("date_of_sale >= ?")
            params.append(self.date_from)
        if self.date_to is not None:
            clauses.append("date_of_sale <= ?")
            params.append(self.date_to)
        if self.sold is not None:
            clauses.append("sold = ?")
            params.append(int(self.sold))

        return (" AND ".join(clauses) or "1"), params
