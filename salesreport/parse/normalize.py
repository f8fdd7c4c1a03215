"""Normalize raw feed items into sale records."""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from salesreport.parse.models import SaleRecord

logger = logging.getLogger(__name__)

TEXT_DEFAULTS = {
    "title": "Untitled",
    "description": "No description",
    "image": "No image",
}
DEFAULT_PRICE = 0.0
DEFAULT_SOLD = False


def _coerce_bool(v: Any) -> Optional[bool]:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    s = str(v).strip().lower()
    if s in ("1", "true", "t", "yes", "y", "on"):
        return True
    if s in ("0", "false", "f", "no", "n", "off"):
        return False
    return None


def _coerce_price(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    try:
        price = float(v) if isinstance(v, (int, float)) else float(str(v).strip())
    except (ValueError, OverflowError):
        return None
    # nan and inf cannot be stored or bucketed
    return price if math.isfinite(price) else None


def _parse_date(v: Any) -> Optional[datetime]:
    if isinstance(v, datetime):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        # Epoch milliseconds
        return datetime.fromtimestamp(v / 1000, tz=timezone.utc)
    s = str(v).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def normalize_item(item: dict, now: datetime) -> tuple[SaleRecord, list[str]]:
    """Build a SaleRecord from one feed item.

    Missing or empty fields get their defaults; ``dateOfSale`` falls back to
    ``now``. Returns the record and the names of the fields that were
    defaulted.
    """
    defaulted: list[str] = []
    values: dict[str, Any] = {}

    for field, default in TEXT_DEFAULTS.items():
        raw = item.get(field)
        if raw is None or raw == "":
            values[field] = default
            defaulted.append(field)
        else:
            values[field] = str(raw)

    raw_price = item.get("price")
    price = None if raw_price is None else _coerce_price(raw_price)
    if price is None:
        if raw_price is not None:
            logger.warning(f"Unparseable price {raw_price!r} for {values['title']!r}, using 0")
        price = DEFAULT_PRICE
        defaulted.append("price")
    values["price"] = price

    raw_sold = item.get("sold")
    sold = None if raw_sold is None else _coerce_bool(raw_sold)
    if sold is None:
        if raw_sold is not None:
            logger.warning(f"Unparseable sold flag {raw_sold!r} for {values['title']!r}")
        sold = DEFAULT_SOLD
        defaulted.append("sold")
    values["sold"] = sold

    raw_date = item.get("dateOfSale")
    date_of_sale = None if raw_date in (None, "") else _parse_date(raw_date)
    if date_of_sale is None:
        if raw_date not in (None, ""):
            logger.warning(f"Unparseable dateOfSale {raw_date!r} for {values['title']!r}")
        date_of_sale = now
        defaulted.append("dateOfSale")
    values["date_of_sale"] = date_of_sale

    return SaleRecord(**values), defaulted
