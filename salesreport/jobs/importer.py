"""Bulk import of the product-sale feed into the record store."""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import aiofiles
import httpx
import orjson

from salesreport.config import config
from salesreport.errors import ImportFailed
from salesreport.fetch.client import FeedClient
from salesreport.jobs.metrics import ImportMetrics
from salesreport.parse.models import SaleRecord
from salesreport.parse.normalize import normalize_item
from salesreport.store.records import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    count: int
    defaulted: dict[str, int] = field(default_factory=dict)
    skipped: int = 0


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def load_feed(
    source: str, transport: Optional[httpx.AsyncBaseTransport] = None
) -> Any:
    """Read the raw feed from a URL or a local JSON file."""
    if is_url(source):
        async with FeedClient(transport=transport) as client:
            try:
                return await client.fetch_json(source)
            except httpx.HTTPError as e:
                raise ImportFailed("Error fetching feed", error=str(e)) from e

    path = Path(source)
    try:
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()
    except OSError as e:
        raise ImportFailed("Error reading feed file", error=str(e)) from e
    try:
        return orjson.loads(content)
    except orjson.JSONDecodeError as e:
        raise ImportFailed("Feed is not valid JSON", error=str(e)) from e


async def import_records(
    store: RecordStore,
    source: Optional[str] = None,
    replace: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ImportResult:
    """Fetch the feed, default missing fields and bulk-insert every item.

    With ``replace`` existing records are swapped out in the same
    transaction as the insert. Non-object items are skipped.
    """
    source = source or config.FEED_URL
    metrics = ImportMetrics(source)

    payload = await load_feed(source, transport=transport)
    if not isinstance(payload, list):
        raise ImportFailed(
            "Feed must be a JSON array", error=f"got {type(payload).__name__}"
        )

    now = datetime.now(timezone.utc)
    records: list[SaleRecord] = []
    for item in payload:
        metrics.increment("processed")
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object feed item: {item!r}")
            metrics.increment("skipped")
            continue
        record, defaulted = normalize_item(item, now)
        metrics.record_defaults(defaulted)
        records.append(record)

    inserted = await store.insert_many(records, replace=replace)
    metrics.increment("inserted", inserted)
    metrics.report()

    summary = metrics.get_summary()
    return ImportResult(
        count=inserted, defaulted=summary["defaulted"], skipped=summary["skipped"]
    )
