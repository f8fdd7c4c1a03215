"""Month-window aggregates: statistics, price histogram, categories."""
import logging

from salesreport.report.models import CategoryCount, HistogramBucket, Statistics
from salesreport.report.window import MonthWindow
from salesreport.store.filters import RecordFilter
from salesreport.store.records import RecordStore

logger = logging.getLogger(__name__)

PRICE_BOUNDARIES = [0, 100, 200, 300, 400, 500, 600, 700, 800, 900, 1000]
OVERFLOW_LABEL = "901-above"


def bucket_labels() -> list[tuple[object, str]]:
    """(bucket id, label) pairs in display order, overflow last."""
    labels = [
        (lower, f"{lower}-{upper}")
        for lower, upper in zip(PRICE_BOUNDARIES, PRICE_BOUNDARIES[1:])
    ]
    labels.append((OVERFLOW_LABEL, OVERFLOW_LABEL))
    return labels


class StatisticsAggregator:
    """Total sales and sold/unsold counts."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def statistics(self, window: MonthWindow) -> Statistics:
        # Three sub-queries, one read transaction
        async with self.store.snapshot() as reader:
            total_sales = await reader.sum(RecordFilter.for_window(window, sold=True), "price")
            sold_count = await reader.count(RecordFilter.for_window(window, sold=True))
            not_sold_count = await reader.count(RecordFilter.for_window(window, sold=False))

        return Statistics(
            total_sales=total_sales or 0,
            sold_count=sold_count,
            not_sold_count=not_sold_count,
        )


class HistogramAggregator:
    """Record counts per fixed price range, empty ranges included."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def histogram(self, window: MonthWindow) -> list[HistogramBucket]:
        rows = await self.store.aggregate_bucket(
            RecordFilter.for_window(window),
            "price",
            PRICE_BOUNDARIES,
            OVERFLOW_LABEL,
        )
        counts = {row["_id"]: row["count"] for row in rows}
        return [
            HistogramBucket(range_label=label, count=counts.get(bucket_id, 0))
            for bucket_id, label in bucket_labels()
        ]


class CategoryAggregator:
    """Record counts per distinct title."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def categories(self, window: MonthWindow) -> list[CategoryCount]:
        rows = await self.store.aggregate_group(RecordFilter.for_window(window), "title")
        return [CategoryCount(category=row["_id"], count=row["count"]) for row in rows]
