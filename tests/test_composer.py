"""Tests for the combined report composer."""
import asyncio
from types import SimpleNamespace

import pytest

from salesreport.errors import InvalidWindow, PartialAggregateFailure, StoreUnavailable
from salesreport.report.composer import ReportComposer


class SlowAggregator:
    """Aggregator stand-in that blocks until cancelled."""

    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False

    async def run(self, window):
        self.started.set()
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


@pytest.mark.asyncio
async def test_combined_report_scenario(scenario_store):
    """Test the merged report for the March 2023 scenario."""
    report = await ReportComposer(scenario_store).combined_report("03", "2023")

    assert report.statistics.total_sales == 150
    assert report.statistics.sold_count == 1
    assert report.statistics.not_sold_count == 1
    assert len(report.histogram) == 11
    assert {b.range_label: b.count for b in report.histogram if b.count} == {
        "100-200": 1,
        "900-1000": 1,
    }
    assert [(c.category, c.count) for c in report.categories] == [("A", 2)]

    payload = report.model_dump(mode="json", by_alias=True)
    assert set(payload) == {"statistics", "histogram", "categories"}
    assert payload["statistics"]["totalSales"] == 150


@pytest.mark.asyncio
async def test_combined_report_rejects_bad_window(store):
    """Test validation happens before any aggregator runs."""
    composer = ReportComposer(store)
    slow = SlowAggregator()
    composer.statistics = SimpleNamespace(statistics=slow.run)
    with pytest.raises(InvalidWindow):
        await composer.combined_report(None, "2023")
    assert not slow.started.is_set()


@pytest.mark.asyncio
async def test_one_failure_fails_the_whole_report(store):
    """Test a failing aggregator cancels the others."""
    composer = ReportComposer(store)
    slow_histogram = SlowAggregator()
    slow_categories = SlowAggregator()

    async def failing_statistics(window):
        await slow_histogram.started.wait()
        await slow_categories.started.wait()
        raise StoreUnavailable("Record store query failed", error="disk I/O error")

    composer.statistics = SimpleNamespace(statistics=failing_statistics)
    composer.histogram = SimpleNamespace(histogram=slow_histogram.run)
    composer.categories = SimpleNamespace(categories=slow_categories.run)

    with pytest.raises(PartialAggregateFailure) as exc:
        await composer.combined_report(3, 2023)

    assert "statistics" in exc.value.message
    assert exc.value.error == "disk I/O error"
    assert isinstance(exc.value.__cause__, StoreUnavailable)
    assert slow_histogram.cancelled
    assert slow_categories.cancelled


@pytest.mark.asyncio
async def test_caller_cancellation_cancels_aggregators(store):
    """Test cancelling the composite call cancels every sub-task."""
    composer = ReportComposer(store)
    slow = [SlowAggregator() for _ in range(3)]
    composer.statistics = SimpleNamespace(statistics=slow[0].run)
    composer.histogram = SimpleNamespace(histogram=slow[1].run)
    composer.categories = SimpleNamespace(categories=slow[2].run)

    task = asyncio.create_task(composer.combined_report(3, 2023))
    for aggregator in slow:
        await aggregator.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert all(aggregator.cancelled for aggregator in slow)
