"""Combined report: runs the three month-window aggregators concurrently."""
import asyncio
import logging
from typing import Any

from salesreport.errors import PartialAggregateFailure, ReportError
from salesreport.report.aggregates import (
    CategoryAggregator,
    HistogramAggregator,
    StatisticsAggregator,
)
from salesreport.report.models import CombinedReport
from salesreport.report.window import resolve_window
from salesreport.store.records import RecordStore

logger = logging.getLogger(__name__)


class ReportComposer:
    """Fans out statistics, histogram and categories for one window."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.statistics = StatisticsAggregator(store)
        self.histogram = HistogramAggregator(store)
        self.categories = CategoryAggregator(store)

    async def combined_report(self, month: Any, year: Any) -> CombinedReport:
        """Build the combined report for (month, year).

        The window is resolved once and shared. If any aggregator fails the
        others are cancelled and PartialAggregateFailure is raised; no partial
        report is ever returned. Cancelling the caller cancels all three.
        """
        window = resolve_window(month, year)

        tasks = {
            "statistics": asyncio.create_task(self.statistics.statistics(window)),
            "histogram": asyncio.create_task(self.histogram.histogram(window)),
            "categories": asyncio.create_task(self.categories.categories(window)),
        }
        try:
            statistics, histogram, categories = await asyncio.gather(*tasks.values())
        except asyncio.CancelledError:
            await _cancel_all(tasks.values())
            raise
        except Exception as e:
            await _cancel_all(tasks.values())
            failed = [
                name
                for name, task in tasks.items()
                if task.done() and not task.cancelled() and task.exception() is not None
            ]
            logger.error(f"Combined report for {window} failed in {failed}: {e}")
            detail = e.error if isinstance(e, ReportError) and e.error else str(e)
            raise PartialAggregateFailure(
                f"Error building combined report ({', '.join(failed) or 'unknown'} failed)",
                error=detail,
            ) from e

        return CombinedReport(
            statistics=statistics, histogram=histogram, categories=categories
        )


async def _cancel_all(tasks) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
