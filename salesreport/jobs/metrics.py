"""Counters for a bulk import run."""
import time
import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class ImportMetrics:
    """Track processed items and defaulted fields during an import."""

    def __init__(self, source: str):
        self.source = source
        self.start_time = time.time()
        self.counters: Dict[str, int] = defaultdict(int)
        self.defaulted: Dict[str, int] = defaultdict(int)

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] += amount

    def record_defaults(self, fields: list[str]) -> None:
        """Count one item's defaulted fields."""
        if fields:
            self.increment("defaulted_items")
        for field in fields:
            self.defaulted[field] += 1

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def report(self) -> None:
        """Log the import summary."""
        processed = self.counters.get("processed", 0)
        logger.info(
            f"Import from {self.source}: "
            f"processed {processed} | "
            f"inserted {self.counters.get('inserted', 0)} | "
            f"with defaults {self.counters.get('defaulted_items', 0)} | "
            f"skipped {self.counters.get('skipped', 0)} | "
            f"{self.elapsed():.2f}s"
        )
        if self.defaulted:
            logger.info(f"Defaulted fields: {dict(self.defaulted)}")

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        return {
            "source": self.source,
            "processed": self.counters.get("processed", 0),
            "inserted": self.counters.get("inserted", 0),
            "skipped": self.counters.get("skipped", 0),
            "defaulted": dict(self.defaulted),
            "elapsed_seconds": self.elapsed(),
        }
