"""SQLite record store for sale records."""
import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Optional, Sequence

import aiosqlite

from salesreport.config import config
from salesreport.errors import StoreUnavailable
from salesreport.parse.models import SaleRecord
from salesreport.store.filters import RecordFilter, column_for, contains_ci, to_date_key

logger = logging.getLogger(__name__)

TABLE = "sale_records"
SELECT_COLUMNS = "id, title, description, image, price, sold, date_of_sale"


def _row_to_record(row: Sequence) -> SaleRecord:
    return SaleRecord(
        id=row[0],
        title=row[1],
        description=row[2],
        image=row[3],
        price=row[4],
        sold=bool(row[5]),
        date_of_sale=datetime.fromisoformat(row[6]),
    )


class RecordReader:
    """Read queries bound to one open connection."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def find(
        self, flt: RecordFilter, skip: int = 0, limit: Optional[int] = None
    ) -> list[SaleRecord]:
        """Matching records in insertion order, after skipping ``skip``."""
        where, params = flt.to_sql()
        cursor = await self.db.execute(
            f"SELECT {SELECT_COLUMNS} FROM {TABLE} WHERE {where} "
            f"ORDER BY id LIMIT ? OFFSET ?",
            (*params, -1 if limit is None else limit, skip),
        )
        return [_row_to_record(row) for row in await cursor.fetchall()]

    async def count(self, flt: RecordFilter) -> int:
        where, params = flt.to_sql()
        cursor = await self.db.execute(
            f"SELECT COUNT(*) FROM {TABLE} WHERE {where}", params
        )
        row = await cursor.fetchone()
        return row[0]

    async def sum(self, flt: RecordFilter, field: str) -> float:
        """Sum of a numeric field over matching records (0 when none)."""
        column = column_for(field)
        where, params = flt.to_sql()
        cursor = await self.db.execute(
            f"SELECT COALESCE(SUM({column}), 0) FROM {TABLE} WHERE {where}", params
        )
        row = await cursor.fetchone()
        return row[0]

    async def aggregate_bucket(
        self,
        flt: RecordFilter,
        group_field: str,
        boundaries: Sequence[float],
        default_label: str,
    ) -> list[dict]:
        """Count matching records per half-open [lower, upper) range.

        Values outside [boundaries[0], boundaries[-1]) land in
        ``default_label``. Only non-empty buckets are returned, each as
        ``{"_id": lower bound or default_label, "count": n}``, in boundary
        order with the default bucket last.
        """
        if len(boundaries) < 2 or list(boundaries) != sorted(set(boundaries)):
            raise ValueError("boundaries must be at least two ascending values")
        column = column_for(group_field)
        where, params = flt.to_sql()

        cases = []
        case_params: list = []
        for lower, upper in zip(boundaries, boundaries[1:]):
            cases.append(f"WHEN {column} >= ? AND {column} < ? THEN ?")
            case_params.extend([lower, upper, lower])
        case_params.append(default_label)

        cursor = await self.db.execute(
            f"SELECT CASE {' '.join(cases)} ELSE ? END AS bucket, COUNT(*) "
            f"FROM {TABLE} WHERE {where} GROUP BY bucket",
            (*case_params, *params),
        )
        counts = {row[0]: row[1] for row in await cursor.fetchall()}

        order = [*boundaries[:-1], default_label]
        return [{"_id": key, "count": counts[key]} for key in order if key in counts]

    async def aggregate_group(self, flt: RecordFilter, group_field: str) -> list[dict]:
        """Count matching records per distinct value of ``group_field``."""
        column = column_for(group_field)
        where, params = flt.to_sql()
        cursor = await self.db.execute(
            f"SELECT {column}, COUNT(*) FROM {TABLE} WHERE {where} "
            f"GROUP BY {column} ORDER BY {column}",
            params,
        )
        return [{"_id": row[0], "count": row[1]} for row in await cursor.fetchall()]


class RecordStore:
    """SQLite-backed collection of sale records.

    Every call opens its own connection; ``snapshot()`` holds one connection
    and a read transaction so that several queries see the same state.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or config.DB_PATH

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.create_function("contains_ci", 2, contains_ci, deterministic=True)
                yield db
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Record store error on {self.db_path}: {e}")
            raise StoreUnavailable("Record store query failed", error=str(e)) from e

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL")
            await db.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    image TEXT NOT NULL,
                    price REAL NOT NULL,
                    sold INTEGER NOT NULL,
                    date_of_sale TEXT NOT NULL
                )
                """
            )
            await db.execute(
                f"CREATE INDEX IF NOT EXISTS idx_date_of_sale ON {TABLE}(date_of_sale)"
            )
            await db.commit()
            logger.info(f"Record store initialized at {self.db_path}")

    async def insert_many(self, records: Sequence[SaleRecord], replace: bool = False) -> int:
        """Insert records in one transaction and return how many were written.

        With ``replace`` existing records are deleted in the same transaction,
        so a failed insert leaves the previous contents in place.
        """
        if not records and not replace:
            return 0
        rows = [
            (r.title, r.description, r.image, r.price, int(r.sold), to_date_key(r.date_of_sale))
            for r in records
        ]
        async with self._connect() as db:
            try:
                if replace:
                    cursor = await db.execute(f"DELETE FROM {TABLE}")
                    logger.info(f"Replacing {cursor.rowcount} existing records")
                await db.executemany(
                    f"INSERT INTO {TABLE} (title, description, image, price, sold, date_of_sale) "
                    f"VALUES (?, ?, ?, ?, ?, ?)",
                    rows,
                )
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise
        logger.info(f"Inserted {len(rows)} records")
        return len(rows)

    async def find(
        self, flt: RecordFilter, skip: int = 0, limit: Optional[int] = None
    ) -> list[SaleRecord]:
        async with self._connect() as db:
            return await RecordReader(db).find(flt, skip, limit)

    async def count(self, flt: RecordFilter) -> int:
        async with self._connect() as db:
            return await RecordReader(db).count(flt)

    async def sum(self, flt: RecordFilter, field: str) -> float:
        async with self._connect() as db:
            return await RecordReader(db).sum(flt, field)

    async def aggregate_bucket(
        self,
        flt: RecordFilter,
        group_field: str,
        boundaries: Sequence[float],
        default_label: str,
    ) -> list[dict]:
        async with self._connect() as db:
            return await RecordReader(db).aggregate_bucket(
                flt, group_field, boundaries, default_label
            )

    async def aggregate_group(self, flt: RecordFilter, group_field: str) -> list[dict]:
        async with self._connect() as db:
            return await RecordReader(db).aggregate_group(flt, group_field)

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[RecordReader]:
        """Yield a reader whose queries share one read transaction."""
        async with self._connect() as db:
            await db.execute("BEGIN")
            try:
                yield RecordReader(db)
            finally:
                await db.rollback()

    async def test_connection(self) -> bool:
        """Check that the store answers a trivial query."""
        try:
            async with self._connect() as db:
                await db.execute(f"SELECT 1 FROM {TABLE} LIMIT 1")
            return True
        except StoreUnavailable as e:
            logger.error(f"Record store connection test failed: {e.error}")
            return False
