"""Shared fixtures: a temporary record store and record builders."""
from datetime import datetime

import pytest
import pytest_asyncio

from salesreport.parse.models import SaleRecord
from salesreport.store.records import RecordStore


def _make_record(
    title: str = "Laptop",
    price: float = 100.0,
    sold: bool = True,
    date: str = "2023-03-05T10:00:00",
    description: str = "A product",
    image: str = "https://example.com/img.jpg",
) -> SaleRecord:
    return SaleRecord(
        title=title,
        description=description,
        image=image,
        price=price,
        sold=sold,
        date_of_sale=datetime.fromisoformat(date),
    )


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def scenario_records():
    """Two March 2023 records for "A" and one February record for "B"."""
    return [
        _make_record(title="A", price=150, sold=True, date="2023-03-05T00:00:00"),
        _make_record(title="A", price=950, sold=False, date="2023-03-20T00:00:00"),
        _make_record(title="B", price=50, sold=True, date="2023-02-15T00:00:00"),
    ]


@pytest_asyncio.fixture
async def store(tmp_path):
    record_store = RecordStore(tmp_path / "sales.db")
    await record_store.initialize()
    return record_store


@pytest_asyncio.fixture
async def scenario_store(store, scenario_records):
    await store.insert_many(scenario_records)
    return store
