"""Tests for record filter compilation."""
from datetime import datetime, timedelta, timezone

import pytest

from salesreport.report.window import resolve_window
from salesreport.store.filters import (
    RecordFilter,
    column_for,
    contains_ci,
    to_date_key,
)


def test_empty_filter_matches_everything():
    """Test the empty filter."""
    assert RecordFilter().to_sql() == ("1", [])


def test_text_filter_skips_numeric_fields():
    """Test that price is never substring-matched."""
    where, params = RecordFilter(
        text="Lap", text_fields=("title", "description", "price")
    ).to_sql()
    assert "price" not in where
    assert where.count("contains_ci") == 2
    assert params == ["lap", "lap"]


def test_text_filter_on_numeric_fields_only_matches_nothing():
    """Test a text filter naming only numeric fields."""
    where, params = RecordFilter(text="100", text_fields=("price",)).to_sql()
    assert where == "0"
    assert params == []


def test_window_filter():
    """Test window bounds and sold flag."""
    flt = RecordFilter.for_window(resolve_window(3, 2023), sold=False)
    where, params = flt.to_sql()
    assert where == "date_of_sale >= ? AND date_of_sale <= ? AND sold = ?"
    assert params == ["2023-03-01T00:00:00", "2023-03-31T00:00:00", 0]


def test_column_for_unknown_field():
    """Test unknown fields are rejected."""
    assert column_for("dateOfSale") == "date_of_sale"
    with pytest.raises(ValueError):
        column_for("title; DROP TABLE sale_records")


def test_to_date_key_converts_to_utc():
    """Test timezone-aware datetimes are stored as naive UTC."""
    aware = datetime(2021, 11, 27, 20, 29, 54, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    assert to_date_key(aware) == "2021-11-27T14:59:54"
    assert to_date_key(datetime(2023, 3, 5)) == "2023-03-05T00:00:00"


def test_to_date_key_pads_early_years():
    """Test keys stay fixed width for years below 1000."""
    assert to_date_key(datetime(999, 3, 5, 7, 8, 9)) == "0999-03-05T07:08:09"
    assert to_date_key(datetime(5, 1, 1)) == "0005-01-01T00:00:00"


def test_contains_ci():
    """Test case-insensitive substring helper."""
    assert contains_ci("Laptop Pro", "lap") == 1
    assert contains_ci("ÉCRAN", "écran") == 1
    assert contains_ci("Phone", "lap") == 0
    assert contains_ci(None, "lap") == 0
