"""Tests for month window resolution."""
import pytest

from salesreport.errors import InvalidWindow
from salesreport.report.window import resolve_window


def test_resolve_window_string_inputs():
    """Test zero-padded string month."""
    window = resolve_window("03", "2023")
    assert window.month == 3
    assert window.year == 2023
    assert window.bounds() == ("2023-03-01T00:00:00", "2023-03-31T00:00:00")


def test_resolve_window_int_inputs():
    """Test plain integers."""
    window = resolve_window(11, 2021)
    assert window.start == "2021-11-01T00:00:00"
    assert str(window) == "2021-11"


def test_end_day_is_literally_31_for_every_month():
    """Test that the end bound is day 31 even for short months."""
    for month in range(1, 13):
        window = resolve_window(month, 2023)
        assert window.start_date.day == 1
        assert window.end_day == 31
        assert window.end[8:10] == "31"


def test_february_end_is_not_clamped():
    """Test the February bound keeps the literal day 31."""
    window = resolve_window("2", "2024")
    assert window.end == "2024-02-31T00:00:00"


@pytest.mark.parametrize(
    "month,year",
    [(None, "2023"), ("3", None), ("", "2023"), ("3", "  ")],
)
def test_missing_month_or_year(month, year):
    """Test missing parts."""
    with pytest.raises(InvalidWindow) as exc:
        resolve_window(month, year)
    assert exc.value.message == "Month and year are required"


@pytest.mark.parametrize(
    "month,year",
    [("march", "2023"), ("3", "twenty"), ("3.5", "2023"), (True, 2023)],
)
def test_non_numeric_month_or_year(month, year):
    """Test non-numeric parts."""
    with pytest.raises(InvalidWindow):
        resolve_window(month, year)


@pytest.mark.parametrize("month", [0, 13, "-1"])
def test_month_out_of_range(month):
    """Test months outside 1-12."""
    with pytest.raises(InvalidWindow):
        resolve_window(month, 2023)
