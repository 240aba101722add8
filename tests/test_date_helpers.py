from datetime import date, datetime

import pytest

from utils.date_helpers import (
    add_months,
    clamp_day_to_month,
    date_range_for_period,
    format_display_date,
    parse_display_date,
    shift_month,
    time_filter_range,
    to_date,
    week_start,
)


def test_to_date_accepts_common_shapes():
    assert to_date("2025-04-10") == date(2025, 4, 10)
    assert to_date("2025-04-10T08:15:00Z") == date(2025, 4, 10)
    assert to_date(datetime(2025, 4, 10, 8)) == date(2025, 4, 10)
    assert to_date("") is None
    assert to_date("April") is None
    assert to_date(None) is None


def test_month_arithmetic():
    assert clamp_day_to_month(2024, 2, 31) == 29
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 11, 3) == (2026, 2)
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)


def test_week_starts_monday():
    assert week_start(date(2025, 4, 10)) == date(2025, 4, 7)


@pytest.mark.parametrize("period, expected", [
    ("today", ("2025-04-10", "2025-04-10")),
    ("current-week", ("2025-04-07", "2025-04-13")),
    ("current-month", ("2025-04-01", "2025-04-30")),
    ("last-month", ("2025-03-01", "2025-03-31")),
    ("last-3-months", ("2025-01-01", "2025-03-31")),
])
def test_named_periods(period, expected):
    assert date_range_for_period(period, date(2025, 4, 10)) == expected


def test_unknown_period():
    with pytest.raises(ValueError):
        date_range_for_period("fortnight", date(2025, 4, 10))


def test_display_formats():
    assert format_display_date("2025-04-10", "DD/MM/YYYY") == "10/04/2025"
    assert parse_display_date("10/04/2025", "DD/MM/YYYY") == date(2025, 4, 10)
    assert parse_display_date("2025-04-10", "DD/MM/YYYY") == date(2025, 4, 10)
    assert parse_display_date("31/31/2025", "DD/MM/YYYY") is None


def test_time_filters():
    ref = date(2025, 4, 10)
    assert time_filter_range("all", ref) == (None, None)
    assert time_filter_range("week", ref) == (date(2025, 4, 7), ref)
    assert time_filter_range("year", ref) == (date(2025, 1, 1), ref)
    with pytest.raises(ValueError):
        time_filter_range("decade", ref)
