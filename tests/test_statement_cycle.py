from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pytest

from models.budget import StatementPeriod
from services.statement_cycle import (
    classify,
    compute_budget_status,
    cumulative_progress,
    previous_period,
    recent_periods,
    spend_in_period,
    statement_period,
)
from utils.date_helpers import add_months, clamp_day_to_month, shift_month


@dataclass
class Tx:
    date: object
    amount: float
    id: int = 0


def test_period_starts_in_previous_month_before_anchor():
    period = statement_period(date(2025, 4, 10), 15)
    assert period == StatementPeriod(date(2025, 3, 15), date(2025, 4, 15))


def test_period_starts_on_anchor_day():
    period = statement_period(date(2025, 4, 15), 15)
    assert period.start == date(2025, 4, 15)
    assert period.end == date(2025, 5, 15)


def test_datetime_reference_uses_calendar_day():
    period = statement_period(datetime(2025, 4, 10, 23, 59), 15)
    assert period.start == date(2025, 3, 15)


def test_anchor_clamps_to_end_of_february():
    period = statement_period(date(2025, 2, 28), 31)
    assert period.start == date(2025, 2, 28)
    assert period.end == date(2025, 3, 31)

    leap = statement_period(date(2024, 2, 29), 31)
    assert leap.start == date(2024, 2, 29)


def test_anchor_clamp_before_short_month_day():
    period = statement_period(date(2025, 3, 10), 31)
    assert period == StatementPeriod(date(2025, 2, 28), date(2025, 3, 31))


def test_period_crosses_year_boundary():
    period = statement_period(date(2025, 1, 5), 20)
    assert period == StatementPeriod(date(2024, 12, 20), date(2025, 1, 20))


def test_invalid_anchor_rejected():
    with pytest.raises(ValueError):
        statement_period(date(2025, 4, 10), 0)
    with pytest.raises(ValueError):
        statement_period(date(2025, 4, 10), 32)


def test_period_is_half_open():
    period = StatementPeriod(date(2025, 3, 15), date(2025, 4, 15))
    assert period.contains(date(2025, 3, 15))
    assert period.contains(date(2025, 4, 14))
    assert not period.contains(date(2025, 4, 15))


def test_previous_and_recent_periods_are_contiguous():
    current = statement_period(date(2025, 4, 10), 15)
    prev = previous_period(current, 15)
    assert prev == StatementPeriod(date(2025, 2, 15), date(2025, 3, 15))

    periods = recent_periods(date(2025, 4, 10), 15, 3)
    assert len(periods) == 4
    assert periods[0] == current
    for newer, older in zip(periods, periods[1:]):
        assert older.end == newer.start


def test_spend_counts_only_transactions_in_period():
    period = statement_period(date(2025, 4, 10), 15)
    txs = [
        Tx("2025-03-20", 850_000),
        Tx("2025-04-16", 100_000),
        Tx("2025-03-14", 5_000),
        Tx("2025-04-15T08:30:00", 7_000),
    ]
    assert spend_in_period(period, txs) == 850_000


def test_malformed_dates_are_skipped():
    period = statement_period(date(2025, 4, 10), 15)
    txs = [Tx("2025-03-20", 100.0), Tx("not a date", 999.0, id=7), Tx(None, 1.0)]
    assert spend_in_period(period, txs) == 100.0


def test_custom_amount_getter():
    period = statement_period(date(2025, 4, 10), 15)
    txs = [Tx("2025-03-20", 10.0)]
    assert spend_in_period(period, txs, amount=lambda t: t.amount * 2) == 20.0


@pytest.mark.parametrize("spent, expected", [
    (1_000_000, "exceeded"),
    (1_200_000, "exceeded"),
    (750_000, "warning"),
    (749_999, "on_track"),
    (0, "on_track"),
])
def test_status_boundaries(spent, expected):
    txs = [Tx("2025-04-01", spent)] if spent else []
    status = compute_budget_status(date(2025, 4, 10), 15, 1_000_000, txs)
    assert status.status == expected


def test_status_fields():
    status = compute_budget_status(
        date(2025, 4, 10), 15, 1_000_000, [Tx("2025-03-20", 850_000)]
    )
    assert status.current_spending == 850_000
    assert status.remaining_amount == 150_000
    assert status.percentage_used == pytest.approx(85.0)
    assert status.statement_period.start == date(2025, 3, 15)


def test_overspend_gives_negative_remaining():
    status = compute_budget_status(
        date(2025, 4, 10), 15, 1_000_000, [Tx("2025-04-01", 1_250_000)]
    )
    assert status.remaining_amount == -250_000
    assert status.percentage_used == pytest.approx(125.0)


@pytest.mark.parametrize("threshold", [0, -5])
def test_non_positive_threshold_disables_status(threshold):
    assert compute_budget_status(date(2025, 4, 10), 15, threshold, [Tx("2025-04-01", 10)]) is None


def test_more_spending_never_lowers_usage():
    order = ["on_track", "warning", "exceeded"]
    amounts = [0.01, 120_000, 0, 333_333, 5, 90_000, 250_000, 1, 400_000]
    txs = []
    last_pct = 0.0
    last_rank = 0
    for i, amount in enumerate(amounts):
        txs.append(Tx(f"2025-04-{i + 1:02d}", amount))
        # Outside the period; must not move the figures
        txs.append(Tx("2025-04-20", 500_000))
        status = compute_budget_status(date(2025, 4, 10), 15, 1_000_000, txs)
        assert status.percentage_used >= last_pct
        rank = order.index(status.status)
        assert rank >= last_rank
        last_pct, last_rank = status.percentage_used, rank
    assert last_rank == 2


def test_classify():
    assert classify(74.99) == "on_track"
    assert classify(75) == "warning"
    assert classify(100) == "exceeded"


def test_cumulative_progress():
    txs = [Tx("2025-04-01", 100), Tx("2025-04-05", 200), Tx("2025-04-09", 700)]
    assert cumulative_progress("2025-04-05", 1000, txs) == 30
    assert cumulative_progress("2025-04-09", 1000, txs) == 100
    assert cumulative_progress("2025-04-05", 0, txs) == 0
    assert cumulative_progress("garbage", 1000, txs) == 0


def _days(first: date, last: date):
    d = first
    while d <= last:
        yield d
        d += timedelta(days=1)


@pytest.mark.parametrize("anchor_day", range(1, 32))
def test_period_always_contains_reference_and_spans_one_month(anchor_day):
    for ref in _days(date(2023, 1, 1), date(2025, 12, 31)):
        period = statement_period(ref, anchor_day)
        assert period.start <= ref < period.end
        assert period.contains(ref)

        year, month = shift_month(period.start.year, period.start.month, 1)
        assert period.end == date(year, month, clamp_day_to_month(year, month, anchor_day))
        assert period.start.day == clamp_day_to_month(
            period.start.year, period.start.month, anchor_day
        )
        if anchor_day <= 28:
            assert period.start.day == anchor_day
            assert add_months(period.start, 1) == period.end
