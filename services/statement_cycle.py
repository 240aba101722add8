"""Statement cycle arithmetic and budget status derivation.

Everything here is a pure function of its arguments. A statement period is
the half-open window [start, end) that begins on a card's anchor day and
runs for one calendar month. Anchor days past the end of a short month are
clamped to that month's last day, so anchor 31 yields Feb 28/29.
"""
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime

from models.budget import BudgetStatus, StatementPeriod
from models.card import MIN_CYCLE_DAY, MAX_CYCLE_DAY
from utils.constants import BUDGET_EXCEEDED_PCT, BUDGET_WARNING_PCT
from utils.date_helpers import clamp_day_to_month, shift_month, to_date

logger = logging.getLogger(__name__)


def _default_amount(tx) -> float:
    return tx.amount


def _anchored(year: int, month: int, anchor_day: int) -> date:
    return date(year, month, clamp_day_to_month(year, month, anchor_day))


def _check_anchor(anchor_day: int):
    if not MIN_CYCLE_DAY <= anchor_day <= MAX_CYCLE_DAY:
        raise ValueError(
            f"Anchor day must be between {MIN_CYCLE_DAY} and {MAX_CYCLE_DAY}, got {anchor_day}."
        )


def statement_period(reference: date | datetime, anchor_day: int) -> StatementPeriod:
    """Return the statement period containing reference for the given anchor day."""
    _check_anchor(anchor_day)
    ref = to_date(reference)
    start = _anchored(ref.year, ref.month, anchor_day)
    if ref.day < start.day:
        year, month = shift_month(ref.year, ref.month, -1)
        start = _anchored(year, month, anchor_day)
    year, month = shift_month(start.year, start.month, 1)
    return StatementPeriod(start=start, end=_anchored(year, month, anchor_day))


def previous_period(period: StatementPeriod, anchor_day: int) -> StatementPeriod:
    """Return the statement period immediately before period."""
    _check_anchor(anchor_day)
    year, month = shift_month(period.start.year, period.start.month, -1)
    return StatementPeriod(start=_anchored(year, month, anchor_day), end=period.start)


def recent_periods(
    reference: date | datetime, anchor_day: int, count: int
) -> list[StatementPeriod]:
    """Current period followed by `count` earlier periods, newest first."""
    period = statement_period(reference, anchor_day)
    periods = [period]
    for _ in range(count):
        period = previous_period(period, anchor_day)
        periods.append(period)
    return periods


def _dated(transactions: Iterable, amount: Callable) -> Iterable[tuple[date, float]]:
    """Yield (day, amount) pairs, skipping records whose date cannot be read."""
    for tx in transactions:
        d = to_date(getattr(tx, "date", None))
        if d is None:
            logger.warning(
                "Skipping transaction %s with malformed date %r",
                getattr(tx, "id", "?"), getattr(tx, "date", None),
            )
            continue
        yield d, amount(tx)


def spend_in_period(
    period: StatementPeriod,
    transactions: Iterable,
    amount: Callable = _default_amount,
) -> float:
    """Sum the amounts of transactions dated inside period."""
    return sum(
        (value for d, value in _dated(transactions, amount) if period.contains(d)),
        0.0,
    )


def classify(percentage_used: float) -> str:
    if percentage_used >= BUDGET_EXCEEDED_PCT:
        return "exceeded"
    if percentage_used >= BUDGET_WARNING_PCT:
        return "warning"
    return "on_track"


def compute_budget_status(
    reference: date | datetime,
    anchor_day: int,
    threshold: float,
    transactions: Iterable,
    amount: Callable = _default_amount,
) -> BudgetStatus | None:
    """Derive the budget status for the period containing reference.

    Returns None when threshold is zero or negative (budgeting disabled).
    """
    if threshold <= 0:
        return None
    period = statement_period(reference, anchor_day)
    spent = spend_in_period(period, transactions, amount)
    pct = spent / threshold * 100
    return BudgetStatus(
        current_spending=spent,
        remaining_amount=threshold - spent,
        percentage_used=pct,
        statement_period=period,
        status=classify(pct),
    )


def cumulative_progress(
    as_of: date | datetime | str,
    threshold: float,
    transactions: Iterable,
    amount: Callable = _default_amount,
) -> int:
    """Rounded percentage of threshold used by everything dated on or before as_of."""
    cutoff = to_date(as_of)
    if threshold <= 0 or cutoff is None:
        return 0
    spent = sum(
        (value for d, value in _dated(transactions, amount) if d <= cutoff),
        0.0,
    )
    return round(spent / threshold * 100)
