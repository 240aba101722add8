from datetime import date, timedelta
from database.transaction_dao import TransactionDAO
from database.card_dao import CardDAO
from database.category_dao import CategoryDAO
from models.budget import StatementPeriod
from models.transaction import Transaction
from services import statement_cycle
from utils.constants import CATEGORY_COLORS, PAST_CYCLE_COUNT
from utils.date_helpers import (
    add_months, date_range_for_period, short_date, to_date, today, week_start,
)

TREND_VIEWS = ("day", "week", "month")
UNCATEGORIZED = "Uncategorized"


def _vnd(tx) -> float:
    return tx.vnd_amount


class ReportService:
    def __init__(self, tx_dao: TransactionDAO, card_dao: CardDAO, category_dao: CategoryDAO):
        self._tx_dao = tx_dao
        self._card_dao = card_dao
        self._category_dao = category_dao

    def get_category_totals(self, days: int = 30, reference: date | None = None) -> list[dict]:
        """Return [{category, color_hex, total}, ...] largest first, for the pie chart.

        days=0 covers all time; otherwise the window is the last `days` days up to reference.
        """
        ref = reference or today()
        cutoff = ref - timedelta(days=days) if days else None
        colors = {c.name: c.color_hex for c in self._category_dao.get_all()}

        totals: dict[str, float] = {}
        for d, tx in self._dated(self._tx_dao.get_all()):
            if d > ref or (cutoff and d < cutoff):
                continue
            name = tx.category_name or UNCATEGORIZED
            totals[name] = totals.get(name, 0.0) + tx.vnd_amount

        rows = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return [
            {
                "category": name,
                "color_hex": colors.get(name) or CATEGORY_COLORS[i % len(CATEGORY_COLORS)],
                "total": total,
            }
            for i, (name, total) in enumerate(rows)
        ]

    def get_spending_trends(
        self, view: str = "month", transactions: list[Transaction] | None = None
    ) -> list[dict]:
        """Return [{label, start, end, amount}, ...] in chronological order.

        Buckets are half-open [start, end) and only buckets with spending appear.
        """
        if view not in TREND_VIEWS:
            raise ValueError(f"Unknown trend view: {view}")
        if transactions is None:
            transactions = self._tx_dao.get_all()

        buckets: dict[date, float] = {}
        for d, tx in self._dated(transactions):
            if view == "day":
                key = d
            elif view == "week":
                key = week_start(d)
            else:
                key = d.replace(day=1)
            buckets[key] = buckets.get(key, 0.0) + tx.vnd_amount

        trends = []
        for start in sorted(buckets):
            if view == "day":
                end, label = start + timedelta(days=1), short_date(start)
            elif view == "week":
                end, label = start + timedelta(days=7), f"Wk {short_date(start)}"
            else:
                end, label = add_months(start, 1), start.strftime("%b %Y")
            trends.append({"label": label, "start": start, "end": end, "amount": buckets[start]})
        return trends

    def get_cycle_options(
        self,
        card_id: int | None = None,
        count: int = PAST_CYCLE_COUNT,
        reference: date | None = None,
    ) -> list[StatementPeriod]:
        """Current statement period plus `count` past ones, newest first.

        Without a card, the first card's statement day drives the cycle.
        """
        if card_id is not None:
            card = self._card_dao.get_by_id(card_id)
        else:
            cards = self._card_dao.get_all()
            card = cards[0] if cards else None
        if card is None:
            return []
        return statement_cycle.recent_periods(reference or today(), card.statement_day, count)

    def get_cycle_spending(self, period: StatementPeriod, card_id: int | None = None) -> float:
        transactions = self._tx_dao.get_all(card_id=card_id)
        return statement_cycle.spend_in_period(period, transactions, amount=_vnd)

    def get_cycle_transactions(
        self, period: StatementPeriod, card_id: int | None = None
    ) -> list[Transaction]:
        transactions = self._tx_dao.get_all(card_id=card_id)
        return [tx for d, tx in self._dated(transactions) if period.contains(d)]

    def get_dashboard_summary(self, reference: date | None = None) -> dict:
        ref = reference or today()
        this_start = ref.replace(day=1)
        last_start = add_months(this_start, -1)

        this_month = last_month = 0.0
        count = 0
        by_category: dict[str, float] = {}
        for d, tx in self._dated(self._tx_dao.get_all()):
            if this_start <= d <= ref:
                this_month += tx.vnd_amount
                count += 1
                name = tx.category_name or UNCATEGORIZED
                by_category[name] = by_category.get(name, 0.0) + tx.vnd_amount
            elif last_start <= d < this_start:
                last_month += tx.vnd_amount

        change_pct = None
        if last_month:
            change_pct = (this_month - last_month) / last_month * 100
        top = max(by_category.items(), key=lambda item: item[1]) if by_category else None
        return {
            "this_month": this_month,
            "last_month": last_month,
            "change_pct": change_pct,
            "transaction_count": count,
            "top_category": top[0] if top else None,
            "top_category_total": top[1] if top else 0.0,
        }

    def export_csv(self, period: str | None = None) -> list[list[str]]:
        """Return rows suitable for CSV export, oldest first."""
        date_from = date_to = None
        if period:
            date_from, date_to = date_range_for_period(period)
        transactions = self._tx_dao.get_all(date_from, date_to)
        transactions.sort(key=lambda t: (t.date, t.id))

        header = ["Date", "Card", "Category", "Description", "Amount", "Currency", "Amount (VND)"]
        rows = [header]
        for tx in transactions:
            rows.append([
                tx.date,
                tx.card_name,
                tx.category_name or "",
                tx.description,
                f"{tx.amount:.2f}",
                tx.currency,
                f"{tx.vnd_amount:.0f}",
            ])
        return rows

    @staticmethod
    def _dated(transactions):
        """Yield (day, transaction), leaving out records whose date cannot be read."""
        for tx in transactions:
            d = to_date(tx.date)
            if d is not None:
                yield d, tx
