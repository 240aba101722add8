import logging
import math
from collections import OrderedDict
from datetime import date
from models.transaction import Transaction
from database.transaction_dao import TransactionDAO
from database.card_dao import CardDAO
from database.category_dao import CategoryDAO
from services.currency_service import CurrencyService, is_supported_currency
from utils.date_helpers import (
    date_range_for_period, format_date, format_month, time_filter_range, to_date,
)

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        card_dao: CardDAO,
        category_dao: CategoryDAO,
        currency_service: CurrencyService,
    ):
        self._dao = tx_dao
        self._card_dao = card_dao
        self._category_dao = category_dao
        self._currency = currency_service

    def get_all(
        self,
        period: str | None = None,
        card_id: int | None = None,
        category_id: int | None = None,
        search: str | None = None,
        ref: date | None = None,
    ) -> list[Transaction]:
        """Newest first. period is one of TRANSACTION_PERIODS or None for everything."""
        date_from = date_to = None
        if period:
            date_from, date_to = date_range_for_period(period, ref)
        return self._dao.get_all(date_from, date_to, card_id, category_id, search)

    def get_by_time_filter(self, time_filter: str, ref: date | None = None) -> list[Transaction]:
        """time_filter is one of TIME_FILTERS."""
        start, end = time_filter_range(time_filter, ref)
        if start is None:
            return self._dao.get_all()
        return self._dao.get_all(format_date(start), format_date(end))

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def create(
        self,
        card_id: int,
        category_id: int | None,
        amount: float,
        currency: str,
        date: str,
        description: str = "",
    ) -> Transaction:
        self._validate(card_id, category_id, amount, currency, date)
        vnd_amount = self._currency.convert_to_vnd(amount, currency)
        tx = self._dao.create(
            card_id=card_id,
            category_id=category_id,
            amount=amount,
            currency=currency,
            vnd_amount=vnd_amount,
            date=date,
            description=description.strip(),
        )
        logger.info("Recorded transaction %s: %s %s on card %s", tx.id, amount, currency, card_id)
        return tx

    def update(
        self,
        tx_id: int,
        card_id: int,
        category_id: int | None,
        amount: float,
        currency: str,
        date: str,
        description: str = "",
    ) -> Transaction:
        if self._dao.get_by_id(tx_id) is None:
            raise ValueError("Transaction not found.")
        self._validate(card_id, category_id, amount, currency, date)
        vnd_amount = self._currency.convert_to_vnd(amount, currency)
        return self._dao.update(
            tx_id, card_id, category_id, amount, currency, vnd_amount,
            date, description.strip(),
        )

    def delete(self, tx_id: int):
        self._dao.delete(tx_id)
        logger.info("Deleted transaction %s", tx_id)

    @staticmethod
    def group_by_month(
        transactions: list[Transaction],
    ) -> "OrderedDict[str, tuple[list[Transaction], float]]":
        """Group (already sorted) transactions by YYYY-MM with the month's VND total.

        Transactions with unreadable dates are collected under 'unknown'.
        """
        groups: OrderedDict[str, tuple[list[Transaction], float]] = OrderedDict()
        for tx in transactions:
            d = to_date(tx.date)
            key = format_month(d) if d else "unknown"
            items, total = groups.get(key, ([], 0.0))
            items.append(tx)
            groups[key] = (items, total + tx.vnd_amount)
        return groups

    def _validate(
        self, card_id: int, category_id: int | None, amount: float, currency: str, date: str
    ):
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError("Amount must be positive.")
        if not is_supported_currency(currency):
            raise ValueError(f"Unsupported currency: {currency}")
        if to_date(date) is None:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
        if self._card_dao.get_by_id(card_id) is None:
            raise ValueError("Please select a card.")
        if category_id is not None and self._category_dao.get_by_id(category_id) is None:
            raise ValueError("Please select a category.")
