from datetime import date

import pytest

from services.currency_service import CurrencyConversionError
from services.transaction_service import TransactionService


def _food(category_service):
    return next(c for c in category_service.get_all() if c.name == "Food & Dining")


def test_create_vnd_transaction(tx_service, category_service, card):
    food = _food(category_service)
    tx = tx_service.create(card.id, food.id, 120_000, "VND", "2025-04-01", "  Lunch ")
    assert tx.vnd_amount == 120_000
    assert tx.description == "Lunch"
    assert tx.card_name == "Visa"
    assert tx.category_name == "Food & Dining"


def test_foreign_amount_is_converted(tx_service, card):
    tx = tx_service.create(card.id, None, 10, "USD", "2025-04-01")
    assert tx.amount == 10
    assert tx.currency == "USD"
    assert tx.vnd_amount == 250_000


def test_conversion_failure_propagates(tx_service, card):
    with pytest.raises(CurrencyConversionError):
        tx_service.create(card.id, None, 10, "EUR", "2025-04-01")


@pytest.mark.parametrize("amount, currency, when", [
    (0, "VND", "2025-04-01"),
    (-5, "VND", "2025-04-01"),
    (10, "XYZ", "2025-04-01"),
    (10, "VND", "01/04/2025x"),
])
def test_invalid_input_rejected(tx_service, card, amount, currency, when):
    with pytest.raises(ValueError):
        tx_service.create(card.id, None, amount, currency, when)


def test_unknown_card_or_category_rejected(tx_service, card):
    with pytest.raises(ValueError, match="card"):
        tx_service.create(999, None, 10, "VND", "2025-04-01")
    with pytest.raises(ValueError, match="category"):
        tx_service.create(card.id, 999, 10, "VND", "2025-04-01")


def test_update_and_delete(tx_service, card):
    tx = tx_service.create(card.id, None, 10, "VND", "2025-04-01")
    updated = tx_service.update(tx.id, card.id, None, 20, "USD", "2025-04-02", "Book")
    assert updated.vnd_amount == 500_000
    assert updated.date == "2025-04-02"

    tx_service.delete(tx.id)
    assert tx_service.get_by_id(tx.id) is None
    with pytest.raises(ValueError):
        tx_service.update(tx.id, card.id, None, 20, "VND", "2025-04-02")


def test_filters(tx_service, card_service, category_service, card):
    other = card_service.create("Amex", 1, 20)
    food = _food(category_service)
    tx_service.create(card.id, food.id, 100, "VND", "2025-04-01", "Coffee")
    tx_service.create(other.id, None, 200, "VND", "2025-03-10", "Taxi")
    tx_service.create(card.id, None, 300, "VND", "2025-04-09", "Cinema")

    assert [t.description for t in tx_service.get_all()] == ["Cinema", "Coffee", "Taxi"]
    assert len(tx_service.get_all(card_id=other.id)) == 1
    assert [t.description for t in tx_service.get_all(category_id=food.id)] == ["Coffee"]
    assert [t.description for t in tx_service.get_all(search="taxi")] == ["Taxi"]
    this_month = tx_service.get_all(period="current-month", ref=date(2025, 4, 10))
    assert {t.description for t in this_month} == {"Coffee", "Cinema"}
    last_month = tx_service.get_all(period="last-month", ref=date(2025, 4, 10))
    assert [t.description for t in last_month] == ["Taxi"]


def test_group_by_month(tx_service, card):
    tx_service.create(card.id, None, 100, "VND", "2025-04-09")
    tx_service.create(card.id, None, 300, "VND", "2025-04-01")
    tx_service.create(card.id, None, 200, "VND", "2025-03-10")

    groups = TransactionService.group_by_month(tx_service.get_all())
    assert list(groups) == ["2025-04", "2025-03"]
    items, total = groups["2025-04"]
    assert len(items) == 2
    assert total == 400


def test_time_filter(tx_service, card):
    tx_service.create(card.id, None, 100, "VND", "2025-04-08", "This week")
    tx_service.create(card.id, None, 200, "VND", "2025-04-02", "This month")
    tx_service.create(card.id, None, 300, "VND", "2025-01-15", "This year")
    tx_service.create(card.id, None, 400, "VND", "2025-04-11", "Tomorrow")
    ref = date(2025, 4, 10)

    def described(time_filter):
        return {t.description for t in tx_service.get_by_time_filter(time_filter, ref)}

    assert described("week") == {"This week"}
    assert described("month") == {"This week", "This month"}
    assert described("year") == {"This week", "This month", "This year"}
    assert len(described("all")) == 4


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_amount_rejected(tx_service, card, amount):
    with pytest.raises(ValueError, match="positive"):
        tx_service.create(card.id, None, amount, "VND", "2025-04-01")
    assert tx_service.get_all() == []
