from datetime import date

import pytest


def test_create_and_list(card_service):
    card = card_service.create("  Visa Gold ", 20, 10)
    assert card.name == "Visa Gold"
    assert card.statement_day == 20
    assert [c.name for c in card_service.get_all()] == ["Visa Gold"]


def test_duplicate_name_rejected(card_service, card):
    with pytest.raises(ValueError, match="already exists"):
        card_service.create("Visa", 1, 1)


@pytest.mark.parametrize("statement_day, due_day", [(0, 5), (32, 5), (15, 0), (15, 40)])
def test_days_must_be_in_range(card_service, statement_day, due_day):
    with pytest.raises(ValueError):
        card_service.create("Master", statement_day, due_day)


def test_day_must_be_int(card_service):
    with pytest.raises(ValueError, match="whole number"):
        card_service.create("Master", "15", 5)


def test_update_keeps_own_name(card_service, card):
    updated = card_service.update(card.id, "Visa", 31, 25)
    assert updated.statement_day == 31


def test_update_to_other_cards_name_rejected(card_service, card):
    other = card_service.create("Amex", 1, 20)
    with pytest.raises(ValueError):
        card_service.update(other.id, "Visa", 1, 20)


def test_delete_blocked_while_transactions_exist(card_service, tx_service, card):
    tx = tx_service.create(card.id, None, 100_000, "VND", "2025-04-01")
    with pytest.raises(ValueError, match="existing transactions"):
        card_service.delete(card.id)
    tx_service.delete(tx.id)
    card_service.delete(card.id)
    assert card_service.get_all() == []


def test_current_cycle_and_balances(card_service, tx_service, card):
    tx_service.create(card.id, None, 850_000, "VND", "2025-03-20")
    tx_service.create(card.id, None, 50_000, "VND", "2025-04-16")

    period, spent = card_service.get_current_cycle(card.id, reference=date(2025, 4, 10))
    assert period.start == date(2025, 3, 15)
    assert period.end == date(2025, 4, 15)
    assert spent == 850_000

    assert card_service.get_balance(card.id) == 900_000
    assert card_service.get_balances() == {card.id: 900_000}


def test_current_cycle_for_missing_card(card_service):
    with pytest.raises(ValueError):
        card_service.get_current_cycle(999)
