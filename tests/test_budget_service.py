from datetime import date

import pytest


def test_no_budget_means_no_status(budget_service):
    assert budget_service.get_budget() is None
    assert budget_service.get_budget_status() is None


def test_enabled_budget_needs_a_card(budget_service):
    with pytest.raises(ValueError):
        budget_service.save_budget(True, 1_000_000, None)
    with pytest.raises(ValueError):
        budget_service.save_budget(True, 1_000_000, 999)


def test_negative_amount_rejected(budget_service, card):
    with pytest.raises(ValueError):
        budget_service.save_budget(True, -1, card.id)


def test_save_updates_single_row(budget_service, card):
    first = budget_service.save_budget(True, 1_000_000, card.id)
    second = budget_service.save_budget(True, 2_000_000, card.id)
    assert first.id == second.id
    assert budget_service.get_budget().monthly_amount == 2_000_000


def test_status_follows_card_cycle(budget_service, tx_service, card):
    budget_service.save_budget(True, 1_000_000, card.id)
    tx_service.create(card.id, None, 850_000, "VND", "2025-03-20")
    tx_service.create(card.id, None, 300_000, "VND", "2025-04-16")

    status = budget_service.get_budget_status(date(2025, 4, 10))
    assert status.current_spending == 850_000
    assert status.status == "warning"
    assert status.statement_period.start == date(2025, 3, 15)


def test_status_uses_converted_amounts(budget_service, tx_service, card):
    budget_service.save_budget(True, 1_000_000, card.id)
    tx_service.create(card.id, None, 40, "USD", "2025-04-01")
    status = budget_service.get_budget_status(date(2025, 4, 10))
    assert status.current_spending == 1_000_000
    assert status.status == "exceeded"


def test_disabled_or_zero_budget_has_no_status(budget_service, tx_service, card):
    tx_service.create(card.id, None, 850_000, "VND", "2025-04-01")
    budget_service.save_budget(False, 1_000_000, card.id)
    assert budget_service.get_budget_status(date(2025, 4, 10)) is None
    budget_service.save_budget(True, 0, card.id)
    assert budget_service.get_budget_status(date(2025, 4, 10)) is None


def test_clear_budget(budget_service, card):
    budget_service.save_budget(True, 1_000_000, card.id)
    budget_service.clear_budget()
    assert budget_service.get_budget() is None


def test_transaction_progress(budget_service, tx_service, card):
    budget_service.save_budget(True, 1_000_000, card.id)
    tx_service.create(card.id, None, 250_000, "VND", "2025-04-01")
    tx_service.create(card.id, None, 500_000, "VND", "2025-04-05")
    assert budget_service.get_transaction_budget_progress("2025-04-01") == 25
    assert budget_service.get_transaction_budget_progress("2025-04-05") == 75


@pytest.mark.parametrize("amount", [float("nan"), float("inf")])
def test_non_finite_budget_rejected(budget_service, card, amount):
    with pytest.raises(ValueError):
        budget_service.save_budget(True, amount, card.id)
    assert budget_service.get_budget() is None
