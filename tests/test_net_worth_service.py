import pytest


def test_asset_converted_to_vnd(net_worth_service):
    asset = net_worth_service.create_asset("Wallet", "cash", 10, "USD")
    assert asset.vnd_amount == 250_000
    assert asset.original_currency == "USD"


def test_custom_type_requires_name(net_worth_service):
    with pytest.raises(ValueError):
        net_worth_service.create_asset("Gold", "custom", 1_000_000)
    asset = net_worth_service.create_asset("Gold", "custom", 1_000_000, custom_type="Gold")
    assert asset.display_type == "Gold"


@pytest.mark.parametrize("name, type_, amount, currency", [
    ("", "cash", 1, "VND"),
    ("Wallet", "bond", 1, "VND"),
    ("Wallet", "cash", -1, "VND"),
    ("Wallet", "cash", 1, "XYZ"),
])
def test_invalid_assets_rejected(net_worth_service, name, type_, amount, currency):
    with pytest.raises(ValueError):
        net_worth_service.create_asset(name, type_, amount, currency)


def test_update_and_delete_asset(net_worth_service):
    asset = net_worth_service.create_asset("Savings", "savings", 5_000_000, term_months=6)
    updated = net_worth_service.update_asset(asset.id, "Savings", "savings", 6_000_000)
    assert updated.vnd_amount == 6_000_000
    net_worth_service.delete_asset(asset.id)
    assert net_worth_service.get_assets() == []


def test_liability_with_card_needs_card(net_worth_service):
    with pytest.raises(ValueError):
        net_worth_service.create_liability("Visa debt", "credit_card", 0, include_credit_card=True)


def test_net_worth_includes_linked_card_balance(net_worth_service, tx_service, card):
    tx_service.create(card.id, None, 200_000, "VND", "2025-04-01")
    net_worth_service.create_asset("Savings", "savings", 5_000_000)
    net_worth_service.create_liability("Car loan", "loan", 1_000_000)
    liability = net_worth_service.create_liability(
        "Visa", "credit_card", 100_000, include_credit_card=True, credit_card_id=card.id,
    )
    assert net_worth_service.liability_total(liability) == 300_000

    totals = net_worth_service.calculate_net_worth()
    assert totals == {
        "total_assets": 5_000_000,
        "total_liabilities": 1_300_000,
        "net_worth": 3_700_000,
    }


def test_asset_allocation_groups_and_sorts(net_worth_service):
    net_worth_service.create_asset("Wallet", "cash", 100_000)
    net_worth_service.create_asset("Bank", "savings", 2_000_000)
    net_worth_service.create_asset("Pocket", "cash", 50_000)
    assert net_worth_service.get_asset_allocation() == [
        {"type": "savings", "amount": 2_000_000},
        {"type": "cash", "amount": 150_000},
    ]


def test_snapshots(net_worth_service):
    net_worth_service.create_asset("Bank", "savings", 2_000_000)
    snap = net_worth_service.take_snapshot("2025-04-30")
    assert snap.net_worth == 2_000_000

    net_worth_service.add_snapshot("2025-05-31", 3_000_000, 500_000)
    latest = net_worth_service.get_snapshots(limit=1)
    assert [s.date for s in latest] == ["2025-05-31"]
    assert latest[0].net_worth == 2_500_000

    edited = net_worth_service.update_snapshot(snap.id, "2025-04-30", 1_000_000, 0)
    assert edited.net_worth == 1_000_000
    net_worth_service.delete_snapshot(snap.id)
    assert len(net_worth_service.get_snapshots()) == 1


def test_invalid_snapshot_rejected(net_worth_service):
    with pytest.raises(ValueError):
        net_worth_service.add_snapshot("30/04/2025", 1, 0)
    with pytest.raises(ValueError):
        net_worth_service.add_snapshot("2025-04-30", -1, 0)


def test_recurring_income_is_replaced(net_worth_service):
    net_worth_service.set_recurring_income(30_000_000, "VND", 5)
    income = net_worth_service.set_recurring_income(1_000, "USD", 25, is_enabled=False)
    assert income.vnd_amount == 25_000_000
    assert income.day_of_month == 25
    assert not income.is_enabled
    assert net_worth_service.get_recurring_income() == income


@pytest.mark.parametrize("amount, currency, day", [
    (-1, "VND", 5), (1, "XYZ", 5), (1, "VND", 0), (1, "VND", 32),
])
def test_invalid_recurring_income(net_worth_service, amount, currency, day):
    with pytest.raises(ValueError):
        net_worth_service.set_recurring_income(amount, currency, day)


@pytest.mark.parametrize("amount", [float("nan"), float("inf")])
def test_non_finite_holdings_rejected(net_worth_service, amount):
    with pytest.raises(ValueError):
        net_worth_service.create_asset("Wallet", "cash", amount)
    with pytest.raises(ValueError):
        net_worth_service.create_liability("Loan", "loan", amount)
    with pytest.raises(ValueError):
        net_worth_service.set_recurring_income(amount, "VND", 5)
    with pytest.raises(ValueError):
        net_worth_service.add_snapshot("2025-04-30", amount, 0)
    assert net_worth_service.get_assets() == []
    assert net_worth_service.get_liabilities() == []
