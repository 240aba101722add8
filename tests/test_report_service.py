from datetime import date

import pytest

from models.budget import StatementPeriod

REF = date(2025, 4, 10)


@pytest.fixture
def spending(tx_service, category_service, card):
    food = next(c for c in category_service.get_all() if c.name == "Food & Dining")
    tx_service.create(card.id, food.id, 50_000, "VND", "2025-03-01", "Dinner")
    tx_service.create(card.id, food.id, 100_000, "VND", "2025-04-01", "Lunch")
    tx_service.create(card.id, None, 300_000, "VND", "2025-04-05", "Shoes")
    return food


def test_category_totals_window(report_service, spending):
    totals = report_service.get_category_totals(days=30, reference=REF)
    assert [(t["category"], t["total"]) for t in totals] == [
        ("Uncategorized", 300_000),
        ("Food & Dining", 100_000),
    ]
    assert totals[1]["color_hex"] == spending.color_hex


def test_category_totals_all_time(report_service, spending):
    totals = report_service.get_category_totals(days=0, reference=REF)
    assert {t["category"]: t["total"] for t in totals} == {
        "Uncategorized": 300_000,
        "Food & Dining": 150_000,
    }


def test_monthly_trends(report_service, spending):
    trends = report_service.get_spending_trends("month")
    assert [(t["label"], t["amount"]) for t in trends] == [
        ("Mar 2025", 50_000),
        ("Apr 2025", 400_000),
    ]
    assert trends[0]["start"] == date(2025, 3, 1)
    assert trends[0]["end"] == date(2025, 4, 1)


def test_weekly_trends_start_on_monday(report_service, spending):
    trends = report_service.get_spending_trends("week")
    assert [t["start"] for t in trends] == [date(2025, 2, 24), date(2025, 3, 31)]
    assert trends[1]["label"] == "Wk Mar 31"
    assert trends[1]["amount"] == 400_000


def test_unknown_trend_view(report_service):
    with pytest.raises(ValueError):
        report_service.get_spending_trends("year")


def test_cycle_options(report_service, card_service):
    assert report_service.get_cycle_options(reference=REF) == []
    card = card_service.create("Visa", 15, 5)
    options = report_service.get_cycle_options(card.id, count=2, reference=REF)
    assert len(options) == 3
    assert options[0] == StatementPeriod(date(2025, 3, 15), date(2025, 4, 15))
    assert options[-1].start == date(2025, 1, 15)


def test_cycle_spending_and_transactions(report_service, spending, card):
    period = StatementPeriod(date(2025, 3, 15), date(2025, 4, 15))
    assert report_service.get_cycle_spending(period, card.id) == 400_000
    assert {t.description for t in report_service.get_cycle_transactions(period)} == {
        "Lunch", "Shoes",
    }


def test_dashboard_summary(report_service, spending):
    summary = report_service.get_dashboard_summary(REF)
    assert summary["this_month"] == 400_000
    assert summary["last_month"] == 50_000
    assert summary["change_pct"] == pytest.approx(700.0)
    assert summary["transaction_count"] == 2
    assert summary["top_category"] == "Uncategorized"
    assert summary["top_category_total"] == 300_000


def test_dashboard_summary_without_history(report_service):
    summary = report_service.get_dashboard_summary(REF)
    assert summary["change_pct"] is None
    assert summary["top_category"] is None


def test_export_rows_oldest_first(report_service, spending):
    rows = report_service.export_csv()
    assert rows[0][0] == "Date"
    assert [r[3] for r in rows[1:]] == ["Dinner", "Lunch", "Shoes"]
    assert rows[1] == [
        "2025-03-01", "Visa", "Food & Dining", "Dinner", "50000.00", "VND", "50000",
    ]
    assert rows[3][2] == ""
