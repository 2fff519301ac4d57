from __future__ import annotations

from datetime import date, datetime

import pytest

from zenspend import models
from zenspend.services import budget_service as bs

TODAY = date(2025, 3, 13)  # Thursday; week is 03-10..03-16


def _cat(cid, budget, period=models.BudgetPeriod.WEEKLY, name=None):
    return models.Category(id=cid, name=name or cid.title(), weekly_budget=budget, period=period, color="#10b981")


def _tx(day, amount, category_id=None, type=models.TxnType.EXPENSE, is_fixed=False):
    return models.Transaction(
        date=day, amount=amount, category_id=category_id, description="t", type=type, is_fixed=is_fixed,
    )


def _settings(**overrides):
    values = dict(
        monthly_income=8000,
        currency="$",
        show_fixed_costs=True,
        checking_balance=0,
        credit_card_balance=0,
        balance_as_of=datetime(2025, 3, 1, 9, 0),
    )
    values.update(overrides)
    return models.UserSettings(id=models.SETTINGS_ID, **values)


def test_category_spending_uses_period_windows():
    groceries = _cat("groceries", 100)
    buffer = _cat("buffer", 300, period=models.BudgetPeriod.MONTHLY)
    txs = [
        _tx(date(2025, 3, 9), 50, "groceries"),  # previous week
        _tx(date(2025, 3, 10), 30, "groceries"),
        _tx(date(2025, 3, 16), 20, "groceries"),
        _tx(date(2025, 3, 12), 99, "groceries", type=models.TxnType.INCOME),
        _tx(date(2025, 3, 1), 400, "buffer"),
    ]

    items = {i.category_id: i for i in bs.category_spending([groceries, buffer], txs, TODAY)}

    g = items["groceries"]
    assert (g.range_start, g.range_end) == (date(2025, 3, 10), date(2025, 3, 16))
    assert g.spent == 50
    assert g.remaining == 50
    assert g.percentage == 50
    assert g.is_over is False

    b = items["buffer"]
    assert (b.range_start, b.range_end) == (date(2025, 3, 1), date(2025, 3, 31))
    assert b.spent == 400
    assert b.percentage == 100
    assert b.is_over is True
    assert b.remaining == -100


def test_percentage_with_zero_budget():
    assert bs._percentage(10, 0) == 100
    assert bs._percentage(0, 0) == 0


def test_month_pace_statuses():
    groceries = _cat("groceries", 100)
    on_track = bs.month_pace([groceries], [_tx(date(2025, 3, 3), 100, "groceries")], TODAY)
    assert on_track.days_in_month == 31
    assert on_track.day_of_month == 13
    assert on_track.month_progress == pytest.approx(13 / 31 * 100)
    assert on_track.total_budget == pytest.approx(100 * 31 / 7)
    assert on_track.status == "on_track"

    ahead = bs.month_pace([groceries], [_tx(date(2025, 3, 3), 300, "groceries")], TODAY)
    assert ahead.status == "ahead"

    over = bs.month_pace([groceries], [_tx(date(2025, 3, 3), 460, "groceries")], date(2025, 3, 31))
    assert over.budget_progress > 100
    assert over.status == "over"


def test_month_pace_ignores_monthly_categories():
    buffer = _cat("buffer", 300, period=models.BudgetPeriod.MONTHLY)
    pace = bs.month_pace([buffer], [_tx(date(2025, 3, 3), 300, "buffer")], TODAY)
    assert pace.total_budget == 0
    assert pace.budget_progress == 0
    assert pace.status == "on_track"


def test_financial_stats_hides_fixed_costs_when_disabled():
    txs = [
        _tx(date(2025, 3, 1), 1200, "fixed", is_fixed=True),
        _tx(date(2025, 3, 11), 80, "groceries"),
        _tx(date(2025, 3, 2), 20, "fixed"),
        _tx(date(2025, 2, 27), 500, "groceries"),
    ]

    shown = bs.financial_stats(txs, _settings(show_fixed_costs=True), TODAY)
    assert shown.month_fixed_costs == 1220
    assert shown.effective_income == 8000
    assert shown.month_spent == 1300
    assert shown.week_spent == 80
    assert shown.remaining == 6700

    hidden = bs.financial_stats(txs, _settings(show_fixed_costs=False), TODAY)
    assert hidden.effective_income == 8000 - 1220
    assert hidden.month_spent == 80
    assert hidden.remaining == 8000 - 1220 - 80


def test_financial_stats_week_follows_today():
    txs = [_tx(date(2025, 3, 11), 80, "groceries")]
    stats = bs.financial_stats(txs, _settings(), date(2025, 1, 20), today=TODAY)
    assert stats.month_start == date(2025, 1, 1)
    assert stats.month_spent == 0
    assert stats.week_start == date(2025, 3, 10)
    assert stats.week_spent == 80


def test_allocation_converts_weekly_budgets():
    cats = [_cat("groceries", 100), _cat("buffer", 300, period=models.BudgetPeriod.MONTHLY)]
    result = bs.allocation(cats, _settings())
    assert result.total_allocated == pytest.approx(733)
    assert result.unallocated == pytest.approx(7267)
    assert result.weekly_allowance == pytest.approx(8000 / 4.33)


def test_weekly_summary_prorates_across_month_boundary():
    cats = [_cat("groceries", 100), _cat("buffer", 433, period=models.BudgetPeriod.MONTHLY)]
    txs = [
        _tx(date(2025, 3, 31), 40, "groceries"),
        _tx(date(2025, 4, 2), 25, "buffer"),
        _tx(date(2025, 4, 1), 900, "fixed", is_fixed=True),
        _tx(date(2025, 4, 7), 70, "groceries"),
    ]
    summary = bs.weekly_summary(txs, cats, _settings(monthly_income=3100), date(2025, 3, 31), date(2025, 4, 6))

    assert summary.total_spent == 65
    assert summary.prorated_allowance == pytest.approx(100)
    assert summary.remaining_allowance == pytest.approx(35)
    by_cat = {c.category_id: c for c in summary.by_category}
    assert by_cat["groceries"].spent == 40
    assert by_cat["buffer"].budget == pytest.approx(100)


def test_balance_projection_rules():
    user_settings = _settings(checking_balance=1000, credit_card_balance=200, balance_as_of=datetime(2025, 3, 10, 12, 0))
    txs = [
        _tx(date(2025, 3, 9), 50),
        _tx(date(2025, 3, 10), 30),
        _tx(date(2025, 3, 12), 500, type=models.TxnType.INCOME),
        _tx(date(2025, 3, 15), 100, type=models.TxnType.CC_PAYMENT),
    ]
    proj = bs.balance_projection(txs, user_settings)
    assert proj.expected_checking == 1400
    assert proj.expected_credit_card == 130
    assert proj.transactions_counted == 3
    assert proj.starting_checking == 1000


def test_overview_endpoint(client, make_category, make_transaction):
    cat = make_category(budget=100)
    make_transaction(date="2025-03-11", amount=30, categoryId=cat["id"])
    make_transaction(date="2025-03-01", amount=1200, categoryId="fixed", isFixed=True)

    r = client.get("/api/budget/overview", params={"date": "2025-03-13"})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["asOf"] == "2025-03-13"
    assert data["categories"][0]["spent"] == 30
    assert data["categories"][0]["rangeStart"] == "2025-03-10"
    assert data["stats"]["monthFixedCosts"] == 1200
    assert data["monthPace"]["daysInMonth"] == 31
    assert data["allocation"]["monthlyIncome"] == 8000


def test_weekly_summary_endpoint(client, make_category, make_transaction):
    cat = make_category(budget=100)
    make_transaction(date="2025-03-11", amount=30, categoryId=cat["id"])
    r = client.get("/api/budget/weekly-summary", params={"start": "2025-03-10", "end": "2025-03-16"})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["totalSpent"] == 30
    assert data["byCategory"][0]["spent"] == 30

    assert client.get("/api/budget/weekly-summary").status_code == 200


def test_weekly_summary_endpoint_validation(client):
    r = client.get("/api/budget/weekly-summary", params={"start": "2025-03-10"})
    assert r.status_code == 400
    r = client.get("/api/budget/weekly-summary", params={"start": "2025-03-16", "end": "2025-03-10"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    r = client.get("/api/budget/weekly-summary", params={"start": "soon", "end": "2025-03-10"})
    assert r.status_code == 400


def test_projection_endpoint(client, make_transaction):
    client.put("/api/settings", json={
        "checkingBalance": 1000, "creditCardBalance": 0, "balanceAsOf": "2025-03-10T08:00:00",
    })
    make_transaction(date="2025-03-05", amount=70)
    make_transaction(date="2025-03-12", amount=45)
    make_transaction(date="2025-03-14", amount=2000, type="income", description="Salary")

    r = client.get("/api/budget/projection")
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["expectedChecking"] == 3000
    assert data["expectedCreditCard"] == 45
    assert data["transactionsCounted"] == 2
