"""
Budget read-models

Pure calculations over transactions, categories and settings that feed the
dashboard: per-category spending, month pace, monthly stats, weekly
summaries, allocation and the reconciled balance projection. Nothing here
writes to the database.

Weeks run Monday through Sunday in every calculation.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from zenspend import models, schemas
from zenspend.services.settings_service import SettingsService
from zenspend.utils.dates import days_in_month, iter_days, month_range, week_range

WEEKS_PER_MONTH = 4.33
# Spending this many points ahead of the month's time progress counts as "ahead of pace"
PACE_TOLERANCE = 10


def _is_expense(tx: models.Transaction) -> bool:
    return tx.type == models.TxnType.EXPENSE


def _expenses(
    transactions: Iterable[models.Transaction],
    start: date,
    end: date,
    *,
    category_id: Optional[str] = None,
    exclude_fixed: bool = False,
) -> float:
    total = 0.0
    for tx in transactions:
        if not _is_expense(tx) or tx.date < start or tx.date > end:
            continue
        if category_id is not None and tx.category_id != category_id:
            continue
        if exclude_fixed and tx.is_fixed_cost:
            continue
        total += float(tx.amount)
    return total


def _percentage(spent: float, budget: float) -> float:
    if budget <= 0:
        return 100.0 if spent > 0 else 0.0
    return min(spent / budget * 100, 100.0)


def monthly_equivalent(category: models.Category) -> float:
    budget = float(category.weekly_budget)
    return budget * WEEKS_PER_MONTH if category.period == models.BudgetPeriod.WEEKLY else budget


def weekly_equivalent(category: models.Category) -> float:
    budget = float(category.weekly_budget)
    return budget if category.period == models.BudgetPeriod.WEEKLY else budget / WEEKS_PER_MONTH


def category_spending(
    categories: Iterable[models.Category],
    transactions: list[models.Transaction],
    today: date,
) -> list[schemas.CategorySpendingOut]:
    """Spent vs. budget for the current period of each category."""
    week = week_range(today)
    month = month_range(today)
    items: list[schemas.CategorySpendingOut] = []
    for cat in categories:
        start, end = week if cat.period == models.BudgetPeriod.WEEKLY else month
        spent = _expenses(transactions, start, end, category_id=cat.id)
        budget = float(cat.weekly_budget)
        items.append(
            schemas.CategorySpendingOut(
                category_id=cat.id,
                name=cat.name,
                color=cat.color,
                period=cat.period,
                range_start=start,
                range_end=end,
                budget=budget,
                spent=spent,
                remaining=budget - spent,
                percentage=_percentage(spent, budget),
                is_over=spent > budget,
            )
        )
    return items


def month_pace(
    categories: Iterable[models.Category],
    transactions: list[models.Transaction],
    today: date,
) -> schemas.MonthPaceOut:
    """Variable (weekly-category) spending against time elapsed in the month."""
    n_days = days_in_month(today.year, today.month)
    start, end = month_range(today)
    month_progress = today.day / n_days * 100
    weeks_in_month = n_days / 7

    weekly = [c for c in categories if c.period == models.BudgetPeriod.WEEKLY]
    total_budget = sum(float(c.weekly_budget) * weeks_in_month for c in weekly)
    total_spent = sum(_expenses(transactions, start, end, category_id=c.id) for c in weekly)
    budget_progress = total_spent / total_budget * 100 if total_budget > 0 else 0.0

    if budget_progress > month_progress + PACE_TOLERANCE:
        status = "ahead"
    elif budget_progress > 100:
        status = "over"
    else:
        status = "on_track"

    return schemas.MonthPaceOut(
        days_in_month=n_days,
        day_of_month=today.day,
        month_progress=month_progress,
        total_budget=total_budget,
        total_spent=total_spent,
        budget_progress=budget_progress,
        status=status,
    )


def financial_stats(
    transactions: list[models.Transaction],
    user_settings: models.UserSettings,
    current_date: date,
    today: Optional[date] = None,
) -> schemas.FinancialStatsOut:
    """Headline numbers for the month containing ``current_date``.

    The week figure always uses the week containing ``today``, so browsing
    other months does not move it.
    """
    today = today or current_date
    month_start, month_end = month_range(current_date)
    week_start, week_end = week_range(today)

    month_txs = [tx for tx in transactions if month_start <= tx.date <= month_end]
    month_fixed_costs = sum(float(tx.amount) for tx in month_txs if _is_expense(tx) and tx.is_fixed_cost)

    income = float(user_settings.monthly_income)
    if user_settings.show_fixed_costs:
        effective_income = income
        visible = month_txs
    else:
        effective_income = income - month_fixed_costs
        visible = [tx for tx in month_txs if not tx.is_fixed_cost]

    month_spent = sum(float(tx.amount) for tx in visible if _is_expense(tx))
    week_spent = _expenses(transactions, week_start, week_end, exclude_fixed=True)

    return schemas.FinancialStatsOut(
        month_start=month_start,
        month_end=month_end,
        week_start=week_start,
        week_end=week_end,
        month_fixed_costs=month_fixed_costs,
        effective_income=effective_income,
        month_spent=month_spent,
        week_spent=week_spent,
        remaining=effective_income - month_spent,
    )


def allocation(categories: Iterable[models.Category], user_settings: models.UserSettings) -> schemas.AllocationOut:
    income = float(user_settings.monthly_income)
    total_allocated = sum(monthly_equivalent(c) for c in categories)
    return schemas.AllocationOut(
        monthly_income=income,
        total_allocated=total_allocated,
        unallocated=income - total_allocated,
        weekly_allowance=income / WEEKS_PER_MONTH,
    )


def weekly_summary(
    transactions: list[models.Transaction],
    categories: Iterable[models.Category],
    user_settings: models.UserSettings,
    start: date,
    end: date,
) -> schemas.WeeklySummaryOut:
    """Variable spending for one calendar row, fixed costs excluded.

    The allowance is prorated by the days of ``start..end`` that fall in
    ``start``'s month.
    """
    total_spent = _expenses(transactions, start, end, exclude_fixed=True)
    by_category = [
        schemas.WeeklyCategoryOut(
            category_id=cat.id,
            name=cat.name,
            color=cat.color,
            period=cat.period,
            budget=weekly_equivalent(cat),
            spent=_expenses(transactions, start, end, category_id=cat.id, exclude_fixed=True),
        )
        for cat in categories
    ]

    month_start, month_end = month_range(start)
    daily_allowance = float(user_settings.monthly_income) / days_in_month(start.year, start.month)
    days_inside = sum(1 for d in iter_days(start, end) if month_start <= d <= month_end)
    prorated = daily_allowance * days_inside

    return schemas.WeeklySummaryOut(
        start=start,
        end=end,
        total_spent=total_spent,
        by_category=by_category,
        prorated_allowance=prorated,
        remaining_allowance=prorated - total_spent,
    )


def balance_projection(
    transactions: Iterable[models.Transaction],
    user_settings: models.UserSettings,
) -> schemas.BalanceProjectionOut:
    """Expected checking / credit-card balances after the snapshot date.

    Expenses are assumed to go on the card, income lands in checking, and a
    card payment moves money from checking to the card.
    """
    checking = float(user_settings.checking_balance)
    card = float(user_settings.credit_card_balance)
    cutoff = user_settings.balance_as_of.date()
    counted = 0
    for tx in transactions:
        if tx.date < cutoff:
            continue
        amount = float(tx.amount)
        if tx.type == models.TxnType.EXPENSE:
            card += amount
        elif tx.type == models.TxnType.INCOME:
            checking += amount
        elif tx.type == models.TxnType.CC_PAYMENT:
            checking -= amount
            card -= amount
        counted += 1
    return schemas.BalanceProjectionOut(
        balance_as_of=user_settings.balance_as_of,
        starting_checking=float(user_settings.checking_balance),
        starting_credit_card=float(user_settings.credit_card_balance),
        expected_checking=checking,
        expected_credit_card=card,
        transactions_counted=counted,
    )


class BudgetService:
    """Load rows once and feed them to the read-model functions."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _categories(self) -> list[models.Category]:
        return self.db.query(models.Category).order_by(models.Category.created_at, models.Category.id).all()

    def _transactions(self, start: Optional[date] = None, end: Optional[date] = None) -> list[models.Transaction]:
        q = self.db.query(models.Transaction)
        if start is not None:
            q = q.filter(models.Transaction.date >= start)
        if end is not None:
            q = q.filter(models.Transaction.date <= end)
        return q.order_by(models.Transaction.date).all()

    def overview(self, current_date: date, today: Optional[date] = None) -> schemas.BudgetOverviewOut:
        today = today or date.today()
        categories = self._categories()
        user_settings = SettingsService(self.db).get_or_create()
        transactions = self._transactions()
        return schemas.BudgetOverviewOut(
            as_of=current_date,
            categories=category_spending(categories, transactions, current_date),
            month_pace=month_pace(categories, transactions, current_date),
            stats=financial_stats(transactions, user_settings, current_date, today),
            allocation=allocation(categories, user_settings),
        )

    def weekly(self, start: date, end: date) -> schemas.WeeklySummaryOut:
        return weekly_summary(
            self._transactions(start, end),
            self._categories(),
            SettingsService(self.db).get_or_create(),
            start,
            end,
        )

    def projection(self) -> schemas.BalanceProjectionOut:
        user_settings = SettingsService(self.db).get_or_create()
        return balance_projection(
            self._transactions(start=user_settings.balance_as_of.date()),
            user_settings,
        )
