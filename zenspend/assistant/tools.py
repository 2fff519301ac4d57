"""
Assistant tool bindings

Maps structured tool calls (a tool name plus JSON arguments, as produced by a
voice or chat agent) onto the REST operations and renders a short text
answer. Argument schemas are pydantic models so malformed calls fail before
any request is sent.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from zenspend.models import FIXED_CATEGORY_ID, TxnType
from zenspend.schemas import CamelModel, IsoDate, Money
from zenspend.services.budget_service import WEEKS_PER_MONTH
from zenspend.utils.dates import month_range, week_range

from .client import AssistantError, ZenSpendClient

Period = Literal["week", "month"]


class LogTransactionArgs(CamelModel):
    amount: Money = Field(gt=0)
    description: str = Field(min_length=1)
    category_id: str
    date: IsoDate
    type: TxnType
    is_fixed: Optional[bool] = None


class GetTransactionsArgs(CamelModel):
    start_date: Optional[IsoDate] = None
    end_date: Optional[IsoDate] = None
    category_id: Optional[str] = None
    type: Optional[TxnType] = None


class DeleteTransactionArgs(CamelModel):
    id: str = Field(min_length=1)


class SpendingSummaryArgs(CamelModel):
    period: Period


class BudgetStatusArgs(CamelModel):
    period: Period = "month"


class UpdateBalanceArgs(CamelModel):
    checking_balance: Optional[Money] = None
    credit_card_balance: Optional[Money] = None


class NoArgs(CamelModel):
    pass


def period_range(period: Period, today: date) -> tuple[date, date]:
    return week_range(today) if period == "week" else month_range(today)


def _money(value: float) -> str:
    return f"{value:.2f}"


def log_transaction(client: ZenSpendClient, args: LogTransactionArgs, today: date) -> str:
    payload = args.model_dump(by_alias=True, mode="json", exclude_none=True)
    if args.is_fixed:
        created = client.create_recurring(payload)
        return (
            f"Recurring transaction logged: {len(created)} monthly entries starting {created[0]['date']} "
            f"(group {created[0]['groupId']})."
        )
    created = client.create_transaction(payload)
    return f"Transaction logged: {created['date']} {created['description']} {_money(created['amount'])} (id {created['id']})."


def get_transactions(client: ZenSpendClient, args: GetTransactionsArgs, today: date) -> str:
    params = args.model_dump(by_alias=True, mode="json", exclude_none=True)
    rows = client.list_transactions(**params)
    if not rows:
        return "No transactions found matching the criteria."
    lines = [
        f"- {t['date']}: {'+' if t['type'] == TxnType.INCOME.value else '-'}{_money(t['amount'])} "
        f"- {t['description']} ({t.get('categoryId') or 'uncategorized'})"
        for t in rows
    ]
    return f"Found {len(rows)} transactions:\n\n" + "\n".join(lines)


def delete_transaction(client: ZenSpendClient, args: DeleteTransactionArgs, today: date) -> str:
    client.delete_transaction(args.id)
    return f"Transaction {args.id} deleted successfully."


def get_spending_summary(client: ZenSpendClient, args: SpendingSummaryArgs, today: date) -> str:
    start, end = period_range(args.period, today)
    rows = client.list_transactions(startDate=start.isoformat(), endDate=end.isoformat())
    names = {c["id"]: c["name"] for c in client.list_categories()}

    by_category: dict[str, float] = {}
    total_expenses = total_income = fixed_costs = 0.0
    for tx in rows:
        if tx["type"] == TxnType.EXPENSE.value:
            total_expenses += tx["amount"]
            if tx.get("isFixed") or tx.get("categoryId") == FIXED_CATEGORY_ID:
                fixed_costs += tx["amount"]
            else:
                key = tx.get("categoryId") or "uncategorized"
                by_category[key] = by_category.get(key, 0.0) + tx["amount"]
        elif tx["type"] == TxnType.INCOME.value:
            total_income += tx["amount"]

    lines = [
        f"## {'Weekly' if args.period == 'week' else 'Monthly'} Spending Summary",
        f"Period: {start.isoformat()} to {end.isoformat()}",
        "",
        f"Total Expenses: {_money(total_expenses)}",
        f"Total Income: {_money(total_income)}",
        f"Fixed Costs: {_money(fixed_costs)}",
        f"Variable Spending: {_money(total_expenses - fixed_costs)}",
    ]
    if by_category:
        lines += ["", "### By Category:"]
        lines += [f"- {names.get(cid, cid)}: {_money(amount)}" for cid, amount in by_category.items()]
    return "\n".join(lines)


def list_categories(client: ZenSpendClient, args: NoArgs, today: date) -> str:
    categories = client.list_categories()
    if not categories:
        return "No categories configured yet."
    lines = [
        f"- {c['name']} (id: {c['id']}): {c['weeklyBudget']}{'/week' if c['period'] == 'weekly' else '/month'}"
        for c in categories
    ]
    return (
        "## Budget Categories\n\n" + "\n".join(lines)
        + f"\n\nUse '{FIXED_CATEGORY_ID}' as categoryId for recurring monthly costs."
    )


def get_budget_status(client: ZenSpendClient, args: BudgetStatusArgs, today: date) -> str:
    start, end = period_range(args.period, today)
    rows = client.list_transactions(startDate=start.isoformat(), endDate=end.isoformat())
    categories = client.list_categories()
    current = client.get_settings()
    currency = current["currency"]

    spent: dict[str, float] = {}
    for tx in rows:
        if tx["type"] != TxnType.EXPENSE.value or tx.get("isFixed") or tx.get("categoryId") == FIXED_CATEGORY_ID:
            continue
        key = tx.get("categoryId") or "uncategorized"
        spent[key] = spent.get(key, 0.0) + tx["amount"]

    lines = [f"## Budget Status ({args.period})", "", f"Monthly Income: {currency}{current['monthlyIncome']}", ""]
    for cat in categories:
        used = spent.get(cat["id"], 0.0)
        budget = cat["weeklyBudget"]
        if cat["period"] == "weekly" and args.period == "month":
            budget *= WEEKS_PER_MONTH
        percent = used / budget * 100 if budget > 0 else 0.0
        marker = "OVER" if percent > 100 else "WARN" if percent > 80 else "OK"
        lines.append(
            f"[{marker}] {cat['name']}: {currency}{used:.0f} / {currency}{budget:.0f} "
            f"({percent:.0f}% used, {currency}{budget - used:.0f} remaining)"
        )
    return "\n".join(lines)


def get_settings(client: ZenSpendClient, args: NoArgs, today: date) -> str:
    s = client.get_settings()
    cur = s["currency"]
    return "\n".join([
        "## Account Settings",
        f"Monthly Income: {cur}{s['monthlyIncome']}",
        f"Currency: {cur}",
        f"Checking Balance: {cur}{s['checkingBalance']}",
        f"Credit Card Balance: {cur}{s['creditCardBalance']}",
        f"Balance As Of: {s['balanceAsOf']}",
        f"Show Fixed Costs: {'Yes' if s['showFixedCosts'] else 'No'}",
    ])


def update_balance(client: ZenSpendClient, args: UpdateBalanceArgs, today: date) -> str:
    if args.checking_balance is None and args.credit_card_balance is None:
        return "Please provide at least one balance to update."
    updates: dict[str, Any] = args.model_dump(by_alias=True, exclude_none=True)
    updates["balanceAsOf"] = datetime.now(timezone.utc).isoformat()
    s = client.update_settings(updates)
    return (
        f"Balances updated: checking {s['currency']}{s['checkingBalance']}, "
        f"credit card {s['currency']}{s['creditCardBalance']} (as of {s['balanceAsOf']})."
    )


ToolFn = Callable[[ZenSpendClient, Any, date], str]

TOOLS: dict[str, tuple[type[BaseModel], ToolFn]] = {
    "log_transaction": (LogTransactionArgs, log_transaction),
    "get_transactions": (GetTransactionsArgs, get_transactions),
    "delete_transaction": (DeleteTransactionArgs, delete_transaction),
    "get_spending_summary": (SpendingSummaryArgs, get_spending_summary),
    "list_categories": (NoArgs, list_categories),
    "get_budget_status": (BudgetStatusArgs, get_budget_status),
    "get_settings": (NoArgs, get_settings),
    "update_balance": (UpdateBalanceArgs, update_balance),
}


def dispatch(
    client: ZenSpendClient,
    tool_name: str,
    arguments: Optional[dict[str, Any]] = None,
    *,
    today: Optional[date] = None,
) -> str:
    """Run one tool call and return its text answer.

    Raises AssistantError for unknown tools, invalid arguments, or API errors.
    """
    try:
        args_model, fn = TOOLS[tool_name]
    except KeyError:
        raise AssistantError(f"Unknown tool: {tool_name}") from None
    try:
        args = args_model.model_validate(arguments or {})
    except ValidationError as exc:
        raise AssistantError(f"Invalid arguments for {tool_name}: {exc.errors()[0].get('msg', 'validation error')}") from exc
    return fn(client, args, today or date.today())
