from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .core.config import settings
from .models import BudgetPeriod, TxnType


T = TypeVar("T")

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


def _check_iso_date(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError("date must be a YYYY-MM-DD string")
    return value


IsoDate = Annotated[date, BeforeValidator(_check_iso_date)]
GroupScope = Literal["all", "future"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


RefId = Annotated[Optional[str], BeforeValidator(_blank_to_none)]

# Money columns are Numeric(18, 4); anything finer would be rounded on storage
MONEY_PLACES = 4


def _check_money_scale(value: float) -> float:
    exponent = Decimal(str(value)).as_tuple().exponent
    if isinstance(exponent, int) and exponent < -MONEY_PLACES:
        raise ValueError(f"at most {MONEY_PLACES} decimal places are allowed")
    return value


Money = Annotated[float, AfterValidator(_check_money_scale)]


def _reject_explicit_nulls(model: BaseModel, fields: tuple[str, ...]) -> None:
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{to_camel(name)} cannot be null")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None


class DeletedFlag(CamelModel):
    deleted: bool = True


class DeletedCount(CamelModel):
    deleted: int


# ---- Categories -------------------------------------------------------------

_BUDGET_ALIASES = AliasChoices("weeklyBudget", "weekly_budget", "budget")


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    weekly_budget: Money = Field(ge=0, validation_alias=_BUDGET_ALIASES)
    period: BudgetPeriod
    color: str = Field(pattern=_COLOR_PATTERN)


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    weekly_budget: Optional[Money] = Field(default=None, ge=0, validation_alias=_BUDGET_ALIASES)
    period: Optional[BudgetPeriod] = None
    color: Optional[str] = Field(default=None, pattern=_COLOR_PATTERN)

    @model_validator(mode="after")
    def _no_nulls(self) -> "CategoryUpdate":
        _reject_explicit_nulls(self, ("name", "weekly_budget", "period", "color"))
        return self


class CategoryOut(CamelModel):
    id: str
    name: str
    weekly_budget: float
    period: BudgetPeriod
    color: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---- Transactions -----------------------------------------------------------

class TransactionCreate(CamelModel):
    date: IsoDate
    amount: Money = Field(gt=0)
    category_id: RefId = Field(default=None, max_length=64)
    description: str = Field(min_length=1)
    type: TxnType
    is_fixed: bool = False
    group_id: RefId = Field(default=None, max_length=64)


class TransactionUpdate(CamelModel):
    date: Optional[IsoDate] = None
    amount: Optional[Money] = Field(default=None, gt=0)
    category_id: RefId = Field(default=None, max_length=64)
    description: Optional[str] = Field(default=None, min_length=1)
    type: Optional[TxnType] = None
    is_fixed: Optional[bool] = None
    group_id: RefId = Field(default=None, max_length=64)

    @model_validator(mode="after")
    def _no_nulls(self) -> "TransactionUpdate":
        _reject_explicit_nulls(self, ("date", "amount", "description", "type", "is_fixed"))
        return self


class TransactionOut(CamelModel):
    id: str
    date: date
    amount: float
    category_id: Optional[str]
    description: str
    type: TxnType
    is_fixed: bool
    group_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionFilter(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[str] = None
    type: Optional[TxnType] = None
    is_fixed: Optional[bool] = None


class RecurringCreate(CamelModel):
    base: TransactionCreate
    months: int = Field(
        default=settings.RECURRING_DEFAULT_MONTHS,
        ge=1,
        le=settings.RECURRING_MAX_MONTHS,
    )


class GroupUpdateRequest(CamelModel):
    updates: TransactionUpdate
    scope: GroupScope
    from_date: Optional[IsoDate] = None


# ---- Settings ---------------------------------------------------------------

class SettingsOut(CamelModel):
    monthly_income: float
    currency: str
    show_fixed_costs: bool
    checking_balance: float
    credit_card_balance: float
    balance_as_of: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SettingsUpdate(CamelModel):
    monthly_income: Optional[Money] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=1, max_length=8)
    show_fixed_costs: Optional[bool] = None
    checking_balance: Optional[Money] = None
    credit_card_balance: Optional[Money] = None
    balance_as_of: Optional[datetime] = None

    @model_validator(mode="after")
    def _no_nulls(self) -> "SettingsUpdate":
        _reject_explicit_nulls(self, tuple(type(self).model_fields))
        return self


# ---- Import / export --------------------------------------------------------

class CategoryImport(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=100)
    weekly_budget: Money = Field(ge=0, validation_alias=_BUDGET_ALIASES)
    period: BudgetPeriod
    color: str = Field(min_length=1, max_length=7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransactionImport(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    date: IsoDate
    amount: Money = Field(gt=0)
    category_id: RefId = Field(default=None, max_length=64)
    description: str = Field(min_length=1)
    type: TxnType
    is_fixed: bool = False
    group_id: RefId = Field(default=None, max_length=64)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SettingsImport(CamelModel):
    monthly_income: Money = Field(ge=0)
    currency: str = Field(min_length=1, max_length=8)
    show_fixed_costs: bool
    checking_balance: Money = 0
    credit_card_balance: Money = 0
    balance_as_of: Optional[datetime] = None


class ImportRequest(CamelModel):
    categories: list[CategoryImport] = Field(default_factory=list)
    transactions: list[TransactionImport] = Field(default_factory=list)
    settings: SettingsImport


class ImportResult(CamelModel):
    categories_imported: int
    transactions_imported: int
    settings_updated: bool


class ExportOut(CamelModel):
    categories: list[CategoryOut]
    transactions: list[TransactionOut]
    settings: SettingsOut
    exported_at: datetime


# ---- Budget read-models -----------------------------------------------------

class CategorySpendingOut(CamelModel):
    category_id: str
    name: str
    color: str
    period: BudgetPeriod
    range_start: date
    range_end: date
    budget: float
    spent: float
    remaining: float
    percentage: float
    is_over: bool


class MonthPaceOut(CamelModel):
    days_in_month: int
    day_of_month: int
    month_progress: float
    total_budget: float
    total_spent: float
    budget_progress: float
    status: Literal["ahead", "over", "on_track"]


class FinancialStatsOut(CamelModel):
    month_start: date
    month_end: date
    week_start: date
    week_end: date
    month_fixed_costs: float
    effective_income: float
    month_spent: float
    week_spent: float
    remaining: float


class AllocationOut(CamelModel):
    monthly_income: float
    total_allocated: float
    unallocated: float
    weekly_allowance: float


class BudgetOverviewOut(CamelModel):
    as_of: date
    categories: list[CategorySpendingOut]
    month_pace: MonthPaceOut
    stats: FinancialStatsOut
    allocation: AllocationOut


class WeeklyCategoryOut(CamelModel):
    category_id: str
    name: str
    color: str
    period: BudgetPeriod
    budget: float
    spent: float


class WeeklySummaryOut(CamelModel):
    start: date
    end: date
    total_spent: float
    by_category: list[WeeklyCategoryOut]
    prorated_allowance: float
    remaining_allowance: float


class BalanceProjectionOut(CamelModel):
    balance_as_of: datetime
    starting_checking: float
    starting_credit_card: float
    expected_checking: float
    expected_credit_card: float
    transactions_counted: int
