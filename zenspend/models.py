from __future__ import annotations

import uuid
import datetime as dt
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .core.config import settings
from .core.database import Base


try:
    LOCAL_ZONE = ZoneInfo(settings.TIMEZONE)
except ZoneInfoNotFoundError:
    LOCAL_ZONE = ZoneInfo("UTC")

SETTINGS_ID = 1
# Pseudo-category for uncategorized recurring costs; never stored as a Category row
FIXED_CATEGORY_ID = "fixed"


def now_local_naive() -> datetime:
    """Return naive datetime normalized to configured local timezone."""
    return datetime.now(LOCAL_ZONE).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)


class TxnType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"
    CC_PAYMENT = "cc_payment"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Category(Base, TimestampMixin):
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Per-period budget: weekly amount for weekly categories, monthly amount otherwise
    weekly_budget: Mapped[float] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    period: Mapped[BudgetPeriod] = mapped_column(
        SAEnum(BudgetPeriod, name="budget_period", values_callable=lambda e: [m.value for m in e]),
        default=BudgetPeriod.WEEKLY,
        nullable=False,
    )
    color: Mapped[str] = mapped_column(String(7), nullable=False)

    __table_args__ = (
        CheckConstraint("weekly_budget >= 0", name="ck_category_budget_non_negative"),
    )


class Transaction(Base, TimestampMixin):
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(18, 4), nullable=False)
    # Not a foreign key: may hold the "fixed" sentinel or a deleted category's id
    category_id: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[TxnType] = mapped_column(
        SAEnum(TxnType, name="txn_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    is_fixed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    group_id: Mapped[str | None] = mapped_column(String(64))

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        Index("ix_transaction_date", "date"),
        Index("ix_transaction_group", "group_id"),
        Index("ix_transaction_category", "category_id"),
        Index("ix_transaction_type", "type"),
    )

    @property
    def is_fixed_cost(self) -> bool:
        """True for recurring members and anything filed under the fixed sentinel."""
        return bool(self.is_fixed) or self.category_id == FIXED_CATEGORY_ID


class UserSettings(Base):
    """Single-row settings aggregate (id is always ``SETTINGS_ID``)."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ID)
    monthly_income: Mapped[float] = mapped_column(Numeric(18, 4), default=8000, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), default="$", nullable=False)
    show_fixed_costs: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    checking_balance: Mapped[float] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    credit_card_balance: Mapped[float] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    balance_as_of: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    __table_args__ = (
        CheckConstraint(f"id = {SETTINGS_ID}", name="ck_settings_singleton"),
    )
