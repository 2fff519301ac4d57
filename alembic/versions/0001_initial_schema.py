"""initial schema: categories, transactions, settings

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-01-05 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "category",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("weekly_budget", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("period", sa.Enum("weekly", "monthly", name="budget_period"), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("weekly_budget >= 0", name="ck_category_budget_non_negative"),
    )

    op.create_table(
        "transaction",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 4), nullable=False),
        sa.Column("category_id", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.Enum("expense", "income", "cc_payment", name="txn_type"), nullable=False),
        sa.Column("is_fixed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("group_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
    )
    op.create_index("ix_transaction_date", "transaction", ["date"], unique=False)
    op.create_index("ix_transaction_group", "transaction", ["group_id"], unique=False)
    op.create_index("ix_transaction_category", "transaction", ["category_id"], unique=False)
    op.create_index("ix_transaction_type", "transaction", ["type"], unique=False)

    op.create_table(
        "usersettings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("monthly_income", sa.Numeric(18, 4), nullable=False, server_default="8000"),
        sa.Column("currency", sa.String(length=8), nullable=False, server_default="$"),
        sa.Column("show_fixed_costs", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("checking_balance", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("credit_card_balance", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("balance_as_of", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("id = 1", name="ck_settings_singleton"),
    )


def downgrade() -> None:
    op.drop_table("usersettings")
    op.drop_index("ix_transaction_type", table_name="transaction")
    op.drop_index("ix_transaction_category", table_name="transaction")
    op.drop_index("ix_transaction_group", table_name="transaction")
    op.drop_index("ix_transaction_date", table_name="transaction")
    op.drop_table("transaction")
    op.drop_table("category")
