"""
Services package

Business logic services operating on an explicit SQLAlchemy session.
"""

from .budget_service import BudgetService
from .category_service import CategoryService
from .migration_service import MigrationService
from .recurrence_service import RecurrenceService
from .settings_service import SettingsService
from .transaction_service import TransactionService

__all__ = [
    "BudgetService",
    "CategoryService",
    "MigrationService",
    "RecurrenceService",
    "SettingsService",
    "TransactionService",
]
