from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .core.database import SessionLocal, init_db
from .core.logging_config import configure_logging
from .models import BudgetPeriod, Category
from .services.settings_service import SettingsService

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"id": "groceries", "name": "Groceries", "weekly_budget": 800, "period": BudgetPeriod.WEEKLY, "color": "#10b981"},
    {"id": "outings", "name": "Outings", "weekly_budget": 1000, "period": BudgetPeriod.WEEKLY, "color": "#3b82f6"},
    {"id": "misc", "name": "Misc", "weekly_budget": 200, "period": BudgetPeriod.WEEKLY, "color": "#6366f1"},
]


def seed_data(db: Session) -> int:
    """Insert default categories (only into an empty table) and the settings row.

    Returns the number of categories created.
    """
    created = 0
    if db.query(Category).count() == 0:
        for item in DEFAULT_CATEGORIES:
            db.add(Category(**item))
            logger.info("Created category: %s", item["name"])
            created += 1
        db.commit()
    else:
        logger.info("Categories already exist, skipping category seed")
    SettingsService(db).get_or_create()
    return created


def seed() -> None:
    init_db()
    db: Session = SessionLocal()
    try:
        seed_data(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    seed()
