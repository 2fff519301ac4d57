from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from zenspend import models
from zenspend.core.config import settings as app_settings


def to_naive_local(value: datetime) -> datetime:
    """Store aware timestamps as naive values in the configured zone."""
    if value.tzinfo is None:
        return value
    return value.astimezone(models.LOCAL_ZONE).replace(tzinfo=None)


class SettingsService:
    """Get-or-create access to the single settings row."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def defaults(self) -> dict[str, Any]:
        return {
            "monthly_income": app_settings.DEFAULT_MONTHLY_INCOME,
            "currency": app_settings.DEFAULT_CURRENCY,
            "show_fixed_costs": True,
            "checking_balance": 0,
            "credit_card_balance": 0,
            "balance_as_of": models.now_local_naive(),
        }

    def get_or_create(self) -> models.UserSettings:
        row = self.db.get(models.UserSettings, models.SETTINGS_ID)
        if row:
            return row
        row = models.UserSettings(id=models.SETTINGS_ID, **self.defaults())
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request created the singleton between our read and insert
            self.db.rollback()
            existing = self.db.get(models.UserSettings, models.SETTINGS_ID)
            if existing is None:
                raise
            return existing
        self.db.refresh(row)
        return row

    def update(self, patch: dict[str, Any]) -> models.UserSettings:
        row = self.get_or_create()
        if "balance_as_of" in patch and patch["balance_as_of"] is not None:
            patch["balance_as_of"] = to_naive_local(patch["balance_as_of"])
        for key, value in patch.items():
            setattr(row, key, value)
        # onupdate does not fire for an empty patch; bump explicitly
        row.updated_at = models.now_local_naive()
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row
