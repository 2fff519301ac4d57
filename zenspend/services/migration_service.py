from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from zenspend import models, schemas
from zenspend.services.settings_service import SettingsService, to_naive_local

logger = logging.getLogger(__name__)


class MigrationService:
    """Bulk JSON export/import of categories, transactions and settings.

    Import is additive: rows whose id already exists are skipped, never
    overwritten. The settings singleton is always replaced by the payload.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def export(self) -> schemas.ExportOut:
        categories = (
            self.db.query(models.Category)
            .order_by(models.Category.created_at, models.Category.id)
            .all()
        )
        transactions = (
            self.db.query(models.Transaction)
            .order_by(models.Transaction.date, models.Transaction.created_at)
            .all()
        )
        current = SettingsService(self.db).get_or_create()
        return schemas.ExportOut(
            categories=[schemas.CategoryOut.model_validate(c) for c in categories],
            transactions=[schemas.TransactionOut.model_validate(t) for t in transactions],
            settings=schemas.SettingsOut.model_validate(current),
            exported_at=models.now_local_naive(),
        )

    def import_data(self, payload: schemas.ImportRequest) -> schemas.ImportResult:
        existing_categories = {cid for (cid,) in self.db.query(models.Category.id).all()}
        existing_transactions = {tid for (tid,) in self.db.query(models.Transaction.id).all()}

        categories_imported = 0
        transactions_imported = 0
        try:
            for item in payload.categories:
                if item.id in existing_categories:
                    continue
                self.db.add(models.Category(**_without_missing_timestamps(item.model_dump())))
                existing_categories.add(item.id)
                categories_imported += 1

            for item in payload.transactions:
                if item.id in existing_transactions:
                    continue
                data = _without_missing_timestamps(item.model_dump())
                row = models.Transaction(**data)
                if row.is_fixed and not row.group_id:
                    row.group_id = models.new_id()
                self.db.add(row)
                existing_transactions.add(item.id)
                transactions_imported += 1

            self._replace_settings(payload.settings)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Imported %d categories and %d transactions (%d and %d skipped)",
            categories_imported,
            transactions_imported,
            len(payload.categories) - categories_imported,
            len(payload.transactions) - transactions_imported,
        )
        return schemas.ImportResult(
            categories_imported=categories_imported,
            transactions_imported=transactions_imported,
            settings_updated=True,
        )

    def _replace_settings(self, incoming: schemas.SettingsImport) -> None:
        values = incoming.model_dump()
        as_of = values.pop("balance_as_of")
        values["balance_as_of"] = to_naive_local(as_of) if as_of is not None else models.now_local_naive()
        row = self.db.get(models.UserSettings, models.SETTINGS_ID)
        if row is None:
            self.db.add(models.UserSettings(id=models.SETTINGS_ID, **values))
            return
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = models.now_local_naive()


def _without_missing_timestamps(data: dict) -> dict:
    for key in ("created_at", "updated_at"):
        if data.get(key) is None:
            data.pop(key, None)
        else:
            data[key] = to_naive_local(data[key])
    return data
