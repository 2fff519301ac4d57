from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from zenspend import models
from zenspend.core.errors import NotFoundError


class CategoryService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self) -> list[models.Category]:
        return (
            self.db.query(models.Category)
            .order_by(models.Category.created_at, models.Category.id)
            .all()
        )

    def get(self, category_id: str) -> models.Category:
        row = self.db.get(models.Category, category_id)
        if not row:
            raise NotFoundError("Category not found", details={"id": category_id})
        return row

    def create(self, payload: dict[str, Any]) -> models.Category:
        row = models.Category(**payload)
        self.db.add(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def update(self, category_id: str, patch: dict[str, Any]) -> models.Category:
        row = self.get(category_id)
        if not patch:
            return row
        for key, value in patch.items():
            setattr(row, key, value)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def delete(self, category_id: str) -> None:
        # Transactions keep their category_id; the UI shows them as uncategorized
        row = self.get(category_id)
        self.db.delete(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
