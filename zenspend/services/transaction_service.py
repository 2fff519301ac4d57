from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from zenspend import models, schemas
from zenspend.core.errors import NotFoundError


class TransactionService:
    """Single-row transaction CRUD and filtered listing."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, filters: Optional[schemas.TransactionFilter] = None) -> list[models.Transaction]:
        q = self.db.query(models.Transaction)
        if filters is not None:
            if filters.start_date is not None:
                q = q.filter(models.Transaction.date >= filters.start_date)
            if filters.end_date is not None:
                q = q.filter(models.Transaction.date <= filters.end_date)
            if filters.category_id:
                q = q.filter(models.Transaction.category_id == filters.category_id)
            if filters.type is not None:
                q = q.filter(models.Transaction.type == filters.type)
            if filters.is_fixed is not None:
                q = q.filter(models.Transaction.is_fixed == bool(filters.is_fixed))
        return q.order_by(models.Transaction.date, models.Transaction.created_at).all()

    def get(self, txn_id: str) -> models.Transaction:
        row = self.db.get(models.Transaction, txn_id)
        if not row:
            raise NotFoundError("Transaction not found", details={"id": txn_id})
        return row

    def create(self, payload: dict[str, Any]) -> models.Transaction:
        row = models.Transaction(**payload)
        self._ensure_group(row)
        self.db.add(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def update(self, txn_id: str, patch: dict[str, Any]) -> models.Transaction:
        row = self.get(txn_id)
        if not patch:
            return row
        patch.pop("id", None)
        for key, value in patch.items():
            setattr(row, key, value)
        self._ensure_group(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def delete(self, txn_id: str) -> None:
        row = self.get(txn_id)
        self.db.delete(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def _ensure_group(row: models.Transaction) -> None:
        # A fixed cost always belongs to a group, even a group of one
        if row.is_fixed and not row.group_id:
            row.group_id = models.new_id()
