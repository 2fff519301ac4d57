from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Literal, Optional

from sqlalchemy.orm import Session

from zenspend import models
from zenspend.core.config import settings
from zenspend.core.errors import NotFoundError, ValidationFailed
from zenspend.utils.dates import add_months_clamped

logger = logging.getLogger(__name__)

Scope = Literal["all", "future"]

# Fields a group-wide patch may never touch
_PROTECTED_FIELDS = frozenset({"id", "date", "created_at", "updated_at"})


def project_dates(base: date, months: int) -> list[date]:
    """Monthly occurrence dates starting at ``base``, clamped to month ends.

    Example:
        >>> project_dates(date(2025, 1, 31), 3)
        [datetime.date(2025, 1, 31), datetime.date(2025, 2, 28), datetime.date(2025, 3, 31)]
    """
    return [add_months_clamped(base, i, day=base.day) for i in range(months)]


def select_scope(
    rows: Iterable[models.Transaction],
    scope: Scope,
    from_date: Optional[date] = None,
) -> list[models.Transaction]:
    """Pick the members of a group a scoped edit/delete applies to.

    ``future`` without ``from_date`` selects nothing; that is a caller error,
    not a failure of the group itself.
    """
    if scope == "all":
        return list(rows)
    if scope == "future":
        if from_date is None:
            return []
        return [row for row in rows if row.date >= from_date]
    raise ValidationFailed(f"Unknown scope: {scope}")


class RecurrenceService:
    """Generate recurrence groups and apply scoped edits/deletes to them.

    Every public method commits once at the end, so a group is either fully
    written or left untouched.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def generate(self, base: dict[str, Any], months: int) -> list[models.Transaction]:
        if months < 1 or months > settings.RECURRING_MAX_MONTHS:
            raise ValidationFailed(
                f"months must be between 1 and {settings.RECURRING_MAX_MONTHS}",
                details={"months": months},
            )
        base_date: date = base["date"]
        group_id = models.new_id()
        template = {k: v for k, v in base.items() if k not in _PROTECTED_FIELDS}
        template.pop("group_id", None)
        template.pop("is_fixed", None)

        rows: list[models.Transaction] = []
        try:
            for occurrence in project_dates(base_date, months):
                row = models.Transaction(
                    **template,
                    date=occurrence,
                    group_id=group_id,
                    is_fixed=True,
                )
                self.db.add(row)
                rows.append(row)
            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for row in rows:
            self.db.refresh(row)
        logger.info("Generated recurrence group %s with %d transactions from %s", group_id, len(rows), base_date)
        return rows

    def get_group(self, group_id: str) -> list[models.Transaction]:
        rows = (
            self.db.query(models.Transaction)
            .filter(models.Transaction.group_id == group_id)
            .order_by(models.Transaction.date, models.Transaction.created_at)
            .all()
        )
        if not rows:
            raise NotFoundError("Transaction group not found", details={"groupId": group_id})
        return rows

    def apply_to_group(
        self,
        group_id: str,
        patch: dict[str, Any],
        scope: Scope,
        from_date: Optional[date] = None,
    ) -> list[models.Transaction]:
        """Merge ``patch`` onto the scoped members; dates are always preserved."""
        members = self.get_group(group_id)
        affected = select_scope(members, scope, from_date)
        changes = {k: v for k, v in patch.items() if k not in _PROTECTED_FIELDS}
        try:
            for row in affected:
                for key, value in changes.items():
                    setattr(row, key, value)
                if row.is_fixed and not row.group_id:
                    row.group_id = group_id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for row in affected:
            self.db.refresh(row)
        logger.info(
            "Updated %d of %d transactions in group %s (scope=%s, from=%s)",
            len(affected), len(members), group_id, scope, from_date,
        )
        return affected

    def delete_group(self, group_id: str, scope: Scope, from_date: Optional[date] = None) -> int:
        members = self.get_group(group_id)
        doomed = select_scope(members, scope, from_date)
        try:
            for row in doomed:
                self.db.delete(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(
            "Deleted %d of %d transactions in group %s (scope=%s, from=%s)",
            len(doomed), len(members), group_id, scope, from_date,
        )
        return len(doomed)
