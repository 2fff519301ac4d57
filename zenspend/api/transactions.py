"""Transaction routes: single-row CRUD plus recurrence groups.

Group routes live under ``/transactions/group/{group_id}``; a group id never
collides with ``/transactions/{txn_id}`` because the extra path segment is
required.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from zenspend.core.database import get_db
from zenspend.models import TxnType
from zenspend.schemas import (
    ApiResponse,
    DeletedCount,
    DeletedFlag,
    GroupScope,
    GroupUpdateRequest,
    RecurringCreate,
    TransactionCreate,
    TransactionFilter,
    TransactionOut,
    TransactionUpdate,
)
from zenspend.services import RecurrenceService, TransactionService

from .common import ok


router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=ApiResponse[list[TransactionOut]])
def list_transactions(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    type: Optional[TxnType] = Query(None),
    is_fixed: Optional[bool] = Query(None, alias="isFixed"),
    db: Session = Depends(get_db),
):
    filters = TransactionFilter(
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        type=type,
        is_fixed=is_fixed,
    )
    return ok(TransactionService(db).list(filters))


@router.post("", response_model=ApiResponse[TransactionOut], status_code=201)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    return ok(TransactionService(db).create(payload.model_dump()))


@router.post("/recurring", response_model=ApiResponse[list[TransactionOut]], status_code=201)
def create_recurring_transactions(payload: RecurringCreate, db: Session = Depends(get_db)):
    return ok(RecurrenceService(db).generate(payload.base.model_dump(), payload.months))


@router.put("/group/{group_id}", response_model=ApiResponse[list[TransactionOut]])
def update_transaction_group(group_id: str, payload: GroupUpdateRequest, db: Session = Depends(get_db)):
    patch = payload.updates.model_dump(exclude_unset=True)
    return ok(RecurrenceService(db).apply_to_group(group_id, patch, payload.scope, payload.from_date))


@router.delete("/group/{group_id}", response_model=ApiResponse[DeletedCount])
def delete_transaction_group(
    group_id: str,
    scope: GroupScope = Query("all"),
    from_date: Optional[date] = Query(None, alias="fromDate"),
    db: Session = Depends(get_db),
):
    deleted = RecurrenceService(db).delete_group(group_id, scope, from_date)
    return ok(DeletedCount(deleted=deleted))


@router.get("/{txn_id}", response_model=ApiResponse[TransactionOut])
def get_transaction(txn_id: str, db: Session = Depends(get_db)):
    return ok(TransactionService(db).get(txn_id))


@router.put("/{txn_id}", response_model=ApiResponse[TransactionOut])
def update_transaction(txn_id: str, payload: TransactionUpdate, db: Session = Depends(get_db)):
    return ok(TransactionService(db).update(txn_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{txn_id}", response_model=ApiResponse[DeletedFlag])
def delete_transaction(txn_id: str, db: Session = Depends(get_db)):
    TransactionService(db).delete(txn_id)
    return ok(DeletedFlag(deleted=True))
