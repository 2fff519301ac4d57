from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from zenspend.core.database import get_db
from zenspend.core.errors import ValidationFailed
from zenspend.schemas import ApiResponse, BalanceProjectionOut, BudgetOverviewOut, WeeklySummaryOut
from zenspend.services import BudgetService
from zenspend.utils.dates import week_range

from .common import ok


router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/overview", response_model=ApiResponse[BudgetOverviewOut])
def budget_overview(
    as_of: Optional[date] = Query(None, alias="date", description="Day whose week/month is summarized (default: today)"),
    db: Session = Depends(get_db),
):
    today = date.today()
    return ok(BudgetService(db).overview(as_of or today, today=today))


@router.get("/weekly-summary", response_model=ApiResponse[WeeklySummaryOut])
def budget_weekly_summary(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    if start is None and end is None:
        start, end = week_range(date.today())
    elif start is None or end is None:
        raise ValidationFailed("start and end must be provided together")
    if end < start:
        raise ValidationFailed("end must not precede start", details={"start": start, "end": end})
    return ok(BudgetService(db).weekly(start, end))


@router.get("/projection", response_model=ApiResponse[BalanceProjectionOut])
def budget_projection(db: Session = Depends(get_db)):
    return ok(BudgetService(db).projection())
