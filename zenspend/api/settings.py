from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from zenspend.core.database import get_db
from zenspend.schemas import ApiResponse, SettingsOut, SettingsUpdate
from zenspend.services import SettingsService

from .common import ok


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=ApiResponse[SettingsOut])
def get_settings(db: Session = Depends(get_db)):
    return ok(SettingsService(db).get_or_create())


@router.put("", response_model=ApiResponse[SettingsOut])
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db)):
    return ok(SettingsService(db).update(payload.model_dump(exclude_unset=True)))
