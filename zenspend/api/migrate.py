from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from zenspend.core.database import get_db
from zenspend.schemas import ApiResponse, ExportOut, ImportRequest, ImportResult
from zenspend.services import MigrationService

from .common import ok


router = APIRouter(prefix="/migrate", tags=["migrate"])


@router.post("/import", response_model=ApiResponse[ImportResult])
def import_data(payload: ImportRequest, db: Session = Depends(get_db)):
    """Import a full export; ids that already exist are skipped."""
    return ok(MigrationService(db).import_data(payload))


@router.get("/export", response_model=ApiResponse[ExportOut])
def export_data(db: Session = Depends(get_db)):
    return ok(MigrationService(db).export())
