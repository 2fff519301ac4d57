from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from zenspend.core.database import get_db
from zenspend.schemas import ApiResponse, CategoryCreate, CategoryOut, CategoryUpdate, DeletedFlag
from zenspend.services import CategoryService

from .common import ok


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[list[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    return ok(CategoryService(db).get_all())


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
def get_category(category_id: str, db: Session = Depends(get_db)):
    return ok(CategoryService(db).get(category_id))


@router.post("", response_model=ApiResponse[CategoryOut], status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return ok(CategoryService(db).create(payload.model_dump()))


@router.put("/{category_id}", response_model=ApiResponse[CategoryOut])
def update_category(category_id: str, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return ok(CategoryService(db).update(category_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{category_id}", response_model=ApiResponse[DeletedFlag])
def delete_category(category_id: str, db: Session = Depends(get_db)):
    CategoryService(db).delete(category_id)
    return ok(DeletedFlag(deleted=True))
