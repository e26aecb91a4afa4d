# app/api/v1/endpoints/parent_route.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_db
from app.api.auth.auth import has_roles
from app.crud import parent_crud
from app.schemas import parent_schema

router = APIRouter()

STAFF_ONLY = has_roles(["admin", "branch_admin"])


@router.post(
    "/",
    response_model=parent_schema.ParentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo hồ sơ phụ huynh",
    dependencies=[Depends(STAFF_ONLY)]
)
def create_parent(parent_in: parent_schema.ParentCreate, db: Session = Depends(get_db)):
    return parent_crud.create_parent(db, parent_in)


@router.get(
    "/",
    response_model=List[parent_schema.ParentRead],
    summary="Danh sách phụ huynh",
    dependencies=[Depends(STAFF_ONLY)]
)
def get_all_parents(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return parent_crud.get_all_parents(db, skip=skip, limit=limit)


@router.post(
    "/{parent_id}/students",
    response_model=parent_schema.StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Thêm học sinh cho phụ huynh",
    dependencies=[Depends(STAFF_ONLY)]
)
def add_student(parent_id: str, student_in: parent_schema.StudentCreate, db: Session = Depends(get_db)):
    parent = parent_crud.get_parent(db, parent_id)
    if not parent:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Phụ huynh không tìm thấy.")
    return parent_crud.add_student(db, parent, student_in)
