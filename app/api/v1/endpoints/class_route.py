# app/api/v1/endpoints/class_route.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.api.deps import get_db
from app.api.auth.auth import has_roles
from app.crud import class_crud, schedule_crud
from app.schemas import class_schema, schedule_schema

router = APIRouter()

# Dependency cho quyền truy cập của nhân viên quản lý
STAFF_ONLY = has_roles(["admin", "branch_admin"])

# Dependency cho quyền truy cập của nhân viên hoặc giáo viên
STAFF_OR_TEACHER = has_roles(["admin", "branch_admin", "teacher"])


# Tạo lớp học mới
@router.post(
    "/",
    response_model=class_schema.ClassRead,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo một lớp học mới",
    dependencies=[Depends(STAFF_ONLY)]
)
def create_new_class(class_in: class_schema.ClassCreate, db: Session = Depends(get_db)):
    """
    Tạo một lớp học mới. Lớp mới mặc định ở trạng thái draft;
    chuyển sang published để job hằng ngày tự bắt đầu lớp khi tới ngày.

    Quyền truy cập: **admin**, **branch_admin**
    """
    return class_crud.create_class(db=db, class_data=class_in)


# Lấy danh sách tất cả các lớp học
@router.get(
    "/",
    response_model=List[class_schema.ClassRead],
    summary="Lấy danh sách các lớp học",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def get_all_classes(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return class_crud.get_all_classes(db, skip=skip, limit=limit)


# Lấy thông tin một lớp học
@router.get(
    "/{class_id}",
    response_model=class_schema.ClassRead,
    summary="Lấy thông tin của một lớp học",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def get_class(class_id: str, db: Session = Depends(get_db)):
    db_class = class_crud.get_class(db, class_id=class_id)
    if db_class is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lớp học không tìm thấy."
        )
    return db_class


# Thêm buổi học cho lớp
@router.post(
    "/{class_id}/schedules",
    response_model=schedule_schema.ScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Thêm một buổi học vào lớp",
    dependencies=[Depends(STAFF_ONLY)]
)
def create_schedule(
    class_id: str,
    schedule_in: schedule_schema.ScheduleCreate,
    db: Session = Depends(get_db),
):
    if class_crud.get_class(db, class_id=class_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lớp học không tìm thấy."
        )
    return schedule_crud.create_schedule(db, class_id, schedule_in)


# Lấy danh sách buổi học của lớp
@router.get(
    "/{class_id}/schedules",
    response_model=List[schedule_schema.ScheduleRead],
    summary="Lấy danh sách buổi học của lớp",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def get_schedules(class_id: str, db: Session = Depends(get_db)):
    return schedule_crud.get_schedules_by_class_id(db, class_id)
