# app/api/v1/endpoints/enrollment_route.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_db
from app.api.auth.auth import has_roles
from app.crud import class_crud, enrollment_crud, parent_crud
from app.models.enrollment_model import EnrollmentStatus
from app.schemas import enrollment_schema

router = APIRouter()

STAFF_ONLY = has_roles(["admin", "branch_admin"])
STAFF_OR_TEACHER = has_roles(["admin", "branch_admin", "teacher"])


@router.post(
    "/",
    response_model=enrollment_schema.EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Đăng ký học sinh vào lớp",
    dependencies=[Depends(STAFF_ONLY)]
)
def create_enrollment(enrollment_in: enrollment_schema.EnrollmentCreate, db: Session = Depends(get_db)):
    student = parent_crud.get_student(db, enrollment_in.student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Học sinh không tìm thấy.")
    if not class_crud.get_class(db, enrollment_in.class_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lớp học không tìm thấy.")

    existing = enrollment_crud.get_enrollment(db, enrollment_in.student_id, enrollment_in.class_id)
    if existing and existing.status == EnrollmentStatus.active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Học sinh đã đăng ký lớp này."
        )
    return enrollment_crud.create_enrollment(db, student, enrollment_in.class_id)


@router.get(
    "/class/{class_id}",
    response_model=List[enrollment_schema.EnrollmentRead],
    summary="Danh sách học sinh đăng ký của một lớp",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def get_enrollments_by_class(class_id: str, db: Session = Depends(get_db)):
    return enrollment_crud.get_enrollments_by_class_id(db, class_id)


@router.patch(
    "/{enrollment_id}",
    response_model=enrollment_schema.EnrollmentRead,
    summary="Cập nhật trạng thái đăng ký (nghỉ học, chuyển lớp...)",
    dependencies=[Depends(STAFF_ONLY)]
)
def update_enrollment(
    enrollment_id: str,
    enrollment_update: enrollment_schema.EnrollmentUpdate,
    db: Session = Depends(get_db),
):
    db_enrollment = enrollment_crud.update_enrollment_status(db, enrollment_id, enrollment_update.status)
    if db_enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy đăng ký.")
    return db_enrollment
