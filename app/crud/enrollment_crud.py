# app/crud/enrollment_crud.py
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.models.enrollment_model import Enrollment, EnrollmentStatus
from app.models.student_model import Student


def get_enrollment(db: Session, student_id: str, class_id: str) -> Optional[Enrollment]:
    """
    Lấy bản ghi enrollment của học sinh trong lớp.
    Nếu có nhiều bản ghi (vd: đã chuyển lớp rồi quay lại) ưu tiên bản ghi active.
    """
    stmt = select(Enrollment).where(
        Enrollment.student_id == student_id,
        Enrollment.class_id == class_id,
    )
    enrollments = db.execute(stmt).scalars().all()
    if not enrollments:
        return None
    for enrollment in enrollments:
        if enrollment.status == EnrollmentStatus.active:
            return enrollment
    return enrollments[0]


def get_active_enrollments_by_class_id(db: Session, class_id: str) -> List[Enrollment]:
    """
    Lấy danh sách enrollments đang active theo class_id.
    """
    stmt = select(Enrollment).where(
        Enrollment.class_id == class_id,
        Enrollment.status == EnrollmentStatus.active,
    )
    return db.execute(stmt).scalars().all()


def get_enrollments_by_class_id(db: Session, class_id: str) -> List[Enrollment]:
    stmt = select(Enrollment).where(Enrollment.class_id == class_id)
    return db.execute(stmt).scalars().all()


def create_enrollment(db: Session, student: Student, class_id: str) -> Enrollment:
    db_enrollment = Enrollment(
        student_id=student.id,
        class_id=class_id,
        parent_id=student.parent_id,
        status=EnrollmentStatus.active,
    )
    db.add(db_enrollment)
    db.commit()
    db.refresh(db_enrollment)
    return db_enrollment


def update_enrollment_status(db: Session, enrollment_id: str, status: EnrollmentStatus) -> Optional[Enrollment]:
    """Cập nhật trạng thái enrollment."""
    db_enrollment = db.get(Enrollment, enrollment_id)
    if db_enrollment:
        db_enrollment.status = status
        db.commit()
        db.refresh(db_enrollment)
    return db_enrollment
