# app/crud/makeup_crud.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.class_model import Class
from app.models.makeup_model import ACTIVE_MAKEUP_STATUSES, MakeupClass, MakeupStatus
from app.models.schedule_model import ClassSchedule


def get_makeup(db: Session, makeup_id: str) -> Optional[MakeupClass]:
    return db.get(MakeupClass, makeup_id)


def get_active_makeup(
    db: Session, student_id: str, class_id: str, schedule_id: str
) -> Optional[MakeupClass]:
    """Yêu cầu học bù đang hoạt động (pending/scheduled) cho một buổi của học sinh."""
    stmt = select(MakeupClass).where(
        MakeupClass.student_id == student_id,
        MakeupClass.original_class_id == class_id,
        MakeupClass.original_schedule_id == schedule_id,
        MakeupClass.status.in_(ACTIVE_MAKEUP_STATUSES),
    )
    return db.execute(stmt).scalars().first()


def search_makeups(
    db: Session,
    student_id: Optional[str] = None,
    class_id: Optional[str] = None,
    status: Optional[MakeupStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[MakeupClass]:
    query = select(MakeupClass)
    if student_id is not None:
        query = query.where(MakeupClass.student_id == student_id)
    if class_id is not None:
        query = query.where(MakeupClass.original_class_id == class_id)
    if status is not None:
        query = query.where(MakeupClass.status == status)
    query = query.order_by(MakeupClass.created_at.desc()).offset(skip).limit(limit)
    return db.execute(query).scalars().all()


def count_makeups(db: Session, student_id: str, class_id: str) -> int:
    """Số yêu cầu học bù (không tính đã hủy) của học sinh trong lớp."""
    stmt = select(func.count(MakeupClass.id)).where(
        MakeupClass.student_id == student_id,
        MakeupClass.original_class_id == class_id,
        MakeupClass.status != MakeupStatus.cancelled,
    )
    return db.execute(stmt).scalar_one()


def get_scheduled_makeups_between(db: Session, start: datetime, end: datetime) -> List[MakeupClass]:
    stmt = select(MakeupClass).where(
        MakeupClass.status == MakeupStatus.scheduled,
        MakeupClass.makeup_date >= start,
        MakeupClass.makeup_date < end,
    )
    return db.execute(stmt).scalars().all()


def get_orphaned_makeups(db: Session) -> List[MakeupClass]:
    """Các yêu cầu học bù mà lớp gốc hoặc buổi gốc không còn tồn tại."""
    class_ids = select(Class.id)
    schedule_ids = select(ClassSchedule.id)
    stmt = select(MakeupClass).where(
        MakeupClass.original_class_id.not_in(class_ids)
        | MakeupClass.original_schedule_id.not_in(schedule_ids)
    )
    return db.execute(stmt).scalars().all()


def create_makeup(db: Session, makeup: MakeupClass) -> MakeupClass:
    """
    Thêm yêu cầu học bù. IntegrityError (trùng active_key) được để nguyên
    cho service xử lý.
    """
    db.add(makeup)
    db.commit()
    db.refresh(makeup)
    return makeup


def delete_makeup(db: Session, makeup: MakeupClass) -> None:
    db.delete(makeup)
    db.commit()


def save(db: Session, makeup: MakeupClass) -> MakeupClass:
    db.commit()
    db.refresh(makeup)
    return makeup
