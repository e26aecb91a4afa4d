from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.schedule_model import ClassSchedule, ScheduleStatus
from app.schemas.schedule_schema import ScheduleCreate


def get_class_schedule(db: Session, class_id: str, schedule_id: str) -> Optional[ClassSchedule]:
    """Lấy buổi học và đảm bảo nó thuộc về lớp class_id."""
    stmt = select(ClassSchedule).where(
        ClassSchedule.id == schedule_id,
        ClassSchedule.class_id == class_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def get_schedules_by_class_id(db: Session, class_id: str) -> List[ClassSchedule]:
    stmt = (
        select(ClassSchedule)
        .where(ClassSchedule.class_id == class_id)
        .order_by(ClassSchedule.session_number)
    )
    return db.execute(stmt).scalars().all()


def get_active_schedules_by_class_id(db: Session, class_id: str) -> List[ClassSchedule]:
    """Các buổi chưa bị hủy của lớp."""
    stmt = select(ClassSchedule).where(
        ClassSchedule.class_id == class_id,
        ClassSchedule.status != ScheduleStatus.cancelled,
    )
    return db.execute(stmt).scalars().all()


def get_scheduled_sessions_between(
    db: Session, class_id: str, start: datetime, end: datetime
) -> List[ClassSchedule]:
    """Các buổi ở trạng thái scheduled có session_date trong [start, end)."""
    stmt = (
        select(ClassSchedule)
        .where(
            ClassSchedule.class_id == class_id,
            ClassSchedule.session_date >= start,
            ClassSchedule.session_date < end,
            ClassSchedule.status == ScheduleStatus.scheduled,
        )
        .order_by(ClassSchedule.session_date)
    )
    return db.execute(stmt).scalars().all()


def create_schedule(db: Session, class_id: str, schedule_in: ScheduleCreate) -> ClassSchedule:
    db_schedule = ClassSchedule(class_id=class_id, attendance=[], **schedule_in.model_dump())
    db.add(db_schedule)
    db.commit()
    db.refresh(db_schedule)
    return db_schedule
