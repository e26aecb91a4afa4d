from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.class_model import Class, ClassStatus
from app.schemas.class_schema import ClassCreate


def get_class(db: Session, class_id: str) -> Optional[Class]:
    return db.get(Class, class_id)


def get_all_classes(db: Session, skip: int = 0, limit: int = 100) -> List[Class]:
    stmt = select(Class).order_by(Class.start_date).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


def get_classes_by_status(db: Session, statuses: Sequence[ClassStatus]) -> List[Class]:
    """Lấy các lớp có trạng thái nằm trong danh sách statuses."""
    stmt = select(Class).where(Class.status.in_(list(statuses)))
    return db.execute(stmt).scalars().all()


def create_class(db: Session, class_data: ClassCreate) -> Class:
    db_class = Class(**class_data.model_dump())
    db.add(db_class)
    db.commit()
    db.refresh(db_class)
    return db_class


def mark_class_started(db: Session, db_class: Class, now: datetime, started_by: str) -> Class:
    db_class.status = ClassStatus.started
    db_class.started_at = now
    db_class.started_by = started_by
    db.commit()
    return db_class


def mark_class_completed(db: Session, db_class: Class, now: datetime, completed_by: str) -> Class:
    db_class.status = ClassStatus.completed
    db_class.completed_at = now
    db_class.completed_by = completed_by
    db.commit()
    return db_class
