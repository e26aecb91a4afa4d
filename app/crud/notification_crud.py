from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.models.notification_model import Notification, NotificationType


def get_notifications(
    db: Session,
    parent_id: Optional[str] = None,
    makeup_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Notification]:
    """Lấy nhật ký thông báo, lọc theo phụ huynh hoặc yêu cầu học bù."""
    stmt = select(Notification)
    if parent_id is not None:
        stmt = stmt.where(Notification.parent_id == parent_id)
    if makeup_id is not None:
        stmt = stmt.where(Notification.makeup_id == makeup_id)
    stmt = stmt.order_by(Notification.sent_at.desc()).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


def create_notification(
    db: Session,
    parent_id: str,
    notif_type: NotificationType,
    content: str,
    delivered: bool,
    student_id: Optional[str] = None,
    makeup_id: Optional[str] = None,
    error: Optional[str] = None,
) -> Notification:
    db_notification = Notification(
        parent_id=parent_id,
        student_id=student_id,
        makeup_id=makeup_id,
        type=notif_type,
        content=content,
        delivered=delivered,
        error=error,
    )
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification
