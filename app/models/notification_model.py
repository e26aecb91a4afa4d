# app/models/notification_model.py
from sqlalchemy import Boolean, Column, DateTime, Enum, String, Text, func
from app.models.base_model import Base, generate_id
import enum


class NotificationType(str, enum.Enum):
    """Định nghĩa các loại thông báo."""
    class_reminder = "class_reminder"
    makeup_scheduled = "makeup_scheduled"
    makeup_reminder = "makeup_reminder"


class Notification(Base):
    """
    Nhật ký các thông báo đã gửi (hoặc gửi lỗi) tới phụ huynh.
    """
    __tablename__ = 'notifications'

    id = Column(String(36), primary_key=True, default=generate_id)
    parent_id = Column(String(36), nullable=False, index=True)
    student_id = Column(String(36), nullable=True)
    makeup_id = Column(String(36), nullable=True)
    type = Column(Enum(NotificationType), nullable=False)
    content = Column(Text, nullable=False)
    channel = Column(String(20), nullable=False, default="line")
    delivered = Column(Boolean, default=False, nullable=False)
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime, default=func.now())
