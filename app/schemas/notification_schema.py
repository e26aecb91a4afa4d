from datetime import datetime
from typing import Optional
from app.models.notification_model import NotificationType
from app.schemas.base_schema import CamelModel


class NotificationRead(CamelModel):
    """
    Schema để đọc nhật ký thông báo.
    """
    id: str
    parent_id: str
    student_id: Optional[str] = None
    makeup_id: Optional[str] = None
    type: NotificationType
    content: str
    channel: str
    delivered: bool
    error: Optional[str] = None
    sent_at: Optional[datetime] = None
