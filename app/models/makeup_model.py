# app/models/makeup_model.py
from datetime import datetime
from sqlalchemy import Column, DateTime, Enum, Integer, String, Text, JSON, UniqueConstraint
from app.models.base_model import Base, generate_id
import enum


class MakeupStatus(str, enum.Enum):
    pending = "pending"
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


ACTIVE_MAKEUP_STATUSES = (MakeupStatus.pending, MakeupStatus.scheduled)


class MakeupType(str, enum.Enum):
    scheduled = "scheduled"
    ad_hoc = "ad-hoc"


class MakeupClass(Base):
    """
    Một yêu cầu học bù: từ buổi vắng (pending) -> đã xếp lịch (scheduled)
    -> đã học (completed), hoặc pending -> cancelled.

    `active_key` chỉ có giá trị khi yêu cầu còn hiệu lực (pending/scheduled);
    ràng buộc UNIQUE đảm bảo mỗi (học sinh, lớp, buổi) có tối đa một yêu cầu
    đang hoạt động.
    """
    __tablename__ = "makeup_classes"
    __table_args__ = (UniqueConstraint("active_key", name="uq_makeup_active_key"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(Enum(MakeupType, values_callable=lambda e: [m.value for m in e]), nullable=False, default=MakeupType.scheduled)

    # Không dùng ForeignKey: bản ghi học bù vẫn giữ lại khi lớp/buổi bị xóa
    original_class_id = Column(String(36), nullable=False, index=True)
    original_schedule_id = Column(String(36), nullable=False)
    student_id = Column(String(36), nullable=False, index=True)
    parent_id = Column(String(36), nullable=True)

    status = Column(Enum(MakeupStatus), nullable=False, default=MakeupStatus.pending)
    requested_by = Column(String(50), nullable=False)
    reason = Column(Text, nullable=True)

    # Sao chép tại thời điểm tạo, không tính lại
    original_session_number = Column(Integer, nullable=True)
    original_session_date = Column(DateTime, nullable=True)

    makeup_schedule = Column(JSON, nullable=True)
    # Ngày học bù (tách riêng từ makeup_schedule để truy vấn theo khoảng ngày)
    makeup_date = Column(DateTime, nullable=True, index=True)
    attendance = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)

    active_key = Column(String(120), nullable=True)

    request_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    @staticmethod
    def build_active_key(student_id: str, class_id: str, schedule_id: str) -> str:
        return f"{student_id}:{class_id}:{schedule_id}"

    def __repr__(self):
        return f"<MakeupClass(id={self.id}, student_id={self.student_id}, status={self.status})>"
