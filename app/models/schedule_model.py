from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, JSON
from sqlalchemy.orm import relationship
from app.models.base_model import Base, generate_id
import enum


class ScheduleStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    late = "late"
    sick = "sick"
    leave = "leave"


class ClassSchedule(Base):
    """
    Một buổi học của lớp. Danh sách điểm danh được nhúng trực tiếp
    trong cột `attendance` (mỗi học sinh tối đa một phần tử):
    {"studentId", "status", "note", "checkedAt", "checkedBy"}
    """
    __tablename__ = "class_schedules"

    id = Column(String(36), primary_key=True, default=generate_id)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    session_number = Column(Integer, nullable=False)
    session_date = Column(DateTime, nullable=False, index=True)
    status = Column(Enum(ScheduleStatus), nullable=False, default=ScheduleStatus.scheduled)
    topic = Column(String(200), nullable=True)
    note = Column(Text, nullable=True)
    attendance = Column(JSON, nullable=False, default=list)

    # Quan hệ với bảng classes
    class_obj = relationship("Class", back_populates="schedules")

    def __repr__(self):
        return f"<ClassSchedule(class_id={self.class_id}, session={self.session_number}, date={self.session_date})>"
