from datetime import datetime
from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship
from app.models.base_model import Base, generate_id
import enum


class ClassStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    started = "started"
    completed = "completed"
    cancelled = "cancelled"


class Class(Base):
    __tablename__ = 'classes'

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    code = Column(String(50), nullable=True)
    subject_name = Column(String(100), nullable=True)
    teacher_name = Column(String(100), nullable=True)
    location = Column(String(200), nullable=True)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    # "HH:MM"
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    total_sessions = Column(Integer, nullable=False, default=0)

    status = Column(Enum(ClassStatus), nullable=False, default=ClassStatus.draft)

    # Dấu vết khi cron đổi trạng thái
    started_at = Column(DateTime, nullable=True)
    started_by = Column(String(50), nullable=True)
    completed_at = Column(DateTime, nullable=True)
    completed_by = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Quan hệ 1-n với ClassSchedule, Enrollment
    schedules = relationship(
        "ClassSchedule",
        back_populates="class_obj",
        cascade="all, delete-orphan",
        order_by="ClassSchedule.session_number",
    )
    enrollments = relationship(
        "Enrollment",
        back_populates="class_obj",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Class(name='{self.name}', status={self.status})>"
