from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Enum, String
from sqlalchemy.orm import relationship
from app.models.base_model import Base, generate_id
import enum


# Enum trạng thái enrollment
class EnrollmentStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    dropped = "dropped"
    transferred = "transferred"


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(String(36), primary_key=True, default=generate_id)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(String(36), ForeignKey("parents.id"), nullable=True)

    enrolled_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(Enum(EnrollmentStatus), default=EnrollmentStatus.active, nullable=False)

    # Quan hệ với Student và Class
    student = relationship("Student", back_populates="enrollments")
    class_obj = relationship("Class", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(student_id={self.student_id}, class_id={self.class_id}, status={self.status})>"
