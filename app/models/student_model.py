from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship
from app.models.base_model import Base, generate_id


class Student(Base):
    """
    Model cho bảng students.
    """
    __tablename__ = 'students'

    id = Column(String(36), primary_key=True, default=generate_id)
    parent_id = Column(String(36), ForeignKey("parents.id"), nullable=True)
    name = Column(String(100), nullable=False)
    nickname = Column(String(50), nullable=True)

    parent = relationship("Parent", back_populates="children")
    enrollments = relationship("Enrollment", back_populates="student")

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    def __repr__(self):
        return f"<Student(id='{self.id}')>"
