from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.models.base_model import Base, generate_id


class Parent(Base):
    __tablename__ = 'parents'

    id = Column(String(36), primary_key=True, default=generate_id)
    display_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    # userId của LINE, dùng để push thông báo
    line_user_id = Column(String(64), nullable=True)

    # Một phụ huynh có nhiều học sinh
    children = relationship("Student", back_populates="parent")

    def __repr__(self):
        return f"<Parent(id={self.id})>"
