# app/models/base_model.py
import uuid

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Lớp cơ sở khai báo cho các mô hình SQLAlchemy 2.0.
    Tất cả các mô hình khác sẽ kế thừa từ lớp này.
    """
    pass


def generate_id() -> str:
    """Sinh id dạng chuỗi (uuid4) cho các bản ghi."""
    return str(uuid.uuid4())
