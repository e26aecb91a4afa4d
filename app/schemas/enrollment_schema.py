# app/schemas/enrollment_schema.py
from datetime import datetime
from app.models.enrollment_model import EnrollmentStatus
from app.schemas.base_schema import CamelModel


class EnrollmentCreate(CamelModel):
    student_id: str
    class_id: str


class EnrollmentUpdate(CamelModel):
    status: EnrollmentStatus


class EnrollmentRead(CamelModel):
    id: str
    student_id: str
    class_id: str
    parent_id: str | None = None
    status: EnrollmentStatus
    enrolled_at: datetime
