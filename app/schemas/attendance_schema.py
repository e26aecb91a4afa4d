# app/schemas/attendance_schema.py
from datetime import datetime
from typing import List, Optional
from app.models.schedule_model import AttendanceStatus
from app.schemas.base_schema import CamelModel


class AttendanceEntry(CamelModel):
    """Một phần tử trong mảng attendance của buổi học"""
    student_id: str
    status: AttendanceStatus
    note: Optional[str] = None
    checked_at: Optional[datetime] = None
    checked_by: Optional[str] = None


class AttendanceCheckItem(CamelModel):
    student_id: str
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceBatchUpdate(CamelModel):
    """Điểm danh thủ công nhiều học sinh cho một buổi"""
    records: List[AttendanceCheckItem]
