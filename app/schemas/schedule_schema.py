from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.schedule_model import ScheduleStatus
from app.schemas.base_schema import CamelModel
from app.schemas.attendance_schema import AttendanceEntry
from app.services.service_helper import to_local_naive


class ScheduleCreate(CamelModel):
    session_number: int = Field(..., ge=1)
    session_date: datetime
    topic: Optional[str] = None
    status: ScheduleStatus = ScheduleStatus.scheduled

    @field_validator("session_date")
    @classmethod
    def normalize_session_date(cls, value):
        return to_local_naive(value)


class ScheduleRead(CamelModel):
    id: str
    class_id: str
    session_number: int
    session_date: datetime
    status: ScheduleStatus
    topic: Optional[str] = None
    note: Optional[str] = None
    attendance: List[AttendanceEntry] = []
