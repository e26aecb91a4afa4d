# app/schemas/makeup_schema.py
from datetime import datetime
from typing import Any, Dict, Literal, Optional
from pydantic import Field, field_validator
from app.models.makeup_model import MakeupStatus, MakeupType
from app.schemas.base_schema import CamelModel
from app.services.service_helper import parse_hhmm, to_local_naive


# ---- LIFF (phụ huynh tự thao tác) ----
class LeaveRequestCreate(CamelModel):
    """Các trường đều optional: thiếu trường được trả về 400 bằng thông báo nghiệp vụ."""
    student_id: Optional[str] = None
    class_id: Optional[str] = None
    schedule_id: Optional[str] = None
    reason: Optional[str] = None
    type: Optional[MakeupType] = None


class LeaveCancelRequest(CamelModel):
    makeup_id: Optional[str] = None
    student_id: Optional[str] = None
    class_id: Optional[str] = None
    schedule_id: Optional[str] = None


class ActionResponse(CamelModel):
    success: bool
    message: str


class LeaveRequestResponse(ActionResponse):
    makeup_id: str


# ---- Nhân viên ----
class MakeupScheduleCreate(CamelModel):
    date: datetime
    start_time: str = Field(..., example="14:00")
    end_time: str = Field(..., example="15:30")
    teacher_id: Optional[str] = None
    room_id: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value):
        return to_local_naive(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_hhmm(cls, value):
        parse_hhmm(value)
        return value


class MakeupAttendanceCreate(CamelModel):
    status: Literal["present", "absent"]
    note: Optional[str] = None


class MakeupCancel(CamelModel):
    reason: str = Field(..., min_length=1)


class MakeupNotificationTest(CamelModel):
    makeup_id: Optional[str] = None
    type: Literal["scheduled", "reminder"] = "scheduled"


class MakeupNotificationResult(CamelModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class MakeupRead(CamelModel):
    id: str
    type: MakeupType
    original_class_id: str
    original_schedule_id: str
    student_id: str
    parent_id: Optional[str] = None
    status: MakeupStatus
    requested_by: str
    reason: Optional[str] = None
    original_session_number: Optional[int] = None
    original_session_date: Optional[datetime] = None
    makeup_schedule: Optional[Dict[str, Any]] = None
    attendance: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    request_date: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None
