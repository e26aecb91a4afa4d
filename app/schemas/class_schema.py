from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from app.models.class_model import ClassStatus
from app.schemas.base_schema import CamelModel
from app.services.service_helper import parse_hhmm, to_local_naive


class ClassBase(CamelModel):
    name: str = Field(..., example="Robotics A1")
    code: Optional[str] = Field(None, example="RB-A1")
    subject_name: Optional[str] = Field(None, example="Robotics")
    teacher_name: Optional[str] = Field(None, example="Cô Lan")
    location: Optional[str] = Field(None, example="Chi nhánh 1 - Phòng 203")
    start_date: datetime
    end_date: Optional[datetime] = None
    start_time: Optional[str] = Field(None, example="09:00")
    end_time: Optional[str] = Field(None, example="10:30")
    total_sessions: int = Field(0, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_hhmm(cls, value):
        if value is not None:
            parse_hhmm(value)
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)


class ClassCreate(ClassBase):
    status: ClassStatus = ClassStatus.draft


class ClassRead(ClassBase):
    id: str
    status: ClassStatus
    started_at: Optional[datetime] = None
    started_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
