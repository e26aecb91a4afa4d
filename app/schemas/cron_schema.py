# app/schemas/cron_schema.py
from datetime import datetime
from typing import List
from app.schemas.base_schema import CamelModel


class ClassStatusSummary(CamelModel):
    classes_checked: int = 0
    classes_completed: int = 0
    classes_started: int = 0
    errors: List[str] = []


class ClassStatusResponse(CamelModel):
    success: bool
    message: str
    details: ClassStatusSummary
    timestamp: datetime


class ReminderSummary(CamelModel):
    class_reminders: int = 0
    makeup_reminders: int = 0
    errors: List[str] = []

    @property
    def sent_count(self) -> int:
        return self.class_reminders + self.makeup_reminders


class ReminderResponse(CamelModel):
    success: bool
    message: str
    sent_count: int
    details: ReminderSummary
    timestamp: datetime
