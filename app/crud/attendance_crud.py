# app/crud/attendance_crud.py
"""
Thao tác trên mảng attendance nhúng trong class_schedules.

Mảng được đọc ra, sửa trong bộ nhớ rồi ghi đè lại toàn bộ; gán list mới
để SQLAlchemy nhận biết thay đổi trên cột JSON.
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.schedule_model import AttendanceStatus, ClassSchedule


def build_entry(
    student_id: str,
    status: AttendanceStatus,
    note: Optional[str] = None,
    checked_at: Optional[datetime] = None,
    checked_by: Optional[str] = None,
) -> Dict:
    return {
        "studentId": student_id,
        "status": AttendanceStatus(status).value,
        "note": note,
        "checkedAt": checked_at.isoformat() if checked_at else None,
        "checkedBy": checked_by,
    }


def upsert_entries(db: Session, schedule: ClassSchedule, entries: List[Dict]) -> ClassSchedule:
    """
    Ghi nhiều bản ghi điểm danh: thay thế nếu đã có studentId, ngược lại thêm mới.
    """
    updated = [dict(entry) for entry in schedule.attendance or []]
    index_by_student = {entry.get("studentId"): i for i, entry in enumerate(updated)}

    for new_entry in entries:
        idx = index_by_student.get(new_entry["studentId"])
        if idx is None:
            index_by_student[new_entry["studentId"]] = len(updated)
            updated.append(new_entry)
        else:
            updated[idx] = new_entry

    schedule.attendance = updated
    db.commit()
    db.refresh(schedule)
    return schedule


def upsert_entry(db: Session, schedule: ClassSchedule, entry: Dict) -> ClassSchedule:
    return upsert_entries(db, schedule, [entry])


def remove_entry(db: Session, schedule: ClassSchedule, student_id: str) -> bool:
    """Xóa phần tử điểm danh của học sinh. Trả về False nếu không có gì để xóa."""
    current = schedule.attendance or []
    remaining = [dict(entry) for entry in current if entry.get("studentId") != student_id]
    if len(remaining) == len(current):
        return False

    schedule.attendance = remaining
    db.commit()
    db.refresh(schedule)
    return True
