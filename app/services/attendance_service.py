import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import attendance_crud, schedule_crud
from app.exceptions import NotFoundError, ValidationError
from app.models.schedule_model import AttendanceStatus, ClassSchedule
from app.schemas.attendance_schema import AttendanceBatchUpdate

logger = logging.getLogger(__name__)


def record_attendance(
    db: Session,
    class_id: str,
    schedule_id: str,
    attendance_data: AttendanceBatchUpdate,
    checked_by: str,
    now: datetime,
) -> ClassSchedule:
    """
    Điểm danh thủ công cho một buổi học.
    Mỗi học sinh chỉ có một bản ghi: điểm danh lại sẽ ghi đè bản ghi cũ.
    """
    schedule = schedule_crud.get_class_schedule(db, class_id, schedule_id)
    if not schedule:
        raise NotFoundError("Không tìm thấy buổi học.")

    student_ids = [record.student_id for record in attendance_data.records]
    if len(student_ids) != len(set(student_ids)):
        raise ValidationError("Mỗi học sinh chỉ được điểm danh một lần trong một yêu cầu.")

    entries = [
        attendance_crud.build_entry(
            student_id=record.student_id,
            status=record.status,
            note=record.note,
            checked_at=now,
            checked_by=checked_by,
        )
        for record in attendance_data.records
    ]
    return attendance_crud.upsert_entries(db, schedule, entries)


# ----------------- Đồng bộ điểm danh khi xin nghỉ / hủy nghỉ -----------------
# Hai hàm dưới đây là bước phụ sau khi ghi yêu cầu học bù: lỗi chỉ được log,
# không làm hỏng thao tác chính.

def mark_absent_for_leave(
    db: Session,
    schedule: ClassSchedule,
    student_id: str,
    reason: Optional[str],
    requested_by: str,
    now: datetime,
) -> bool:
    try:
        entry = attendance_crud.build_entry(
            student_id=student_id,
            status=AttendanceStatus.absent,
            note=f"Xin học bù: {reason}" if reason else "Xin học bù",
            checked_at=now,
            checked_by=requested_by,
        )
        attendance_crud.upsert_entry(db, schedule, entry)
        return True
    except Exception:
        db.rollback()
        logger.warning(
            f"[Leave Request] Could not mark student {student_id} absent on schedule {schedule.id}",
            exc_info=True,
        )
        return False


def clear_leave_absence(db: Session, class_id: str, schedule_id: str, student_id: str) -> bool:
    try:
        schedule = schedule_crud.get_class_schedule(db, class_id, schedule_id)
        if not schedule:
            return False
        return attendance_crud.remove_entry(db, schedule, student_id)
    except Exception:
        db.rollback()
        logger.warning(
            f"[Cancel Leave] Could not remove attendance of student {student_id} on schedule {schedule_id}",
            exc_info=True,
        )
        return False
