# app/services/makeup_service.py
"""
Vòng đời yêu cầu học bù:

    pending -> scheduled -> completed
    pending -> cancelled

completed và cancelled là trạng thái cuối. Phụ huynh hủy đơn xin nghỉ
(khi còn pending) sẽ xóa hẳn bản ghi thay vì chuyển sang cancelled.
"""
import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import class_crud, enrollment_crud, makeup_crud, parent_crud, schedule_crud
from app.exceptions import (
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    LeaveAlreadyCancelledError,
    NotFoundError,
    PastDateError,
    UpstreamError,
    ValidationError,
)
from app.models.enrollment_model import EnrollmentStatus
from app.models.makeup_model import MakeupClass, MakeupStatus, MakeupType
from app.schemas.makeup_schema import MakeupAttendanceCreate, MakeupScheduleCreate
from app.services import attendance_service, notification_service
from app.services.service_helper import is_past, parse_hhmm

logger = logging.getLogger(__name__)

LIFF_REQUESTER = "parent-liff"
DEFAULT_LIFF_REASON = "Xin nghỉ qua LIFF"


def _require(*values) -> None:
    if not all(values):
        raise ValidationError("Thiếu thông tin bắt buộc.")


def _get_makeup_or_404(db: Session, makeup_id: str) -> MakeupClass:
    makeup = makeup_crud.get_makeup(db, makeup_id)
    if not makeup:
        raise NotFoundError("Không tìm thấy yêu cầu học bù.")
    return makeup


# ----------------- Phụ huynh: xin nghỉ -----------------
def create_leave_request(
    db: Session,
    student_id: Optional[str],
    class_id: Optional[str],
    schedule_id: Optional[str],
    reason: Optional[str],
    makeup_type: Optional[MakeupType],
    now: datetime,
    requested_by: str = LIFF_REQUESTER,
) -> MakeupClass:
    """
    Tạo yêu cầu học bù (pending) cho buổi học mà học sinh sẽ vắng,
    đồng thời đánh dấu vắng trong danh sách điểm danh của buổi đó.
    """
    _require(student_id, class_id, schedule_id)

    class_obj = class_crud.get_class(db, class_id)
    if not class_obj:
        raise NotFoundError("Không tìm thấy lớp học.")

    schedule = schedule_crud.get_class_schedule(db, class_id, schedule_id)
    if not schedule:
        raise NotFoundError("Không tìm thấy buổi học.")

    student = parent_crud.get_student(db, student_id)
    if not student:
        raise NotFoundError("Không tìm thấy học sinh.")

    enrollment = enrollment_crud.get_enrollment(db, student_id, class_id)
    if not enrollment:
        raise NotFoundError("Học sinh chưa đăng ký lớp học này.")
    if enrollment.status != EnrollmentStatus.active:
        raise ForbiddenError("Học sinh không còn theo học lớp này.")

    if is_past(schedule.session_date, now):
        raise PastDateError("Không thể xin nghỉ cho buổi học đã diễn ra.")

    if makeup_crud.get_active_makeup(db, student_id, class_id, schedule_id):
        raise DuplicateRequestError("Đã có yêu cầu xin nghỉ cho buổi học này.")

    makeup = MakeupClass(
        type=makeup_type or MakeupType.scheduled,
        original_class_id=class_id,
        original_schedule_id=schedule_id,
        student_id=student_id,
        parent_id=student.parent_id or enrollment.parent_id,
        status=MakeupStatus.pending,
        requested_by=requested_by,
        reason=reason or DEFAULT_LIFF_REASON,
        original_session_number=schedule.session_number,
        original_session_date=schedule.session_date,
        active_key=MakeupClass.build_active_key(student_id, class_id, schedule_id),
        request_date=now,
        created_at=now,
    )
    try:
        makeup = makeup_crud.create_makeup(db, makeup)
    except IntegrityError:
        # Một yêu cầu khác cho cùng buổi vừa được ghi trước
        db.rollback()
        raise DuplicateRequestError("Đã có yêu cầu xin nghỉ cho buổi học này.")

    attendance_service.mark_absent_for_leave(
        db, schedule, student_id, makeup.reason, requested_by, now
    )
    logger.info(f"[Leave Request] Created makeup request {makeup.id} for student {student_id}")
    return makeup


def cancel_leave_request(
    db: Session,
    makeup_id: Optional[str],
    student_id: Optional[str],
    class_id: Optional[str],
    schedule_id: Optional[str],
    now: datetime,
) -> None:
    """
    Phụ huynh hủy đơn xin nghỉ: chỉ khi còn pending và buổi học chưa diễn ra.
    Bản ghi học bù bị xóa, phần tử điểm danh của học sinh được gỡ khỏi buổi học.
    """
    _require(makeup_id, student_id, class_id, schedule_id)

    makeup = makeup_crud.get_makeup(db, makeup_id)
    if not makeup:
        raise LeaveAlreadyCancelledError()

    if (
        makeup.student_id != student_id
        or makeup.original_class_id != class_id
        or makeup.original_schedule_id != schedule_id
    ):
        raise NotFoundError("Không tìm thấy thông tin xin nghỉ.")

    if makeup.status != MakeupStatus.pending:
        raise InvalidStateError("Không thể hủy vì đã có lịch học bù.")

    if is_past(makeup.original_session_date, now):
        raise PastDateError("Không thể hủy đơn xin nghỉ cho buổi học đã qua.")

    makeup_crud.delete_makeup(db, makeup)
    attendance_service.clear_leave_absence(db, class_id, schedule_id, student_id)
    logger.info(f"[Cancel Leave] Cancelled makeup request {makeup_id} for student {student_id}")


# ----------------- Nhân viên -----------------
def is_teacher_available(
    db: Session,
    teacher_id: str,
    date: datetime,
    start_time: str,
    end_time: str,
    exclude_id: Optional[str] = None,
) -> bool:
    """
    Giáo viên còn trống nếu khung giờ [start_time, end_time) không chồng lên
    buổi học bù đã xếp lịch nào khác của giáo viên trong cùng ngày.
    """
    start, end = parse_hhmm(start_time), parse_hhmm(end_time)
    day_start = datetime.combine(date.date(), time.min)
    for other in makeup_crud.get_scheduled_makeups_between(db, day_start, day_start + timedelta(days=1)):
        schedule = other.makeup_schedule or {}
        if other.id == exclude_id or schedule.get("teacherId") != teacher_id:
            continue
        if start < parse_hhmm(schedule["endTime"]) and end > parse_hhmm(schedule["startTime"]):
            return False
    return True


def schedule_makeup(
    db: Session,
    makeup_id: str,
    schedule_in: MakeupScheduleCreate,
    confirmed_by: str,
    now: datetime,
) -> MakeupClass:
    """pending -> scheduled, sau đó gửi thông báo xác nhận cho phụ huynh."""
    makeup = _get_makeup_or_404(db, makeup_id)
    if makeup.status != MakeupStatus.pending:
        raise InvalidStateError("Chỉ xếp lịch được cho yêu cầu đang chờ.")
    if is_past(schedule_in.date, now):
        raise PastDateError("Ngày học bù phải ở tương lai.")
    if parse_hhmm(schedule_in.start_time) >= parse_hhmm(schedule_in.end_time):
        raise ValidationError("Giờ bắt đầu phải trước giờ kết thúc.")
    if schedule_in.teacher_id and not is_teacher_available(
        db, schedule_in.teacher_id, schedule_in.date, schedule_in.start_time, schedule_in.end_time,
        exclude_id=makeup.id,
    ):
        raise InvalidStateError("Giáo viên đã có lịch dạy bù trùng giờ trong ngày này.")

    makeup.status = MakeupStatus.scheduled
    makeup.makeup_date = schedule_in.date
    makeup.makeup_schedule = {
        "date": schedule_in.date.isoformat(),
        "startTime": schedule_in.start_time,
        "endTime": schedule_in.end_time,
        "teacherId": schedule_in.teacher_id,
        "roomId": schedule_in.room_id,
        "confirmedBy": confirmed_by,
        "confirmedAt": now.isoformat(),
    }
    makeup.updated_at = now
    makeup = makeup_crud.save(db, makeup)

    try:
        notification_service.send_makeup_notification(db, makeup.id, "scheduled")
    except UpstreamError as e:
        logger.warning(f"Could not send makeup confirmation for {makeup.id}: {e.message}")

    return makeup


def record_makeup_attendance(
    db: Session,
    makeup_id: str,
    attendance_in: MakeupAttendanceCreate,
    checked_by: str,
    now: datetime,
) -> MakeupClass:
    """scheduled -> completed, kèm kết quả điểm danh buổi học bù."""
    makeup = _get_makeup_or_404(db, makeup_id)
    if makeup.status != MakeupStatus.scheduled:
        raise InvalidStateError("Chỉ điểm danh được cho buổi học bù đã xếp lịch.")

    makeup.status = MakeupStatus.completed
    makeup.attendance = {
        "status": attendance_in.status,
        "note": attendance_in.note,
        "checkedBy": checked_by,
        "checkedAt": now.isoformat(),
    }
    makeup.active_key = None
    makeup.updated_at = now
    return makeup_crud.save(db, makeup)


def cancel_makeup(
    db: Session,
    makeup_id: str,
    reason: str,
    cancelled_by: str,
    now: datetime,
) -> MakeupClass:
    """Nhân viên hủy yêu cầu đang chờ; bản ghi được giữ lại với trạng thái cancelled."""
    makeup = _get_makeup_or_404(db, makeup_id)
    if makeup.status != MakeupStatus.pending:
        raise InvalidStateError("Chỉ hủy được yêu cầu đang chờ.")

    makeup.status = MakeupStatus.cancelled
    makeup.notes = reason
    makeup.active_key = None
    makeup.updated_at = now
    makeup = makeup_crud.save(db, makeup)

    attendance_service.clear_leave_absence(
        db, makeup.original_class_id, makeup.original_schedule_id, makeup.student_id
    )
    logger.info(f"Makeup {makeup_id} cancelled by {cancelled_by}")
    return makeup


# ----------------- Truy vấn -----------------
def get_makeup(db: Session, makeup_id: str) -> MakeupClass:
    return _get_makeup_or_404(db, makeup_id)


def list_makeups(
    db: Session,
    student_id: Optional[str] = None,
    class_id: Optional[str] = None,
    status: Optional[MakeupStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[MakeupClass]:
    return makeup_crud.search_makeups(
        db, student_id=student_id, class_id=class_id, status=status, skip=skip, limit=limit
    )


def get_makeup_count(db: Session, student_id: str, class_id: str) -> int:
    return makeup_crud.count_makeups(db, student_id, class_id)


def find_orphaned_makeups(db: Session) -> List[MakeupClass]:
    orphans = makeup_crud.get_orphaned_makeups(db)
    if orphans:
        logger.warning(f"Found {len(orphans)} orphaned makeup requests")
    return orphans
