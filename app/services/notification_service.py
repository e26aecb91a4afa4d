# app/services/notification_service.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.crud import class_crud, makeup_crud, notification_crud, parent_crud
from app.exceptions import UpstreamError
from app.models.makeup_model import MakeupClass, MakeupStatus
from app.models.notification_model import NotificationType
from app.models.parent_model import Parent
from app.models.schedule_model import ClassSchedule
from app.services import line_service

logger = logging.getLogger(__name__)

CLASS_REMINDER_TEMPLATE = (
    "Nhắc lịch: bé {student_name} có buổi học {subject_name} vào ngày mai\n"
    "📅 {date}\n⏰ {time}\n📍 {location}\n\nHẹn gặp bé ở lớp nhé!"
)
MAKEUP_TEMPLATE = (
    "Lịch học bù\n\nBé {student_name}\nMôn: {subject_name}\n"
    "📅 {date}\n⏰ {time}\n👩‍🏫 Giáo viên: {teacher_name}\n📍 {location}"
)
MAKEUP_REMINDER_PREFIX = "⏰ [Nhắc lịch học bù ngày mai]"
MAKEUP_SCHEDULED_PREFIX = "✅ [Xác nhận lịch học bù]"
MAKEUP_SCHEDULED_SUFFIX = "Nếu cần thay đổi, vui lòng liên hệ trung tâm."

NOT_SPECIFIED = "Chưa xác định"


def _format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def _deliver(
    db: Session,
    parent: Parent,
    content: str,
    notif_type: NotificationType,
    student_id: Optional[str] = None,
    makeup_id: Optional[str] = None,
) -> bool:
    """Push qua LINE và ghi lại kết quả vào bảng notifications."""
    try:
        line_service.push_message(parent.line_user_id, content)
    except UpstreamError as e:
        notification_crud.create_notification(
            db, parent_id=parent.id, notif_type=notif_type, content=content,
            delivered=False, student_id=student_id, makeup_id=makeup_id, error=e.message,
        )
        raise

    notification_crud.create_notification(
        db, parent_id=parent.id, notif_type=notif_type, content=content,
        delivered=True, student_id=student_id, makeup_id=makeup_id,
    )
    return True


def _resolve_recipient(db: Session, student_id: str):
    """Trả về (student, parent) nếu phụ huynh đã liên kết LINE, ngược lại (student, None)."""
    student = parent_crud.get_student(db, student_id)
    if not student or not student.parent_id:
        return student, None
    parent = parent_crud.get_parent(db, student.parent_id)
    if not parent or not parent.line_user_id:
        return student, None
    return student, parent


# ----------------- Nhắc lịch lớp thường -----------------
def send_class_reminder(db: Session, student_id: str, class_id: str, session: ClassSchedule) -> bool:
    """
    Nhắc phụ huynh về buổi học ngày mai.
    Trả về False nếu không xác định được người nhận (chưa có LINE, thiếu dữ liệu).
    """
    student, parent = _resolve_recipient(db, student_id)
    if parent is None:
        logger.info(f"Skip class reminder: student {student_id} has no LINE recipient")
        return False

    class_obj = class_crud.get_class(db, class_id)
    if not class_obj:
        return False

    time_range = NOT_SPECIFIED
    if class_obj.start_time and class_obj.end_time:
        time_range = f"{class_obj.start_time} - {class_obj.end_time}"

    content = CLASS_REMINDER_TEMPLATE.format(
        student_name=student.display_name,
        subject_name=class_obj.subject_name or class_obj.name,
        date=_format_date(session.session_date),
        time=time_range,
        location=class_obj.location or NOT_SPECIFIED,
    )
    _deliver(db, parent, content, NotificationType.class_reminder, student_id=student_id)
    logger.info(f"Sent class reminder for student {student_id} class {class_id}")
    return True


# ----------------- Thông báo học bù -----------------
def build_makeup_message(db: Session, makeup: MakeupClass, student_name: str, kind: str) -> str:
    schedule = makeup.makeup_schedule or {}
    class_obj = class_crud.get_class(db, makeup.original_class_id)

    makeup_date = makeup.makeup_date or datetime.fromisoformat(schedule["date"])
    message = MAKEUP_TEMPLATE.format(
        student_name=student_name,
        subject_name=(class_obj.subject_name or class_obj.name) if class_obj else NOT_SPECIFIED,
        date=_format_date(makeup_date),
        time=f"{schedule.get('startTime')} - {schedule.get('endTime')}",
        teacher_name=schedule.get("teacherId") or NOT_SPECIFIED,
        location=schedule.get("roomId") or (class_obj.location if class_obj else None) or NOT_SPECIFIED,
    )

    if kind == "reminder":
        return f"{MAKEUP_REMINDER_PREFIX}\n\n{message}"
    return f"{MAKEUP_SCHEDULED_PREFIX}\n\n{message}\n\n{MAKEUP_SCHEDULED_SUFFIX}"


def send_makeup_notification(db: Session, makeup_id: str, kind: str) -> bool:
    """
    kind: "scheduled" (khi vừa xếp lịch) hoặc "reminder" (trước 1 ngày).
    """
    makeup = makeup_crud.get_makeup(db, makeup_id)
    if not makeup or not makeup.makeup_schedule:
        return False

    student, parent = _resolve_recipient(db, makeup.student_id)
    if parent is None:
        logger.info(f"Skip makeup {kind}: student {makeup.student_id} has no LINE recipient")
        return False

    content = build_makeup_message(db, makeup, student.display_name, kind)
    notif_type = NotificationType.makeup_reminder if kind == "reminder" else NotificationType.makeup_scheduled
    _deliver(db, parent, content, notif_type, student_id=makeup.student_id, makeup_id=makeup.id)
    logger.info(f"Sent makeup {kind} for makeup {makeup_id}")
    return True


def verify_makeup_notification(db: Session, makeup_id: str, kind: str = "scheduled") -> Optional[Dict[str, Any]]:
    """
    Kiểm tra từng bước điều kiện gửi thông báo học bù rồi gửi thử.
    Dùng cho nhân viên khi phụ huynh báo không nhận được tin nhắn.
    """
    makeup = makeup_crud.get_makeup(db, makeup_id)
    if not makeup:
        return None

    if makeup.status != MakeupStatus.scheduled or not makeup.makeup_schedule:
        return {
            "success": False,
            "message": "Yêu cầu học bù chưa được xếp lịch.",
            "data": {"status": makeup.status.value, "hasSchedule": bool(makeup.makeup_schedule)},
        }

    student = parent_crud.get_student(db, makeup.student_id)
    if not student:
        return {
            "success": False,
            "message": "Không tìm thấy học sinh.",
            "data": {"parentId": makeup.parent_id, "studentId": makeup.student_id},
        }

    parent_id = makeup.parent_id or student.parent_id
    parent = parent_crud.get_parent(db, parent_id) if parent_id else None
    if not parent:
        return {"success": False, "message": "Không tìm thấy phụ huynh."}

    if not parent.line_user_id:
        return {
            "success": False,
            "message": "Phụ huynh chưa liên kết LINE.",
            "data": {"parentId": parent.id, "parentName": parent.display_name},
        }

    data = {
        "makeupId": makeup.id,
        "studentName": student.name,
        "parentName": parent.display_name,
        "hasLineId": True,
        "scheduleDate": makeup.makeup_schedule.get("date"),
        "scheduleTime": f"{makeup.makeup_schedule.get('startTime')} - {makeup.makeup_schedule.get('endTime')}",
    }
    try:
        sent = send_makeup_notification(db, makeup.id, kind)
    except UpstreamError as e:
        return {
            "success": False,
            "message": "Gửi thông báo thất bại.",
            "error": e.message,
            "data": data,
        }

    return {
        "success": sent,
        "message": "Đã gửi thông báo thành công." if sent else "Không gửi được thông báo.",
        "data": data,
    }
