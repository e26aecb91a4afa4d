# app/services/reminder_service.py
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.crud import class_crud, enrollment_crud, makeup_crud, schedule_crud
from app.models.class_model import ClassStatus
from app.models.makeup_model import MakeupClass
from app.schemas.cron_schema import ReminderSummary
from app.services import notification_service
from app.services.service_helper import collect_errors, tomorrow_window

logger = logging.getLogger(__name__)


def _send_class_reminders(db: Session, start: datetime, end: datetime, summary: ReminderSummary) -> None:
    classes = class_crud.get_classes_by_status(db, [ClassStatus.started])
    logger.info(f"Found {len(classes)} started classes")

    for class_obj in classes:
        sessions = schedule_crud.get_scheduled_sessions_between(db, class_obj.id, start, end)
        if not sessions:
            continue

        enrollments = enrollment_crud.get_active_enrollments_by_class_id(db, class_obj.id)
        logger.info(
            f"Class '{class_obj.name}': {len(sessions)} sessions tomorrow, "
            f"{len(enrollments)} active students"
        )

        for session in sessions:
            batch = collect_errors(
                enrollments,
                lambda enrollment: notification_service.send_class_reminder(
                    db, enrollment.student_id, class_obj.id, session
                ),
                describe=lambda enrollment, e: (
                    f"Class reminder error: student {enrollment.student_id}, "
                    f"session {session.id}: {e}"
                ),
                on_error=db.rollback,
            )
            summary.class_reminders += batch.succeeded
            summary.errors.extend(batch.errors)


def _send_makeup_reminders(db: Session, start: datetime, end: datetime, summary: ReminderSummary) -> None:
    makeups = makeup_crud.get_scheduled_makeups_between(db, start, end)
    logger.info(f"Found {len(makeups)} makeup classes for tomorrow")

    def handle(makeup: MakeupClass) -> bool:
        return notification_service.send_makeup_notification(db, makeup.id, "reminder")

    batch = collect_errors(
        makeups,
        handle,
        describe=lambda makeup, e: f"Makeup reminder error: makeup {makeup.id}: {e}",
        on_error=db.rollback,
    )
    summary.makeup_reminders += batch.succeeded
    summary.errors.extend(batch.errors)


def send_reminders(db: Session, now: datetime) -> ReminderSummary:
    """
    Job định kỳ: nhắc lịch các buổi học và buổi học bù diễn ra vào ngày mai.
    Mỗi lần gửi độc lập; lỗi được ghi vào summary.errors.
    """
    start, end = tomorrow_window(now)
    logger.info(f"=== Starting reminder job for {start:%d/%m/%Y} ===")

    summary = ReminderSummary()
    _send_class_reminders(db, start, end, summary)
    _send_makeup_reminders(db, start, end, summary)

    logger.info(
        f"=== Reminder job completed: total={summary.sent_count}, "
        f"class={summary.class_reminders}, makeup={summary.makeup_reminders}, "
        f"errors={len(summary.errors)} ==="
    )
    return summary
