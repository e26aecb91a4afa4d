# app/services/class_status_service.py
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.crud import class_crud, schedule_crud
from app.models.class_model import Class, ClassStatus
from app.schemas.cron_schema import ClassStatusSummary
from app.services.service_helper import collect_errors, end_of_day

logger = logging.getLogger(__name__)

SYSTEM_CRON = "system-cron"


def _all_sessions_past(db: Session, class_id: str, now: datetime) -> bool:
    """
    True nếu mọi buổi chưa hủy đều đã diễn ra (hoặc buổi cuối cùng đã qua).
    Lớp không có buổi nào được coi là đã học xong.
    """
    sessions = schedule_crud.get_active_schedules_by_class_id(db, class_id)
    session_dates = [s.session_date for s in sessions if s.session_date is not None]
    if not session_dates:
        return True

    all_past = all(d <= now for d in session_dates)
    last_session_date = max(session_dates)
    return all_past or last_session_date < now


def reconcile_class(db: Session, class_obj: Class, now: datetime, summary: ClassStatusSummary) -> bool:
    """
    Cập nhật trạng thái cho một lớp dựa trên thời gian hiện tại.
    Cả hai điều kiện đều xét trên trạng thái đọc được trước khi cập nhật,
    nên một lớp không thể vừa bắt đầu vừa kết thúc trong cùng một lần chạy.
    """
    status_snapshot = class_obj.status
    changed = False

    # 1. started -> completed khi đã qua hết ngày end_date và không còn buổi nào phía trước
    if status_snapshot == ClassStatus.started and class_obj.end_date is not None:
        if end_of_day(class_obj.end_date) < now:
            logger.info(f"Class '{class_obj.name}' ({class_obj.id}) end date has passed")
            if _all_sessions_past(db, class_obj.id, now):
                class_crud.mark_class_completed(db, class_obj, now, SYSTEM_CRON)
                summary.classes_completed += 1
                changed = True
                logger.info(f"  ✓ Marked class {class_obj.id} as completed")
            else:
                logger.info(f"  - Class {class_obj.id} still has future sessions")

    # 2. published -> started khi tới ngày bắt đầu
    if status_snapshot == ClassStatus.published and class_obj.start_date is not None:
        if class_obj.start_date <= now:
            class_crud.mark_class_started(db, class_obj, now, SYSTEM_CRON)
            summary.classes_started += 1
            changed = True
            logger.info(f"  ✓ Marked class {class_obj.id} as started")

    return changed


def update_class_statuses(db: Session, now: datetime) -> ClassStatusSummary:
    """
    Job định kỳ: chuyển trạng thái các lớp published/started theo thời gian.
    Lỗi của từng lớp được ghi lại trong summary.errors, không dừng cả batch.
    """
    logger.info("=== Starting class status update job ===")
    summary = ClassStatusSummary()

    candidates = class_crud.get_classes_by_status(db, [ClassStatus.published, ClassStatus.started])
    logger.info(f"Found {len(candidates)} published/started classes")

    def handle(class_obj: Class) -> bool:
        summary.classes_checked += 1
        return reconcile_class(db, class_obj, now, summary)

    batch = collect_errors(
        candidates,
        handle,
        describe=lambda class_obj, e: f"Class {class_obj.id}: {e}",
        on_error=db.rollback,
    )
    summary.errors.extend(batch.errors)

    logger.info(
        f"=== Class status update completed: checked={summary.classes_checked}, "
        f"completed={summary.classes_completed}, started={summary.classes_started}, "
        f"errors={len(summary.errors)} ==="
    )
    return summary
