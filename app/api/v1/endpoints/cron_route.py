# app/api/v1/endpoints/cron_route.py
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app import config
from app.api.auth.auth import verify_cron_secret
from app.api.deps import get_clock, get_db
from app.exceptions import AuthError
from app.schemas import cron_schema
from app.services import class_status_service, reminder_service
from app.services.service_helper import Clock

logger = logging.getLogger(__name__)

router = APIRouter()


def _unauthorized() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})


def _job_failed(job_name: str, e: Exception) -> JSONResponse:
    logger.error(f"Cron job {job_name} failed: {e}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "message": str(e) if config.DEBUG else "Đã xảy ra lỗi hệ thống.",
        },
    )


@router.get(
    "/update-class-status",
    response_model=cron_schema.ClassStatusResponse,
    summary="Cập nhật trạng thái lớp học theo thời gian (cron hằng ngày)"
)
def update_class_status(
    request: Request,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    try:
        verify_cron_secret(request)
    except AuthError:
        return _unauthorized()

    now = clock.now()
    try:
        summary = class_status_service.update_class_statuses(db, now)
    except Exception as e:
        db.rollback()
        return _job_failed("update-class-status", e)

    return cron_schema.ClassStatusResponse(
        success=True,
        message=(
            f"Updated {summary.classes_completed} completed classes, "
            f"{summary.classes_started} started classes"
        ),
        details=summary,
        timestamp=now,
    )


@router.get(
    "/send-reminders",
    response_model=cron_schema.ReminderResponse,
    summary="Gửi nhắc lịch học và học bù cho ngày mai"
)
def send_reminders(
    request: Request,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    try:
        verify_cron_secret(request)
    except AuthError:
        return _unauthorized()

    now = clock.now()
    try:
        summary = reminder_service.send_reminders(db, now)
    except Exception as e:
        db.rollback()
        return _job_failed("send-reminders", e)

    return cron_schema.ReminderResponse(
        success=True,
        message=f"Đã gửi {summary.sent_count} thông báo nhắc lịch.",
        sent_count=summary.sent_count,
        details=summary,
        timestamp=now,
    )
