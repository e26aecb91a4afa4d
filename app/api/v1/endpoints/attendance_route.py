# app/api/v1/endpoints/attendance_route.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.auth.auth import has_roles
from app.api.deps import get_clock, get_db
from app.schemas import attendance_schema, schedule_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.services import attendance_service
from app.services.service_helper import Clock

router = APIRouter()

STAFF_OR_TEACHER = has_roles(["admin", "branch_admin", "teacher"])


@router.put(
    "/{class_id}/schedules/{schedule_id}/attendance",
    response_model=schedule_schema.ScheduleRead,
    summary="Điểm danh một buổi học"
)
def record_attendance(
    class_id: str,
    schedule_id: str,
    attendance_in: attendance_schema.AttendanceBatchUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: AuthenticatedUser = Depends(STAFF_OR_TEACHER),
):
    """
    Ghi điểm danh cho nhiều học sinh. Học sinh đã có bản ghi sẽ được ghi đè.

    Quyền truy cập: **admin**, **branch_admin**, **teacher**
    """
    return attendance_service.record_attendance(
        db, class_id, schedule_id, attendance_in, checked_by=current_user.user_id, now=clock.now()
    )
