# app/api/v1/endpoints/makeup_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.auth.auth import has_roles
from app.api.deps import get_clock, get_db
from app.models.makeup_model import MakeupStatus
from app.schemas import makeup_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.services import makeup_service, notification_service
from app.services.service_helper import Clock

router = APIRouter()

# Quản lý học bù: admin và quản lý chi nhánh
STAFF_ONLY = has_roles(["admin", "branch_admin"])

# Điểm danh buổi học bù: thêm giáo viên
STAFF_OR_TEACHER = has_roles(["admin", "branch_admin", "teacher"])


@router.get(
    "/",
    response_model=List[makeup_schema.MakeupRead],
    summary="Danh sách yêu cầu học bù",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def list_makeups(
    student_id: Optional[str] = Query(None, alias="studentId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    makeup_status: Optional[MakeupStatus] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return makeup_service.list_makeups(
        db, student_id=student_id, class_id=class_id, status=makeup_status, skip=skip, limit=limit
    )


@router.get(
    "/orphaned",
    response_model=List[makeup_schema.MakeupRead],
    summary="Yêu cầu học bù trỏ tới lớp/học sinh không còn tồn tại",
    dependencies=[Depends(STAFF_ONLY)]
)
def list_orphaned_makeups(db: Session = Depends(get_db)):
    return makeup_service.find_orphaned_makeups(db)


@router.get(
    "/count",
    response_model=int,
    summary="Số lần học bù (chưa hủy) của học sinh trong một lớp",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def count_makeups(
    student_id: str = Query(..., alias="studentId"),
    class_id: str = Query(..., alias="classId"),
    db: Session = Depends(get_db),
):
    return makeup_service.get_makeup_count(db, student_id, class_id)


@router.post(
    "/test-notification",
    response_model=makeup_schema.MakeupNotificationResult,
    summary="Kiểm tra và gửi thử thông báo học bù"
)
def test_makeup_notification(
    test_in: makeup_schema.MakeupNotificationTest,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(STAFF_ONLY),
):
    """
    Kiểm tra lần lượt: yêu cầu học bù, lịch học bù, học sinh, phụ huynh, LINE ID,
    sau đó gửi thử. Dùng khi phụ huynh báo không nhận được tin nhắn.
    """
    if not test_in.makeup_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="makeupId is required")

    result = notification_service.verify_makeup_notification(db, test_in.makeup_id, test_in.type)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Makeup class not found")
    return result


@router.get(
    "/{makeup_id}",
    response_model=makeup_schema.MakeupRead,
    summary="Chi tiết một yêu cầu học bù",
    dependencies=[Depends(STAFF_OR_TEACHER)]
)
def get_makeup(makeup_id: str, db: Session = Depends(get_db)):
    return makeup_service.get_makeup(db, makeup_id)


@router.post(
    "/{makeup_id}/schedule",
    response_model=makeup_schema.MakeupRead,
    summary="Xếp lịch học bù"
)
def schedule_makeup(
    makeup_id: str,
    schedule_in: makeup_schema.MakeupScheduleCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: AuthenticatedUser = Depends(STAFF_ONLY),
):
    """
    Chuyển yêu cầu từ pending sang scheduled và gửi xác nhận cho phụ huynh qua LINE.

    Quyền truy cập: **admin**, **branch_admin**
    """
    return makeup_service.schedule_makeup(
        db, makeup_id, schedule_in, confirmed_by=current_user.user_id, now=clock.now()
    )


@router.post(
    "/{makeup_id}/attendance",
    response_model=makeup_schema.MakeupRead,
    summary="Điểm danh buổi học bù"
)
def record_makeup_attendance(
    makeup_id: str,
    attendance_in: makeup_schema.MakeupAttendanceCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: AuthenticatedUser = Depends(STAFF_OR_TEACHER),
):
    """
    Ghi nhận kết quả buổi học bù; yêu cầu chuyển sang completed.

    Quyền truy cập: **admin**, **branch_admin**, **teacher**
    """
    return makeup_service.record_makeup_attendance(
        db, makeup_id, attendance_in, checked_by=current_user.user_id, now=clock.now()
    )


@router.post(
    "/{makeup_id}/cancel",
    response_model=makeup_schema.MakeupRead,
    summary="Hủy yêu cầu học bù"
)
def cancel_makeup(
    makeup_id: str,
    cancel_in: makeup_schema.MakeupCancel,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: AuthenticatedUser = Depends(STAFF_ONLY),
):
    return makeup_service.cancel_makeup(
        db, makeup_id, cancel_in.reason, cancelled_by=current_user.user_id, now=clock.now()
    )
