# app/api/v1/endpoints/liff_route.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_clock, get_db
from app.schemas import makeup_schema
from app.services import makeup_service
from app.services.service_helper import Clock

router = APIRouter()


@router.post(
    "/leave-request",
    response_model=makeup_schema.LeaveRequestResponse,
    status_code=status.HTTP_200_OK,
    summary="Phụ huynh xin nghỉ một buổi học (tạo yêu cầu học bù)"
)
def create_leave_request(
    request_in: makeup_schema.LeaveRequestCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Được gọi từ LINE LIFF của phụ huynh.

    - Buổi học phải ở tương lai và học sinh phải đang theo học lớp.
    - Mỗi (học sinh, lớp, buổi) chỉ có một yêu cầu còn hiệu lực.
    - Học sinh được đánh dấu vắng trong điểm danh của buổi đó.
    """
    makeup = makeup_service.create_leave_request(
        db,
        student_id=request_in.student_id,
        class_id=request_in.class_id,
        schedule_id=request_in.schedule_id,
        reason=request_in.reason,
        makeup_type=request_in.type,
        now=clock.now(),
    )
    return makeup_schema.LeaveRequestResponse(
        success=True,
        message="Đã ghi nhận đơn xin nghỉ.",
        makeup_id=makeup.id,
    )


@router.post(
    "/cancel-leave",
    response_model=makeup_schema.ActionResponse,
    summary="Phụ huynh hủy đơn xin nghỉ"
)
def cancel_leave_request(
    cancel_in: makeup_schema.LeaveCancelRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Chỉ hủy được khi yêu cầu còn ở trạng thái chờ và buổi học chưa diễn ra.
    """
    makeup_service.cancel_leave_request(
        db,
        makeup_id=cancel_in.makeup_id,
        student_id=cancel_in.student_id,
        class_id=cancel_in.class_id,
        schedule_id=cancel_in.schedule_id,
        now=clock.now(),
    )
    return makeup_schema.ActionResponse(success=True, message="Đã hủy đơn xin nghỉ.")
