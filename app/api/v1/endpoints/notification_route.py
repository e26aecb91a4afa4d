from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import notification_crud
from app.api import deps
from app.schemas import notification_schema
from app.api.auth.auth import has_roles

router = APIRouter()

# Dependency cho quyền truy cập của nhân viên quản lý
STAFF_ONLY = has_roles(["admin", "branch_admin"])


@router.get(
    "/",
    response_model=List[notification_schema.NotificationRead],
    summary="Nhật ký thông báo LINE đã gửi",
    dependencies=[Depends(STAFF_ONLY)]
)
def get_all_notifications(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    makeup_id: Optional[str] = Query(None, alias="makeupId"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(deps.get_db),
):
    """
    Lấy nhật ký thông báo (kể cả lần gửi thất bại), mới nhất trước.

    Quyền truy cập: **admin**, **branch_admin**
    """
    return notification_crud.get_notifications(
        db, parent_id=parent_id, makeup_id=makeup_id, skip=skip, limit=limit
    )
