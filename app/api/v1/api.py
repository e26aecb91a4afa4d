# app/api/v1/api.py
from fastapi import APIRouter

# --- Import các routers cho nhân viên ---
from app.api.v1.endpoints.class_route import router as class_router
from app.api.v1.endpoints.attendance_route import router as attendance_router
from app.api.v1.endpoints.enrollment_route import router as enrollment_router
from app.api.v1.endpoints.parent_route import router as parent_router
from app.api.v1.endpoints.makeup_route import router as makeup_router
from app.api.v1.endpoints.notification_route import router as notification_router
# --- Import các routers gọi từ bên ngoài (LINE LIFF, cron) ---
from app.api.v1.endpoints.liff_route import router as liff_router
from app.api.v1.endpoints.cron_route import router as cron_router

api_router = APIRouter()

# --- Bao gồm các routers vào router chính ---
api_router.include_router(class_router, prefix="/classes", tags=["Classes"])
api_router.include_router(attendance_router, prefix="/classes", tags=["Attendances"])
api_router.include_router(enrollment_router, prefix="/enrollments", tags=["Enrollments"])
api_router.include_router(parent_router, prefix="/parents", tags=["Parents"])
api_router.include_router(makeup_router, prefix="/makeup", tags=["Makeup Classes"])
api_router.include_router(notification_router, prefix="/notifications", tags=["Notifications"])
# --- Bao gồm các routers gọi từ bên ngoài ---
api_router.include_router(liff_router, prefix="/liff", tags=["LIFF"])
api_router.include_router(cron_router, prefix="/cron", tags=["Cron"])
