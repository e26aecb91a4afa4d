# main.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from apscheduler.schedulers.asyncio import AsyncIOScheduler # type: ignore
from apscheduler.triggers.cron import CronTrigger # type: ignore
from fastapi.middleware.cors import CORSMiddleware
from app import config
from app.api.v1.api import api_router
from app.database import Base, engine, SessionLocal
from app.exceptions import AppError
from app.models import *
from app.services import class_status_service, reminder_service
from app.services.service_helper import Clock
import logging

# Cấu hình logging cho ứng dụng và APScheduler
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logging.getLogger('apscheduler').setLevel(logging.INFO)

logger = logging.getLogger(__name__)

# Tạo scheduler
scheduler = AsyncIOScheduler(timezone=config.APP_TIMEZONE)


# Các tác vụ sẽ được lập lịch (khi không dùng cron bên ngoài)
async def run_class_status_task():
    """Tác vụ cập nhật trạng thái lớp học, chạy hằng ngày."""
    db = SessionLocal()
    try:
        summary = class_status_service.update_class_statuses(db, Clock().now())
        logger.info(f"Tác vụ cập nhật trạng thái lớp học đã chạy: {summary.model_dump()}")
    except Exception as e:
        logger.error(f"Lỗi khi chạy tác vụ cập nhật trạng thái lớp học: {e}", exc_info=True)
    finally:
        db.close()


async def run_reminder_task():
    """Tác vụ gửi nhắc lịch học cho ngày mai."""
    db = SessionLocal()
    try:
        summary = reminder_service.send_reminders(db, Clock().now())
        logger.info(f"Tác vụ nhắc lịch đã gửi {summary.sent_count} thông báo.")
    except Exception as e:
        logger.error(f"Lỗi khi chạy tác vụ nhắc lịch: {e}", exc_info=True)
    finally:
        db.close()


# Hàm lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tạo tất cả các bảng trong cơ sở dữ liệu
    Base.metadata.create_all(bind=engine)

    if config.ENABLE_SCHEDULER:
        scheduler.add_job(
            run_class_status_task,
            trigger=CronTrigger(hour=config.RECONCILE_CRON_HOUR, minute=0),
            id="class_status_job",
            name="Update Class Statuses"
        )
        scheduler.add_job(
            run_reminder_task,
            trigger=CronTrigger(hour=config.REMINDER_CRON_HOUR, minute=0),
            id="reminder_job",
            name="Send Tomorrow Reminders"
        )
        scheduler.start()
        logger.info("Scheduler đã được khởi động.")

    yield # Điểm này ứng dụng sẽ chạy

    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler đã tắt.")


# Khởi tạo ứng dụng FastAPI với lifespan handler
app = FastAPI(
    title="Makeup Class API",
    description="API quản lý xin nghỉ, học bù và nhắc lịch học qua LINE.",
    version="1.0.0",
    lifespan=lifespan
)

# Cấu hình CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------- Xử lý lỗi -----------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # LIFF chỉ hiển thị thông báo ngắn cho phụ huynh
    if request.url.path.startswith("/api/v1/liff"):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Thiếu thông tin bắt buộc."},
        )
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    content = {"success": False, "message": "Đã xảy ra lỗi hệ thống."}
    if config.DEBUG:
        content["debug"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Bao gồm router chính của API v1
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Makeup Class API! Visit /docs for API documentation."}
