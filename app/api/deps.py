# app/api/deps.py
from typing import Generator
from sqlalchemy.orm import Session
from app.database import SessionLocal
from app.services.service_helper import Clock


def get_db() -> Generator[Session, None, None]:
    """Dependency để lấy phiên cơ sở dữ liệu."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Clock:
    """Dependency để lấy thời gian hiện tại (test override bằng FixedClock)."""
    return Clock()
