import os

# Phải đặt trước khi import app: engine mặc định không được trỏ tới Postgres
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["APP_TIMEZONE"] = "Asia/Bangkok"

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt # type: ignore
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import config
from app.api.deps import get_clock, get_db
from app.exceptions import UpstreamError
from app.models import (
    Base, Class, ClassSchedule, ClassStatus, Enrollment, EnrollmentStatus, Parent, Student,
)
from app.services import line_service
from app.services.service_helper import FixedClock
from main import app

# 1. Cấu hình SQLite In-Memory (DB ảo)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Thứ Hai 10/03/2025, 09:00 giờ địa phương
NOW = datetime(2025, 3, 10, 9, 0)
CRON_SECRET = "test-cron-secret"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def client(db, clock):
    # API và test dùng chung một session để đọc được ngay dữ liệu vừa ghi
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeLine:
    """Thay cho LINE Messaging API: ghi lại tin nhắn, có thể giả lập lỗi theo userId."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    def push_message(self, line_user_id, message, access_token=None):
        if line_user_id in self.fail_for:
            raise UpstreamError("LINE từ chối tin nhắn (status 500).")
        self.sent.append((line_user_id, message))

    def messages_to(self, line_user_id):
        return [message for user_id, message in self.sent if user_id == line_user_id]


@pytest.fixture(autouse=True)
def line(monkeypatch):
    fake = FakeLine()
    monkeypatch.setattr(line_service, "push_message", fake.push_message)
    return fake


@pytest.fixture
def cron_headers(monkeypatch):
    monkeypatch.setattr(config, "CRON_SECRET", CRON_SECRET)
    return {"Authorization": f"Bearer {CRON_SECRET}"}


def make_token(user_id="staff-01", roles=("admin",), name="Nhân viên A"):
    payload = {"sub": user_id, "roles": list(roles), "name": name}
    return jwt.encode(payload, config.SECRET_KEY, algorithm="HS256")


@pytest.fixture
def staff_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def teacher_headers():
    return {"Authorization": f"Bearer {make_token(user_id='teacher-01', roles=['teacher'])}"}


# ----------------- Dữ liệu mẫu -----------------
def add_class(db, **kwargs) -> Class:
    values = dict(
        name="Robotics A1",
        subject_name="Robotics",
        location="Chi nhánh 1",
        start_date=NOW - timedelta(days=30),
        end_date=NOW + timedelta(days=60),
        start_time="09:00",
        end_time="10:30",
        total_sessions=10,
        status=ClassStatus.started,
    )
    values.update(kwargs)
    class_obj = Class(**values)
    db.add(class_obj)
    db.commit()
    db.refresh(class_obj)
    return class_obj


def add_session(db, class_obj: Class, session_number: int, session_date: datetime, **kwargs) -> ClassSchedule:
    session = ClassSchedule(
        class_id=class_obj.id,
        session_number=session_number,
        session_date=session_date,
        **kwargs,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def add_family(db, line_user_id="U-parent-1", student_name="Nguyễn Minh An", nickname="An"):
    parent = Parent(display_name="Chị Hoa", phone="0900000000", line_user_id=line_user_id)
    db.add(parent)
    db.commit()
    student = Student(parent_id=parent.id, name=student_name, nickname=nickname)
    db.add(student)
    db.commit()
    db.refresh(parent)
    db.refresh(student)
    return parent, student


def enroll(db, student: Student, class_obj: Class, status=EnrollmentStatus.active) -> Enrollment:
    enrollment = Enrollment(
        student_id=student.id,
        class_id=class_obj.id,
        parent_id=student.parent_id,
        status=status,
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


@pytest.fixture
def seeded(db):
    """
    Một lớp đang học với ba buổi: đã qua, ngày mai (buổi 5) và tuần sau;
    một học sinh đang theo học, phụ huynh đã liên kết LINE.
    """
    class_obj = add_class(db)
    past_session = add_session(db, class_obj, 4, NOW - timedelta(days=2))
    tomorrow_session = add_session(db, class_obj, 5, NOW + timedelta(days=1))
    next_week_session = add_session(db, class_obj, 6, NOW + timedelta(days=7))
    parent, student = add_family(db)
    enrollment = enroll(db, student, class_obj)
    return SimpleNamespace(
        class_obj=class_obj,
        past_session=past_session,
        session=tomorrow_session,
        next_week_session=next_week_session,
        parent=parent,
        student=student,
        enrollment=enrollment,
    )


def leave_payload(seeded, schedule=None, **overrides):
    payload = {
        "studentId": seeded.student.id,
        "classId": seeded.class_obj.id,
        "scheduleId": (schedule or seeded.session).id,
        "reason": "Bé bị ốm",
        "type": "scheduled",
    }
    payload.update(overrides)
    return payload
