from datetime import timedelta

import pytest

from app.exceptions import InvalidStateError
from app.models import MakeupClass, MakeupStatus
from app.schemas.makeup_schema import MakeupScheduleCreate
from app.services import attendance_service, makeup_service
from conftest import NOW, add_session, leave_payload

LEAVE_URL = "/api/v1/liff/leave-request"
CANCEL_URL = "/api/v1/liff/cancel-leave"


def _create_leave(client, seeded, schedule=None):
    response = client.post(LEAVE_URL, json=leave_payload(seeded, schedule=schedule))
    assert response.status_code == 200
    return response.json()["makeupId"]


def _cancel_payload(seeded, makeup_id, schedule=None):
    return {
        "makeupId": makeup_id,
        "studentId": seeded.student.id,
        "classId": seeded.class_obj.id,
        "scheduleId": (schedule or seeded.session).id,
    }


def _attendance_of(db, session, student_id):
    db.refresh(session)
    return [e for e in session.attendance if e["studentId"] == student_id]


def test_end_to_end_leave_then_cancel(client, db, seeded):
    response = client.post(LEAVE_URL, json=leave_payload(seeded, reason="sick"))
    body = response.json()
    assert body["success"] is True
    makeup_id = body["makeupId"]

    entries = _attendance_of(db, seeded.session, seeded.student.id)
    assert [e["status"] for e in entries] == ["absent"]

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert _attendance_of(db, seeded.session, seeded.student.id) == []
    assert db.get(MakeupClass, makeup_id) is None


def test_cancel_keeps_other_students_attendance(client, db, seeded):
    makeup_id = _create_leave(client, seeded)
    seeded.session.attendance = seeded.session.attendance + [
        {"studentId": "other-student", "status": "present", "note": None, "checkedAt": None, "checkedBy": None}
    ]
    db.commit()

    client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    db.refresh(seeded.session)
    assert [e["studentId"] for e in seeded.session.attendance] == ["other-student"]


def test_second_cancel_fails(client, db, seeded):
    makeup_id = _create_leave(client, seeded)
    first = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))
    second = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    assert first.status_code == 200
    assert second.status_code == 404
    assert second.json()["success"] is False


def test_second_cancel_raises_invalid_state(db, seeded):
    makeup = makeup_service.create_leave_request(
        db, seeded.student.id, seeded.class_obj.id, seeded.session.id, "ốm", None, NOW
    )
    makeup_id = makeup.id
    makeup_service.cancel_leave_request(
        db, makeup_id, seeded.student.id, seeded.class_obj.id, seeded.session.id, NOW
    )

    with pytest.raises(InvalidStateError):
        makeup_service.cancel_leave_request(
            db, makeup_id, seeded.student.id, seeded.class_obj.id, seeded.session.id, NOW
        )


def test_cancel_scheduled_makeup_is_rejected(client, db, seeded):
    makeup_id = _create_leave(client, seeded)
    makeup_service.schedule_makeup(
        db,
        makeup_id,
        MakeupScheduleCreate(date=NOW + timedelta(days=3), start_time="14:00", end_time="15:30"),
        confirmed_by="staff-01",
        now=NOW,
    )

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    assert response.status_code == 400
    assert response.json()["message"] == "Không thể hủy vì đã có lịch học bù."
    assert db.get(MakeupClass, makeup_id).status == MakeupStatus.scheduled
    assert len(_attendance_of(db, seeded.session, seeded.student.id)) == 1


def test_cancel_after_session_started_is_rejected(client, db, seeded, clock):
    makeup_id = _create_leave(client, seeded)
    clock.advance(days=1)

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    # Ngày buổi học == now: áp dụng cùng quy tắc với lúc tạo (đã qua)
    assert response.status_code == 400
    assert response.json()["message"] == "Không thể hủy đơn xin nghỉ cho buổi học đã qua."
    assert db.get(MakeupClass, makeup_id) is not None


def test_cancel_one_second_before_session_is_accepted(client, db, seeded, clock):
    makeup_id = _create_leave(client, seeded)
    clock.advance(days=1, seconds=-1)

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    assert response.status_code == 200


def test_cancel_with_mismatched_session_is_not_found(client, db, seeded):
    makeup_id = _create_leave(client, seeded)

    response = client.post(
        CANCEL_URL, json=_cancel_payload(seeded, makeup_id, schedule=seeded.next_week_session)
    )

    assert response.status_code == 404
    assert db.get(MakeupClass, makeup_id) is not None


def test_cancel_missing_fields(client, seeded):
    response = client.post(CANCEL_URL, json={"makeupId": "abc"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Thiếu thông tin bắt buộc."}


def test_attendance_cleanup_failure_is_swallowed(client, db, seeded, monkeypatch):
    makeup_id = _create_leave(client, seeded)

    def broken_remove(*args, **kwargs):
        raise RuntimeError("write conflict")

    monkeypatch.setattr(attendance_service.attendance_crud, "remove_entry", broken_remove)

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id))

    assert response.status_code == 200
    assert db.get(MakeupClass, makeup_id) is None


def test_cancel_for_session_later_in_week(client, db, seeded):
    session = add_session(db, seeded.class_obj, 8, NOW + timedelta(days=10))
    makeup_id = _create_leave(client, seeded, schedule=session)

    response = client.post(CANCEL_URL, json=_cancel_payload(seeded, makeup_id, schedule=session))

    assert response.status_code == 200
    assert _attendance_of(db, session, seeded.student.id) == []
