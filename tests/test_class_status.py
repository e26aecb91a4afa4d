from datetime import timedelta

from app.models import ClassStatus, ScheduleStatus
from app.services import class_status_service
from conftest import NOW, add_class, add_session

STATUS_URL = "/api/v1/cron/update-class-status"


def test_published_class_starts_once(client, db, cron_headers):
    class_obj = add_class(db, status=ClassStatus.published, start_date=NOW - timedelta(hours=1))

    first = client.get(STATUS_URL, headers=cron_headers)
    second = client.get(STATUS_URL, headers=cron_headers)

    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["details"] == {
        "classesChecked": 1,
        "classesCompleted": 0,
        "classesStarted": 1,
        "errors": [],
    }
    assert second.json()["details"]["classesStarted"] == 0

    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.started
    assert class_obj.started_by == "system-cron"
    assert class_obj.started_at == NOW


def test_published_class_in_future_is_untouched(db):
    class_obj = add_class(db, status=ClassStatus.published, start_date=NOW + timedelta(days=1))

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_checked == 1
    assert summary.classes_started == 0
    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.published


def test_started_class_completes_after_end_date(db):
    class_obj = add_class(db, start_date=NOW - timedelta(days=60), end_date=NOW - timedelta(days=2))
    add_session(db, class_obj, 1, NOW - timedelta(days=9))
    add_session(db, class_obj, 2, NOW - timedelta(days=2))

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_completed == 1
    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.completed
    assert class_obj.completed_by == "system-cron"
    assert class_obj.completed_at == NOW


def test_class_with_future_session_stays_started(db):
    class_obj = add_class(db, start_date=NOW - timedelta(days=60), end_date=NOW - timedelta(days=2))
    add_session(db, class_obj, 1, NOW - timedelta(days=9))
    add_session(db, class_obj, 2, NOW + timedelta(days=3))

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_completed == 0
    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.started


def test_cancelled_future_session_is_ignored(db):
    class_obj = add_class(db, start_date=NOW - timedelta(days=60), end_date=NOW - timedelta(days=2))
    add_session(db, class_obj, 1, NOW - timedelta(days=9))
    add_session(db, class_obj, 2, NOW + timedelta(days=3), status=ScheduleStatus.cancelled)

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_completed == 1


def test_end_date_today_is_not_yet_past(db):
    class_obj = add_class(db, start_date=NOW - timedelta(days=60), end_date=NOW.replace(hour=0))

    class_status_service.update_class_statuses(db, NOW)

    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.started


def test_class_without_sessions_completes(db):
    class_obj = add_class(db, start_date=NOW - timedelta(days=60), end_date=NOW - timedelta(days=1))

    class_status_service.update_class_statuses(db, NOW)

    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.completed


def test_missing_end_date_skips_completion(db):
    class_obj = add_class(db, end_date=None)

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_checked == 1
    assert summary.errors == []
    db.refresh(class_obj)
    assert class_obj.status == ClassStatus.started


def test_published_class_cannot_start_and_complete_in_one_pass(db):
    class_obj = add_class(
        db,
        status=ClassStatus.published,
        start_date=NOW - timedelta(days=60),
        end_date=NOW - timedelta(days=1),
    )

    first = class_status_service.update_class_statuses(db, NOW)
    db.refresh(class_obj)
    assert (first.classes_started, first.classes_completed) == (1, 0)
    assert class_obj.status == ClassStatus.started

    second = class_status_service.update_class_statuses(db, NOW)
    db.refresh(class_obj)
    assert (second.classes_started, second.classes_completed) == (0, 1)
    assert class_obj.status == ClassStatus.completed


def test_draft_and_completed_classes_are_not_candidates(db):
    add_class(db, status=ClassStatus.draft, start_date=NOW - timedelta(days=1))
    add_class(db, status=ClassStatus.completed, end_date=NOW - timedelta(days=10))

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_checked == 0


def test_one_failing_class_does_not_block_others(db, monkeypatch):
    broken = add_class(db, name="Broken", status=ClassStatus.published, start_date=NOW - timedelta(days=1))
    healthy = add_class(db, name="Healthy", status=ClassStatus.published, start_date=NOW - timedelta(days=1))
    original = class_status_service.class_crud.mark_class_started

    def flaky_mark_started(db, class_obj, now, started_by):
        if class_obj.id == broken.id:
            raise RuntimeError("store unavailable")
        return original(db, class_obj, now, started_by)

    monkeypatch.setattr(class_status_service.class_crud, "mark_class_started", flaky_mark_started)

    summary = class_status_service.update_class_statuses(db, NOW)

    assert summary.classes_checked == 2
    assert summary.classes_started == 1
    assert summary.errors == [f"Class {broken.id}: store unavailable"]
    db.refresh(healthy)
    assert healthy.status == ClassStatus.started


def test_catastrophic_failure_returns_500(client, cron_headers, monkeypatch):
    def broken_query(*args, **kwargs):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(class_status_service.class_crud, "get_classes_by_status", broken_query)

    response = client.get(STATUS_URL, headers=cron_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal server error"
    assert "connection refused" not in body["message"]
