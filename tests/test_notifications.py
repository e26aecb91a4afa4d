from datetime import timedelta

import pytest
import requests

from app import config
from app.exceptions import UpstreamError
from app.schemas.makeup_schema import MakeupScheduleCreate
from app.services import line_service, makeup_service
from app.services.line_service import push_message as real_push_message
from conftest import NOW

TEST_URL = "/api/v1/makeup/test-notification"


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = str(self._payload)

    def json(self):
        return self._payload


def _scheduled_makeup(db, seeded):
    makeup = makeup_service.create_leave_request(
        db, seeded.student.id, seeded.class_obj.id, seeded.session.id, "ốm", None, NOW
    )
    return makeup_service.schedule_makeup(
        db,
        makeup.id,
        MakeupScheduleCreate(date=NOW + timedelta(days=4), start_time="14:00", end_time="15:30"),
        confirmed_by="staff-01",
        now=NOW,
    )


# ----------------- LINE Messaging API -----------------
def test_push_message_posts_text_message(monkeypatch):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(200)

    monkeypatch.setattr(config, "LINE_CHANNEL_ACCESS_TOKEN", "channel-token")
    monkeypatch.setattr(line_service.requests, "post", fake_post)

    real_push_message("U-parent-1", "Xin chào")

    assert captured["url"] == config.LINE_PUSH_URL
    assert captured["headers"]["Authorization"] == "Bearer channel-token"
    assert captured["json"] == {"to": "U-parent-1", "messages": [{"type": "text", "text": "Xin chào"}]}
    assert captured["timeout"] == config.LINE_TIMEOUT_SECONDS


def test_push_message_without_token_fails(monkeypatch):
    monkeypatch.setattr(config, "LINE_CHANNEL_ACCESS_TOKEN", None)

    with pytest.raises(UpstreamError):
        real_push_message("U-parent-1", "Xin chào")


def test_push_message_rejected_by_line(monkeypatch):
    monkeypatch.setattr(config, "LINE_CHANNEL_ACCESS_TOKEN", "channel-token")
    monkeypatch.setattr(
        line_service.requests, "post", lambda *args, **kwargs: FakeResponse(400, {"message": "Invalid to"})
    )

    with pytest.raises(UpstreamError):
        real_push_message("U-parent-1", "Xin chào")


def test_push_message_network_error(monkeypatch):
    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("timed out")

    monkeypatch.setattr(config, "LINE_CHANNEL_ACCESS_TOKEN", "channel-token")
    monkeypatch.setattr(line_service.requests, "post", broken_post)

    with pytest.raises(UpstreamError):
        real_push_message("U-parent-1", "Xin chào")


# ----------------- Kiểm tra thông báo học bù -----------------
def test_verify_notification_sends_when_all_checks_pass(client, db, seeded, staff_headers, line):
    makeup = _scheduled_makeup(db, seeded)
    line.sent.clear()

    response = client.post(TEST_URL, json={"makeupId": makeup.id, "type": "reminder"}, headers=staff_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["hasLineId"] is True
    assert body["data"]["scheduleTime"] == "14:00 - 15:30"
    assert len(line.messages_to(seeded.parent.line_user_id)) == 1


def test_verify_notification_reports_pending_makeup(client, db, seeded, staff_headers, line):
    makeup = makeup_service.create_leave_request(
        db, seeded.student.id, seeded.class_obj.id, seeded.session.id, "ốm", None, NOW
    )

    body = client.post(TEST_URL, json={"makeupId": makeup.id}, headers=staff_headers).json()

    assert body["success"] is False
    assert body["data"] == {"status": "pending", "hasSchedule": False}
    assert line.sent == []


def test_verify_notification_reports_missing_line_link(client, db, seeded, staff_headers):
    makeup = _scheduled_makeup(db, seeded)
    seeded.parent.line_user_id = None
    db.commit()

    body = client.post(TEST_URL, json={"makeupId": makeup.id}, headers=staff_headers).json()

    assert body["success"] is False
    assert body["message"] == "Phụ huynh chưa liên kết LINE."


def test_verify_notification_reports_delivery_error(client, db, seeded, staff_headers, line):
    makeup = _scheduled_makeup(db, seeded)
    line.fail_for.add(seeded.parent.line_user_id)

    body = client.post(TEST_URL, json={"makeupId": makeup.id}, headers=staff_headers).json()

    assert body["success"] is False
    assert body["error"]


def test_verify_notification_unknown_makeup(client, staff_headers):
    response = client.post(TEST_URL, json={"makeupId": "missing"}, headers=staff_headers)

    assert response.status_code == 404


def test_verify_notification_requires_makeup_id(client, staff_headers):
    response = client.post(TEST_URL, json={}, headers=staff_headers)

    assert response.status_code == 400


def test_notification_log_lists_sent_messages(client, db, seeded, staff_headers):
    makeup = _scheduled_makeup(db, seeded)

    response = client.get("/api/v1/notifications/", params={"makeupId": makeup.id}, headers=staff_headers)

    assert response.status_code == 200
    items = response.json()
    assert len(items) == 1
    assert items[0]["type"] == "makeup_scheduled"
    assert items[0]["delivered"] is True
    assert items[0]["parentId"] == seeded.parent.id
