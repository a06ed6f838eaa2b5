from __future__ import annotations

import json

import pytest

from src.face_attendance.face_attendance.core.exceptions import PersistenceError
from src.face_attendance.face_attendance.main import create_app


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def test_time_log_checkin_created(client, descriptor):
    resp = client.post("/time-logs", json={"faceDescriptor": json.dumps(descriptor(0)), "type": "checkin"})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["employee"]["id"] == 1
    assert body["employee"]["employeeCode"] == "EMP001"
    assert body["distance"] == 0.0
    assert body["timeLog"]["type"] == "checkin"
    assert body["workHours"] is None
    assert body["message"] == "Check-in successful for Nguyen Van A"


def test_verify_endpoint_accepts_mode_spelling(client, descriptor):
    resp = client.post("/face-recognition/verify", json={"descriptor": descriptor(10), "mode": "check_in"})

    assert resp.status_code == 201
    assert resp.get_json()["employee"]["id"] == 2


def test_second_checkin_is_rejected(client, descriptor):
    payload = {"faceDescriptor": descriptor(0), "type": "checkin"}
    client.post("/time-logs", json=payload)

    resp = client.post("/time-logs", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "already_checked_in"


def test_checkout_without_checkin(client, descriptor):
    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(0), "type": "checkout"})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "not_checked_in"


@pytest.mark.parametrize(
    "payload, code",
    [
        ({"type": "checkin"}, "invalid_request"),
        ({"faceDescriptor": "  ", "type": "checkin"}, "invalid_request"),
        ({"faceDescriptor": "[0.1, 0.2]", "type": "checkin"}, "invalid_descriptor"),
        ({"faceDescriptor": "0.1,abc", "type": "checkin"}, "invalid_descriptor"),
        ({"faceDescriptor": "[1" + "0" * 400 + "," + ",".join(["0.1"] * 127) + "]", "type": "checkin"}, "invalid_descriptor"),
    ],
)
def test_bad_descriptor_payloads(client, payload, code):
    resp = client.post("/time-logs", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["code"] == code


def test_bad_type(client, descriptor):
    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(0), "type": "lunch"})

    assert resp.status_code == 400
    assert "check-in or check-out" in resp.get_json()["error"]


def test_non_object_body(client):
    resp = client.post("/time-logs", json=[1, 2, 3])
    assert resp.status_code == 400


def test_unknown_face(client, descriptor):
    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(60), "type": "checkin"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "identification_failed"


def test_storage_failure_maps_to_500(client, container, descriptor, monkeypatch):
    def boom(*args, **kwargs):
        raise PersistenceError("connection lost")

    monkeypatch.setattr(container.face_attendance_service, "identify_and_record", boom)

    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(0), "type": "checkin"})

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["code"] == "persistence_error"
    assert "connection lost" not in body["error"]


def test_unexpected_failure_maps_to_500(client, container, descriptor, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("bug")

    monkeypatch.setattr(container.face_attendance_service, "identify_and_record", boom)

    resp = client.post("/face-recognition/verify", json={"descriptor": descriptor(0), "mode": "check_in"})

    assert resp.status_code == 500
    assert resp.get_json()["code"] == "internal_error"


def test_time_logs_for_employee(client, descriptor):
    client.post("/time-logs", json={"faceDescriptor": descriptor(0), "type": "checkin"})

    resp = client.get("/employees/1/time-logs")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["sessionState"] == "open_session"
    assert [log["type"] for log in body["logs"]] == ["checkin"]


def test_time_logs_bad_date(client):
    resp = client.get("/employees/1/time-logs?date=06-01-2025")
    assert resp.status_code == 400


def test_time_logs_unknown_employee(client):
    assert client.get("/employees/99/time-logs").status_code == 404


def test_work_hours_past_day_is_absent(client):
    resp = client.get("/employees/1/work-hours?date=2020-01-01")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "absent"
    assert body["totalHoursFormatted"] == "0:00"


def test_work_hours_unknown_employee(client):
    resp = client.get("/employees/99/work-hours?date=2020-01-01")

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "employee_not_found"


def test_daily_work_hours(client):
    resp = client.get("/work-hours/daily?date=2020-01-01")

    assert resp.status_code == 200
    assert [r["employeeName"] for r in resp.get_json()] == ["Nguyen Van A", "Tran Thi B", "Le Van C"]


def test_enroll_and_reset_face(client, descriptor):
    resp = client.post("/employees/3/face-descriptor", json={"descriptor": descriptor(30)})
    assert resp.status_code == 201
    assert resp.get_json()["employee"]["id"] == 3

    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(30), "type": "checkin"})
    assert resp.get_json()["employee"]["id"] == 3

    assert client.delete("/employees/3/face-descriptor").status_code == 200
    resp = client.post("/time-logs", json={"faceDescriptor": descriptor(30), "type": "checkout"})
    assert resp.status_code == 401


def test_enroll_unknown_employee(client, descriptor):
    resp = client.post("/employees/99/face-descriptor", json={"descriptor": descriptor(30)})
    assert resp.status_code == 404


def test_request_verification_code(client):
    assert client.post("/employees/3/face-descriptor/verification-code").status_code == 202
    assert client.post("/employees/99/face-descriptor/verification-code").status_code == 404
