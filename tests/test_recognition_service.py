from __future__ import annotations

import json
from datetime import timedelta

import pytest

from src.face_attendance.face_attendance.container import build_services
from src.face_attendance.face_attendance.core.enums import TimeLogType
from src.face_attendance.face_attendance.core.exceptions import (
    AlreadyOpen,
    DecodeError,
    EmployeeNotFoundError,
    NoMatchError,
)


def test_identify_and_record_checks_in_matched_employee(container, descriptor, time_logs_repo, fixed_now):
    result = container.face_attendance_service.identify_and_record(
        json.dumps(descriptor(10, offset=0.05)), TimeLogType.CHECKIN, now=fixed_now
    )

    assert result.employee.employee_id == 2
    assert result.match.distance == pytest.approx(0.05)
    assert result.event.employee_id == 2
    assert result.work_hours is None
    assert len(time_logs_repo.events) == 1


def test_full_day_through_recognition(container, descriptor, fixed_now):
    probe = ",".join(str(v) for v in descriptor(0, offset=0.1))
    svc = container.face_attendance_service

    svc.identify_and_record(probe, TimeLogType.CHECKIN, now=fixed_now)
    result = svc.identify_and_record(probe, TimeLogType.CHECKOUT, now=fixed_now + timedelta(hours=9))

    assert result.employee.employee_id == 1
    assert result.work_hours.regular_hours == 8.0
    assert result.work_hours.overtime_hours == 1.0


def test_pairing_violation_propagates(container, descriptor, fixed_now):
    svc = container.face_attendance_service
    svc.identify_and_record(descriptor(0), TimeLogType.CHECKIN, now=fixed_now)

    with pytest.raises(AlreadyOpen):
        svc.identify_and_record(descriptor(0), TimeLogType.CHECKIN, now=fixed_now + timedelta(minutes=5))


def test_unknown_face_is_not_recognised(container, descriptor, time_logs_repo, fixed_now):
    with pytest.raises(NoMatchError) as exc:
        container.face_attendance_service.identify_and_record(descriptor(50), TimeLogType.CHECKIN, now=fixed_now)

    assert exc.value.best_distance == pytest.approx(2 ** 0.5)
    assert time_logs_repo.events == []


def test_empty_roster(container, employees_repo, descriptor):
    employees_repo.set_face_descriptor(1, None)
    employees_repo.set_face_descriptor(2, None)

    with pytest.raises(NoMatchError, match="No employees with enrolled face data"):
        container.face_attendance_service.identify(descriptor(0))


def test_malformed_probe(container):
    with pytest.raises(DecodeError):
        container.face_attendance_service.identify("[0.1, 0.2]")


def test_threshold_is_configurable(employees_repo, time_logs_repo, work_hours_repo, descriptor, settings):
    from dataclasses import replace

    strict = build_services(
        employees_repo=employees_repo,
        time_logs_repo=time_logs_repo,
        work_hours_repo=work_hours_repo,
        settings=replace(settings, match_threshold=0.01),
    )

    with pytest.raises(NoMatchError):
        strict.face_attendance_service.identify(descriptor(0, offset=0.1))


class VanishingEmployees:
    """Roster still lists the employee but the record is gone."""

    def __init__(self, inner):
        self._inner = inner

    def list_with_face_descriptor(self):
        return self._inner.list_with_face_descriptor()

    def get_by_id(self, employee_id):
        return None


def test_matched_employee_deleted_meanwhile(employees_repo, time_logs_repo, work_hours_repo, descriptor, settings):
    c = build_services(
        employees_repo=VanishingEmployees(employees_repo),
        time_logs_repo=time_logs_repo,
        work_hours_repo=work_hours_repo,
        settings=settings,
    )

    with pytest.raises(EmployeeNotFoundError):
        c.face_attendance_service.identify(descriptor(0))
