from __future__ import annotations

import threading
from datetime import date, datetime, timedelta

import pytest

from src.face_attendance.face_attendance.attendance.model import DailyWorkHours
from src.face_attendance.face_attendance.attendance.service import AttendanceService, WorkHoursService
from src.face_attendance.face_attendance.core.enums import SessionState, TimeLogSource, TimeLogType, WorkDayStatus
from src.face_attendance.face_attendance.core.exceptions import AlreadyOpen, EmployeeNotFoundError, NoOpenSession, TooSoon

IN = TimeLogType.CHECKIN
OUT = TimeLogType.CHECKOUT


@pytest.fixture
def work_hours_service(time_logs_repo, work_hours_repo, employees_repo, fixed_now):
    return WorkHoursService(time_logs_repo, work_hours_repo, employees_repo, clock=lambda: fixed_now)


@pytest.fixture
def svc(time_logs_repo, work_hours_service):
    return AttendanceService(time_logs_repo, work_hours_service)


def test_checkin_then_checkout_produces_daily_summary(svc, time_logs_repo, work_hours_repo):
    morning = datetime(2025, 1, 6, 8, 0)

    first = svc.record(1, IN, now=morning)
    assert first.work_hours is None
    assert first.event.source is TimeLogSource.FACE

    outcome = svc.record(1, OUT, now=morning + timedelta(hours=9))

    assert outcome.decision.closes == first.event
    assert outcome.work_hours.regular_hours == 8.0
    assert outcome.work_hours.overtime_hours == 1.0
    assert outcome.work_hours.status is WorkDayStatus.NORMAL
    assert work_hours_repo.get_for_employee_and_date(1, date(2025, 1, 6)) == outcome.work_hours
    assert [e.log_type for e in time_logs_repo.events] == [IN, OUT]


def test_late_checkin_marks_day_late(svc, fixed_now):
    svc.record(1, IN, now=fixed_now)
    outcome = svc.record(1, OUT, now=fixed_now + timedelta(hours=8))

    assert outcome.work_hours.status is WorkDayStatus.LATE


def test_rejected_event_is_not_stored(svc, time_logs_repo, fixed_now):
    svc.record(1, IN, now=fixed_now)

    with pytest.raises(AlreadyOpen):
        svc.record(1, IN, now=fixed_now + timedelta(minutes=5))
    assert len(time_logs_repo.events) == 1


def test_checkout_first_is_rejected(svc, time_logs_repo, fixed_now):
    with pytest.raises(NoOpenSession):
        svc.record(1, OUT, now=fixed_now)
    assert time_logs_repo.events == []


def test_summary_is_recomputed_from_whole_day(svc, fixed_now):
    svc.record(1, IN, now=fixed_now)
    svc.record(1, OUT, now=fixed_now + timedelta(hours=3))
    svc.record(1, IN, now=fixed_now + timedelta(hours=4))
    outcome = svc.record(1, OUT, now=fixed_now + timedelta(hours=10))

    assert outcome.work_hours.first_checkin == fixed_now
    assert outcome.work_hours.regular_hours == 8.0
    assert outcome.work_hours.overtime_hours == 2.0


def test_stale_summary_is_removed_when_day_has_no_pair(svc, work_hours_repo, fixed_now):
    day = fixed_now.date()
    work_hours_repo.upsert(
        DailyWorkHours(
            employee_id=1,
            work_date=day,
            regular_hours=8.0,
            overtime_hours=0.0,
            first_checkin=None,
            last_checkout=None,
        )
    )

    outcome = svc.record(1, IN, now=fixed_now)

    assert outcome.work_hours is None
    assert work_hours_repo.get_for_employee_and_date(1, day) is None


def test_employees_do_not_affect_each_other(svc, fixed_now):
    svc.record(1, IN, now=fixed_now)
    svc.record(2, IN, now=fixed_now)

    assert svc.session_state(1, now=fixed_now) is SessionState.OPEN_SESSION
    assert svc.session_state(2, now=fixed_now) is SessionState.OPEN_SESSION
    assert svc.session_state(3, now=fixed_now) is SessionState.NO_OPEN_SESSION


def test_concurrent_checkins_record_exactly_one(svc, time_logs_repo, fixed_now):
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        try:
            svc.record(1, IN, now=fixed_now)
            results.append("ok")
        except AlreadyOpen:
            results.append("rejected")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("rejected") == 7
    assert len(time_logs_repo.events) == 1


def test_employee_work_hours_read_model(svc, work_hours_service, fixed_now):
    svc.record(1, IN, now=fixed_now)
    svc.record(1, OUT, now=fixed_now + timedelta(hours=8, minutes=30))

    view = work_hours_service.get_employee_work_hours(1, fixed_now.date())

    data = view.to_dict()
    assert data["regularHoursFormatted"] == "8:00"
    assert data["overtimeHoursFormatted"] == "0:30"
    assert data["status"] == "late"


def test_past_day_without_summary_is_absent(work_hours_service, fixed_now):
    view = work_hours_service.get_employee_work_hours(1, fixed_now.date() - timedelta(days=1))
    assert view.status is WorkDayStatus.ABSENT
    assert view.total_hours == 0.0


def test_today_without_summary_has_no_status(work_hours_service, fixed_now):
    assert work_hours_service.get_employee_work_hours(1, fixed_now.date()).status is None


def test_unknown_employee(work_hours_service, fixed_now):
    with pytest.raises(EmployeeNotFoundError):
        work_hours_service.get_employee_work_hours(99, fixed_now.date())


def test_daily_report_lists_every_employee(svc, work_hours_service, fixed_now):
    svc.record(2, IN, now=fixed_now - timedelta(hours=1))
    svc.record(2, OUT, now=fixed_now + timedelta(hours=7))

    report = work_hours_service.get_daily_work_hours(fixed_now.date())

    assert [r["employeeId"] for r in report] == [1, 2, 3]
    assert report[1]["employeeName"] == "Tran Thi B"
    assert report[1]["regularHours"] == 8.0
    assert report[0]["status"] is None


def test_time_logs_for_day(svc, work_hours_service, fixed_now):
    svc.record(1, IN, now=fixed_now)
    svc.record(1, OUT, now=fixed_now + timedelta(hours=8))

    logs = work_hours_service.get_employee_time_logs(1, fixed_now.date())

    assert [e.to_dict()["type"] for e in logs] == ["checkin", "checkout"]
    assert work_hours_service.get_employee_time_logs(1, fixed_now.date() + timedelta(days=1)) == []


def test_same_instant_checkout_cannot_leave_double_checkout(svc, time_logs_repo, fixed_now):
    svc.record(1, IN, now=fixed_now)

    with pytest.raises(TooSoon):
        svc.record(1, OUT, now=fixed_now)
    svc.record(1, OUT, now=fixed_now + timedelta(seconds=61))
    with pytest.raises(NoOpenSession):
        svc.record(1, OUT, now=fixed_now + timedelta(seconds=200))

    assert [e.log_type for e in time_logs_repo.events] == [IN, OUT]
