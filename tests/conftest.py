from __future__ import annotations

import json
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.face_attendance.face_attendance.attendance.model import DailyWorkHours, TimeLogEvent
from src.face_attendance.face_attendance.container import AttendanceSettings, build_services
from src.face_attendance.face_attendance.core.constants import DESCRIPTOR_LENGTH
from src.face_attendance.face_attendance.employees.model import Employee


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self._by_id[employee.employee_id] = employee
        return employee

    def remove(self, employee_id: int) -> None:
        self._by_id.pop(employee_id, None)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def list_all(self):
        return [self._by_id[k] for k in sorted(self._by_id)]

    def list_with_face_descriptor(self):
        return [e for e in self.list_all() if e.has_face]

    def set_face_descriptor(self, employee_id: int, face_descriptor: Optional[str]) -> bool:
        emp = self._by_id.get(int(employee_id))
        if not emp:
            return False
        self._by_id[emp.employee_id] = replace(emp, face_descriptor=face_descriptor)
        return True


class InMemoryTimeLogs:
    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self.events: list[TimeLogEvent] = []

    def list_for_employee_between(self, employee_id: int, *, start: datetime, end: Optional[datetime] = None):
        with self._lock:
            items = [
                e
                for e in self.events
                if e.employee_id == employee_id and e.log_time >= start and (end is None or e.log_time < end)
            ]
        return sorted(items, key=lambda e: (e.log_time, e.log_id))

    def append(self, *, employee_id, log_type, log_time, source) -> TimeLogEvent:
        with self._lock:
            event = TimeLogEvent(
                log_id=self._next_id,
                employee_id=employee_id,
                log_type=log_type,
                log_time=log_time,
                source=source,
            )
            self._next_id += 1
            self.events.append(event)
            return event


class InMemoryWorkHours:
    def __init__(self):
        self.rows: dict[tuple[int, date], DailyWorkHours] = {}

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        return self.rows.get((employee_id, work_date))

    def list_for_date(self, work_date: date):
        return [r for (_, d), r in sorted(self.rows.items()) if d == work_date]

    def upsert(self, row: DailyWorkHours) -> None:
        self.rows[(row.employee_id, row.work_date)] = row

    def delete(self, employee_id: int, work_date: date) -> bool:
        return self.rows.pop((employee_id, work_date), None) is not None


def unit_descriptor(index: int, *, offset: float = 0.0, length: int = DESCRIPTOR_LENGTH) -> list[float]:
    """Basis vector e_index, optionally nudged by ``offset`` along the next axis."""
    values = [0.0] * length
    values[index % length] = 1.0
    values[(index + 1) % length] += offset
    return values


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 1, 6, 9, 0, 0)


@pytest.fixture
def descriptor():
    return unit_descriptor


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(1, "EMP001", "Nguyen", "Van A", department_id=1, face_descriptor=json.dumps(unit_descriptor(0))),
            Employee(2, "EMP002", "Tran", "Thi B", department_id=1, face_descriptor=json.dumps(unit_descriptor(10))),
            Employee(3, "EMP003", "Le", "Van C"),
        ]
    )


@pytest.fixture
def time_logs_repo() -> InMemoryTimeLogs:
    return InMemoryTimeLogs()


@pytest.fixture
def work_hours_repo() -> InMemoryWorkHours:
    return InMemoryWorkHours()


@pytest.fixture
def settings() -> AttendanceSettings:
    return AttendanceSettings(roster_cache_ttl_seconds=0.0)


@pytest.fixture
def container(employees_repo, time_logs_repo, work_hours_repo, settings):
    return build_services(
        employees_repo=employees_repo,
        time_logs_repo=time_logs_repo,
        work_hours_repo=work_hours_repo,
        settings=settings,
    )
