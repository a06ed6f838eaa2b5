from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import SessionState, TimeLogSource, TimeLogType, WorkDayStatus
from ..core.exceptions import EmployeeNotFoundError, PairingViolation
from ..employees.repository import EmployeeRepository
from .locks import EmployeeLocks
from .model import DailyWorkHours, TimeLogEvent, WorkHoursView
from .pairing import AttendancePairingEngine, PairingDecision
from .repository import TimeLogRepository, WorkHoursRepository
from .work_hours import WorkHoursAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceOutcome:
    event: TimeLogEvent
    decision: PairingDecision
    work_hours: Optional[DailyWorkHours]


class WorkHoursService:
    def __init__(
        self,
        time_logs: TimeLogRepository,
        work_hours: WorkHoursRepository,
        employees: EmployeeRepository,
        *,
        aggregator: Optional[WorkHoursAggregator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._time_logs = time_logs
        self._work_hours = work_hours
        self._employees = employees
        self._aggregator = aggregator or WorkHoursAggregator()
        self._clock = clock

    def recompute(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        """Rebuild the (employee, date) summary from the log.

        Callers that also append events must hold the employee lock so the
        last write wins with a summary computed from the latest log.
        """

        events = self.get_employee_time_logs(employee_id, work_date)
        row = self._aggregator.summarize_day(employee_id, work_date, events)
        if row is None:
            if self._work_hours.delete(employee_id, work_date):
                logger.info("Removed work hours for employee %s on %s (no valid pair)", employee_id, work_date)
            return None

        self._work_hours.upsert(row)
        logger.info(
            "Work hours for employee %s on %s: regular=%.2f overtime=%.2f status=%s",
            employee_id,
            work_date,
            row.regular_hours,
            row.overtime_hours,
            row.status.value,
        )
        return row

    def get_employee_time_logs(self, employee_id: int, work_date: date) -> List[TimeLogEvent]:
        start, end = day_bounds(work_date)
        return list(self._time_logs.list_for_employee_between(employee_id, start=start, end=end))

    def get_employee_work_hours(self, employee_id: int, work_date: date) -> WorkHoursView:
        if not self._employees.get_by_id(employee_id):
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")

        row = self._work_hours.get_for_employee_and_date(employee_id, work_date)
        if row:
            return WorkHoursView.from_row(row)
        return self._empty_view(employee_id, work_date)

    def get_daily_work_hours(self, work_date: date) -> List[dict]:
        rows = {r.employee_id: r for r in self._work_hours.list_for_date(work_date)}
        out = []
        for emp in self._employees.list_all():
            row = rows.get(emp.employee_id)
            view = WorkHoursView.from_row(row) if row else self._empty_view(emp.employee_id, work_date)
            item = view.to_dict()
            item["employeeName"] = emp.full_name
            out.append(item)
        return out

    def _empty_view(self, employee_id: int, work_date: date) -> WorkHoursView:
        is_past = work_date < self._clock().date()
        return WorkHoursView(
            employee_id=employee_id,
            work_date=work_date,
            regular_hours=0.0,
            overtime_hours=0.0,
            status=WorkDayStatus.ABSENT if is_past else None,
        )


class AttendanceService:
    def __init__(
        self,
        time_logs: TimeLogRepository,
        work_hours: WorkHoursService,
        *,
        engine: Optional[AttendancePairingEngine] = None,
        locks: Optional[EmployeeLocks] = None,
    ):
        self._time_logs = time_logs
        self._work_hours = work_hours
        self._engine = engine or AttendancePairingEngine()
        self._locks = locks or EmployeeLocks()

    def record(
        self,
        employee_id: int,
        log_type: TimeLogType,
        *,
        now: Optional[datetime] = None,
        source: TimeLogSource = TimeLogSource.FACE,
    ) -> AttendanceOutcome:
        at = now or now_local()

        with self._locks.hold(employee_id):
            history = self._time_logs.list_for_employee_between(
                employee_id, start=at - self._engine.rules.history_span
            )
            try:
                decision = self._engine.validate(history, log_type, at)
            except PairingViolation as e:
                logger.info("Rejected %s for employee %s at %s: %s", log_type.value, employee_id, at, e)
                raise

            event = self._time_logs.append(employee_id=employee_id, log_type=log_type, log_time=at, source=source)
            logger.info("Accepted %s for employee %s at %s (log_id=%s)", log_type.value, employee_id, at, event.log_id)

            summary = self._work_hours.recompute(employee_id, at.date())

        return AttendanceOutcome(event=event, decision=decision, work_hours=summary)

    def session_state(self, employee_id: int, *, now: Optional[datetime] = None) -> SessionState:
        at = now or now_local()
        history = self._time_logs.list_for_employee_between(employee_id, start=at - self._engine.rules.history_span)
        return self._engine.state_at(history, at)
