from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeLogSource, TimeLogType
from .model import DailyWorkHours, TimeLogEvent


class TimeLogRepository(Protocol):
    """Append-only event log."""

    def list_for_employee_between(
        self,
        employee_id: int,
        *,
        start: datetime,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeLogEvent]:
        """Events with ``start <= log_time < end`` (open-ended when ``end`` is None), oldest first."""

        raise NotImplementedError

    def append(
        self,
        *,
        employee_id: int,
        log_type: TimeLogType,
        log_time: datetime,
        source: TimeLogSource,
    ) -> TimeLogEvent:
        raise NotImplementedError


class WorkHoursRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[DailyWorkHours]:
        raise NotImplementedError

    def upsert(self, row: DailyWorkHours) -> None:
        raise NotImplementedError

    def delete(self, employee_id: int, work_date: date) -> bool:
        raise NotImplementedError
