from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Optional

from ..common.datetime_utils import format_hours_minutes
from ..core.constants import LATE_AFTER, STANDARD_WORKDAY_HOURS
from ..core.enums import TimeLogType, WorkDayStatus
from .model import DailyWorkHours, TimeLogEvent


@dataclass(frozen=True)
class HoursSplit:
    regular_hours: float
    overtime_hours: float

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours

    @property
    def regular_formatted(self) -> str:
        return format_hours_minutes(self.regular_hours)

    @property
    def overtime_formatted(self) -> str:
        return format_hours_minutes(self.overtime_hours)


class WorkHoursAggregator:
    """Turns a day's first check-in / last check-out into regular + overtime hours."""

    def __init__(self, *, standard_hours: float = STANDARD_WORKDAY_HOURS, late_after: time = LATE_AFTER):
        self._standard_hours = float(standard_hours)
        self._late_after = late_after

    def aggregate(self, first_checkin: datetime, last_checkout: datetime) -> HoursSplit:
        # A checkout earlier than the check-in (clock anomaly) is counted by its absolute span.
        elapsed = abs((last_checkout - first_checkin).total_seconds()) / 3600.0
        regular = min(elapsed, self._standard_hours)
        overtime = max(elapsed - self._standard_hours, 0.0)
        return HoursSplit(regular_hours=regular, overtime_hours=overtime)

    def status_for(self, first_checkin: datetime) -> WorkDayStatus:
        if first_checkin.time() > self._late_after:
            return WorkDayStatus.LATE
        return WorkDayStatus.NORMAL

    def summarize_day(
        self,
        employee_id: int,
        work_date: date,
        events: Iterable[TimeLogEvent],
    ) -> Optional[DailyWorkHours]:
        """Summary row for one day, or None until the day has both a check-in and a check-out."""

        day_events = sorted(
            (e for e in events if e.log_time.date() == work_date),
            key=lambda e: (e.log_time, e.log_id),
        )
        checkins = [e for e in day_events if e.log_type is TimeLogType.CHECKIN]
        if not checkins:
            return None
        first_checkin = checkins[0].log_time

        # Check-outs before the first check-in close the previous day.
        checkouts = [e for e in day_events if e.log_type is TimeLogType.CHECKOUT and e.log_time > first_checkin]
        if not checkouts:
            return None
        last_checkout = checkouts[-1].log_time
        split = self.aggregate(first_checkin, last_checkout)
        return DailyWorkHours(
            employee_id=int(employee_id),
            work_date=work_date,
            regular_hours=round(split.regular_hours, 2),
            overtime_hours=round(split.overtime_hours, 2),
            first_checkin=first_checkin,
            last_checkout=last_checkout,
            status=self.status_for(first_checkin),
        )
