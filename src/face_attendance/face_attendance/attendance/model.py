from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_hours_minutes
from ..core.enums import TimeLogSource, TimeLogType, WorkDayStatus


@dataclass(frozen=True)
class TimeLogEvent:
    """Thực thể miền (domain): Một lần chấm công vào/ra. Bất biến, chỉ ghi thêm."""

    log_id: int
    employee_id: int
    log_type: TimeLogType
    log_time: datetime
    source: TimeLogSource = TimeLogSource.FACE

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "employeeId": self.employee_id,
            "type": self.log_type.value,
            "logTime": self.log_time.isoformat(),
            "source": self.source.value,
        }


@dataclass(frozen=True)
class DailyWorkHours:
    """Bảng tổng hợp giờ làm theo ngày (suy ra từ time_logs, luôn tính lại toàn bộ)."""

    employee_id: int
    work_date: date
    regular_hours: float
    overtime_hours: float
    first_checkin: Optional[datetime]
    last_checkout: Optional[datetime]
    status: WorkDayStatus = WorkDayStatus.NORMAL


@dataclass(frozen=True)
class WorkHoursView:
    """Read-model for API responses (decimal hours plus H:MM strings)."""

    employee_id: int
    work_date: date
    regular_hours: float
    overtime_hours: float
    first_checkin: Optional[datetime] = None
    last_checkout: Optional[datetime] = None
    status: Optional[WorkDayStatus] = None

    @classmethod
    def from_row(cls, row: DailyWorkHours) -> "WorkHoursView":
        return cls(
            employee_id=row.employee_id,
            work_date=row.work_date,
            regular_hours=row.regular_hours,
            overtime_hours=row.overtime_hours,
            first_checkin=row.first_checkin,
            last_checkout=row.last_checkout,
            status=row.status,
        )

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "regularHours": round(self.regular_hours, 2),
            "overtimeHours": round(self.overtime_hours, 2),
            "regularHoursFormatted": format_hours_minutes(self.regular_hours),
            "overtimeHoursFormatted": format_hours_minutes(self.overtime_hours),
            "totalHoursFormatted": format_hours_minutes(self.total_hours),
            "checkinTime": self.first_checkin.isoformat() if self.first_checkin else None,
            "checkoutTime": self.last_checkout.isoformat() if self.last_checkout else None,
            "status": self.status.value if self.status else None,
        }
