from __future__ import annotations

from enum import Enum


class TimeLogType(str, Enum):
    """Loại sự kiện chấm công lưu trong bảng time_logs."""

    CHECKIN = "checkin"
    CHECKOUT = "checkout"

    @classmethod
    def parse(cls, value: str) -> "TimeLogType":
        """Accept both the time-log spelling and the verify-endpoint spelling."""

        normalized = (value or "").strip().lower()
        aliases = {
            "checkin": cls.CHECKIN,
            "check_in": cls.CHECKIN,
            "checkout": cls.CHECKOUT,
            "check_out": cls.CHECKOUT,
        }
        if normalized not in aliases:
            raise ValueError(f"Unsupported time log type: {value!r}")
        return aliases[normalized]


class TimeLogSource(str, Enum):
    FACE = "face"
    MANUAL = "manual"


class SessionState(str, Enum):
    """Trạng thái phiên làm việc của nhân viên, suy ra từ log (không lưu)."""

    NO_OPEN_SESSION = "no_open_session"
    OPEN_SESSION = "open_session"


class WorkDayStatus(str, Enum):
    NORMAL = "normal"
    LATE = "late"
    ABSENT = "absent"


class DescriptorFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    OBJECT = "object"
    NATIVE = "native"
