from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..attendance.model import DailyWorkHours, TimeLogEvent
from ..attendance.service import AttendanceService
from ..core.enums import TimeLogSource, TimeLogType
from ..core.exceptions import EmployeeNotFoundError, NoMatchError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..face.codec import DescriptorCodec
from ..face.matcher import FaceMatcher
from ..face.model import MatchResult
from ..face.roster import RosterCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionResult:
    employee: Employee
    match: MatchResult
    event: TimeLogEvent
    work_hours: Optional[DailyWorkHours]


class FaceAttendanceService:
    """Identify who is in front of the camera, then record their check-in/out.

    Both HTTP entry points (``/time-logs`` and ``/face-recognition/verify``) go
    through :meth:`identify_and_record`, so they share one threshold and one
    set of pairing rules.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        roster: RosterCache,
        matcher: FaceMatcher,
        attendance: AttendanceService,
        *,
        codec: Optional[DescriptorCodec] = None,
    ):
        self._employees = employees
        self._roster = roster
        self._matcher = matcher
        self._attendance = attendance
        self._codec = codec or DescriptorCodec()

    def identify(self, raw_descriptor: Any) -> tuple[Employee, MatchResult]:
        probe = self._codec.decode(raw_descriptor)

        roster = self._roster.get()
        if not roster:
            logger.info("Identification failed: no enrolled faces")
            raise NoMatchError("No employees with enrolled face data")

        best = self._matcher.best(probe, roster)
        if not self._matcher.accepts(best):
            logger.info(
                "Identification failed: best distance %s above threshold %.4f",
                f"{best.distance:.4f}" if best else "n/a",
                self._matcher.threshold,
            )
            raise NoMatchError(best_distance=best.distance if best else None)

        employee = self._employees.get_by_id(best.employee_id)
        if not employee:
            # Deleted between roster load and lookup.
            self._roster.invalidate()
            raise EmployeeNotFoundError(f"Employee {best.employee_id} not found")

        logger.info("Identified employee %s (distance=%.4f)", employee.employee_id, best.distance)
        return employee, best

    def identify_and_record(
        self,
        raw_descriptor: Any,
        log_type: TimeLogType,
        *,
        now: Optional[datetime] = None,
    ) -> RecognitionResult:
        employee, match = self.identify(raw_descriptor)
        outcome = self._attendance.record(employee.employee_id, log_type, now=now, source=TimeLogSource.FACE)
        return RecognitionResult(employee=employee, match=match, event=outcome.event, work_hours=outcome.work_hours)
