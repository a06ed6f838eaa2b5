from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from .attendance.locks import EmployeeLocks
from .attendance.mysql_time_log_repository import MySQLTimeLogRepository
from .attendance.mysql_work_hours_repository import MySQLWorkHoursRepository
from .attendance.pairing import AttendancePairingEngine, PairingRules
from .attendance.repository import TimeLogRepository, WorkHoursRepository
from .attendance.service import AttendanceService, WorkHoursService
from .core import constants
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import FaceEnrollmentService
from .face.codec import DescriptorCodec
from .face.matcher import FaceMatcher
from .face.roster import RosterCache
from .recognition.service import FaceAttendanceService
from .verification.cache import VerificationCodeCache


@dataclass(frozen=True)
class AttendanceSettings:
    """Tunable knobs of the recognition/pairing engine."""

    match_threshold: float = constants.DEFAULT_MATCH_THRESHOLD
    roster_cache_ttl_seconds: float = constants.DEFAULT_ROSTER_CACHE_TTL_SECONDS
    checkin_lookback_hours: float = constants.DEFAULT_CHECKIN_LOOKBACK_HOURS
    checkout_lookback_hours: float = constants.DEFAULT_CHECKOUT_LOOKBACK_HOURS
    checkin_required_within_hours: float = constants.DEFAULT_CHECKIN_REQUIRED_WITHIN_HOURS
    min_seconds_between_events: float = constants.DEFAULT_MIN_SECONDS_BETWEEN_EVENTS
    require_enrollment_code: bool = False
    verification_code_ttl_seconds: float = constants.DEFAULT_VERIFICATION_CODE_TTL_SECONDS

    @classmethod
    def from_module(cls, settings: Any) -> "AttendanceSettings":
        defaults = cls()
        return cls(
            match_threshold=float(getattr(settings, "MATCH_THRESHOLD", defaults.match_threshold)),
            roster_cache_ttl_seconds=float(
                getattr(settings, "ROSTER_CACHE_TTL_SECONDS", defaults.roster_cache_ttl_seconds)
            ),
            checkin_lookback_hours=float(getattr(settings, "CHECKIN_LOOKBACK_HOURS", defaults.checkin_lookback_hours)),
            checkout_lookback_hours=float(
                getattr(settings, "CHECKOUT_LOOKBACK_HOURS", defaults.checkout_lookback_hours)
            ),
            checkin_required_within_hours=float(
                getattr(settings, "CHECKIN_REQUIRED_WITHIN_HOURS", defaults.checkin_required_within_hours)
            ),
            min_seconds_between_events=float(
                getattr(settings, "MIN_SECONDS_BETWEEN_EVENTS", defaults.min_seconds_between_events)
            ),
            require_enrollment_code=bool(getattr(settings, "REQUIRE_ENROLLMENT_CODE", False)),
            verification_code_ttl_seconds=float(
                getattr(settings, "VERIFICATION_CODE_TTL_SECONDS", defaults.verification_code_ttl_seconds)
            ),
        )

    def pairing_rules(self) -> PairingRules:
        return PairingRules(
            checkin_lookback=timedelta(hours=self.checkin_lookback_hours),
            checkout_lookback=timedelta(hours=self.checkout_lookback_hours),
            checkin_required_within=timedelta(hours=self.checkin_required_within_hours),
            min_interval=timedelta(seconds=self.min_seconds_between_events),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    time_logs_repo: TimeLogRepository
    work_hours_repo: WorkHoursRepository

    roster: RosterCache
    matcher: FaceMatcher
    work_hours_service: WorkHoursService
    attendance_service: AttendanceService
    face_attendance_service: FaceAttendanceService
    enrollment_service: FaceEnrollmentService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    time_logs_repo: TimeLogRepository,
    work_hours_repo: WorkHoursRepository,
    settings: Optional[AttendanceSettings] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementation (MySQL or in-memory)."""

    settings = settings or AttendanceSettings()
    codec = DescriptorCodec()

    roster = RosterCache(employees_repo, codec=codec, ttl_seconds=settings.roster_cache_ttl_seconds)
    matcher = FaceMatcher(threshold=settings.match_threshold)
    work_hours_service = WorkHoursService(time_logs_repo, work_hours_repo, employees_repo)
    attendance_service = AttendanceService(
        time_logs_repo,
        work_hours_service,
        engine=AttendancePairingEngine(settings.pairing_rules()),
        locks=EmployeeLocks(),
    )
    face_attendance_service = FaceAttendanceService(
        employees_repo,
        roster,
        matcher,
        attendance_service,
        codec=codec,
    )
    enrollment_service = FaceEnrollmentService(
        employees_repo,
        roster,
        codec=codec,
        codes=VerificationCodeCache(ttl_seconds=settings.verification_code_ttl_seconds),
        require_code=settings.require_enrollment_code,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        time_logs_repo=time_logs_repo,
        work_hours_repo=work_hours_repo,
        roster=roster,
        matcher=matcher,
        work_hours_service=work_hours_service,
        attendance_service=attendance_service,
        face_attendance_service=face_attendance_service,
        enrollment_service=enrollment_service,
    )


def build_container(*, db_config: dict, settings: Optional[AttendanceSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        time_logs_repo=MySQLTimeLogRepository(conn),
        work_hours_repo=MySQLWorkHoursRepository(conn),
        settings=settings,
        conn=conn,
    )
