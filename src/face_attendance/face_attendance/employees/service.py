from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.enums import DescriptorFormat
from ..core.exceptions import EmployeeNotFoundError, ValidationError
from ..face.codec import DescriptorCodec
from ..face.roster import RosterCache
from ..verification.cache import VerificationCodeCache
from ..verification.notifier import CodeNotifier, LoggingCodeNotifier
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class FaceEnrollmentService:
    """Register or reset an employee's face descriptor."""

    def __init__(
        self,
        employees: EmployeeRepository,
        roster: RosterCache,
        *,
        codec: Optional[DescriptorCodec] = None,
        codes: Optional[VerificationCodeCache] = None,
        notifier: Optional[CodeNotifier] = None,
        require_code: bool = False,
    ):
        self._employees = employees
        self._roster = roster
        self._codec = codec or DescriptorCodec()
        self._codes = codes or VerificationCodeCache()
        self._notifier = notifier or LoggingCodeNotifier()
        self._require_code = bool(require_code)

    @property
    def requires_code(self) -> bool:
        return self._require_code

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")
        return employee

    def request_verification_code(self, employee_id: int) -> None:
        employee = self._get_employee(employee_id)
        code = self._codes.issue(employee.employee_id)
        self._notifier.send(employee, code)

    def enroll(self, employee_id: int, raw_descriptor: Any, *, verification_code: Optional[str] = None) -> Employee:
        employee = self._get_employee(employee_id)
        descriptor = self._codec.decode(raw_descriptor)

        if self._require_code:
            if not verification_code:
                raise ValidationError("Verification code is required")
            if not self._codes.verify(employee.employee_id, verification_code):
                raise ValidationError("Verification code is invalid or expired")

        stored = self._codec.encode(descriptor, DescriptorFormat.JSON)
        self._employees.set_face_descriptor(employee.employee_id, stored)
        self._roster.invalidate()
        logger.info("Enrolled face descriptor for employee %s", employee.employee_id)
        return self._get_employee(employee.employee_id)

    def reset(self, employee_id: int) -> None:
        employee = self._get_employee(employee_id)
        self._employees.set_face_descriptor(employee.employee_id, None)
        self._roster.invalidate()
        logger.info("Cleared face descriptor for employee %s", employee.employee_id)
