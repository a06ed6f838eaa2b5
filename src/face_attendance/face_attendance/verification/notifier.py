from __future__ import annotations

import logging
from typing import Protocol

from ..employees.model import Employee

logger = logging.getLogger(__name__)


class CodeNotifier(Protocol):
    """Delivers a verification code to the employee (e-mail, SMS, ...)."""

    def send(self, employee: Employee, code: str) -> None:
        raise NotImplementedError


class LoggingCodeNotifier(CodeNotifier):
    """Default notifier: records that a code was issued, never the code itself."""

    def send(self, employee: Employee, code: str) -> None:
        logger.info("Verification code issued for employee %s (%s)", employee.employee_id, employee.employee_code)
