from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "invalid_request"


class DecodeError(ValidationError):
    """Raised when a face descriptor is malformed or has the wrong length."""

    code = "invalid_descriptor"


class EmployeeNotFoundError(DomainError):
    code = "employee_not_found"


class NoMatchError(DomainError):
    """No enrolled face is close enough to the probe. Safe to re-capture and retry."""

    code = "identification_failed"

    def __init__(self, message: str = "Face not recognized, please try again", *, best_distance: Optional[float] = None):
        super().__init__(message)
        self.best_distance = best_distance


class PairingViolation(DomainError):
    """The proposed check-in/check-out conflicts with recent history."""

    code = "pairing_violation"


class AlreadyOpen(PairingViolation):
    code = "already_checked_in"

    def __init__(self, message: str = "Already checked in, must check out first"):
        super().__init__(message)


class NoOpenSession(PairingViolation):
    code = "no_open_session"

    def __init__(self, message: str = "No open session to close", *, code: Optional[str] = None):
        super().__init__(message)
        if code:
            self.code = code


class TooSoon(PairingViolation):
    code = "too_soon"

    def __init__(self, message: str, *, retry_after_seconds: int):
        super().__init__(message)
        self.retry_after_seconds = int(retry_after_seconds)


class PersistenceError(DomainError):
    """Storage failed; the event may or may not have been recorded."""

    code = "persistence_error"
