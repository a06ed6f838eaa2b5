from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_ROSTER_CACHE_TTL_SECONDS
from ..core.exceptions import DecodeError
from ..employees.repository import EmployeeRepository
from .codec import DescriptorCodec
from .model import EnrolledFace

logger = logging.getLogger(__name__)


class RosterCache:
    """Short-lived snapshot of enrolled descriptors.

    A stale roster could still match a face that was reset a moment ago, so
    entries live at most ``ttl_seconds`` and enrolment changes call
    :meth:`invalidate`. ``ttl_seconds <= 0`` reads the repository on every call.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        codec: Optional[DescriptorCodec] = None,
        ttl_seconds: float = DEFAULT_ROSTER_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._employees = employees
        self._codec = codec or DescriptorCodec()
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[Tuple[EnrolledFace, ...]] = None
        self._loaded_at = 0.0

    def get(self) -> Sequence[EnrolledFace]:
        with self._lock:
            now = self._clock()
            if self._snapshot is not None and self._ttl > 0 and now - self._loaded_at < self._ttl:
                return self._snapshot
            self._snapshot = self._load()
            self._loaded_at = now
            return self._snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None

    def _load(self) -> Tuple[EnrolledFace, ...]:
        roster = []
        for emp in self._employees.list_with_face_descriptor():
            if not emp.has_face:
                continue
            try:
                # Length is not enforced here: the matcher scores mismatched
                # lengths as non-matching.
                descriptor = self._codec.decode(emp.face_descriptor, expected_length=None)
            except DecodeError as exc:
                logger.warning("Skipping malformed descriptor for employee %s: %s", emp.employee_id, exc)
                continue
            roster.append(EnrolledFace(employee_id=emp.employee_id, descriptor=descriptor))
        logger.debug("Loaded roster with %d enrolled faces", len(roster))
        return tuple(roster)
