from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class EmployeeLocks:
    """Per-employee mutexes.

    "read recent events, validate, append, recompute summary" must run as one
    step per employee; different employees never wait on each other.
    Locks are created lazily and kept for the life of the process (one small
    object per employee that ever clocked in).
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def _lock_for(self, employee_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[employee_id] = lock
            return lock

    @contextmanager
    def hold(self, employee_id: int) -> Iterator[None]:
        lock = self._lock_for(int(employee_id))
        with lock:
            yield
