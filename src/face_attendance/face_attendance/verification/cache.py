from __future__ import annotations

import hmac
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable

from ..core.constants import DEFAULT_VERIFICATION_CODE_TTL_SECONDS, VERIFICATION_CODE_DIGITS


@dataclass(frozen=True)
class _Entry:
    code: str
    expires_at: float


class VerificationCodeCache:
    """Process-wide one-time codes keyed by subject, with TTL eviction.

    Codes are lost on restart; a deployment that needs them across restarts
    or across several worker processes should back this with shared storage.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_VERIFICATION_CODE_TTL_SECONDS,
        digits: int = VERIFICATION_CODE_DIGITS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = float(ttl_seconds)
        self._digits = int(digits)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, _Entry] = {}

    def issue(self, subject: Hashable) -> str:
        """Create (or replace) the code for ``subject``."""
        code = "".join(secrets.choice("0123456789") for _ in range(self._digits))
        with self._lock:
            now = self._clock()
            for k in [k for k, e in self._entries.items() if e.expires_at <= now]:
                del self._entries[k]
            self._entries[subject] = _Entry(code=code, expires_at=now + self._ttl)
        return code

    def verify(self, subject: Hashable, code: str) -> bool:
        """Check and consume the code. A wrong code leaves the entry in place."""
        with self._lock:
            entry = self._entries.get(subject)
            if entry is None:
                return False
            if entry.expires_at <= self._clock():
                del self._entries[subject]
                return False
            if not hmac.compare_digest(entry.code, str(code or "")):
                return False
            del self._entries[subject]
            return True

    def evict_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for k in expired:
                del self._entries[k]
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
