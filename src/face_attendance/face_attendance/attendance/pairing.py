"""Check-in / check-out pairing rules.

The session state of an employee is never stored. It is derived from the
recent event window each time a new event is proposed, because events can
arrive out of order (client clock skew, retried requests) and must be judged
against the *set* of recent events, not only the last one.

Lookback windows bound how far back the engine searches. An employee who
never checks out therefore stops blocking new check-ins once the open
check-in falls out of the check-in window.
"""
from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from ..core.constants import (
    DEFAULT_CHECKIN_LOOKBACK_HOURS,
    DEFAULT_CHECKIN_REQUIRED_WITHIN_HOURS,
    DEFAULT_CHECKOUT_LOOKBACK_HOURS,
    DEFAULT_MIN_SECONDS_BETWEEN_EVENTS,
)
from ..core.enums import SessionState, TimeLogType
from ..core.exceptions import AlreadyOpen, NoOpenSession, TooSoon
from .model import TimeLogEvent


@dataclass(frozen=True)
class PairingRules:
    checkin_lookback: timedelta = timedelta(hours=DEFAULT_CHECKIN_LOOKBACK_HOURS)
    checkout_lookback: timedelta = timedelta(hours=DEFAULT_CHECKOUT_LOOKBACK_HOURS)
    checkin_required_within: timedelta = timedelta(hours=DEFAULT_CHECKIN_REQUIRED_WITHIN_HOURS)
    min_interval: timedelta = timedelta(seconds=DEFAULT_MIN_SECONDS_BETWEEN_EVENTS)

    @property
    def history_span(self) -> timedelta:
        """How far back a caller must load events for a decision."""
        return max(self.checkin_lookback, self.checkout_lookback, self.checkin_required_within, self.min_interval)


class EventWindow:
    """One employee's recent events, ordered by time, with bounded range lookups."""

    def __init__(self, events: Iterable[TimeLogEvent]):
        ordered = sorted(events, key=lambda e: (e.log_time, e.log_id))
        self._checkins: List[TimeLogEvent] = [e for e in ordered if e.log_type is TimeLogType.CHECKIN]
        self._checkin_times = [e.log_time for e in self._checkins]
        self._checkouts: List[TimeLogEvent] = [e for e in ordered if e.log_type is TimeLogType.CHECKOUT]
        self._checkout_times = [e.log_time for e in self._checkouts]

    def checkins_between(self, start: datetime, end: datetime) -> List[TimeLogEvent]:
        """Check-ins with ``start <= log_time <= end``."""
        lo = bisect_left(self._checkin_times, start)
        hi = bisect_right(self._checkin_times, end)
        return self._checkins[lo:hi]

    def latest_checkin_at_or_before(self, at: datetime) -> Optional[TimeLogEvent]:
        i = bisect_right(self._checkin_times, at)
        return self._checkins[i - 1] if i else None

    def latest_checkout_at_or_before(self, at: datetime) -> Optional[TimeLogEvent]:
        i = bisect_right(self._checkout_times, at)
        return self._checkouts[i - 1] if i else None

    def is_unpaired(self, checkin: TimeLogEvent) -> bool:
        """True when no check-out has a timestamp strictly later than ``checkin``."""
        return not self._checkout_times or self._checkout_times[-1] <= checkin.log_time

    def open_checkin(self, start: datetime, end: datetime) -> Optional[TimeLogEvent]:
        """Most recent unpaired check-in inside ``[start, end]``."""
        for checkin in reversed(self.checkins_between(start, end)):
            if self.is_unpaired(checkin):
                return checkin
        return None


@dataclass(frozen=True)
class PairingDecision:
    log_type: TimeLogType
    at: datetime
    state_before: SessionState
    closes: Optional[TimeLogEvent] = None


def _retry_after(elapsed: timedelta, min_interval: timedelta) -> int:
    return max(1, math.ceil((min_interval - elapsed).total_seconds()))


class AttendancePairingEngine:
    def __init__(self, rules: Optional[PairingRules] = None):
        self.rules = rules or PairingRules()

    def state_at(self, history: Iterable[TimeLogEvent], at: datetime) -> SessionState:
        window = history if isinstance(history, EventWindow) else EventWindow(history)
        if window.open_checkin(at - self.rules.checkin_lookback, at):
            return SessionState.OPEN_SESSION
        return SessionState.NO_OPEN_SESSION

    def validate(self, history: Iterable[TimeLogEvent], log_type: TimeLogType, at: datetime) -> PairingDecision:
        """Accept or reject a proposed event; raises a PairingViolation subtype on rejection."""

        window = EventWindow(history)
        if log_type is TimeLogType.CHECKIN:
            return self._validate_checkin(window, at)
        return self._validate_checkout(window, at)

    def _validate_checkin(self, window: EventWindow, at: datetime) -> PairingDecision:
        rules = self.rules

        open_checkin = window.open_checkin(at - rules.checkin_lookback, at)
        if open_checkin:
            raise AlreadyOpen(
                f"Already checked in at {open_checkin.log_time:%H:%M}, must check out first"
            )

        last_checkin = window.latest_checkin_at_or_before(at)
        if last_checkin:
            elapsed = at - last_checkin.log_time
            if elapsed < rules.min_interval:
                retry = _retry_after(elapsed, rules.min_interval)
                raise TooSoon(
                    f"Rate limited, wait {retry} seconds before re-checking-in",
                    retry_after_seconds=retry,
                )

        return PairingDecision(log_type=TimeLogType.CHECKIN, at=at, state_before=SessionState.NO_OPEN_SESSION)

    def _validate_checkout(self, window: EventWindow, at: datetime) -> PairingDecision:
        rules = self.rules

        if not window.checkins_between(at - rules.checkin_required_within, at):
            raise NoOpenSession("Must check in before checking out", code="not_checked_in")

        open_checkin = window.open_checkin(at - rules.checkout_lookback, at)
        if not open_checkin:
            raise NoOpenSession("No open session to close, check in first")

        # A check-out only closes a check-in it is strictly later than.
        if at <= open_checkin.log_time:
            raise TooSoon("Check-out must be later than check-in", retry_after_seconds=1)

        last_checkout = window.latest_checkout_at_or_before(at)
        if last_checkout:
            elapsed = at - last_checkout.log_time
            if elapsed < rules.min_interval:
                retry = _retry_after(elapsed, rules.min_interval)
                raise TooSoon(
                    f"Rate limited, wait {retry} seconds before re-checking-out",
                    retry_after_seconds=retry,
                )

        return PairingDecision(
            log_type=TimeLogType.CHECKOUT,
            at=at,
            state_before=SessionState.OPEN_SESSION,
            closes=open_checkin,
        )
