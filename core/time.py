"""Time-related helpers.

This module centralizes helpers for obtaining timestamps in UTC.  Code that
needs "now" should receive a :class:`Clock` instead of calling
``datetime.now`` directly so tests can pin time to a known instant.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Protocol, runtime_checkable


def utc_now() -> datetime:
    """Return the current UTC time as an aware ``datetime`` instance."""

    return datetime.now(timezone.utc)


def utc_now_isoformat() -> str:
    """Return the current UTC time in ISO 8601 format ending with ``Z``."""

    return utc_now().isoformat().replace("+00:00", "Z")


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_isoformat(value: str) -> datetime:
    """Parse an ISO 8601 timestamp (``Z`` suffix allowed) into aware UTC."""

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


@runtime_checkable
class Clock(Protocol):
    """Anything exposing ``now()``."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the host's wall clock."""

    def now(self) -> datetime:
        return utc_now()


class FakeClock:
    """Manually driven clock for tests.

    The clock starts at *start* (or the current time) and only moves when
    :meth:`set` or :meth:`add` is called.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = ensure_utc(start) if start is not None else utc_now()
        self._lock = Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = ensure_utc(value)

    def add(self, delta: timedelta) -> None:
        with self._lock:
            self._now = self._now + delta


__all__ = [
    "Clock",
    "FakeClock",
    "SystemClock",
    "ensure_utc",
    "parse_isoformat",
    "utc_now",
    "utc_now_isoformat",
]
