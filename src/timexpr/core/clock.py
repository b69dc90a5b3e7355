"""Clock abstraction used to resolve "now".

Callers can pass a clock straight to the resolver. The process-wide
default is only consulted when none is given, and swapping it is guarded
by a lock so concurrent resolutions always see a complete clock.
"""

import threading
from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a single instant, for deterministic tests."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def __repr__(self) -> str:
        return f"FixedClock({self.instant.isoformat()})"


_default_clock: Clock = SystemClock()
_clock_lock = threading.Lock()


def get_clock() -> Clock:
    """Return the process-wide clock."""
    with _clock_lock:
        return _default_clock


def set_clock(clock: Optional[Clock]) -> Clock:
    """Install a process-wide clock.

    Intended for tests. Passing ``None`` restores the system clock.

    Args:
        clock: Object with a ``now()`` method returning a datetime

    Returns:
        The previously installed clock, so callers can restore it
    """
    global _default_clock

    if clock is None:
        clock = SystemClock()
    elif not isinstance(clock, Clock):
        raise TypeError(f"clock must provide now(), got {type(clock).__name__}")

    with _clock_lock:
        previous = _default_clock
        _default_clock = clock
    return previous


def reset_clock() -> None:
    """Restore the system clock."""
    set_clock(None)
