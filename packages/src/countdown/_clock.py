"""Clock port and system adapters.

Provides :class:`ClockPort` (Protocol) and the production clocks the
deadline scheduler reads from.

**Which clock?** The scheduler detects host suspend by noticing that
far more time passed between two reads than it asked to sleep.  That
only works if the clock keeps running while the host is suspended:

- :class:`SystemClock` (default) reads ``CLOCK_BOOTTIME`` where the
  platform has it.  It is monotonic *and* counts suspended time, so a
  suspend shows up as a forward jump and never as a backward one.
  Elsewhere it falls back to ``time.monotonic()``.
- :class:`MonotonicClock` wraps ``time.monotonic()``.  Immune to NTP
  and manual clock changes, but on Linux it stops during suspend, so
  the wait is extended by the time spent asleep.
- :class:`WallClock` wraps ``time.time()``.  Counts suspended time but
  follows every clock adjustment, including backward steps.

Only *differences* between ``now()`` calls are meaningful.  Use
:func:`elapsed` to take them: it clamps backward steps to zero.
"""

from __future__ import annotations

import time
from typing import Literal, Protocol, runtime_checkable

ClockKind = Literal["system", "monotonic", "wall"]


@runtime_checkable
class ClockPort(Protocol):
    """Clock for deadline arithmetic.

    The default implementation is :class:`SystemClock`.  Tests inject
    a deterministic fake clock to drive suspend and convergence
    scenarios without waiting in real time.
    """

    def now(self) -> float:
        """Return the current time in seconds.

        Returns:
            A float representing seconds from an arbitrary epoch.
            Only the *difference* between two calls is meaningful.
        """
        ...


class SystemClock:
    """Production clock that keeps counting across host suspend.

    Satisfies :class:`ClockPort` via structural subtyping (PEP 544).

    Usage::

        clock = SystemClock()
        start = clock.now()
        # ... some work ...
        gap = elapsed(start, clock.now())
    """

    def __init__(self) -> None:
        self._clock_id: int | None = getattr(time, "CLOCK_BOOTTIME", None)

    def now(self) -> float:
        """Return boot-time seconds, or monotonic seconds as a fallback."""
        if self._clock_id is not None:
            return time.clock_gettime(self._clock_id)
        return time.monotonic()


class MonotonicClock:
    """Clock wrapping ``time.monotonic()``."""

    def now(self) -> float:
        return time.monotonic()


class WallClock:
    """Clock wrapping ``time.time()``.

    May step backward when the system clock is adjusted.
    """

    def now(self) -> float:
        return time.time()


def make_clock(kind: ClockKind = "system") -> ClockPort:
    """Build the clock named by *kind*.

    Raises:
        ValueError: If *kind* is not a known clock name.
    """
    if kind == "system":
        return SystemClock()
    if kind == "monotonic":
        return MonotonicClock()
    if kind == "wall":
        return WallClock()
    msg = f"Unknown clock kind: {kind!r}"
    raise ValueError(msg)


def elapsed(earlier: float, later: float) -> float:
    """Return ``later - earlier``, clamped to be non-negative.

    A clock that stepped backward between the two reads yields ``0.0``.
    """
    return max(later - earlier, 0.0)
