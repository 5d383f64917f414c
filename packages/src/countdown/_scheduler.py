"""Adaptive deadline sleep.

Sleeping for the whole remaining wait in one call is fragile: if the
host is suspended or the clock jumps, there is no chance to notice and
correct mid-flight.  Polling at a fixed interval wastes wake-ups on
long waits.  The loop here sits in between:

1. Re-read the clock and compute the time remaining.
2. If far more time passed since the last read than was slept (host
   suspend, VM pause, starvation), reset the backoff to its baseline.
3. Double the sleep, capped at :attr:`BackoffPolicy.maximum`.
4. If that would reach the deadline, sleep half the remaining time
   instead; once the doubled sleep is within
   :attr:`BackoffPolicy.min_overshoot` of the deadline, sleep exactly
   the remaining time as the final step.
5. Sleep, and repeat until the clock reads at or past the deadline.

Deadlines are readings of the clock the loop is given, so always build
them from that clock (see :meth:`DeadlineSleeper.deadline_after`).

Usage::

    sleeper = DeadlineSleeper()
    sleeper.sleep_for(90.0)

    await sleep_until_async(clock.now() + 90.0, clock=clock)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass

from countdown._clock import ClockPort, SystemClock, elapsed

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BackoffPolicy:
    """Tunables of the deadline sleep loop.  All values are seconds.

    Attributes:
        initial: Sleep duration the loop starts from.
        baseline: Sleep duration restored after a detected suspend.
        grace_period: Slack allowed on top of the last sleep before the
            gap between two clock reads counts as a suspend.
        maximum: Upper bound for a single sleep.
        min_overshoot: When the next sleep would pass the deadline by
            less than this, the loop sleeps out the remainder instead
            of halving it.
        factor: Backoff multiplier applied every iteration.
    """

    initial: float = 0.5
    baseline: float = 0.5
    grace_period: float = 0.5
    maximum: float = 60.0
    min_overshoot: float = 0.1
    factor: float = 2.0


DEFAULT_POLICY = BackoffPolicy()


def next_sleep(
    duration_to_sleep: float,
    elapsed_since_previous: float,
    remaining: float,
    policy: BackoffPolicy = DEFAULT_POLICY,
) -> float:
    """Compute the next sleep duration from the previous one.

    Args:
        duration_to_sleep: The duration slept in the previous iteration.
        elapsed_since_previous: Clock time that actually passed since
            the previous read, already clamped to be non-negative.
        remaining: Time left until the deadline, non-negative.
        policy: Backoff tunables.

    Returns:
        The duration to sleep now, never negative.
    """
    if elapsed_since_previous > duration_to_sleep + policy.grace_period:
        logger.info(
            "Host appears to have been suspended (%.3fs passed, expected "
            "%.3fs); resetting sleep interval",
            elapsed_since_previous,
            duration_to_sleep,
        )
        duration_to_sleep = policy.baseline

    duration_to_sleep *= policy.factor

    if duration_to_sleep > policy.maximum:
        logger.debug("Sleep interval capped at %.3fs", policy.maximum)
        duration_to_sleep = policy.maximum

    if duration_to_sleep >= remaining:
        if duration_to_sleep - remaining >= policy.min_overshoot:
            duration_to_sleep = remaining / 2
        else:
            # Final step. A zero here would stay zero under doubling and
            # spin until the deadline.
            duration_to_sleep = remaining

    return duration_to_sleep


class DeadlineSleeper:
    """Blocks the calling thread until a deadline on its clock passes.

    Args:
        clock: Clock the deadline is measured on.  Defaults to
            :class:`~countdown._clock.SystemClock`.
        sleep: Blocking sleep primitive.  Defaults to ``time.sleep``.
        policy: Backoff tunables.  Defaults to :data:`DEFAULT_POLICY`.
    """

    def __init__(
        self,
        clock: ClockPort | None = None,
        sleep: Callable[[float], object] | None = None,
        policy: BackoffPolicy | None = None,
    ) -> None:
        self._clock = clock if clock is not None else SystemClock()
        self._sleep = sleep if sleep is not None else time.sleep
        self._policy = policy if policy is not None else DEFAULT_POLICY

    @property
    def clock(self) -> ClockPort:
        return self._clock

    @property
    def policy(self) -> BackoffPolicy:
        return self._policy

    def deadline_after(self, seconds: float) -> float:
        """Return the deadline *seconds* from now on this sleeper's clock."""
        return self._clock.now() + seconds

    def steps(self, deadline: float) -> Iterator[float]:
        """Yield each sleep duration on the way to *deadline*.

        The clock is re-read when the next value is requested, so the
        caller must finish sleeping before advancing the iterator.
        Exhausts once a read finds the clock at or past *deadline*.
        """
        policy = self._policy
        now = self._clock.now()
        duration_to_sleep = policy.initial
        logger.debug("Deadline is %.3f; clock reads %.3f", deadline, now)

        while now < deadline:
            previous_time = now
            now = self._clock.now()
            remaining = max(deadline - now, 0.0)
            duration_to_sleep = next_sleep(
                duration_to_sleep,
                elapsed(previous_time, now),
                remaining,
                policy,
            )
            logger.debug(
                "%.3fs remaining; sleeping for %.3fs", remaining, duration_to_sleep
            )
            yield duration_to_sleep

    def sleep_until(self, deadline: float) -> None:
        """Block until the clock reads at or past *deadline*."""
        for duration in self.steps(deadline):
            self._sleep(duration)

    def sleep_for(self, seconds: float) -> None:
        """Block for *seconds* measured on this sleeper's clock."""
        self.sleep_until(self.deadline_after(seconds))


def sleep_until(
    deadline: float,
    *,
    clock: ClockPort | None = None,
    sleep: Callable[[float], object] | None = None,
    policy: BackoffPolicy | None = None,
) -> None:
    """Block until *deadline*, a reading of *clock*, has passed.

    Convenience wrapper around :meth:`DeadlineSleeper.sleep_until`.
    """
    DeadlineSleeper(clock=clock, sleep=sleep, policy=policy).sleep_until(deadline)


async def sleep_until_async(
    deadline: float,
    *,
    clock: ClockPort | None = None,
    sleep: Callable[[float], Awaitable[object]] | None = None,
    policy: BackoffPolicy | None = None,
) -> None:
    """Coroutine form of :func:`sleep_until`.

    Follows the same backoff and suspend detection, awaiting
    ``asyncio.sleep`` (or *sleep*) between clock reads.  Cancelling the
    task interrupts the current sleep and propagates
    :class:`asyncio.CancelledError`.
    """
    nap = sleep if sleep is not None else asyncio.sleep
    sleeper = DeadlineSleeper(clock=clock, policy=policy)
    for duration in sleeper.steps(deadline):
        await nap(duration)
