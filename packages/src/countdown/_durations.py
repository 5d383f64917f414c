"""Duration tokens: parsing, summation and display.

A duration token is a number followed by an optional one-letter unit::

    30      30 seconds (no unit means seconds)
    30s     30 seconds
    2.5m    150 seconds
    1h      3600 seconds
    1d      86400 seconds

:func:`parse_duration` is strict and raises :class:`DurationError`.
:func:`resolve` is what the CLI uses: it sums many tokens and lets a
bad one contribute nothing, so garbage input shortens the wait rather
than aborting it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from itertools import takewhile

logger = logging.getLogger(__name__)

UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
}

DEFAULT_UNIT = "s"

_NUMERIC_CHARS = frozenset("0123456789.")


class DurationError(ValueError):
    """A duration token could not be converted to seconds."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Could not parse {token!r}: {reason}")
        self.token = token
        self.reason = reason


def parse_duration(token: str) -> float:
    """Convert a single duration token to seconds.

    The numeric prefix is the leading run of ASCII digits and ``.``
    characters.  The first character after it selects the unit; it
    must be one of :data:`UNIT_SECONDS` and must end the token.

    Raises:
        DurationError: If the prefix is not a number, the unit is
            unknown, characters follow the unit, or the result does not
            fit in a float.
    """
    number = "".join(takewhile(_NUMERIC_CHARS.__contains__, token))
    try:
        value = float(number)
    except ValueError as exc:
        raise DurationError(token, "did not start with a number") from exc

    rest = token[len(number) :]
    unit = rest[:1] or DEFAULT_UNIT
    if unit not in UNIT_SECONDS:
        raise DurationError(token, f"unknown suffix {unit!r}")
    if len(rest) > 1:
        raise DurationError(token, f"unexpected characters after {unit!r}")

    seconds = value * UNIT_SECONDS[unit]
    if not math.isfinite(seconds):
        raise DurationError(token, "number is out of range")
    return seconds


def resolve(tokens: Iterable[str]) -> float:
    """Sum the seconds of every token.

    Invalid tokens are logged and count as zero, as does a token that
    would push the total past what a float can hold.  This never
    raises for a bad token.
    """
    total = 0.0
    for token in tokens:
        try:
            seconds = parse_duration(token)
        except DurationError as exc:
            logger.warning("%s; ignoring it", exc)
            continue
        if not math.isfinite(total + seconds):
            logger.warning("Total is out of range with %r; ignoring it", token)
            continue
        total += seconds
    return total


def format_duration(seconds: float) -> str:
    """Render *seconds* for humans, e.g. ``3725 -> "1h 2m 5s"``.

    Waits under a minute keep their fractional part; longer waits are
    rounded to whole seconds and zero components are left out.
    """
    if seconds < 60:
        return f"{seconds:g}s"

    remainder = round(seconds)
    parts: list[str] = []
    for unit, size in sorted(UNIT_SECONDS.items(), key=lambda item: -item[1]):
        count, remainder = divmod(remainder, size)
        if count:
            parts.append(f"{count}{unit}")
    return " ".join(parts)
