"""countdown.

Wait until the sum of human-readable durations has passed, riding out
host suspend and clock jumps along the way.
"""

from importlib.metadata import PackageNotFoundError, version

from countdown._clock import (
    ClockKind,
    ClockPort,
    MonotonicClock,
    SystemClock,
    WallClock,
    elapsed,
    make_clock,
)
from countdown._durations import (
    UNIT_SECONDS,
    DurationError,
    format_duration,
    parse_duration,
    resolve,
)
from countdown._logging import JsonFormatter, configure_logging
from countdown._scheduler import (
    DEFAULT_POLICY,
    BackoffPolicy,
    DeadlineSleeper,
    next_sleep,
    sleep_until,
    sleep_until_async,
)
from countdown._settings import LoggingSettings, SchedulerSettings, Settings

try:
    # Prefer the generated version file (setuptools_scm at build time)
    from countdown._version import __version__
except ImportError:
    try:
        # Fallback to installed package metadata
        __version__ = version("countdown")
    except PackageNotFoundError:
        # Last resort fallback for editable installs without metadata
        __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Clock
    "ClockKind",
    "ClockPort",
    "MonotonicClock",
    "SystemClock",
    "WallClock",
    "elapsed",
    "make_clock",
    # Durations
    "UNIT_SECONDS",
    "DurationError",
    "format_duration",
    "parse_duration",
    "resolve",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Scheduler
    "DEFAULT_POLICY",
    "BackoffPolicy",
    "DeadlineSleeper",
    "next_sleep",
    "sleep_until",
    "sleep_until_async",
    # Settings
    "LoggingSettings",
    "SchedulerSettings",
    "Settings",
]
