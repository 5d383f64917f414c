"""Application configuration via pydantic-settings.

Configuration is loaded from ``COUNTDOWN_``-prefixed environment
variables and/or a ``.env`` file.  Nested models use ``__`` as the
delimiter, e.g. ``COUNTDOWN_LOGGING__LEVEL=DEBUG``.

Nothing here is needed for ordinary use: the defaults reproduce the
standard sleep loop and log human-readable lines to stderr.

All durations are in **seconds**.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from countdown._scheduler import BackoffPolicy

# -------------------------------------------------------------------
# Sub-models (BaseModel, NOT BaseSettings; nested via composition)
# -------------------------------------------------------------------


class LoggingSettings(BaseModel):
    """Logging configuration.

    Logs always go to stderr.  The ``format`` field selects:

    - ``"text"`` (default) — human-readable timestamped lines.
    - ``"json"`` — one JSON object per line, for log collectors.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description=(
            "Log output format. "
            "'text' emits human-readable timestamped lines; "
            "'json' emits structured JSON lines."
        ),
    )


class SchedulerSettings(BaseModel):
    """Deadline sleep loop configuration.

    Environment variables (with ``__`` nesting)::

        COUNTDOWN_SCHEDULER__CLOCK=monotonic
        COUNTDOWN_SCHEDULER__MAX_SLEEP=30
    """

    clock: Literal["system", "monotonic", "wall"] = Field(
        default="system",
        description=(
            "Clock the deadline is measured on. "
            "'system' keeps counting across host suspend; "
            "'monotonic' pauses during suspend on some platforms; "
            "'wall' follows system clock adjustments."
        ),
    )
    initial_sleep: Annotated[float, Field(gt=0)] = Field(
        default=0.5,
        description="Sleep interval the loop starts from.",
    )
    baseline_sleep: Annotated[float, Field(gt=0)] = Field(
        default=0.5,
        description="Sleep interval restored after a detected suspend.",
    )
    grace_period: Annotated[float, Field(ge=0)] = Field(
        default=0.5,
        description=(
            "Slack on top of the last sleep before a gap between two "
            "clock reads is treated as a suspend."
        ),
    )
    max_sleep: Annotated[float, Field(gt=0)] = Field(
        default=60.0,
        description="Upper bound for a single sleep.",
    )
    min_overshoot: Annotated[float, Field(ge=0)] = Field(
        default=0.1,
        description=(
            "Overshoot below which the loop sleeps out the remaining "
            "time instead of halving it."
        ),
    )
    backoff_factor: Annotated[float, Field(gt=1)] = Field(
        default=2.0,
        description="Multiplier applied to the sleep interval each iteration.",
    )

    def to_policy(self) -> BackoffPolicy:
        """Build the :class:`BackoffPolicy` these settings describe."""
        return BackoffPolicy(
            initial=self.initial_sleep,
            baseline=self.baseline_sleep,
            grace_period=self.grace_period,
            maximum=self.max_sleep,
            min_overshoot=self.min_overshoot,
            factor=self.backoff_factor,
        )


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root settings for the countdown CLI.

    Example ``.env``::

        COUNTDOWN_LOGGING__LEVEL=DEBUG
        COUNTDOWN_LOGGING__FORMAT=json
        COUNTDOWN_SCHEDULER__CLOCK=wall
    """

    model_config = SettingsConfigDict(
        env_prefix="COUNTDOWN_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )
    scheduler: SchedulerSettings = Field(
        default_factory=SchedulerSettings,
        description="Deadline sleep loop configuration.",
    )
