"""Command-line interface (Typer-based).

Provides :func:`build_cli`, which constructs the Typer app behind the
``countdown`` console script, and :func:`main`, the script's entry
point::

    countdown 1h 30m
    countdown --log-level debug 90s
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from typing import Annotated, get_args

import typer
from pydantic import ValidationError

from countdown import __version__
from countdown._clock import make_clock
from countdown._durations import format_duration, resolve
from countdown._logging import configure_logging
from countdown._scheduler import DeadlineSleeper
from countdown._settings import LoggingSettings, Settings

logger = logging.getLogger(__name__)

PROG_NAME = "countdown"

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 3
EXIT_INTERRUPTED = 130
EXIT_USAGE_ERROR = 255

# ---------------------------------------------------------------------------
# Allowed values (extracted from LoggingSettings Literal types)
# ---------------------------------------------------------------------------

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["level"].annotation,
)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["format"].annotation,
)

SleeperFactory = Callable[[Settings], DeadlineSleeper]


def make_sleeper(settings: Settings) -> DeadlineSleeper:
    """Build the production sleeper described by *settings*."""
    return DeadlineSleeper(
        clock=make_clock(settings.scheduler.clock),
        policy=settings.scheduler.to_policy(),
    )


def run(durations: Sequence[str], sleeper: DeadlineSleeper) -> float:
    """Sum *durations* and block until that much time has passed.

    Returns:
        The total wait in seconds.
    """
    total = resolve(durations)
    logger.info("Waiting for %s", format_duration(total))
    sleeper.sleep_for(total)
    logger.info("Time is up")
    return total


def _override_logging(
    settings: LoggingSettings,
    log_level: str | None,
    log_format: str | None,
) -> LoggingSettings:
    """Return *settings* with the command-line log options applied."""
    if log_level is not None:
        settings = settings.model_copy(update={"level": log_level.upper()})
    if log_format is not None:
        settings = settings.model_copy(update={"format": log_format.lower()})
    return settings


def build_cli(sleeper_factory: SleeperFactory = make_sleeper) -> typer.Typer:
    """Construct the ``countdown`` Typer CLI.

    Args:
        sleeper_factory: Builds the :class:`DeadlineSleeper` from the
            loaded settings.  Tests pass one wired to a fake clock.

    Returns:
        A configured :class:`typer.Typer` ready to invoke.
    """
    cli = typer.Typer(
        help=(
            f"{PROG_NAME} v{__version__}: wait until the sum of the given "
            "durations has passed."
        ),
        add_completion=False,
    )

    @cli.command()
    def main(
        durations: Annotated[
            list[str] | None,
            typer.Argument(
                help="Durations such as 30s, 5m, 1.5h or 2d (no suffix means seconds).",
                show_default=False,
            ),
        ] = None,
        version_flag: Annotated[
            bool | None,
            typer.Option(
                "--version",
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override log format."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
    ) -> None:
        # -- version ---------------------------------------------------------
        if version_flag:
            typer.echo(f"{PROG_NAME} v{__version__}")
            raise typer.Exit()

        # -- validate enum-like options -------------------------------------
        if log_level is not None and log_level.upper() not in _VALID_LOG_LEVELS:
            raise typer.BadParameter(
                f"Invalid log level '{log_level}'. "
                f"Choose from: {', '.join(_VALID_LOG_LEVELS)}",
                param_hint="'--log-level'",
            )

        if log_format is not None and log_format.lower() not in _VALID_LOG_FORMATS:
            raise typer.BadParameter(
                f"Invalid log format '{log_format}'. "
                f"Choose from: {', '.join(_VALID_LOG_FORMATS)}",
                param_hint="'--log-format'",
            )

        # -- argument count -------------------------------------------------
        if not durations:
            configure_logging(
                _override_logging(LoggingSettings(), log_level, log_format),
                service=PROG_NAME,
                version=__version__,
            )
            logger.error("Not enough arguments.")
            raise SystemExit(EXIT_USAGE_ERROR)

        # -- build settings -------------------------------------------------
        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as exc:
            logger.error("Configuration error: %s", exc)
            raise SystemExit(EXIT_CONFIG_ERROR) from exc

        # -- apply CLI overrides --------------------------------------------
        settings.logging = _override_logging(settings.logging, log_level, log_format)

        configure_logging(settings.logging, service=PROG_NAME, version=__version__)

        # -- wait -----------------------------------------------------------
        try:
            run(durations, sleeper_factory(settings))
        except KeyboardInterrupt:
            logger.warning("Interrupted before the time was up")
            raise SystemExit(EXIT_INTERRUPTED) from None
        except Exception as exc:
            logger.error("Runtime error: %s", exc)
            sys.exit(EXIT_RUNTIME_ERROR)

    return cli


def main() -> None:
    """Console script entry point."""
    build_cli()(prog_name=PROG_NAME)
