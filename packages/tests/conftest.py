"""Pytest configuration and shared fixtures."""

import pytest

# The countdown testing plugin is registered via a ``pytest11`` entry
# point (pyproject.toml) for external consumers.  In our own test
# suite we disable it (``-p no:countdown``) and load explicitly here
# instead, so the countdown import chain is measured by pytest-cov.
pytest_plugins = ["countdown.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real clock and subprocess)"
    )
