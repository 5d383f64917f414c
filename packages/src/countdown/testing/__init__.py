"""Public test-support utilities for countdown.

Provided symbols:

- :class:`FakeClock` — deterministic clock and sleep primitive.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files.
"""

from countdown.testing._clock import FakeClock
from countdown.testing._settings import make_settings

__all__ = [
    "FakeClock",
    "make_settings",
]
