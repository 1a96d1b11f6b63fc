"""Performance timing decorator."""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable


def timed(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs execution time of client methods.

    The instance's own ``_logger`` is used so that the level chosen at
    construction applies.
    """

    @functools.wraps(fn)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        logger: logging.Logger = getattr(self, "_logger", None) or logging.getLogger("redmine_cli")
        start = time.monotonic()
        try:
            return fn(self, *args, **kwargs)
        finally:
            elapsed = time.monotonic() - start
            logger.debug("%s completed in %.3fs", fn.__name__, elapsed)

    return wrapper
