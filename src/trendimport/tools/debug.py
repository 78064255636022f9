"""Opt-in timing hooks for import runs."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Return True when ``TRENDIMPORT_DEBUG`` asks for instrumentation."""
    return os.getenv("TRENDIMPORT_DEBUG", "").lower() in _TRUTHY


@contextmanager
def time_block(label: str, *, emitter: Callable[[str], None] | None = None) -> Iterator[None]:
    """
    Context manager that reports elapsed time when debugging is enabled.

    Reports go to ``emitter`` or, by default, to this module's logger at DEBUG.
    """
    if not debug_enabled():
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        message = f"{label} took {elapsed_ms:.3f} ms"
        if emitter is None:
            logger.debug(message)
        else:
            emitter(message)
