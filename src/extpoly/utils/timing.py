"""Execution-time logging for public entry points."""

import functools
import time

from extpoly.utils.log_config import logger


def timed(func):
    """Log the wall-clock duration of every call to *func* at debug level.

    The wrapped function's result and exceptions pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            logger.debug("Method %s executed in %.3f ms", func.__qualname__, elapsed_ms)

    return wrapper
