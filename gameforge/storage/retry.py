# gameforge/storage/retry.py
from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, ProgrammingError

from ..errors import StorageUnavailableError

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0

_PERMANENT_MARKERS = (
    "validation",
    "authentication",
    "authorization",
    "syntax error",
    "no such table",
    "no such column",
)


def is_non_retryable(error: BaseException) -> bool:
    """Programmer errors and schema mismatches fail the same way every time."""
    if isinstance(error, (IntegrityError, ProgrammingError)):
        return True

    message = str(error).lower()
    if any(marker in message for marker in _PERMANENT_MARKERS):
        return True
    return "does not exist" in message and ("column" in message or "relation" in message)


def run_with_retry(
    operation: Callable[[], T],
    context: str,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``; retry transient failures with exponential backoff.

    The delay before retry ``n`` (1-based) is ``base_delay * 2 ** (n - 1)``.
    Non-retryable errors propagate unchanged on the first failure. When every
    attempt fails, ``StorageUnavailableError`` is raised from the last error.
    """
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except Exception as e:
            last_error = e
            log.error("Database operation failed (attempt %d/%d) - %s: %s", attempt, attempts, context, e)

            if is_non_retryable(e):
                raise

            if attempt < attempts:
                delay = base_delay * (2 ** (attempt - 1))
                log.warning("Retrying %s in %.2fs", context, delay)
                sleep(delay)

    raise StorageUnavailableError(context, attempts, last_error) from last_error
