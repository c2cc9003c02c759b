"""Retry with exponential backoff for Google API (Gmail, Calendar) requests."""

from __future__ import annotations

import logging
import socket
import time
from typing import Any

from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

# Network-level failures worth another attempt
_TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    socket.gaierror,
    ConnectionError,
    TimeoutError,
    OSError,
)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0  # seconds


def http_status(exc: BaseException) -> int | None:
    """HTTP status of a Google API error, or None for non-HTTP failures."""
    if isinstance(exc, HttpError):
        return exc.resp.status
    return None


def _is_retryable(exc: BaseException) -> bool:
    """Check whether an exception is transient and worth retrying."""
    if isinstance(exc, _TRANSIENT_EXCEPTIONS):
        return True
    if http_status(exc) in _RETRYABLE_STATUS_CODES:
        return True
    # httplib2 wraps socket errors in its own exception hierarchy
    cause = exc.__cause__ or exc.__context__
    return isinstance(cause, _TRANSIENT_EXCEPTIONS)


def execute_with_retry(
    request: Any,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    operation: str = "API call",
) -> Any:
    """Run ``request.execute()``, retrying transient failures.

    Network errors and 429/5xx responses are retried with delays of
    ``base_delay * 2**attempt``; any other error (notably 4xx) is raised
    on the spot. After ``max_retries`` retries the last error is raised.
    """
    attempts = 1 + max_retries
    for attempt in range(attempts):
        try:
            return request.execute()
        except Exception as exc:
            if not _is_retryable(exc) or attempt == attempts - 1:
                if attempt:
                    logger.error("%s failed after %d attempts: %s", operation, attempt + 1, exc)
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                operation,
                attempt + 1,
                attempts,
                delay,
                exc,
            )
            time.sleep(delay)
