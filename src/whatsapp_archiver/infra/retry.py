"""Centralized retry configuration for file I/O and Google Docs calls."""

from __future__ import annotations

import logging

from googleapiclient.errors import HttpError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
MAX_ATTEMPTS = MAX_RETRIES + 1

# Errors that will not go away by trying again.
PERMANENT_IO_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError)

TRANSIENT_HTTP_STATUSES = frozenset({408, 429, 500, 502, 503, 504})

IO_RETRY_IF = retry_if_exception_type(OSError) & retry_if_not_exception_type(PERMANENT_IO_ERRORS)
IO_RETRY_WAIT = wait_exponential(multiplier=2.0, min=2.0, max=30.0)

STATE_RETRY_WAIT = wait_exponential(multiplier=0.1, min=0.1, max=2.0)

DOCS_RETRY_WAIT = wait_exponential(multiplier=1.0, min=1.0, max=30.0)


def is_transient_docs_error(exc: BaseException) -> bool:
    """Return True for Google API failures worth retrying."""
    if isinstance(exc, HttpError):
        return exc.resp is not None and int(exc.resp.status) in TRANSIENT_HTTP_STATUSES
    return isinstance(exc, (ConnectionError, TimeoutError))


DOCS_RETRY_IF = retry_if_exception(is_transient_docs_error)


def _log_before_retry(retry_state: RetryCallState) -> None:
    """Log before retrying a call."""
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    sleep = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Retrying after %s (attempt %d, waiting %.1fs)...",
        type(error).__name__ if error else "failure",
        retry_state.attempt_number,
        sleep,
    )


def io_retrying(wait: wait_base | None = None) -> Retrying:
    """Retry policy for reading chat exports from disk."""
    return Retrying(
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait if wait is not None else IO_RETRY_WAIT,
        retry=IO_RETRY_IF,
        before_sleep=_log_before_retry,
        reraise=True,
    )


def state_retrying(wait: wait_base | None = None) -> Retrying:
    """Retry policy for checkpoint reads and writes."""
    return Retrying(
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait if wait is not None else STATE_RETRY_WAIT,
        retry=IO_RETRY_IF,
        before_sleep=_log_before_retry,
        reraise=True,
    )


def docs_retrying(wait: wait_base | None = None) -> Retrying:
    """Retry policy for Google Docs API requests."""
    return Retrying(
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait if wait is not None else DOCS_RETRY_WAIT,
        retry=DOCS_RETRY_IF,
        before_sleep=_log_before_retry,
        reraise=True,
    )
