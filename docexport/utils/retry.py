"""Retry decorator with exponential backoff for transient errors.

Only transient errors are retried - authentication failures and malformed
queries are NOT retried.
"""

import functools
import logging
import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from docexport.exceptions import DocexportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default transient exceptions that should be retried
DEFAULT_TRANSIENT_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    TimeoutError,
    ConnectionError,
)


def _is_retryable(exc: Exception, exceptions: Tuple[Type[Exception], ...]) -> bool:
    if isinstance(exc, DocexportError):
        return exc.retryable
    return isinstance(exc, exceptions)


def retry(
    max_retries: int = 3,
    min_backoff: float = 1.0,
    max_backoff: float = 10.0,
    exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator that retries a function on transient failures with exponential backoff.

    docexport errors are retried when their ``retryable`` flag is set; other
    exceptions only when they are instances of ``exceptions``.

    Args:
        max_retries: Maximum number of retry attempts (default: 3).
        min_backoff: Minimum backoff time in seconds (default: 1.0).
        max_backoff: Maximum backoff time in seconds (default: 10.0).
        exceptions: Tuple of exception types to retry on. If None, uses
            DEFAULT_TRANSIENT_EXCEPTIONS.
        on_retry: Optional callback called before each retry with (exception, attempt).
        sleep: Sleep function; defaults to time.sleep.

    Returns:
        A decorator function.

    Example:
        @retry(max_retries=3, min_backoff=1.0, max_backoff=10.0)
        def query_store():
            response = session.get(url, params={"query": query})
            response.raise_for_status()
            return response.json()
    """
    if exceptions is None:
        exceptions = DEFAULT_TRANSIENT_EXCEPTIONS

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            attempt = 0

            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not _is_retryable(e, exceptions):
                        raise
                    last_exception = e

                attempt += 1

                if attempt > max_retries:
                    logger.warning(
                        "Max retries (%d) exceeded for %s: %s",
                        max_retries,
                        func.__name__,
                        last_exception,
                    )
                    raise last_exception

                backoff = min(min_backoff * (2 ** (attempt - 1)), max_backoff)
                retry_after = getattr(last_exception, "context", {}).get("retry_after")
                if retry_after is not None:
                    backoff = max(backoff, float(retry_after))
                # Jitter to prevent thundering herd
                sleep_time = backoff + random.uniform(0, backoff * 0.1)

                logger.debug(
                    "Retry %d/%d for %s after %.2fs: %s",
                    attempt,
                    max_retries,
                    func.__name__,
                    sleep_time,
                    last_exception,
                )

                if on_retry:
                    on_retry(last_exception, attempt)

                (sleep or time.sleep)(sleep_time)

        return wrapper

    return decorator
