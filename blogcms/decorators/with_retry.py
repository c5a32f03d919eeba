from collections.abc import Awaitable, Callable
from logging import getLogger

from httpx import TransportError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from blogcms.configs import file_logger

logger = file_logger(getLogger(__name__))

# Network-level failures only; HTTP error statuses are answers, not faults
RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (TransportError, ConnectionError, TimeoutError)


def _log_before_sleep(max_retries: int) -> Callable[[RetryCallState], None]:
    def before_sleep_callback(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        sleep_duration = retry_state.next_action.sleep if retry_state.next_action else 0
        func_name = retry_state.fn.__name__ if retry_state.fn else "unknown"
        logger.warning(
            "Retry %d/%d for %s after %.2fs delay. Exception: %s",
            retry_state.attempt_number,
            max_retries,
            func_name,
            sleep_duration,
            exception,
        )

    return before_sleep_callback


def with_retry[**P, T](
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async function with exponential backoff.

    Args:
        max_retries: Total attempts, the first call included.
        base_delay: Initial delay between retries in seconds.
        max_delay: Maximum delay between retries in seconds.
        exec_retry: Exception types worth retrying.

    Returns:
        Decorator; the last exception is re-raised once attempts run out.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_log_before_sleep(max_retries),
        reraise=True,
    )
