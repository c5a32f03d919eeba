"""
Single-flight execution of identical in-flight operations.

Concurrent callers asking for the same key share one execution and all
receive its outcome, success or failure. Entries live only while the
operation runs and never longer than the timeout: after the timeout a new
caller starts a fresh execution even if the old one is still running.
"""

from asyncio import Future, ensure_future, shield
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from logging import DEBUG, getLogger
from threading import Lock
from time import monotonic
from typing import Any

from blogcms.configs import file_logger, settings

logger = file_logger(getLogger(__name__))

type Clock = Callable[[], float]


@dataclass(slots=True)
class PendingRequest:
    future: Future[Any]
    registered_at: float


class RequestDeduplicator:
    """
    Keyed table of in-flight operations.

    Args:
        timeout: Seconds after which an entry no longer accepts joiners.
            Defaults to ``settings.DEDUP_TIMEOUT_SECONDS``.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, timeout: float | None = None, clock: Clock = monotonic) -> None:
        self.timeout = settings.DEDUP_TIMEOUT_SECONDS if timeout is None else timeout
        self._clock = clock
        self._pending: dict[str, PendingRequest] = {}
        # Guards check-and-replace; never held across an await
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._pending)

    def pending_keys(self) -> list[str]:
        with self._lock:
            return list(self._pending)

    def _is_live(self, entry: PendingRequest, now: float) -> bool:
        return now - entry.registered_at < self.timeout

    async def dedupe[T](self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``operation`` once per key among concurrent callers.

        Args:
            key: Identity of the operation.
            operation: Zero-argument async callable, only invoked when no
                live entry exists for ``key``.

        Returns:
            The shared operation's result.

        Raises:
            Whatever the shared operation raised, to every caller.
        """
        with self._lock:
            now = self._clock()
            entry = self._pending.get(key)
            if entry is not None and self._is_live(entry, now):
                future = entry.future
                if logger.isEnabledFor(DEBUG):
                    logger.debug("Joining in-flight request: %s", key)
            else:
                if entry is not None:
                    logger.debug("Evicting expired in-flight request: %s", key)
                future = ensure_future(operation())
                self._pending[key] = PendingRequest(future=future, registered_at=now)
                future.add_done_callback(partial(self._settle, key))

        # One caller giving up must not cancel the work others are waiting on
        return await shield(future)

    def _settle(self, key: str, future: Future[Any]) -> None:
        with self._lock:
            entry = self._pending.get(key)
            # A newer execution may already own the key after expiry
            if entry is not None and entry.future is future:
                del self._pending[key]
        if not future.cancelled() and future.exception() is not None:
            logger.debug("In-flight request %s failed", key)

    def clear(self) -> None:
        """Forget every entry; running operations are left to finish."""
        with self._lock:
            self._pending.clear()
