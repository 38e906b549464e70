"""Flow control for classification requests: rate limiting, cancellation, timeouts."""

import asyncio
import contextlib
import logging
import threading
import time
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClassifierTimeout(Exception):
    """A single request attempt exceeded its time budget."""


class ClassificationCancelled(Exception):
    """The caller cancelled the classification (e.g. switched documents)."""


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and one classification.

    ``cancel()`` may be called from any coroutine on the token's event loop.
    Suspending operations race against the token via ``run()`` and ``sleep()``.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ClassificationCancelled()

    async def run(self, awaitable: Awaitable[T], timeout: float | None = None) -> T:
        """Await *awaitable*, aborting it promptly on cancellation or after *timeout* seconds.

        Raises ClassificationCancelled or ClassifierTimeout; the pending
        operation is cancelled in both cases.
        """
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
        if task in done:
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        if waiter in done:
            raise ClassificationCancelled()
        raise ClassifierTimeout()

    async def sleep(self, seconds: float) -> None:
        """Sleep for *seconds* unless cancelled first (then raise ClassificationCancelled)."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise ClassificationCancelled()


class RateLimiter:
    """Enforces a minimum gap between request start times.

    Slots are reserved under a lock so concurrent callers (even on different
    event loops) are serialized by start time; the wait itself is an async
    sleep that honours cancellation.  State lives for the life of the object;
    the module-level ``DEFAULT_RATE_LIMITER`` lives for the process.
    """

    def __init__(self, min_gap: float = 0.5, clock: Callable[[], float] = time.monotonic) -> None:
        self.min_gap = min_gap
        self._clock = clock
        self._lock = threading.Lock()
        self._last_start: float | None = None

    def reserve(self, min_gap: float | None = None) -> float:
        """Reserve the next start slot; return how many seconds to wait for it."""
        gap = self.min_gap if min_gap is None else min_gap
        with self._lock:
            now = self._clock()
            start = now if self._last_start is None else max(now, self._last_start + gap)
            self._last_start = start
            return start - now

    async def acquire(self, cancel: CancellationToken | None = None, min_gap: float | None = None) -> None:
        """Wait for a start slot; *min_gap* overrides the limiter default for this request."""
        delay = self.reserve(min_gap)
        if delay <= 0:
            return
        logger.debug("Rate limiter: waiting %.3fs", delay)
        if cancel is None:
            await asyncio.sleep(delay)
        else:
            await cancel.sleep(delay)


DEFAULT_RATE_LIMITER = RateLimiter()


async def call_with_token(
    func: Callable[[], Awaitable[T]], cancel: CancellationToken | None, timeout: float
) -> T:
    """Run one attempt under *timeout*, racing the cancellation token when given."""
    if cancel is not None:
        return await cancel.run(func(), timeout=timeout)
    try:
        return await asyncio.wait_for(func(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise ClassifierTimeout() from exc
