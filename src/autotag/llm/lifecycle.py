"""Bookkeeping for cancellable, timed outbound requests."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from ..core.exceptions import RequestError, RequestErrorKind

T = TypeVar("T")

TIMEOUT_REASON = "timeout"
DISPOSED_REASON = "disposed"


class CancelToken:
    """One-shot cancellation flag that awaitables can be raced against."""

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Why the token was cancelled, or None if it has not been."""
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Cancel the token. Only the first reason is kept."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token is cancelled first.

        Args:
            awaitable: Work to run.

        Returns:
            The awaitable's result.

        Raises:
            RequestError: TIMEOUT if cancelled by the timer, CANCELLED otherwise.
        """
        work = asyncio.ensure_future(awaitable)
        if self.cancelled:
            work.cancel()
            raise self._error()

        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            # Also reached when the caller is cancelled; the work must not outlive it.
            if not work.done():
                work.cancel()

        if work.done() and not work.cancelled():
            return work.result()

        try:
            await work
        except asyncio.CancelledError:
            pass
        raise self._error()

    def _error(self) -> RequestError:
        if self._reason == TIMEOUT_REASON:
            return RequestError("Request timed out", kind=RequestErrorKind.TIMEOUT)
        return RequestError(f"Request cancelled ({self._reason})", kind=RequestErrorKind.CANCELLED)


@dataclass(frozen=True)
class RequestHandle:
    """A tracked request: its token and the cleanup that must run once."""

    token: CancelToken
    cleanup: Callable[[], None]


class RequestLifecycleManager:
    """Tracks in-flight requests so they can time out or be aborted together.

    Example:
        handle = manager.begin(timeout=30.0)
        try:
            response = await handle.token.run(client.post(url, json=body))
        finally:
            handle.cleanup()
    """

    def __init__(self):
        self._ids = itertools.count()
        self._active: dict[int, tuple[CancelToken, asyncio.TimerHandle]] = {}

    @property
    def active_count(self) -> int:
        """Number of requests currently tracked."""
        return len(self._active)

    def begin(self, timeout: float) -> RequestHandle:
        """Register a request and arm its timeout timer.

        Must be called from within a running event loop.

        Args:
            timeout: Seconds before the token is cancelled with reason "timeout".

        Returns:
            RequestHandle whose ``cleanup`` deregisters the request and clears the timer.
        """
        loop = asyncio.get_running_loop()
        token = CancelToken()
        request_id = next(self._ids)
        timer = loop.call_later(timeout, token.cancel, TIMEOUT_REASON)
        self._active[request_id] = (token, timer)

        def cleanup() -> None:
            entry = self._active.pop(request_id, None)
            if entry is not None:
                entry[1].cancel()

        return RequestHandle(token=token, cleanup=cleanup)

    def dispose_all(self) -> None:
        """Cancel every tracked request and clear all timers. Safe to repeat."""
        if self._active:
            logger.debug(f"Disposing {len(self._active)} in-flight requests")
        for token, timer in self._active.values():
            timer.cancel()
            token.cancel(DISPOSED_REASON)
        self._active.clear()
