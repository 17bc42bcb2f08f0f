"""Per-document "reindexed" notifications."""

from __future__ import annotations

import asyncio

from loguru import logger


class ReindexWaiter:
    """Pending wait for one document to be reindexed.

    Created by ``ReindexSignals.expect`` before the write it waits for, so a
    notification that arrives before ``wait`` is called is not lost.
    """

    def __init__(self, signals: ReindexSignals, doc_id: str, future: asyncio.Future[None]):
        self._signals = signals
        self.doc_id = doc_id
        self._future = future

    @property
    def done(self) -> bool:
        return self._future.done()

    async def wait(self, timeout: float) -> bool:
        """Wait for the signal.

        Args:
            timeout: Seconds to wait before giving up.

        Returns:
            True if the document was reindexed, False on timeout.
        """
        try:
            await asyncio.wait_for(asyncio.shield(self._future), timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"No reindex signal for {self.doc_id!r} within {timeout:.1f}s")
            return False
        finally:
            self.cancel()

    def cancel(self) -> None:
        """Stop waiting and deregister."""
        self._signals._discard(self.doc_id, self._future)
        if not self._future.done():
            self._future.cancel()


class ReindexSignals:
    """Routes "document reindexed" events to waiters for that document only.

    Example:
        waiter = signals.expect("notes/a.md")
        await vault.write_text("notes/a.md", text)
        if not await waiter.wait(5.0):
            ...  # the index never caught up
    """

    def __init__(self):
        self._waiters: dict[str, list[asyncio.Future[None]]] = {}

    def expect(self, doc_id: str) -> ReindexWaiter:
        """Register interest in the next reindex of ``doc_id``.

        Must be called from within a running event loop.
        """
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.setdefault(doc_id, []).append(future)
        return ReindexWaiter(self, doc_id, future)

    def notify(self, doc_id: str) -> None:
        """Signal that ``doc_id`` has been reindexed, releasing its waiters."""
        for future in self._waiters.pop(doc_id, []):
            if not future.done():
                future.set_result(None)

    def pending(self, doc_id: str) -> int:
        """Number of waiters registered for ``doc_id``."""
        return len(self._waiters.get(doc_id, []))

    def _discard(self, doc_id: str, future: asyncio.Future[None]) -> None:
        futures = self._waiters.get(doc_id)
        if not futures:
            return
        if future in futures:
            futures.remove(future)
        if not futures:
            del self._waiters[doc_id]
