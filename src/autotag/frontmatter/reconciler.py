"""Merge and clear tags in a document's frontmatter."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from ..core.exceptions import ReconciliationError
from ..core.types import TagOperationResult
from ..tags.validator import TagSet, merge, partition
from .document import FrontmatterDocument

if TYPE_CHECKING:
    from ..vault.host import VaultHost


class FrontmatterReconciler:
    """Rewrites only the ``tags`` entry of a document's frontmatter.

    After each write the reconciler waits for the host's reindex signal for
    that document, so callers never observe the pre-write index. Hosts
    without signals get a fixed settle delay instead.

    Both operations return a TagOperationResult and never raise.

    Example:
        reconciler = FrontmatterReconciler(vault)
        result = await reconciler.update_tags("a.md", ["#new"], ["#existing"])
        if not result.success:
            print(result.message)
    """

    def __init__(
        self,
        host: VaultHost,
        reindex_timeout: float = 5.0,
        settle_delay: float = 0.2,
    ):
        """Initialize FrontmatterReconciler.

        Args:
            host: Document store.
            reindex_timeout: Seconds to wait for the reindex signal after a write.
            settle_delay: Seconds to wait after a write when the host has no signals.
        """
        self._host = host
        self._reindex_timeout = reindex_timeout
        self._settle_delay = settle_delay

    async def update_tags(
        self,
        doc_id: str,
        new_tags: Iterable[str],
        matched_tags: Iterable[str] = (),
        existing: Iterable[str] | None = None,
    ) -> TagOperationResult:
        """Merge tags into a document's frontmatter.

        ``final = merge(existing, merge(new_tags, matched_tags))``. Invalid
        incoming tags are skipped and reported in the message.

        The "No valid tags to add" shortcut tests the incoming tags, not
        ``final``: when nothing valid arrives the document is left untouched
        even if it already carries tags, and those tags are returned as-is.

        Args:
            doc_id: Document identifier.
            new_tags: Newly suggested tags.
            matched_tags: Existing or predefined tags the model matched.
            existing: Tags already on the document. Defaults to the host's
                indexed view, never a re-scan of the text.

        Returns:
            TagOperationResult with the final tag set.
        """
        start_time = time.perf_counter()
        new_tags = list(new_tags)
        matched_tags = list(matched_tags)
        try:
            _, invalid = partition([*new_tags, *matched_tags])
            if invalid:
                logger.warning(f"Skipping invalid tags for {doc_id!r}: {invalid!r}")

            existing_tags = merge(
                existing if existing is not None else self._host.indexed_tags(doc_id), ()
            )
            incoming = merge(new_tags, matched_tags)
            if not incoming:
                return TagOperationResult(True, "No valid tags to add", existing_tags)

            final = merge(existing_tags, incoming)
            text = await self._host.read_text(doc_id)
            updated = FrontmatterDocument.parse(text).with_tags(final.bare()).render()

            if updated == text:
                message = "Tags already up to date"
            else:
                await self._write_and_wait(doc_id, updated)
                added = len(final) - len(existing_tags)
                message = f"Added {added} tag{'s' if added != 1 else ''}"
            if invalid:
                message += f" (skipped invalid: {', '.join(invalid)})"

            elapsed = (time.perf_counter() - start_time) * 1000
            logger.info(f"Updated tags for {doc_id!r}: {len(final)} tags, {elapsed:.1f}ms")
            return TagOperationResult(True, message, final)
        except Exception as e:
            logger.error(f"Tag update failed for {doc_id!r}: {e}")
            return TagOperationResult(False, f"Update failed: {e}")

    async def clear_tags(self, doc_id: str) -> TagOperationResult:
        """Leave a present-but-empty ``tags`` key; everything else is untouched.

        A document without frontmatter gains a block holding only ``tags:``.

        Args:
            doc_id: Document identifier.

        Returns:
            TagOperationResult with an empty final tag set on success.
        """
        try:
            text = await self._host.read_text(doc_id)
            updated = FrontmatterDocument.parse(text).with_tags([]).render()
            if updated == text:
                return TagOperationResult(True, "Tags already cleared", TagSet())

            await self._write_and_wait(doc_id, updated)
            logger.info(f"Cleared tags for {doc_id!r}")
            return TagOperationResult(True, "Tags cleared", TagSet())
        except Exception as e:
            logger.error(f"Tag clear failed for {doc_id!r}: {e}")
            return TagOperationResult(False, f"Clear failed: {e}")

    async def _write_and_wait(self, doc_id: str, text: str) -> None:
        """Write, then block until the host reports the document reindexed.

        Raises:
            ReconciliationError: If the reindex signal does not arrive in time.
        """
        signals = self._host.signals
        if signals is None:
            await self._host.write_text(doc_id, text)
            await asyncio.sleep(self._settle_delay)
            return

        # Armed before writing so an immediate reindex is not missed
        waiter = signals.expect(doc_id)
        try:
            await self._host.write_text(doc_id, text)
        except BaseException:
            waiter.cancel()
            raise

        if not await waiter.wait(self._reindex_timeout):
            raise ReconciliationError(
                f"{doc_id} was written but not reindexed within {self._reindex_timeout:.1f}s"
            )
