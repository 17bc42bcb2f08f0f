"""Sequential batch runner with coarse progress reporting."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from loguru import logger

from ..core.types import BatchResult, TagOperationResult


@dataclass(frozen=True)
class BatchProgress:
    """Snapshot passed to progress callbacks."""

    processed: int
    total: int
    success_count: int
    error_count: int
    done: bool = False


class BatchProcessor:
    """Runs one operation per document, strictly one after another.

    A failing document is recorded and the batch moves on. Progress is
    reported at most once per ``progress_interval`` seconds and once at the
    end, never per item.

    Example:
        processor = BatchProcessor(on_progress=lambda p: print(p.processed, p.total))
        result = await processor.run(doc_ids, service.tag_document)
    """

    def __init__(
        self,
        progress_interval: float = 5.0,
        on_progress: Callable[[BatchProgress], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize BatchProcessor.

        Args:
            progress_interval: Minimum seconds between progress reports.
            on_progress: Callback for progress reports. Reports are logged if None.
            clock: Monotonic time source in seconds.
        """
        self._progress_interval = progress_interval
        self._on_progress = on_progress
        self._clock = clock
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop before the next document. The current one completes."""
        self._cancelled = True

    async def run(
        self,
        items: Sequence[str],
        operation: Callable[[str], Awaitable[TagOperationResult]],
    ) -> BatchResult:
        """Apply ``operation`` to each item in order.

        Args:
            items: Document identifiers.
            operation: Async per-document operation returning a TagOperationResult.

        Returns:
            BatchResult tally. ``cancelled`` is set if the batch stopped early.
        """
        self._cancelled = False
        result = BatchResult()
        total = len(items)
        start_time = time.perf_counter()
        last_report = self._clock()

        for item in items:
            if self._cancelled:
                result.cancelled = True
                logger.info(f"Batch cancelled after {result.processed}/{total} documents")
                break

            result.processed += 1
            try:
                outcome = await operation(item)
            except Exception as e:
                result.errors.append((item, str(e)))
                logger.warning(f"Failed to process {item!r}: {e}")
            else:
                if outcome.success:
                    result.success_count += 1
                else:
                    result.errors.append((item, outcome.message))

            now = self._clock()
            if now - last_report >= self._progress_interval:
                self._report(result, total, done=False)
                last_report = now

        self._report(result, total, done=True)
        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Batch complete: {result.success_count}/{result.processed} succeeded, "
            f"{len(result.errors)} failed, {elapsed:.1f}s"
        )
        return result

    def _report(self, result: BatchResult, total: int, done: bool) -> None:
        progress = BatchProgress(
            processed=result.processed,
            total=total,
            success_count=result.success_count,
            error_count=len(result.errors),
            done=done,
        )
        if self._on_progress is not None:
            self._on_progress(progress)
        else:
            logger.info(f"Progress: {progress.processed}/{progress.total} documents")
