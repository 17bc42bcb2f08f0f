"""Tagging service: model analysis followed by frontmatter reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from loguru import logger

from ..core.config import TaggingConfig
from ..core.exceptions import AutotagError, ConfigError
from ..core.types import BatchResult, TagOperationResult
from ..llm.prompts import TaggingMode
from ..tags.cache import TagCache
from ..vault.metadata import parse_frontmatter
from .batch import BatchProcessor, BatchProgress

if TYPE_CHECKING:
    from ..frontmatter.reconciler import FrontmatterReconciler
    from ..llm.base import TaggingProvider
    from ..vault.host import VaultHost


class TaggingService:
    """Service for tagging and clearing documents.

    This service handles:
    - Choosing candidate tags (vault tags or the predefined list)
    - Asking the provider for tags
    - Merging the result into the document's frontmatter
    - Running either operation over many documents, one at a time

    Example:

        service = TaggingService(provider, reconciler, vault, config.tagging)
        result = await service.tag_document("notes/idea.md")
        batch = await service.tag_documents(vault.list_documents())
        await service.dispose()
    """

    def __init__(
        self,
        provider: TaggingProvider,
        reconciler: FrontmatterReconciler,
        host: VaultHost,
        config: TaggingConfig | None = None,
        predefined_tags: list[str] | None = None,
        tag_cache: TagCache | None = None,
        progress_interval: float = 5.0,
        on_progress: Callable[[BatchProgress], None] | None = None,
    ):
        """Initialize TaggingService.

        Args:
            provider: LLM tagging provider.
            reconciler: Frontmatter reconciler bound to ``host``.
            host: Document store.
            config: Tagging settings. Defaults are used if None.
            predefined_tags: Candidate list for predefined modes.
            tag_cache: Cache for the vault-wide tag list. A new one is created if None.
            progress_interval: Seconds between batch progress reports.
            on_progress: Callback for batch progress reports.
        """
        self._provider = provider
        self._reconciler = reconciler
        self._host = host
        self._config = config or TaggingConfig()
        self._predefined_tags = list(predefined_tags or [])
        self._tag_cache = tag_cache or TagCache(ttl=self._config.tag_cache_ttl)
        self._batch = BatchProcessor(progress_interval=progress_interval, on_progress=on_progress)

    def _candidate_tags(self, mode: TaggingMode) -> list[str]:
        if mode.uses_predefined:
            return list(self._predefined_tags)
        if mode is TaggingMode.GENERATE:
            return []
        return self._tag_cache.get(self._host.all_tags).to_list()

    async def tag_document(
        self,
        doc_id: str,
        mode: TaggingMode | str | None = None,
        max_tags: int | None = None,
        language: str | None = None,
    ) -> TagOperationResult:
        """Analyze a document and merge the resulting tags into it.

        Args:
            doc_id: Document identifier.
            mode: Tagging mode. Defaults to the configured mode.
            max_tags: Maximum tags per set. Defaults to the configured limit.
            language: Optional language code for generated tags.

        Returns:
            TagOperationResult. Provider and extraction failures become failure results.
        """
        try:
            try:
                resolved_mode = TaggingMode(mode or self._config.mode)
            except ValueError:
                raise ConfigError(f"Unknown tagging mode: {mode or self._config.mode!r}") from None

            text = await self._host.read_text(doc_id)
            body = parse_frontmatter(text).content
            parsed = await self._provider.analyze(
                body,
                self._candidate_tags(resolved_mode),
                resolved_mode,
                max_tags or self._config.max_tags,
                language,
            )
        except AutotagError as e:
            logger.warning(f"Tagging failed for {doc_id!r}: {e}")
            return TagOperationResult(False, f"Tagging failed: {e}")

        result = await self._reconciler.update_tags(
            doc_id, parsed.suggested_tags, parsed.matched_tags
        )
        if result.success:
            self._tag_cache.invalidate()
        return result

    async def clear_document(self, doc_id: str) -> TagOperationResult:
        """Clear a document's tags."""
        result = await self._reconciler.clear_tags(doc_id)
        if result.success:
            self._tag_cache.invalidate()
        return result

    async def tag_documents(
        self,
        doc_ids: Sequence[str],
        mode: TaggingMode | str | None = None,
        max_tags: int | None = None,
        language: str | None = None,
    ) -> BatchResult:
        """Tag documents one after another.

        Returns:
            BatchResult with per-document failures.
        """
        logger.info(f"Tagging {len(doc_ids)} documents")

        async def operation(doc_id: str) -> TagOperationResult:
            return await self.tag_document(doc_id, mode, max_tags, language)

        return await self._batch.run(doc_ids, operation)

    async def clear_documents(self, doc_ids: Sequence[str]) -> BatchResult:
        """Clear tags on documents one after another."""
        logger.info(f"Clearing tags on {len(doc_ids)} documents")
        return await self._batch.run(doc_ids, self.clear_document)

    def cancel_batch(self) -> None:
        """Stop the running batch before its next document."""
        self._batch.cancel()

    async def dispose(self) -> None:
        """Cancel any batch and abort the provider's in-flight requests."""
        self._batch.cancel()
        await self._provider.dispose()
