"""Markdown vault on a local directory, using fsspec."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

import fsspec
from loguru import logger

from ..core.exceptions import ReconciliationError
from ..frontmatter.signals import ReindexSignals
from ..tags.validator import TagSet
from .metadata import tags_from_text


class FileSystemVault:
    """Markdown files under a root directory with an in-memory tag index.

    Writes go to disk immediately. The index entry for the written document
    is refreshed on the next event-loop iteration, after which the
    document's reindex signal fires and change listeners are called.

    Example:
        vault = FileSystemVault("~/notes")
        vault.build_index()
        text = await vault.read_text("projects/plan.md")
    """

    def __init__(
        self,
        root: str | Path,
        glob_pattern: str = "**/*.md",
        signals: ReindexSignals | None = None,
    ):
        """Initialize FileSystemVault.

        Args:
            root: Vault root directory.
            glob_pattern: Pattern selecting documents, relative to root.
            signals: Reindex notifier. A new one is created if None.
        """
        self.root = Path(root).expanduser().resolve()
        self.glob_pattern = glob_pattern
        self.signals: ReindexSignals | None = signals or ReindexSignals()
        self._fs = fsspec.filesystem("file")
        self._index: dict[str, TagSet] = {}
        self._indexed_all = False
        self._listeners: list[Callable[[str], None]] = []

    def _path(self, doc_id: str) -> Path:
        path = (self.root / doc_id).resolve()
        if not path.is_relative_to(self.root):
            raise ReconciliationError(f"Document {doc_id!r} is outside the vault")
        return path

    def list_documents(self) -> list[str]:
        """List documents matching the glob pattern, relative to root, sorted."""
        docs = [
            path.relative_to(self.root).as_posix()
            for path in self.root.glob(self.glob_pattern)
            if path.is_file()
        ]
        return sorted(docs)

    def _read_sync(self, doc_id: str) -> str:
        try:
            with self._fs.open(str(self._path(doc_id)), "r", encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ReconciliationError(f"Cannot read {doc_id}: {e}") from e

    def _write_sync(self, doc_id: str, text: str) -> None:
        path = self._path(doc_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with self._fs.open(str(path), "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise ReconciliationError(f"Cannot write {doc_id}: {e}") from e

    async def read_text(self, doc_id: str) -> str:
        """Read a document's full text, line endings untouched.

        Raises:
            ReconciliationError: If the file cannot be read.
        """
        return await asyncio.to_thread(self._read_sync, doc_id)

    async def write_text(self, doc_id: str, text: str) -> None:
        """Write a document and schedule its reindex.

        Raises:
            ReconciliationError: If the file cannot be written.
        """
        await asyncio.to_thread(self._write_sync, doc_id, text)
        logger.debug(f"Wrote {doc_id!r} ({len(text)} chars)")
        asyncio.get_running_loop().call_soon(self._reindex, doc_id)

    def _reindex(self, doc_id: str) -> None:
        try:
            self._index[doc_id] = tags_from_text(self._read_sync(doc_id))
        except ReconciliationError as e:
            # Waiters time out instead of observing a stale view
            logger.error(f"Reindex failed for {doc_id!r}: {e}")
            return
        if self.signals is not None:
            self.signals.notify(doc_id)
        for callback in self._listeners:
            callback(doc_id)

    def build_index(self) -> int:
        """Index every document's frontmatter tags.

        Returns:
            Number of documents indexed.
        """
        self._index = {}
        for doc_id in self.list_documents():
            try:
                self._index[doc_id] = tags_from_text(self._read_sync(doc_id))
            except ReconciliationError as e:
                logger.warning(f"Skipping unreadable document {doc_id!r}: {e}")
        self._indexed_all = True
        logger.info(f"Indexed {len(self._index)} documents under {self.root}")
        return len(self._index)

    def indexed_tags(self, doc_id: str) -> TagSet:
        """Tags from the index, indexing the document on first access."""
        if doc_id not in self._index:
            self._index[doc_id] = tags_from_text(self._read_sync(doc_id))
        return self._index[doc_id]

    def all_tag_sets(self) -> list[tuple[str, TagSet]]:
        if not self._indexed_all:
            self.build_index()
        return sorted(self._index.items())

    def all_tags(self) -> TagSet:
        tags = TagSet()
        for _, doc_tags in self.all_tag_sets():
            tags = tags.union(doc_tags)
        return tags

    def on_change(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)
