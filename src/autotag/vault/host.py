"""Protocol for the document store the tagging core runs against.

Reconciliation, graph building and the tagging workflow depend on this
protocol rather than on a concrete vault, so they can be driven by the
filesystem vault or by an in-memory fake.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..frontmatter.signals import ReindexSignals
    from ..tags.validator import TagSet


@runtime_checkable
class VaultHost(Protocol):
    """Protocol for reading, writing and indexing documents."""

    signals: ReindexSignals | None
    """Per-document reindex notifications, or None if the host has none."""

    def list_documents(self) -> list[str]:
        """List document identifiers in a stable order."""
        ...

    async def read_text(self, doc_id: str) -> str:
        """Read a document's full text."""
        ...

    async def write_text(self, doc_id: str, text: str) -> None:
        """Replace a document's full text. Reindexing happens afterwards."""
        ...

    def indexed_tags(self, doc_id: str) -> TagSet:
        """Tags of a document as last seen by the metadata index."""
        ...

    def all_tag_sets(self) -> list[tuple[str, TagSet]]:
        """Indexed (document, tags) pairs for every document."""
        ...

    def all_tags(self) -> TagSet:
        """Union of every document's indexed tags."""
        ...

    def on_change(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with a document id after it is reindexed."""
        ...
