"""Frontmatter parsing, reindex signalling and tag reconciliation."""

from .document import FrontmatterDocument, FrontmatterState
from .reconciler import FrontmatterReconciler
from .signals import ReindexSignals, ReindexWaiter

__all__ = [
    "FrontmatterDocument",
    "FrontmatterState",
    "FrontmatterReconciler",
    "ReindexSignals",
    "ReindexWaiter",
]
