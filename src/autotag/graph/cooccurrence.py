"""Vault-wide tag co-occurrence graph."""

from __future__ import annotations

import asyncio
import itertools
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from loguru import logger

from ..tags.validator import strip_marker, to_tag_set

MIN_NODE_SIZE = 5
MAX_NODE_SIZE = 30


@dataclass
class CooccurrenceGraph:
    """Tag frequencies and pairwise co-occurrence weights.

    Attributes:
        nodes: Tag -> number of documents carrying it.
        edges: (tag_a, tag_b) with tag_a < tag_b -> number of documents carrying both.
        document_count: Number of documents scanned.
    """

    nodes: dict[str, int] = field(default_factory=dict)
    edges: dict[tuple[str, str], int] = field(default_factory=dict)
    document_count: int = 0

    def node_list(self) -> list[tuple[str, int]]:
        """Nodes by descending frequency, then tag."""
        return sorted(self.nodes.items(), key=lambda item: (-item[1], item[0]))

    def edge_list(self, min_weight: int = 1) -> list[tuple[str, str, int]]:
        """Edges with at least ``min_weight``, by descending weight, then pair."""
        edges = [(a, b, w) for (a, b), w in self.edges.items() if w >= min_weight]
        return sorted(edges, key=lambda e: (-e[2], e[0], e[1]))

    def weight(self, tag_a: str, tag_b: str) -> int:
        """Co-occurrence weight of two tags, in either order."""
        key = (tag_a, tag_b) if tag_a < tag_b else (tag_b, tag_a)
        return self.edges.get(key, 0)

    def neighbors(self, tag: str) -> dict[str, int]:
        """Tags co-occurring with ``tag`` and their weights."""
        result: dict[str, int] = {}
        for (a, b), w in self.edges.items():
            if a == tag:
                result[b] = w
            elif b == tag:
                result[a] = w
        return result

    def to_network_data(self, min_weight: int = 1) -> dict[str, list[dict[str, Any]]]:
        """Nodes and edges in the shape a graph renderer consumes.

        Node size grows with frequency and is clamped to [5, 30].
        """
        nodes = [
            {
                "id": tag,
                "label": strip_marker(tag),
                "size": max(MIN_NODE_SIZE, min(MAX_NODE_SIZE, MIN_NODE_SIZE + freq * 3)),
                "frequency": freq,
            }
            for tag, freq in self.node_list()
        ]
        edges = [
            {"id": f"{a}-{b}", "source": a, "target": b, "weight": w}
            for a, b, w in self.edge_list(min_weight)
        ]
        return {"nodes": nodes, "edges": edges}


class CooccurrenceGraphBuilder:
    """Builds a CooccurrenceGraph from per-document tag collections."""

    def build(self, tag_sets: Iterable[Iterable[str]]) -> CooccurrenceGraph:
        """Count tag frequencies and co-occurring pairs.

        Each document contributes at most 1 to a tag and 1 to a pair.
        Invalid tags are ignored; no self-edges are produced.

        Args:
            tag_sets: One tag collection per document.

        Returns:
            A fresh CooccurrenceGraph.

        Example:
            >>> graph = CooccurrenceGraphBuilder().build([["a", "b"], ["a", "c"]])
            >>> graph.nodes
            {'#a': 2, '#b': 1, '#c': 1}
        """
        start_time = time.perf_counter()
        nodes: Counter[str] = Counter()
        edges: Counter[tuple[str, str]] = Counter()
        documents = 0

        for tags in tag_sets:
            documents += 1
            # TagSet is sorted, so combinations yield (a, b) with a < b
            canonical = to_tag_set(tags).to_list()
            nodes.update(canonical)
            edges.update(itertools.combinations(canonical, 2))

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Built tag graph: {len(nodes)} nodes, {len(edges)} edges "
            f"from {documents} documents, {elapsed:.1f}ms"
        )
        return CooccurrenceGraph(nodes=dict(nodes), edges=dict(edges), document_count=documents)


class GraphRefresher:
    """Keeps a graph current, rebuilding on demand or after changes settle.

    Change notifications within ``debounce`` seconds of each other trigger
    a single rebuild.

    Example:
        refresher = GraphRefresher(lambda: [t for _, t in vault.all_tag_sets()])
        vault.on_change(refresher.notify_change)
        graph = refresher.refresh()
    """

    def __init__(
        self,
        source: Callable[[], Iterable[Iterable[str]]],
        builder: CooccurrenceGraphBuilder | None = None,
        debounce: float = 0.5,
        on_rebuild: Callable[[CooccurrenceGraph], None] | None = None,
    ):
        self._source = source
        self._builder = builder or CooccurrenceGraphBuilder()
        self._debounce = debounce
        self._on_rebuild = on_rebuild
        self._pending: asyncio.TimerHandle | None = None
        self._graph: CooccurrenceGraph | None = None

    @property
    def graph(self) -> CooccurrenceGraph:
        """The latest graph, built on first access."""
        if self._graph is None:
            return self.refresh()
        return self._graph

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def refresh(self) -> CooccurrenceGraph:
        """Rebuild immediately from the source."""
        self.cancel()
        self._graph = self._builder.build(self._source())
        if self._on_rebuild is not None:
            self._on_rebuild(self._graph)
        return self._graph

    def notify_change(self, doc_id: str | None = None) -> None:
        """Schedule a rebuild, restarting the debounce window.

        Must be called from within a running event loop.
        """
        if self._pending is not None:
            self._pending.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._debounce, self._fire)

    def _fire(self) -> None:
        self._pending = None
        self.refresh()

    def cancel(self) -> None:
        """Drop a scheduled rebuild, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
