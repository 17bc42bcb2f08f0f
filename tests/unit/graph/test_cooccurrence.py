"""Tests for the tag co-occurrence graph."""

import asyncio

import pytest

from autotag.graph import CooccurrenceGraphBuilder, GraphRefresher


@pytest.fixture
def graph():
    return CooccurrenceGraphBuilder().build([["a", "b"], ["a", "c"]])


class TestCooccurrenceGraphBuilder:
    """Tests for building the graph."""

    def test_node_frequencies(self, graph):
        assert graph.nodes == {"#a": 2, "#b": 1, "#c": 1}
        assert graph.document_count == 2

    def test_edges(self, graph):
        assert graph.weight("#a", "#b") == 1
        assert graph.weight("#c", "#a") == 1
        assert graph.weight("#b", "#c") == 0
        assert set(graph.edges) == {("#a", "#b"), ("#a", "#c")}

    def test_document_counts_once(self):
        """Duplicate tags on one document count once, with no self-edges."""
        graph = CooccurrenceGraphBuilder().build([["#a", "a", "#b", "b"]])

        assert graph.nodes == {"#a": 1, "#b": 1}
        assert graph.edges == {("#a", "#b"): 1}

    def test_ignores_invalid_tags(self):
        graph = CooccurrenceGraphBuilder().build([["ok", "not ok"]])

        assert graph.nodes == {"#ok": 1}
        assert graph.edges == {}

    def test_empty_input(self):
        graph = CooccurrenceGraphBuilder().build([])

        assert graph.nodes == {}
        assert graph.document_count == 0

    def test_node_list_ordering(self, graph):
        assert graph.node_list() == [("#a", 2), ("#b", 1), ("#c", 1)]

    def test_edge_list_min_weight(self):
        graph = CooccurrenceGraphBuilder().build([["a", "b"], ["a", "b"], ["a", "c"]])

        assert graph.edge_list() == [("#a", "#b", 2), ("#a", "#c", 1)]
        assert graph.edge_list(min_weight=2) == [("#a", "#b", 2)]

    def test_neighbors(self, graph):
        assert graph.neighbors("#a") == {"#b": 1, "#c": 1}
        assert graph.neighbors("#b") == {"#a": 1}


class TestNetworkData:
    """Tests for renderer-ready output."""

    def test_nodes_and_edges(self, graph):
        data = graph.to_network_data()

        assert data["nodes"][0] == {"id": "#a", "label": "a", "size": 11, "frequency": 2}
        assert data["edges"][0] == {"id": "#a-#b", "source": "#a", "target": "#b", "weight": 1}

    def test_size_is_clamped(self):
        graph = CooccurrenceGraphBuilder().build([["a"]] * 20)

        assert graph.to_network_data()["nodes"][0]["size"] == 30


class TestGraphRefresher:
    """Tests for on-demand and debounced rebuilding."""

    def test_builds_on_first_access(self):
        source_calls = []

        def source():
            source_calls.append(1)
            return [["a", "b"]]

        refresher = GraphRefresher(source)

        assert refresher.graph.nodes == {"#a": 1, "#b": 1}
        assert refresher.graph.nodes == {"#a": 1, "#b": 1}
        assert len(source_calls) == 1

    def test_refresh_rebuilds(self):
        docs = [["a"]]
        rebuilt = []
        refresher = GraphRefresher(lambda: docs, on_rebuild=rebuilt.append)

        refresher.refresh()
        docs.append(["b"])
        graph = refresher.refresh()

        assert graph.nodes == {"#a": 1, "#b": 1}
        assert len(rebuilt) == 2

    @pytest.mark.asyncio
    async def test_debounces_bursts(self):
        """Several changes within the window cause a single rebuild."""
        docs = [["a"]]
        rebuilt = []
        refresher = GraphRefresher(lambda: docs, debounce=0.02, on_rebuild=rebuilt.append)

        for doc_id in ("x.md", "y.md", "z.md"):
            refresher.notify_change(doc_id)
            docs.append(["b"])

        assert refresher.has_pending
        await asyncio.sleep(0.1)

        assert len(rebuilt) == 1
        assert not refresher.has_pending
        assert refresher.graph.nodes == {"#a": 1, "#b": 3}

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_rebuild(self):
        rebuilt = []
        refresher = GraphRefresher(lambda: [], debounce=0.01, on_rebuild=rebuilt.append)

        refresher.notify_change()
        refresher.cancel()
        await asyncio.sleep(0.05)

        assert rebuilt == []
