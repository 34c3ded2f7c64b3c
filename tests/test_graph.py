"""Tests for graph data model and queries."""

import pytest
from pathlib import Path

from graph.model import DependencyGraph, Symbol, SymbolKind
from graph.query import AmbiguousPathError, get_relationships, get_summary


ROOT = Path("/repo")


def _graph(*names):
    graph = DependencyGraph(ROOT)
    for name in names:
        graph.init_node(ROOT / name)
    return graph


class TestDependencyGraph:
    """Tests for DependencyGraph class."""

    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = DependencyGraph()
        assert len(graph) == 0
        assert graph.nodes == {}
        assert list(graph.iter_edges()) == []

    def test_init_node(self):
        """Test adding nodes."""
        graph = _graph("src/app.ts")
        path = ROOT / "src/app.ts"

        assert len(graph) == 1
        assert path in graph
        node = graph.get(path)
        assert node.imports == []
        assert node.imported_by == []
        assert node.symbols == []

    def test_record_edge_is_symmetric(self):
        """Test that an edge lands in both imports and imported_by."""
        graph = _graph("a.ts", "b.ts")
        a, b = ROOT / "a.ts", ROOT / "b.ts"

        assert graph.record_edge(a, b)

        assert graph.get(a).imports == [b]
        assert graph.get(b).imported_by == [a]
        assert graph.get(a).imported_by == []
        assert graph.get(b).imports == []

    def test_record_edge_is_idempotent(self):
        """Test that recording the same edge twice adds nothing."""
        graph = _graph("a.ts", "b.ts")
        a, b = ROOT / "a.ts", ROOT / "b.ts"

        assert graph.record_edge(a, b)
        assert not graph.record_edge(a, b)

        assert graph.get(a).imports == [b]
        assert graph.get(b).imported_by == [a]

    def test_record_edge_keeps_insertion_order(self):
        """Test that imports keep the order edges were recorded in."""
        graph = _graph("a.ts", "b.ts", "c.ts")
        a, b, c = ROOT / "a.ts", ROOT / "b.ts", ROOT / "c.ts"

        graph.record_edge(a, c)
        graph.record_edge(a, b)
        graph.record_edge(a, c)

        assert graph.get(a).imports == [c, b]

    def test_record_edge_never_creates_nodes(self):
        """Test that unknown endpoints are rejected."""
        graph = _graph("a.ts")

        with pytest.raises(KeyError):
            graph.record_edge(ROOT / "a.ts", ROOT / "ghost.ts")

        assert len(graph) == 1
        assert graph.get(ROOT / "a.ts").imports == []

    def test_set_symbols(self):
        """Test replacing the symbols of a node."""
        graph = _graph("a.ts")
        symbols = [Symbol(SymbolKind.FUNCTION, "run"), Symbol(SymbolKind.VARIABLE, "x")]

        graph.set_symbols(ROOT / "a.ts", symbols)

        assert graph.get(ROOT / "a.ts").symbols == symbols

    def test_relative(self):
        """Test root-relative path rendering."""
        graph = _graph()
        assert graph.relative(ROOT / "src" / "a.ts") == "src/a.ts"
        assert graph.relative(Path("/elsewhere/a.ts")) == "/elsewhere/a.ts"

    def test_find_by_suffix_on_segment_boundary(self):
        """Test that suffix search does not match partial file names."""
        graph = _graph("src/utils.ts", "src/myutils.ts", "lib/utils.ts")

        matches = graph.find_by_suffix("utils.ts")

        assert matches == [ROOT / "lib/utils.ts", ROOT / "src/utils.ts"]
        assert graph.find_by_suffix("./src/utils.ts") == [ROOT / "src/utils.ts"]
        assert graph.find_by_suffix("tils.ts") == []

    def test_iter_edges(self):
        """Test iterating over edges."""
        graph = _graph("a.ts", "b.ts", "c.ts")
        edges = [
            (ROOT / "a.ts", ROOT / "b.ts"),
            (ROOT / "a.ts", ROOT / "c.ts"),
            (ROOT / "b.ts", ROOT / "c.ts"),
        ]
        for source, target in edges:
            graph.record_edge(source, target)

        assert list(graph.iter_edges()) == edges

    def test_repr(self):
        """Test string representation."""
        graph = _graph("a.ts", "b.ts")
        graph.record_edge(ROOT / "a.ts", ROOT / "b.ts")

        assert "nodes=2" in repr(graph)
        assert "edges=1" in repr(graph)


class TestRelationshipsQuery:
    """Tests for get_relationships."""

    def test_exact_match(self):
        """Test lookup by root-relative path."""
        graph = _graph("index.ts", "utils.ts")
        graph.record_edge(ROOT / "index.ts", ROOT / "utils.ts")

        rel = get_relationships(graph, "index.ts")

        assert rel.path == str(ROOT / "index.ts")
        assert rel.imports == ["utils.ts"]
        assert rel.imported_by == []

    def test_absolute_query(self):
        """Test lookup by absolute path."""
        graph = _graph("index.ts", "utils.ts")
        graph.record_edge(ROOT / "index.ts", ROOT / "utils.ts")

        rel = get_relationships(graph, "/repo/utils.ts")

        assert rel.imports == []
        assert rel.imported_by == ["index.ts"]

    def test_unique_suffix_match(self):
        """Test fallback to a unique suffix."""
        graph = _graph("src/deep/widget.tsx", "src/index.ts")

        rel = get_relationships(graph, "deep/widget.tsx")

        assert rel.path == str(ROOT / "src/deep/widget.tsx")

    def test_ambiguous_suffix_raises(self):
        """Test that several suffix matches are reported, not guessed."""
        graph = _graph("a/utils.ts", "b/utils.ts")

        with pytest.raises(AmbiguousPathError) as exc_info:
            get_relationships(graph, "utils.ts")

        assert exc_info.value.candidates == ["a/utils.ts", "b/utils.ts"]

    def test_not_found(self):
        """Test that an unknown file yields None."""
        graph = _graph("index.ts")
        assert get_relationships(graph, "missing.ts") is None

    def test_to_dict(self):
        """Test the wire format of a relationships result."""
        graph = _graph("index.ts", "utils.ts")
        graph.record_edge(ROOT / "index.ts", ROOT / "utils.ts")
        graph.set_symbols(ROOT / "utils.ts", [Symbol(SymbolKind.CLASS, "Cache")])

        data = get_relationships(graph, "utils.ts").to_dict()

        assert data == {
            "path": "/repo/utils.ts",
            "imports": [],
            "importedBy": ["index.ts"],
            "symbols": [{"kind": "class", "name": "Cache"}],
        }


class TestSummaryQuery:
    """Tests for get_summary."""

    def test_ranking_and_tie_break(self):
        """Test ordering by importer count, then by path."""
        graph = _graph("a.ts", "b.ts", "c.ts", "d.ts", "e.ts", "f.ts", "g.ts")
        for source in ("a.ts", "b.ts", "c.ts"):
            graph.record_edge(ROOT / source, ROOT / "g.ts")
        graph.record_edge(ROOT / "a.ts", ROOT / "f.ts")
        graph.record_edge(ROOT / "a.ts", ROOT / "e.ts")

        summary = get_summary(graph)

        assert summary.root == "/repo"
        assert summary.file_count == 7
        assert [(f.file, f.referenced_by) for f in summary.most_referenced] == [
            ("g.ts", 3),
            ("e.ts", 1),
            ("f.ts", 1),
            ("a.ts", 0),
            ("b.ts", 0),
        ]

    def test_empty_graph(self):
        """Test summary of a graph that was never built."""
        summary = get_summary(DependencyGraph())

        assert summary.to_dict() == {"root": "", "fileCount": 0, "mostReferencedFiles": []}
