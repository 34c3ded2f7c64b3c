"""JSON exporter for dependency graphs and query results (machine-friendly format)."""

import json
from typing import Any, Dict, List

from graph.model import DependencyGraph


def to_json(graph: DependencyGraph, indent: int = 2) -> str:
    """
    Convert a dependency graph to JSON format.

    Args:
        graph: The dependency graph to export.
        indent: JSON indentation level.

    Returns:
        JSON string with the root, every node and every edge. Paths are
        relative to the graph root.
    """
    nodes: List[Dict[str, Any]] = []
    for node in sorted(graph.iter_nodes(), key=lambda n: n.path):
        nodes.append({
            "path": graph.relative(node.path),
            "imports": [graph.relative(p) for p in node.imports],
            "importedBy": [graph.relative(p) for p in node.imported_by],
            "symbols": [s.to_dict() for s in node.symbols],
        })

    edges: List[List[str]] = []
    for source, target in graph.iter_edges():
        edges.append([graph.relative(source), graph.relative(target)])

    data: Dict[str, Any] = {
        "root": str(graph.root) if graph.root is not None else "",
        "nodes": nodes,
        "edges": edges,
    }

    return json.dumps(data, indent=indent)


def result_to_json(result: Any, indent: int = 2) -> str:
    """Serialize a query or build result that provides ``to_dict()``."""
    return json.dumps(result.to_dict(), indent=indent)
