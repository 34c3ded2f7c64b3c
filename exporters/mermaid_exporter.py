"""Mermaid flowchart exporter for dependency graphs."""

import re
from pathlib import Path
from typing import Dict, List, Set

from graph.model import DependencyGraph


def to_mermaid(
    graph: DependencyGraph,
    orientation: str = "LR",
    group_by_directory: bool = False,
    show_all: bool = False,
) -> str:
    """
    Convert a dependency graph to Mermaid flowchart syntax.

    Args:
        graph: The dependency graph to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        group_by_directory: If True, group nodes by top-level directory.
        show_all: If True, include files without any imports or importers.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    nodes = sorted(
        node.path for node in graph.iter_nodes()
        if show_all or node.imports or node.imported_by
    )
    node_ids = _node_ids(graph, nodes)

    if group_by_directory:
        lines.extend(_grouped_nodes(graph, nodes, node_ids))
    else:
        for node in nodes:
            lines.append(f'    {node_ids[node]}["{graph.relative(node)}"]')

    edges = list(graph.iter_edges())
    if edges:
        lines.append("")
    for source, target in edges:
        lines.append(f"    {node_ids[source]} --> {node_ids[target]}")

    return "\n".join(lines)


def _grouped_nodes(graph: DependencyGraph, nodes: List[Path], node_ids: Dict[Path, str]) -> List[str]:
    """Generate subgraphs grouped by top-level directory."""
    lines = []

    groups: Dict[str, Set[Path]] = {}
    for node in nodes:
        parts = graph.relative(node).split("/")
        top_dir = parts[0] if len(parts) > 1 else "root"
        groups.setdefault(top_dir, set()).add(node)

    for group_name in sorted(groups):
        lines.append(f"    subgraph {_sanitize_id('dir_' + group_name)}[{group_name}]")
        for node in sorted(groups[group_name]):
            lines.append(f'        {node_ids[node]}["{graph.relative(node)}"]')
        lines.append("    end")

    return lines


def _node_ids(graph: DependencyGraph, nodes: List[Path]) -> Dict[Path, str]:
    """Assign each node a distinct Mermaid ID derived from its path."""
    node_ids: Dict[Path, str] = {}
    used: Set[str] = set()
    for node in nodes:
        base = _sanitize_id(graph.relative(node))
        node_id = base
        suffix = 2
        # `a-b.ts` and `a_b.ts` sanitize alike
        while node_id in used:
            node_id = f"{base}_{suffix}"
            suffix += 1
        used.add(node_id)
        node_ids[node] = node_id
    return node_ids


def _sanitize_id(value: str) -> str:
    """
    Convert a path to a valid Mermaid node ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    sanitized = re.sub(r"[/\\.\-@]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"
