"""ASCII tree-style exporter for dependency graphs and query results."""

from pathlib import Path
from typing import List, Set, Tuple

from graph.model import DependencyGraph
from graph.query import GraphSummary, Relationships


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def _chars(style: str) -> Tuple[str, str, str, str]:
    if style == "ascii":
        return (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    return (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)


def to_ascii(graph: DependencyGraph, style: str = "tree", show_all: bool = False) -> str:
    """
    Convert a dependency graph to an import tree.

    Every file that nobody imports starts a tree; its imports hang below it.
    Files in import cycles that no such tree reaches start a tree of their own.
    A file already on the current branch is marked ``[*]`` and not expanded.

    Args:
        graph: The dependency graph to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        show_all: If True, include files with no imports and no importers.

    Returns:
        ASCII tree string.
    """
    chars = _chars(style)

    nodes = [
        node for node in graph.iter_nodes()
        if show_all or node.imports or node.imported_by
    ]
    root_nodes = sorted(node.path for node in nodes if not node.imported_by)

    lines: List[str] = []
    reached: Set[Path] = set()

    def _render_tree(start: Path) -> None:
        if lines:
            lines.append("")
        _render_node(graph, start, "", True, chars, set(), lines, reached, is_root=True)

    for root_node in root_nodes:
        _render_tree(root_node)

    # Cycles without an entry point start from their first unreached file.
    for path in sorted(node.path for node in nodes):
        if path not in reached:
            _render_tree(path)

    return "\n".join(lines)


def _render_node(
    graph: DependencyGraph,
    node: Path,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[Path],
    lines: List[str],
    reached: Set[Path],
    is_root: bool = False,
) -> None:
    """
    Recursively render a node and its imports.

    Args:
        graph: The dependency graph.
        node: Current node to render.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Nodes on the current branch (to detect cycles).
        lines: Output lines list (modified in place).
        reached: Every node rendered so far, across all trees.
        is_root: Whether this is a root-level node.
    """
    branch, last, vertical, space = chars

    is_cycle = node in visited
    cycle_marker = " [*]" if is_cycle else ""
    display_path = graph.relative(node)

    if is_root:
        lines.append(f"{display_path}{cycle_marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{display_path}{cycle_marker}")

    if is_cycle:
        return

    visited.add(node)
    reached.add(node)

    children = graph.get(node).imports
    if is_root:
        new_prefix = ""
    else:
        new_prefix = prefix + (space if is_last else vertical)

    for index, child in enumerate(children):
        _render_node(
            graph, child, new_prefix, index == len(children) - 1,
            chars, visited, lines, reached,
        )

    # Allow the same node on other branches
    visited.discard(node)


def relationships_to_ascii(relationships: Relationships, style: str = "tree") -> str:
    """Render one file's imports, importers and exported symbols."""
    branch, last, vertical, space = _chars(style)

    sections = [
        ("imports", relationships.imports),
        ("imported by", relationships.imported_by),
        ("symbols", [f"{s.kind.value} {s.name}" for s in relationships.symbols]),
    ]

    lines = [relationships.path]
    for section_index, (title, items) in enumerate(sections):
        section_last = section_index == len(sections) - 1
        lines.append(f"{last if section_last else branch}{title} ({len(items)})")
        child_prefix = space if section_last else vertical
        for item_index, item in enumerate(items):
            connector = last if item_index == len(items) - 1 else branch
            lines.append(f"{child_prefix}{connector}{item}")

    return "\n".join(lines)


def summary_to_ascii(summary: GraphSummary, style: str = "tree") -> str:
    """Render the file count and the most referenced files."""
    branch, last, _, _ = _chars(style)

    lines = [
        f"{summary.root}",
        f"{summary.file_count} files",
    ]
    if summary.most_referenced:
        lines.append("most referenced:")
        for index, entry in enumerate(summary.most_referenced):
            connector = last if index == len(summary.most_referenced) - 1 else branch
            lines.append(f"{connector}{entry.file} ({entry.referenced_by})")

    return "\n".join(lines)
