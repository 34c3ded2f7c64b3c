"""Graph data model for storing file dependency relationships."""

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class SymbolKind(str, Enum):
    """Kinds of exported symbols recorded per file."""

    FUNCTION = "function"
    CLASS = "class"
    VARIABLE = "variable"


@dataclass(frozen=True)
class Symbol:
    """An exported symbol declared in a file."""

    kind: SymbolKind
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "name": self.name}


class FileNode:
    """
    A single discovered file.

    ``imports`` and ``imported_by`` behave as insertion-ordered sets: adding a
    path that is already present is a no-op.
    """

    def __init__(self, path: Path):
        self.path = path
        self._imports: Dict[Path, None] = {}
        self._imported_by: Dict[Path, None] = {}
        self._symbols: List[Symbol] = []

    @property
    def imports(self) -> List[Path]:
        """Return the files this file depends on, in insertion order."""
        return list(self._imports)

    @property
    def imported_by(self) -> List[Path]:
        """Return the files that depend on this file, in insertion order."""
        return list(self._imported_by)

    @property
    def symbols(self) -> List[Symbol]:
        """Return exported symbols in declaration order."""
        return list(self._symbols)

    def __repr__(self) -> str:
        return (
            f"FileNode(path={str(self.path)!r}, imports={len(self._imports)}, "
            f"imported_by={len(self._imported_by)}, symbols={len(self._symbols)})"
        )


class DependencyGraph:
    """
    A directed graph of file imports rooted at a project directory.

    Nodes are canonical file paths. Every edge is stored twice: in the
    source's ``imports`` and in the target's ``imported_by``. Nodes are only
    ever created through ``init_node``.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = root
        self._nodes: Dict[Path, FileNode] = {}
        self._lock = threading.Lock()

    @property
    def nodes(self) -> Dict[Path, FileNode]:
        """Return a shallow copy of the path -> node mapping."""
        return dict(self._nodes)

    def init_node(self, path: Path) -> FileNode:
        """Create an empty node for a discovered file."""
        node = FileNode(path)
        self._nodes[path] = node
        return node

    def get(self, path: Path) -> Optional[FileNode]:
        """Return the node for ``path``, or None."""
        return self._nodes.get(path)

    def set_symbols(self, path: Path, symbols: Iterable[Symbol]) -> None:
        """Replace the exported symbols of an existing node."""
        self._nodes[path]._symbols = list(symbols)

    def record_edge(self, source: Path, target: Path) -> bool:
        """
        Record that ``source`` imports ``target``.

        Both endpoints must already be nodes; an unknown endpoint raises
        KeyError rather than creating a node.

        Returns:
            True if the edge was new, False if it was already present.
        """
        source_node = self._nodes[source]
        target_node = self._nodes[target]

        with self._lock:
            if target in source_node._imports:
                return False
            source_node._imports[target] = None
            target_node._imported_by[source] = None
        return True

    def iter_nodes(self) -> Iterator[FileNode]:
        """Iterate over nodes in discovery order."""
        return iter(list(self._nodes.values()))

    def iter_edges(self) -> Iterator[Tuple[Path, Path]]:
        """Iterate over all edges as (source, target) tuples."""
        for source, node in self._nodes.items():
            for target in node._imports:
                yield source, target

    def relative(self, path: Path) -> str:
        """Return ``path`` relative to the graph root using '/' separators."""
        if self.root is None:
            return path.as_posix()
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def find_by_suffix(self, query: str) -> List[Path]:
        """
        Find nodes whose path ends with ``query`` on a segment boundary.

        ``utils.ts`` matches ``src/utils.ts`` but not ``src/myutils.ts``.

        Returns:
            Matching paths in lexical order.
        """
        suffix = query.replace("\\", "/").strip("/")
        while suffix.startswith("./"):
            suffix = suffix[2:]
        if not suffix:
            return []

        matches = []
        for path in self._nodes:
            posix = path.as_posix()
            if posix == suffix or posix.endswith("/" + suffix):
                matches.append(path)
        return sorted(matches)

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        """Check if a path is a node in the graph."""
        return node in self._nodes

    def __repr__(self) -> str:
        edge_count = sum(len(n._imports) for n in self._nodes.values())
        return f"DependencyGraph(root={str(self.root)!r}, nodes={len(self._nodes)}, edges={edge_count})"
