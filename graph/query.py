"""Relationship and summary queries against a built dependency graph."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from scanner.exceptions import DepmapError
from .model import DependencyGraph, FileNode, Symbol


SUMMARY_LIMIT = 5


class AmbiguousPathError(DepmapError):
    """Raised when a query path suffix matches more than one file."""

    def __init__(self, query: str, candidates: List[str]):
        self.query = query
        self.candidates = candidates
        super().__init__(
            f"Path {query!r} matches {len(candidates)} files: {', '.join(candidates)}"
        )


@dataclass
class Relationships:
    """Imports, importers and exported symbols of one file."""

    path: str
    imports: List[str] = field(default_factory=list)
    imported_by: List[str] = field(default_factory=list)
    symbols: List[Symbol] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "imports": list(self.imports),
            "importedBy": list(self.imported_by),
            "symbols": [s.to_dict() for s in self.symbols],
        }


@dataclass
class ReferencedFile:
    file: str
    referenced_by: int

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "referencedBy": self.referenced_by}


@dataclass
class GraphSummary:
    """File count and the most depended-upon files of a graph."""

    root: str
    file_count: int
    most_referenced: List[ReferencedFile] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "fileCount": self.file_count,
            "mostReferencedFiles": [f.to_dict() for f in self.most_referenced],
        }


def find_node(graph: DependencyGraph, query_path: str) -> Optional[FileNode]:
    """
    Locate the node a query path refers to.

    The path is first joined to the graph root and normalized; an exact
    node wins. Otherwise the query is matched as a path suffix on segment
    boundaries.

    Raises:
        AmbiguousPathError: If the suffix matches several nodes.
    """
    root = graph.root if graph.root is not None else Path.cwd()
    absolute = Path(os.path.normpath(os.path.join(root, query_path)))
    node = graph.get(absolute)
    if node is not None:
        return node

    matches = graph.find_by_suffix(query_path)
    if len(matches) > 1:
        raise AmbiguousPathError(query_path, [graph.relative(m) for m in matches])
    if matches:
        return graph.get(matches[0])
    return None


def get_relationships(graph: DependencyGraph, query_path: str) -> Optional[Relationships]:
    """
    Describe the dependencies of one file.

    Returns:
        Relationships with root-relative imports/importers, or None if no
        file matches the query.

    Raises:
        AmbiguousPathError: If the query only matches by suffix and more
            than one file ends with it.
    """
    node = find_node(graph, query_path)
    if node is None:
        return None

    return Relationships(
        path=str(node.path),
        imports=[graph.relative(p) for p in node.imports],
        imported_by=[graph.relative(p) for p in node.imported_by],
        symbols=node.symbols,
    )


def get_summary(graph: DependencyGraph, limit: int = SUMMARY_LIMIT) -> GraphSummary:
    """
    Summarize a graph.

    The most referenced files are ranked by number of importers,
    descending; equal counts are ordered by root-relative path.
    """
    ranked = sorted(
        ((len(node.imported_by), graph.relative(node.path)) for node in graph.iter_nodes()),
        key=lambda item: (-item[0], item[1]),
    )
    return GraphSummary(
        root=str(graph.root) if graph.root is not None else "",
        file_count=len(graph),
        most_referenced=[ReferencedFile(file=rel, referenced_by=count) for count, rel in ranked[:limit]],
    )
