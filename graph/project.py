"""Stateful facade holding the most recently built project graph."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from scanner.builder import build_graph
from scanner.discovery import discover_files
from scanner.config import ScanConfig
from .model import DependencyGraph
from .query import GraphSummary, Relationships, get_relationships, get_summary

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    node_count: int
    total_files: int

    def to_dict(self) -> Dict[str, int]:
        return {"nodeCount": self.node_count, "totalFiles": self.total_files}


class ProjectGraph:
    """
    Builds a project's dependency graph and answers queries against it.

    Each ``build`` discards the previous graph and replaces it with a freshly
    built snapshot; queries always see one complete snapshot.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config if config is not None else ScanConfig()
        self._graph = DependencyGraph()

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def root(self) -> Optional[Path]:
        return self._graph.root

    def build(self, root: Union[str, Path] = ".") -> BuildResult:
        """
        Rebuild the graph for ``root``.

        Raises:
            DiscoveryError: If the tree cannot be enumerated. The previous
                graph has already been discarded at that point.
        """
        canonical_root = Path(root).resolve()
        self._graph = DependencyGraph(canonical_root)

        files = discover_files(
            root=canonical_root,
            include_ext=self.config.include_ext,
            exclude_dirs=self.config.exclude_dirs,
            max_depth=self.config.max_depth,
        )
        graph = build_graph(canonical_root, self.config, files)
        self._graph = graph

        result = BuildResult(node_count=len(graph), total_files=len(files))
        logger.info(
            "Graph built successfully. Nodes: %d, Total Scanned Files: %d",
            result.node_count, result.total_files,
        )
        return result

    def get_relationships(self, file_path: str) -> Optional[Relationships]:
        """Return the relationships of one file, or None if it is unknown."""
        return get_relationships(self._graph, file_path)

    def get_summary(self) -> GraphSummary:
        return get_summary(self._graph)
