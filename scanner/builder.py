"""Graph builder that orchestrates discovery, analysis and resolution."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from graph.model import DependencyGraph
from .config import ScanConfig
from .discovery import discover_files
from .exceptions import ParseError
from .parser import SourceAnalysis, analyze_file
from .resolver import resolve_module_path

logger = logging.getLogger(__name__)


def build_graph(
    root: Path,
    config: Optional[ScanConfig] = None,
    files: Optional[List[Path]] = None,
) -> DependencyGraph:
    """
    Scan a project and build its dependency graph.

    Discovery runs to completion first and one empty node is created per
    file. Each file is then analyzed and its references resolved into edges.
    A file that cannot be read or parsed is logged and keeps an edge-free,
    symbol-free node.

    Args:
        root: Project root directory.
        config: Scan options; defaults to ScanConfig().
        files: Already discovered files under ``root``. When None, the tree
            is walked with the discovery options from ``config``.

    Returns:
        DependencyGraph rooted at the canonical root.

    Raises:
        DiscoveryError: If the tree cannot be enumerated.
    """
    if config is None:
        config = ScanConfig()
    root = Path(root).resolve()

    if files is None:
        logger.info("Scanning %s", root)
        files = discover_files(
            root=root,
            include_ext=config.include_ext,
            exclude_dirs=config.exclude_dirs,
            max_depth=config.max_depth,
        )

    graph = DependencyGraph(root)
    for file_path in files:
        graph.init_node(file_path)

    edge_count = 0
    unresolved_count = 0
    for file_path, analysis in _analyze_all(files, config.workers):
        graph.set_symbols(file_path, analysis.symbols)

        for specifier in analysis.references:
            resolved = resolve_module_path(file_path.parent, root, specifier, graph)
            if resolved is None:
                unresolved_count += 1
                logger.debug("Unresolved module %r in %s", specifier, file_path)
                continue
            if graph.record_edge(file_path, resolved):
                edge_count += 1

    logger.info(
        "Built graph for %s: %d nodes, %d edges, %d external references",
        root, len(graph), edge_count, unresolved_count,
    )
    return graph


def _analyze_all(files: List[Path], workers: int) -> Iterator[Tuple[Path, SourceAnalysis]]:
    """
    Analyze files, yielding results in discovery order.

    With more than one worker, files are read and parsed concurrently; the
    ordered ``map`` keeps the edge insertion order identical to a
    sequential run.
    """
    if workers <= 1 or len(files) <= 1:
        for file_path in files:
            yield file_path, _analyze_one(file_path)
        return

    with ThreadPoolExecutor(max_workers=workers) as executor:
        yield from zip(files, executor.map(_analyze_one, files))


def _analyze_one(file_path: Path) -> SourceAnalysis:
    try:
        analysis = analyze_file(file_path)
    except (OSError, UnicodeDecodeError, ParseError) as e:
        logger.warning("Failed to analyze %s: %s", file_path, e)
        return SourceAnalysis()

    logger.debug(
        "Analyzed %s: %d references, %d symbols",
        file_path, len(analysis.references), len(analysis.symbols),
    )
    return analysis
