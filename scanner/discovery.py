"""File discovery utilities for scanning JavaScript/TypeScript projects."""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Set

from .exceptions import DiscoveryError

logger = logging.getLogger(__name__)


DEFAULT_EXTENSIONS = {".ts", ".js", ".tsx", ".jsx", ".json"}
DEFAULT_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    "node_modules", "bower_components",
    "dist", "build", "out",
    "coverage", ".nyc_output",
    ".cache", ".parcel-cache", ".turbo", ".next", ".nuxt",
    "__pycache__", ".venv", "venv",
    "*.egg-info",
}


def iter_files(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
    max_depth: Optional[int] = None,
) -> Iterator[Path]:
    """
    Iterate over source files in a directory tree.

    Entries are visited in sorted order so two walks of an unchanged tree
    yield the same sequence. Symbolic links are neither followed nor yielded.

    Args:
        root: Root directory to scan.
        include_ext: Set of file extensions to include (e.g., {'.ts', '.js'}).
                    If None, uses DEFAULT_EXTENSIONS.
        exclude_dirs: Set of directory names to skip.
                     If None, uses DEFAULT_EXCLUDE_DIRS.
        max_depth: Maximum depth to descend. None means unlimited.

    Yields:
        Canonical Path objects for matching files.

    Raises:
        DiscoveryError: If any directory cannot be listed.
    """
    if include_ext is None:
        include_ext = DEFAULT_EXTENSIONS
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    root = root.resolve()
    patterns = [pat.lstrip("*") for pat in exclude_dirs if pat.startswith("*")]

    def _walk(current: Path, depth: int) -> Iterator[Path]:
        if max_depth is not None and depth > max_depth:
            return

        try:
            entries = sorted(current.iterdir())
        except OSError as e:
            raise DiscoveryError(f"Cannot list directory: {e.strerror or e}", str(current)) from e

        for entry in entries:
            if entry.is_symlink():
                continue
            if entry.is_dir():
                if entry.name in exclude_dirs:
                    continue
                if any(entry.name.endswith(pat) for pat in patterns):
                    continue
                yield from _walk(entry, depth + 1)
            elif entry.is_file():
                if entry.suffix.lower() in include_ext:
                    yield entry

    yield from _walk(root, 0)


def discover_files(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
    max_depth: Optional[int] = None,
) -> List[Path]:
    """Walk the whole tree and return every eligible file."""
    files = list(iter_files(root, include_ext, exclude_dirs, max_depth))
    logger.debug("Discovered %d files under %s", len(files), root)
    return files
