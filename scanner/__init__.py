"""Scanner module for file discovery, source analysis and graph construction."""

from .discovery import iter_files, discover_files
from .parser import analyze, analyze_file
from .resolver import resolve_module_path
from .builder import build_graph
from .config import ScanConfig, load_config

__all__ = [
    "iter_files",
    "discover_files",
    "analyze",
    "analyze_file",
    "resolve_module_path",
    "build_graph",
    "ScanConfig",
    "load_config",
]
