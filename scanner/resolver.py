"""Path resolution utilities for mapping module specifiers to discovered files."""

import os
from pathlib import Path
from typing import Container, Optional


# Probed in order after an exact match fails.
CANDIDATE_EXTENSIONS = (".ts", ".js", ".tsx", ".jsx", ".json")
INDEX_FILES = ("index.ts", "index.js")

# Authored siblings tried when a specifier names the compiled ".js" form.
COMPILED_EXTENSION = ".js"
AUTHORING_EXTENSIONS = (".ts", ".tsx", ".jsx")


def resolve_module_path(
    origin_dir: Path,
    root: Path,
    specifier: str,
    known: Container[Path],
) -> Optional[Path]:
    """
    Resolve a module specifier to a discovered file.

    Tries, in order, first success wins:
    1. The base candidate itself. Specifiers starting with '.' are taken
       relative to the importing file's directory, everything else relative
       to the project root.
    2. The base candidate with each of CANDIDATE_EXTENSIONS appended, then
       each of INDEX_FILES inside it.
    3. For a base ending in '.js', the same path with each of
       AUTHORING_EXTENSIONS instead.

    Args:
        origin_dir: Directory of the file containing the reference.
        root: The project root directory.
        specifier: The raw module specifier as written in source.
        known: Canonical paths of all discovered files.

    Returns:
        The matching canonical path, or None for an external/untracked module.
    """
    base = base_candidate(origin_dir, root, specifier)

    if base in known:
        return base

    base_str = str(base)
    for ext in CANDIDATE_EXTENSIONS:
        candidate = Path(base_str + ext)
        if candidate in known:
            return candidate

    for index_file in INDEX_FILES:
        candidate = base / index_file
        if candidate in known:
            return candidate

    if base_str.endswith(COMPILED_EXTENSION):
        stem = base_str[: -len(COMPILED_EXTENSION)]
        for ext in AUTHORING_EXTENSIONS:
            candidate = Path(stem + ext)
            if candidate in known:
                return candidate

    return None


def base_candidate(origin_dir: Path, root: Path, specifier: str) -> Path:
    """
    Compute the normalized path a specifier points at before probing.

    Normalization is purely lexical; the filesystem is not consulted.
    """
    anchor = origin_dir if is_relative_specifier(specifier) else root
    return Path(os.path.normpath(os.path.join(anchor, specifier)))


def is_relative_specifier(specifier: str) -> bool:
    """Check if a specifier is relative to the importing file."""
    return specifier.startswith(".")
