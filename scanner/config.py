"""Scan configuration: defaults, project config files and overrides."""

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

import yaml

from .discovery import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


CONFIG_FILENAMES = (".depmap.yaml", ".depmap.yml")
PYPROJECT_TABLE = "depmap"
KNOWN_KEYS = {"include_ext", "exclude_dirs", "max_depth", "workers"}


@dataclass
class ScanConfig:
    """
    Options controlling discovery and the analysis worker pool.

    Attributes:
        include_ext: Source suffixes to scan (lower case, leading dot).
        exclude_dirs: Directory names (or '*suffix' patterns) to skip.
        max_depth: Maximum directory depth to scan; None means unlimited.
        workers: Number of threads analyzing files; 1 means sequential.
    """

    include_ext: Set[str] = field(default_factory=lambda: set(DEFAULT_EXTENSIONS))
    exclude_dirs: Set[str] = field(default_factory=lambda: set(DEFAULT_EXCLUDE_DIRS))
    max_depth: Optional[int] = None
    workers: int = 1

    def merged(self, **overrides: Any) -> "ScanConfig":
        """
        Return a copy with non-None overrides applied.

        ``include_ext`` replaces the current set; ``exclude_dirs`` is added to
        it, so the default exclusions always stay in effect.
        """
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in KNOWN_KEYS:
                raise ConfigError(f"Unknown configuration key: {key}")
            changes[key] = value

        if "include_ext" in changes:
            changes["include_ext"] = normalize_extensions(changes["include_ext"])
        if "exclude_dirs" in changes:
            changes["exclude_dirs"] = self.exclude_dirs | _as_str_set("exclude_dirs", changes["exclude_dirs"])
        for key in ("max_depth", "workers"):
            if key in changes:
                _check_int(key, changes[key])
        if changes.get("workers", 1) < 1:
            raise ConfigError("workers must be at least 1")

        return replace(self, **changes)


def normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    """Lower-case extensions and make sure each has a leading dot."""
    normalized = set()
    for ext in _as_str_set("include_ext", extensions):
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext.lower())
    return normalized


def load_config(root: Path, config_path: Optional[Path] = None) -> ScanConfig:
    """
    Load the scan configuration for a project.

    Without an explicit ``config_path`` the root is searched for
    ``.depmap.yaml`` / ``.depmap.yml``, then for a ``[tool.depmap]`` table in
    ``pyproject.toml``. Missing files simply yield the defaults.

    Raises:
        ConfigError: If a config file cannot be read or holds invalid values.
    """
    config = ScanConfig()

    if config_path is None:
        config_path = _find_config(root)
        if config_path is None:
            return config

    data = read_config_file(config_path)
    logger.debug("Loaded configuration from %s", config_path)
    return config.merged(**data)


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML or TOML config file and return its depmap settings."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        if path.suffix.lower() == ".toml":
            data = tomllib.loads(content)
            if path.name == "pyproject.toml":
                data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        else:
            data = yaml.safe_load(content) or {}
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _find_config(root: Path) -> Optional[Path]:
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
            return None
        if PYPROJECT_TABLE in data.get("tool", {}):
            return pyproject
    return None


def _as_str_set(key: str, value: Any) -> Set[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return set(value)


def _check_int(key: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
