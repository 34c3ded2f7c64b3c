"""Exceptions raised while scanning a project and building its graph."""

from typing import Optional


class DepmapError(Exception):
    """Base class for all depmap errors."""


class DiscoveryError(DepmapError):
    """
    Raised when the project tree cannot be enumerated.

    This aborts the whole build: missing root, unreadable directory or any
    other I/O fault while listing entries.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        full_message = f"{message} [path={path}]" if path else message
        super().__init__(full_message)


class ParseError(DepmapError):
    """
    Raised when a single source file cannot be parsed.

    The builder absorbs this per file; the file keeps its node but gets no
    edges and no symbols.
    """

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        file_path: Optional[str] = None,
    ):
        self.message = message
        self.language = language
        self.file_path = file_path

        details = []
        if language:
            details.append(f"language={language}")
        if file_path:
            details.append(f"file={file_path}")

        full_message = message
        if details:
            full_message = f"{message} [{', '.join(details)}]"

        super().__init__(full_message)


class ConfigError(DepmapError):
    """Raised for an unreadable or invalid configuration file."""
