"""Exception hierarchy for cppgen.

Scanning and config-loading failures are fatal for the whole run and surface
as exceptions.  Render and write failures are file-scoped and are recorded on
the :class:`~cppgen.scaffolder.writer.GenerationResult` instead.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class CppgenError(Exception):
    """Base class for every error raised by cppgen."""


class ConfigError(CppgenError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class TypeMismatchError(CppgenError, TypeError):
    """Raised when a config entry is read through the wrong type tag."""

    def __init__(self, expected: str, actual: str, key: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.key = key
        where = f" for '{key}'" if key else ""
        super().__init__(f"Expected {expected} config value{where}, got {actual}")


class ScanErrorKind(str, Enum):
    """Why a directory scan failed."""

    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    ERROR = "error"


class ScanError(CppgenError):
    """Raised when a template directory cannot be scanned."""

    def __init__(self, kind: ScanErrorKind, path: str | Path, message: str = "") -> None:
        self.kind = kind
        self.path = Path(path)
        if not message:
            message = {
                ScanErrorKind.NOT_FOUND: f"Template directory not found: {path}",
                ScanErrorKind.NOT_A_DIRECTORY: f"Path is not a directory: {path}",
                ScanErrorKind.ERROR: f"Filesystem error during scan of {path}",
            }[kind]
        super().__init__(message)


class TemplateNotFoundError(CppgenError):
    """Raised when a template root or a named template is missing."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class GenerationError(CppgenError):
    """Raised when generation cannot start (e.g. the output root is a file)."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class TemplateLoadError(CppgenError):
    """Raised when a template file exists but cannot be read."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)
