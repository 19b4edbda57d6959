"""Template directory scanning for scan & replay generation.

Turns an arbitrary template folder into a tree of :class:`Directory` nodes.
Files that sit directly under the scanned root are collected into a
synthetic node named ``"."``.  Directory symlinks are listed but never
descended into; file and directory checks follow symlinks.
"""

from __future__ import annotations

import bisect
import os
from dataclasses import dataclass, field
from pathlib import Path

from cppgen.errors import ScanError, ScanErrorKind
from cppgen.utils import print_warning

ROOT_FILES_NODE = "."


@dataclass
class Directory:
    """A scanned directory: its file names and child directories.

    ``path`` is canonical.  ``directories`` is kept sorted by name and names
    are unique among siblings.
    """

    name: str
    path: Path
    files: set[str] = field(default_factory=set)
    directories: list["Directory"] = field(default_factory=list)

    def add_directory(self, child: "Directory") -> None:
        """Insert *child* in name order; a duplicate name is ignored."""
        if self.find(child.name) is not None:
            return
        bisect.insort(self.directories, child, key=lambda d: d.name)

    def find(self, name: str) -> "Directory | None":
        """Return the direct child called *name*, if any."""
        for child in self.directories:
            if child.name == name:
                return child
        return None

    def is_empty(self) -> bool:
        return not self.files and not self.directories


def _canonical(path: Path) -> Path | None:
    """Resolve *path*, or print a warning and return ``None``."""
    try:
        return path.resolve()
    except (OSError, RuntimeError) as exc:
        print_warning(f"Warning: could not canonicalize {path}: {exc}. Skipping entry.")
        return None


def _skip_unreadable(path: Path, exc: OSError) -> None:
    print_warning(f"Warning: error checking type of {path}: {exc}. Skipping.")


def _check_template_dir(template_dir: Path) -> None:
    try:
        exists = template_dir.exists()
        is_dir = template_dir.is_dir()
    except OSError as exc:
        raise ScanError(
            ScanErrorKind.ERROR,
            template_dir,
            f"Error checking template directory {template_dir}: {exc}",
        ) from exc
    if not exists:
        raise ScanError(ScanErrorKind.NOT_FOUND, template_dir)
    if not is_dir:
        raise ScanError(ScanErrorKind.NOT_A_DIRECTORY, template_dir)


def scan_template_directory(template_name: str, base_dir: str | Path) -> list[Directory]:
    """Scan ``base_dir / template_name`` into a tree of :class:`Directory`.

    Args:
        template_name: Template directory name, relative to *base_dir*.  May
            contain several segments or be ``"."``.
        base_dir: Directory holding the templates.

    Returns:
        The top-level nodes ordered by name.  Root-level files are grouped in
        a ``"."`` node, present only when there is at least one such file.

    Raises:
        ScanError: ``NOT_FOUND`` / ``NOT_A_DIRECTORY`` when the template
            directory is unusable, ``ERROR`` for any filesystem error while
            walking.  Partial results are discarded.
    """
    template_dir = Path(base_dir) / template_name
    _check_template_dir(template_dir)

    root = _canonical(template_dir) or template_dir

    nodes: dict[Path, Directory] = {}
    top_level: dict[str, Directory] = {}
    root_files: Directory | None = None

    def _on_walk_error(exc: OSError) -> None:
        if isinstance(exc, PermissionError) and Path(exc.filename or "") != root:
            print_warning(f"Warning: permission denied: {exc.filename}. Skipping.")
            return
        raise exc

    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
            parent = _canonical(Path(dirpath))
            if parent is None:
                continue

            for dirname in sorted(dirnames):
                raw = Path(dirpath) / dirname
                try:
                    is_dir = raw.is_dir()
                    is_link = raw.is_symlink()
                except OSError as exc:
                    _skip_unreadable(raw, exc)
                    continue
                if not is_dir:
                    continue
                canonical = _canonical(raw)
                if canonical is None:
                    continue
                node = Directory(name=dirname, path=canonical)
                # symlinked directories are listed but never walked
                if not is_link:
                    nodes[canonical] = node

                if parent == root:
                    top_level.setdefault(dirname, node)
                elif parent in nodes:
                    nodes[parent].add_directory(node)
                else:
                    print_warning(
                        f"Warning: parent directory {parent} for subdirectory {raw} "
                        "not found. Subdirectory not linked."
                    )

            for filename in sorted(filenames):
                raw = Path(dirpath) / filename
                try:
                    is_file = raw.is_file()
                except OSError as exc:
                    _skip_unreadable(raw, exc)
                    continue
                if not is_file:
                    continue
                if parent == root:
                    if root_files is None:
                        root_files = Directory(name=ROOT_FILES_NODE, path=root)
                    root_files.files.add(filename)
                elif parent in nodes:
                    nodes[parent].files.add(filename)
                else:
                    print_warning(
                        f"Warning: parent directory {parent} for file {raw} not found. File skipped."
                    )
    except OSError as exc:
        raise ScanError(
            ScanErrorKind.ERROR, root, f"Filesystem error during scan of {root}: {exc}"
        ) from exc

    if root_files is not None and root_files.files and ROOT_FILES_NODE not in top_level:
        top_level[ROOT_FILES_NODE] = root_files

    return [top_level[name] for name in sorted(top_level)]


def list_templates(base_dir: str | Path) -> list[str]:
    """Return the template names available under *base_dir*.

    Every sub-directory whose name does not start with ``_`` is a template.

    Raises:
        ScanError: If *base_dir* is missing, not a directory or unreadable.
    """
    templates_dir = Path(base_dir)
    _check_template_dir(templates_dir)
    try:
        return sorted(
            entry.name
            for entry in templates_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith("_")
        )
    except OSError as exc:
        raise ScanError(
            ScanErrorKind.ERROR,
            templates_dir,
            f"Error reading templates directory {templates_dir}: {exc}",
        ) from exc
