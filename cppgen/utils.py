"""Shared utility functions for cppgen.

Provides file-system helpers used by every generator plus the Rich-based
console reporting that stands in for logging throughout the tool.  Normal
progress goes to stdout; warnings and errors go to a dedicated stderr
console so they survive output redirection.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()
error_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory path.

    Returns:
        The resolved ``Path`` object.

    Raises:
        NotADirectoryError: If *path* exists and is not a directory.
    """
    dir_path = Path(path)
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path exists but is not a directory: {dir_path}")
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def write_file(path: str | Path, content: str) -> Path:
    """Create parent directories, then truncate/create *path* with *content*."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
    return file_path


def read_file(path: str | Path) -> str:
    """Read a UTF-8 text file."""
    return Path(path).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold bright_cyan] {escape(title)} [/bold bright_cyan]", style="bright_cyan"))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_note(message: str) -> None:
    """Print a dim informational message."""
    console.print(f"[dim]{escape(message)}[/dim]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    error_console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    error_console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
