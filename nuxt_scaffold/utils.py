"""Shared utility functions for the scaffolder.

Provides the Rich consoles every module prints through, markup helpers for
errors / warnings / debug lines, path normalisation, and a best-effort
recursive delete used by the cleanup paths.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

_debug_enabled = False


# ---------------------------------------------------------------------------
# Console configuration
# ---------------------------------------------------------------------------


def configure_console(color: bool = True, debug: bool = False) -> None:
    """Apply the ``--no-color`` / ``--debug`` switches to both consoles.

    Rich already honours ``NO_COLOR`` on its own; this only adds the explicit
    flag on top.
    """
    global _debug_enabled
    if not color:
        for con in (console, err_console):
            con.no_color = True
    _debug_enabled = debug


def debug_enabled() -> bool:
    """Return ``True`` when ``--debug`` output was requested."""
    return _debug_enabled


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_error(message: str) -> None:
    """Print a red ``ERROR:`` line to stderr."""
    err_console.print(f"[bold red]ERROR:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_debug(message: str) -> None:
    """Print a dimmed ``[debug]`` line to stderr when debug output is on.

    Debug goes to stderr so that ``--json`` output on stdout stays parseable.
    """
    if _debug_enabled:
        err_console.print(f"[dim]\\[debug] {escape(message)}[/dim]")


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def normalize_rel_path(path: str | Path) -> str:
    """Return a relative path with forward slashes only.

    Backslashes are converted as well, so Windows-style relative paths
    compare equal to their POSIX spelling.
    """
    text = path.as_posix() if isinstance(path, Path) else str(path)
    return text.replace("\\", "/")


def expand_path(path: str | Path) -> Path:
    """Expand a leading ``~`` and make the path absolute."""
    return Path(os.path.expanduser(str(path))).resolve()


def remove_tree(path: Path | None) -> None:
    """Recursively delete *path*, ignoring every failure.

    Used on cleanup paths that must never raise.
    """
    if path is None:
        return
    shutil.rmtree(path, ignore_errors=True)
