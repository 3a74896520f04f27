"""Thin wrapper around the ``git`` command line.

Every git invocation made by the scaffolder goes through :func:`run_git`, which
captures output and converts a non-zero exit status into ``CloneFailed``.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from nuxt_scaffold.errors import CloneFailed
from nuxt_scaffold.utils import print_debug

GIT_EXECUTABLE = "git"


def run_git(*args: str, cwd: str | Path | None = None) -> str:
    """Run a git command synchronously and return its stripped stdout.

    Raises:
        CloneFailed: If git cannot be started or exits with a non-zero code.
    """
    cmd = [GIT_EXECUTABLE, *args]
    cmd_str = " ".join(cmd)
    print_debug(f"$ {cmd_str}" + (f"  (cwd={cwd})" if cwd else ""))

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        raise CloneFailed(
            f"Could not run {cmd_str}: {exc}",
            command=cmd_str,
        ) from exc

    stdout = (result.stdout or "").strip()
    stderr = (result.stderr or "").strip()
    if result.returncode != 0:
        raise CloneFailed(
            f"{cmd_str} failed: {stderr or stdout}",
            command=cmd_str,
            stderr=stderr,
        )
    return stdout


def git_available() -> bool:
    """Return ``True`` when ``git --version`` runs successfully."""
    try:
        run_git("--version")
    except CloneFailed:
        return False
    return True
