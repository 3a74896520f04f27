"""Shallow clone of a template repository with an optimized-mode fallback.

Implements the optimized -> full chain:
1. If optimized mode was requested, clone with ``--filter=blob:none --sparse``
   and restrict the working tree to the template subdirectory.
2. Verify the post-condition "working tree is not empty" (``.git`` aside).
   Some server / sparse-checkout combinations materialise nothing at all.
3. If the check fails, throw the clone away and run a plain shallow clone.

The full clone never has a post-condition: whatever it produces is final.
Tracks attempt history for ``--debug`` output.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nuxt_scaffold.config import DEFAULT_REPO_REF
from nuxt_scaffold.errors import CloneFailed
from nuxt_scaffold.source.git import run_git
from nuxt_scaffold.utils import print_debug, remove_tree

TEMP_PREFIX = "nuxt4-scaffold-"
GIT_DIR_NAME = ".git"


class CloneMode(str, Enum):
    """How the repository was fetched."""

    FULL = "full"
    OPTIMIZED = "optimized"


@dataclass
class CloneAttempt:
    """Record of a single clone attempt."""

    mode: CloneMode
    entries: int = 0
    accepted: bool = False
    error: str = ""


@dataclass
class CloneResult:
    """Outcome of :meth:`ShallowCloner.clone`.

    ``temp_dir`` is the directory the caller now owns and must delete.
    """

    repo_path: Path
    temp_dir: Path
    mode: CloneMode
    attempts: list[CloneAttempt] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class CloneStrategy:
    """One way of materialising the repository into ``dest``."""

    mode: CloneMode = CloneMode.FULL
    requires_files: bool = False

    def clone(self, url: str, dest: Path, template_dir: str) -> None:
        run_git("clone", "--depth=1", "--no-tags", url, str(dest))


class FullClone(CloneStrategy):
    """Plain shallow, single-commit clone."""


class OptimizedClone(CloneStrategy):
    """Blob-filtered sparse clone limited to ``<template_dir>/**``."""

    mode = CloneMode.OPTIMIZED
    requires_files = True

    def clone(self, url: str, dest: Path, template_dir: str) -> None:
        run_git(
            "clone", "--depth=1", "--no-tags", "--filter=blob:none", "--sparse",
            url, str(dest),
        )
        try:
            run_git("sparse-checkout", "set", "--no-cone", f"{template_dir}/**", cwd=dest)
        except CloneFailed as exc:
            # Older git lacks --no-cone; the emptiness check decides what happens next.
            print_debug(f"sparse-checkout failed, keeping default sparse tree: {exc}")


def count_entries(repo_path: Path) -> int:
    """Number of top-level working tree entries, ignoring ``.git``."""
    if not repo_path.is_dir():
        return 0
    return sum(1 for entry in repo_path.iterdir() if entry.name != GIT_DIR_NAME)


# ---------------------------------------------------------------------------
# Cloner
# ---------------------------------------------------------------------------


class ShallowCloner:
    """Clones ``url`` at ``ref`` into a fresh temporary directory.

    Each attempt gets its own temporary directory. A rejected or failed
    attempt deletes its directory before the next one starts, so at most one
    directory survives and it is handed to the caller in the result.
    """

    def __init__(
        self,
        url: str,
        ref: str = DEFAULT_REPO_REF,
        template_dir: str = "templates",
        temp_base: str | Path | None = None,
    ) -> None:
        self.url = url
        self.ref = ref
        self.template_dir = template_dir
        self.temp_base = str(temp_base) if temp_base else None

    @staticmethod
    def strategies(optimized: bool) -> list[CloneStrategy]:
        """Ordered attempts for the requested mode."""
        if optimized:
            return [OptimizedClone(), FullClone()]
        return [FullClone()]

    def clone(self, optimized: bool = False) -> CloneResult:
        """Run the strategy chain and return the first accepted clone.

        Raises:
            CloneFailed: If a git command fails.
        """
        attempts: list[CloneAttempt] = []
        chain = self.strategies(optimized)

        for index, strategy in enumerate(chain):
            is_last = index == len(chain) - 1
            attempt = CloneAttempt(mode=strategy.mode)
            attempts.append(attempt)

            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=self.temp_base))
            repo_path = temp_dir / "repo"
            try:
                strategy.clone(self.url, repo_path, self.template_dir)
                self._checkout_ref(repo_path)
            except BaseException as exc:
                attempt.error = str(exc)
                remove_tree(temp_dir)
                raise

            attempt.entries = count_entries(repo_path)
            if strategy.requires_files and attempt.entries == 0 and not is_last:
                print_debug(f"{strategy.mode.value} clone produced no files; retrying with a full clone")
                remove_tree(temp_dir)
                continue

            attempt.accepted = True
            return CloneResult(
                repo_path=repo_path,
                temp_dir=temp_dir,
                mode=strategy.mode,
                attempts=attempts,
            )

        # Unreachable: the last strategy is always accepted.
        raise CloneFailed(f"No clone strategy produced a checkout of {self.url}")

    def _checkout_ref(self, repo_path: Path) -> None:
        if self.ref == DEFAULT_REPO_REF:
            return
        run_git("fetch", "--depth=1", "origin", self.ref, cwd=repo_path)
        run_git("checkout", "--quiet", "FETCH_HEAD", cwd=repo_path)
