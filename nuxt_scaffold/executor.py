"""Carries out (or simulates) the copy of classified template files.

Provides the :class:`ExecutionResult` model that aggregates per-file outcomes
and the :class:`Executor` that fills it in a single pass over the actions.
A failure on one file is recorded and the batch carries on, so a scaffold
adds as much as it safely can.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from nuxt_scaffold.classifier.models import Action, ActionOutcome
from nuxt_scaffold.utils import print_debug


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class ExcludedFile(BaseModel):
    """A template file that was deliberately left out."""

    file: str
    reason: str = ""


class FileError(BaseModel):
    """A template file that could not be copied."""

    file: str
    error: str


class ExecutionResult(BaseModel):
    """Per-outcome buckets for one run."""

    added: list[str] = Field(default_factory=list, description="Written, or would be written")
    skipped: list[str] = Field(default_factory=list, description="Already present in the target")
    excluded: list[ExcludedFile] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def has_errors(self) -> bool:
        """True when at least one copy failed."""
        return len(self.errors) > 0

    def counts(self) -> dict[str, int]:
        return {
            "add": len(self.added),
            "skip": len(self.skipped),
            "excluded": len(self.excluded),
            "errors": len(self.errors),
        }

    def finalize(self) -> "ExecutionResult":
        """Sort every bucket by path for deterministic output."""
        self.added.sort()
        self.skipped.sort()
        self.excluded.sort(key=lambda item: item.file)
        self.errors.sort(key=lambda item: item.file)
        return self


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


def copy_new_file(src: Path, dest: Path) -> None:
    """Copy *src* to *dest* byte for byte, refusing to replace *dest*.

    Parent directories are created as needed.  The destination is opened
    with exclusive-create mode, so a file that appeared after classification
    raises ``FileExistsError`` instead of being overwritten.  Permission bits
    follow the source.  A copy that fails after the destination was created
    removes it again, so no truncated file is left behind.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    with open(src, "rb") as reader:
        writer = open(dest, "xb")
        try:
            with writer:
                shutil.copyfileobj(reader, writer)
            shutil.copymode(src, dest)
        except BaseException:
            dest.unlink(missing_ok=True)
            raise


class Executor:
    """Applies classified actions to a target directory."""

    def __init__(self, template_root: Path, target_root: Path) -> None:
        self.template_root = Path(template_root)
        self.target_root = Path(target_root)

    def execute(self, actions: Iterable[Action], simulate: bool = False) -> ExecutionResult:
        """Copy every ``add`` action, or just record it when *simulate* is set.

        Args:
            actions: Output of the classifier.
            simulate: ``--dry-run`` / ``--list``: no filesystem access at all.

        Returns:
            A finalized (sorted) ``ExecutionResult``.
        """
        result = ExecutionResult()

        for action in actions:
            if action.outcome is ActionOutcome.ADD:
                if simulate:
                    result.added.append(action.file)
                    continue
                try:
                    copy_new_file(
                        self.template_root / action.file,
                        self.target_root / action.file,
                    )
                except OSError as exc:
                    print_debug(f"copy failed for {action.file}: {exc}")
                    result.errors.append(FileError(file=action.file, error=str(exc)))
                else:
                    result.added.append(action.file)
            elif action.outcome is ActionOutcome.SKIP_EXISTS:
                result.skipped.append(action.file)
            else:
                result.excluded.append(ExcludedFile(file=action.file, reason=action.reason or ""))

        return result.finalize()
