"""Template source resolution.

Decides which directory tree the template files are read from:

1. the embedded ``templates/`` tree shipped with the package, when the caller
   kept the default source;
2. a local directory, when the source is not a URL;
3. a shallow clone of a remote Git repository otherwise.

The resolved root is then narrowed to ``<template_dir>`` when such a
subdirectory exists, and checked against the target directory so the
scaffolder never copies a project onto itself.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nuxt_scaffold.config import ScaffoldConfig
from nuxt_scaffold.errors import (
    SelfTargetConflict,
    TemplateSourceNotFound,
    VcsUnavailable,
)
from nuxt_scaffold.source.clone import CloneMode, ShallowCloner
from nuxt_scaffold.source.git import git_available
from nuxt_scaffold.utils import expand_path, print_debug, remove_tree

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_SCP_RE = re.compile(r"^[\w.\-]+@[\w.\-]+:")


class Provenance(str, Enum):
    """Which resolution path produced the template root."""

    EMBEDDED = "embedded"
    LOCAL = "local"
    CLONED_FULL = "cloned-full"
    CLONED_OPTIMIZED = "cloned-optimized"


_CLONE_PROVENANCE = {
    CloneMode.FULL: Provenance.CLONED_FULL,
    CloneMode.OPTIMIZED: Provenance.CLONED_OPTIMIZED,
}


def is_remote(source: str) -> bool:
    """Return ``True`` for ``scheme://`` URLs and scp-style ``user@host:path``."""
    return bool(_SCHEME_RE.match(source) or _SCP_RE.match(source))


@dataclass
class TemplateRoot:
    """The directory template files are read from, plus where it came from.

    When the tree is a temporary clone, ``temp_dir`` is owned by this object
    and removed by :meth:`cleanup`.
    """

    path: Path
    provenance: Provenance
    source: str
    ref: str
    temp_dir: Path | None = field(default=None, repr=False)

    def cleanup(self) -> None:
        """Delete the temporary clone, if any. Safe to call repeatedly."""
        if self.temp_dir is not None:
            remove_tree(self.temp_dir)
            self.temp_dir = None


class SourceResolver:
    """Resolves a :class:`TemplateRoot` for one run and cleans it up afterwards.

    Usable as a context manager; leaving the block always removes any
    temporary clone, whatever the outcome of the run.
    """

    def __init__(self, embedded_base: Path, temp_base: str | Path | None = None) -> None:
        self.embedded_base = Path(embedded_base)
        self.temp_base = temp_base
        self.root: TemplateRoot | None = None

    @classmethod
    def from_config(cls, config: ScaffoldConfig) -> "SourceResolver":
        return cls(embedded_base=config.embedded_base)

    def __enter__(self) -> "SourceResolver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    # -- Public API --------------------------------------------------------

    def resolve(
        self,
        source: str,
        ref: str,
        template_dir: str,
        optimized: bool = False,
        is_default_source: bool = False,
        target: Path | None = None,
    ) -> TemplateRoot:
        """Produce the template root for *source*.

        Args:
            source: Git URL or local directory.
            ref: Branch, tag or commit for remote sources.
            template_dir: Conventional template subdirectory name.
            optimized: Try a sparse, blob-filtered clone first.
            is_default_source: The caller did not override the source, so
                the embedded tree may be used.
            target: Target directory for the self-target guard.

        Raises:
            TemplateSourceNotFound: Local path missing or not a directory.
            VcsUnavailable: Remote source but no usable git.
            CloneFailed: A git command failed.
            SelfTargetConflict: The template root is the target itself.
        """
        root = self._resolve_embedded(source, ref, template_dir, is_default_source)
        if root is None:
            if is_remote(source):
                root = self._resolve_remote(source, ref, template_dir, optimized)
            else:
                root = self._resolve_local(source, ref, template_dir)
        self.root = root

        print_debug(f"template root: {root.path} ({root.provenance.value})")
        if target is not None:
            _guard_self_target(root.path, target)
        return root

    def cleanup(self) -> None:
        """Remove any temporary clone. Idempotent and never raises."""
        if self.root is not None:
            self.root.cleanup()

    # -- Resolution paths --------------------------------------------------

    def _resolve_embedded(
        self, source: str, ref: str, template_dir: str, is_default_source: bool
    ) -> TemplateRoot | None:
        if not is_default_source:
            return None
        candidate = self.embedded_base / template_dir
        if not candidate.is_dir():
            print_debug(f"no embedded templates at {candidate}")
            return None
        return TemplateRoot(path=candidate, provenance=Provenance.EMBEDDED, source=source, ref=ref)

    def _resolve_local(self, source: str, ref: str, template_dir: str) -> TemplateRoot:
        local = expand_path(source)
        if not local.is_dir():
            raise TemplateSourceNotFound(f"Local template path not found: {local}")
        return TemplateRoot(
            path=_narrow(local, template_dir),
            provenance=Provenance.LOCAL,
            source=source,
            ref=ref,
        )

    def _resolve_remote(
        self, source: str, ref: str, template_dir: str, optimized: bool
    ) -> TemplateRoot:
        if not git_available():
            raise VcsUnavailable("Git not available and no embedded templates.")

        cloner = ShallowCloner(source, ref=ref, template_dir=template_dir, temp_base=self.temp_base)
        result = cloner.clone(optimized=optimized)
        for attempt in result.attempts:
            print_debug(
                f"clone attempt {attempt.mode.value}: entries={attempt.entries} "
                f"accepted={attempt.accepted}"
            )
        return TemplateRoot(
            path=_narrow(result.repo_path, template_dir),
            provenance=_CLONE_PROVENANCE[result.mode],
            source=source,
            ref=ref,
            temp_dir=result.temp_dir,
        )


def _narrow(root: Path, template_dir: str) -> Path:
    """Descend into ``template_dir`` when the root contains it."""
    if template_dir:
        candidate = root / template_dir
        if candidate.is_dir():
            return candidate
    return root


def _guard_self_target(template_root: Path, target: Path) -> None:
    try:
        same = os.path.samefile(template_root, target)
    except OSError:
        return
    if same:
        raise SelfTargetConflict(f"Template root is the target directory: {target}")
