"""Enumerate the files of a template tree."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from nuxt_scaffold.utils import normalize_rel_path

SKIP_DIRS = frozenset({".git", "node_modules"})


@dataclass(frozen=True, order=True)
class TemplateFile:
    """A template file identified by its slash-normalised relative path."""

    path: str

    @classmethod
    def of(cls, path: str | Path) -> "TemplateFile":
        return cls(normalize_rel_path(path))

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).name

    def __str__(self) -> str:
        return self.path


def list_template_files(root: str | Path) -> list[TemplateFile]:
    """Walk *root* and return every regular file, sorted by path.

    ``.git`` and ``node_modules`` are pruned. Directory symlinks are not
    followed and unreadable directories are silently skipped, matching
    ``os.walk`` defaults.
    """
    root_path = Path(root)
    files: list[TemplateFile] = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
        current = Path(dirpath)
        for name in filenames:
            full = current / name
            if not full.is_file():
                continue
            files.append(TemplateFile.of(full.relative_to(root_path)))

    files.sort()
    return files
