"""Target project inspection.

A target is eligible when it is a directory holding a ``package.json`` that
parses as a JSON object and at least one ``nuxt.config.*`` file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from nuxt_scaffold.errors import ConfigurationError, TargetNotEligible

MANIFEST_NAME = "package.json"
NUXT_CONFIG_FILES = ("nuxt.config.ts", "nuxt.config.js", "nuxt.config.mjs")


@dataclass
class TargetProject:
    """A validated target directory."""

    root: Path

    @classmethod
    def open(cls, path: str | Path) -> "TargetProject":
        """Resolve *path* and make sure it is a directory.

        Raises:
            ConfigurationError: If the path is missing or not a directory.
        """
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise ConfigurationError(f"Target path not a directory: {root}")
        return cls(root=root)

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_NAME

    def load_manifest(self) -> dict[str, Any]:
        """Read and parse ``package.json``.

        Raises:
            TargetNotEligible: Missing file, invalid JSON, or not an object.
        """
        path = self.manifest_path
        if not path.is_file():
            raise TargetNotEligible(f"package.json missing in target: {self.root}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TargetNotEligible(f"Failed to parse package.json: {exc}") from exc
        if not isinstance(data, dict):
            raise TargetNotEligible("Failed to parse package.json: top-level value is not an object.")
        return data

    def nuxt_config(self) -> Path | None:
        """Return the first ``nuxt.config.*`` present, if any."""
        for name in NUXT_CONFIG_FILES:
            candidate = self.root / name
            if candidate.exists():
                return candidate
        return None

    def ensure_eligible(self) -> dict[str, Any]:
        """Validate the target and return its parsed manifest."""
        manifest = self.load_manifest()
        if self.nuxt_config() is None:
            raise TargetNotEligible("nuxt.config.* missing in target path.")
        return manifest
