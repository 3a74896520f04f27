"""Scaffolder configuration.

Centralised, typed configuration for a single scaffold run. All settings use
Pydantic v2 models so contradictory flag combinations are rejected at
construction time, before the target directory is touched.  The core
components never read ``os.environ`` or the working directory themselves; the
CLI builds a ``ScaffoldConfig`` once and passes it down.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from nuxt_scaffold.features import FeatureSignals

DEFAULT_REPO_URL = "https://gitlab.com/thaikolja/scaffold-nuxt-4.git"
DEFAULT_REPO_REF = "main"
DEFAULT_TEMPLATE_DIR = "templates"

# Directory that holds the embedded ``templates/`` tree shipped with the package.
PACKAGE_DIR = Path(__file__).resolve().parent


class FeatureOverrides(BaseModel):
    """Explicit feature switches given on the command line.

    Precedence when computing the effective signal for a feature:
    ``force_all`` > ``with_X`` > ``without_X`` > auto-detection.
    """

    force_all: bool = False
    with_content: bool = False
    without_content: bool = False
    with_tailwind: bool = False
    without_tailwind: bool = False

    @model_validator(mode="after")
    def _reject_contradictions(self) -> "FeatureOverrides":
        if self.with_content and self.without_content:
            raise ValueError("--with-content and --without-content are mutually exclusive.")
        if self.with_tailwind and self.without_tailwind:
            raise ValueError("--with-tailwind and --without-tailwind are mutually exclusive.")
        if self.force_all and (self.without_content or self.without_tailwind):
            raise ValueError("--all cannot be combined with --without-content or --without-tailwind.")
        return self

    def apply(self, detected: FeatureSignals) -> FeatureSignals:
        """Merge these overrides with auto-detected signals."""
        return FeatureSignals(
            content=_effective(
                detected.content, self.force_all, self.with_content, self.without_content
            ),
            tailwind=_effective(
                detected.tailwind, self.force_all, self.with_tailwind, self.without_tailwind
            ),
        )


def _effective(detected: bool, force_all: bool, with_: bool, without: bool) -> bool:
    if force_all:
        return True
    if with_:
        return True
    if without:
        return False
    return detected


class ScaffoldConfig(BaseModel):
    """Settings for one scaffold run.

    Instances are created once by the CLI entry point (or by tests) and then
    handed to ``ScaffoldPipeline``.
    """

    target: Path = Field(default_factory=Path.cwd, description="Nuxt project to scaffold into")
    source: str = Field(default=DEFAULT_REPO_URL, description="Git URL or local template path")
    ref: str = Field(default=DEFAULT_REPO_REF, description="Branch, tag or commit to check out")
    template_dir: str = Field(
        default=DEFAULT_TEMPLATE_DIR,
        description="Subdirectory of the source that holds the template files",
    )
    optimized: bool = Field(default=False, description="Use a sparse, blob-filtered clone")
    embedded_base: Path = Field(
        default=PACKAGE_DIR,
        description="Directory searched for the embedded <template_dir> tree",
    )
    overrides: FeatureOverrides = Field(default_factory=FeatureOverrides)

    clean: bool = Field(default=False, description="Exclude INFO.md files")
    include_docs: bool = Field(default=False, description="Copy README/LICENSE/CHANGELOG files")
    dry_run: bool = False
    list_only: bool = False
    json_output: bool = False
    debug: bool = False
    color: bool = True

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def uses_default_source(self) -> bool:
        """``True`` when the caller has not overridden the template source."""
        return self.source == DEFAULT_REPO_URL

    @property
    def simulate(self) -> bool:
        """``True`` when no file may be written (``--dry-run`` or ``--list``)."""
        return self.dry_run or self.list_only

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLD_REPO_URL, SCAFFOLD_REPO_REF, SCAFFOLD_FAST=1, NO_COLOR.

        Keyword arguments win over the environment; ``None`` values are
        ignored so argparse defaults can be forwarded as-is.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SCAFFOLD_REPO_URL"):
            kwargs["source"] = os.environ["SCAFFOLD_REPO_URL"]
        if os.environ.get("SCAFFOLD_REPO_REF"):
            kwargs["ref"] = os.environ["SCAFFOLD_REPO_REF"]
        if os.environ.get("SCAFFOLD_FAST") == "1":
            kwargs["optimized"] = True
        if os.environ.get("NO_COLOR"):
            kwargs["color"] = False

        for key, value in overrides.items():
            if value is None:
                continue
            if key == "optimized" and not value:
                # A flag left off on the CLI must not undo SCAFFOLD_FAST=1.
                continue
            if key == "color" and value:
                continue
            kwargs[key] = value
        return cls(**kwargs)
