"""Feature detection from the target's ``package.json``.

A feature counts as present when its signature package is declared under
``dependencies`` or ``devDependencies``.  Only key presence matters; the
version string is never inspected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

CONTENT_PACKAGE = "@nuxt/content"
TAILWIND_PACKAGE = "tailwindcss"

_DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


class FeatureSignals(BaseModel):
    """Boolean state of each optional feature set."""

    content: bool = False
    tailwind: bool = False


def declared_dependencies(manifest: Mapping[str, Any]) -> set[str]:
    """Return every package name declared as a runtime or build dependency."""
    names: set[str] = set()
    for section in _DEPENDENCY_SECTIONS:
        deps = manifest.get(section)
        if isinstance(deps, Mapping):
            names.update(str(name) for name in deps)
    return names


def detect_features(manifest: Mapping[str, Any]) -> FeatureSignals:
    """Infer feature signals from a parsed ``package.json`` mapping."""
    deps = declared_dependencies(manifest)
    return FeatureSignals(
        content=CONTENT_PACKAGE in deps,
        tailwind=TAILWIND_PACKAGE in deps,
    )
