"""Ordered classification rules.

Each rule is a small named object with a predicate and the outcome it
produces.  The classifier walks :func:`default_rules` top to bottom and the
first matching rule decides; some categories overlap (a README under
``content/`` is both documentation and content-gated) so the order is part of
the behaviour.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from nuxt_scaffold.classifier.models import ActionOutcome
from nuxt_scaffold.features import FeatureSignals
from nuxt_scaffold.lock import LOCK_NAME
from nuxt_scaffold.source.walker import TemplateFile

ALWAYS_EXCLUDE: frozenset[str] = frozenset({
    "package.json",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    "bun.lockb",
    "scaffold.mjs",
    "_scaffold.mjs",
    LOCK_NAME,
    ".DS_Store",
    "Thumbs.db",
})

DOC_EXCLUDE: frozenset[str] = frozenset({
    "README.md",
    "LICENSE",
    "LICENSE.txt",
    "CHANGELOG.md",
    "CHANGES.md",
})

INFO_FILE = "INFO.md"

CONTENT_CONFIG_FILE = "content.config.ts"
CONTENT_DIR_PREFIX = "content/"
TAILWIND_CONFIG_FILES: frozenset[str] = frozenset({
    "tailwind.config.ts",
    "tailwind.config.js",
    "tailwind.config.cjs",
})


@dataclass(frozen=True)
class ClassificationContext:
    """Everything the rules need to know besides the file itself."""

    features: FeatureSignals
    exists_in_target: Callable[[str], bool]
    always_exclude: frozenset[str] = ALWAYS_EXCLUDE
    doc_exclude: frozenset[str] = DOC_EXCLUDE
    clean: bool = False
    include_docs: bool = False


@dataclass(frozen=True)
class Rule(ABC):
    """A named predicate mapped to an outcome. Subclasses implement ``matches``."""

    name: str
    outcome: ActionOutcome
    reason: Optional[str] = None

    @abstractmethod
    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        ...


@dataclass(frozen=True)
class AlwaysExcludeRule(Rule):
    """Build artefacts, lockfiles and the scaffolder's own files."""

    name: str = "always-exclude"
    outcome: ActionOutcome = ActionOutcome.EXCLUDE_ALWAYS
    reason: Optional[str] = "utility"

    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        return file.basename in ctx.always_exclude


@dataclass(frozen=True)
class DocExcludeRule(Rule):
    """README / LICENSE / CHANGELOG unless ``--include-docs``."""

    name: str = "doc-exclude"
    outcome: ActionOutcome = ActionOutcome.EXCLUDE_DOCS
    reason: Optional[str] = "docs"

    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        return not ctx.include_docs and file.basename in ctx.doc_exclude


@dataclass(frozen=True)
class InfoExcludeRule(Rule):
    """``INFO.md`` marker files in clean mode."""

    name: str = "info-exclude"
    outcome: ActionOutcome = ActionOutcome.EXCLUDE_INFO
    reason: Optional[str] = "info-clean"

    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        return ctx.clean and file.basename == INFO_FILE


@dataclass(frozen=True)
class FeatureRule(Rule):
    """Files gated on a feature signal that is switched off."""

    outcome: ActionOutcome = ActionOutcome.EXCLUDE_FEATURE
    feature: str = ""
    exact: frozenset[str] = field(default_factory=frozenset)
    prefixes: tuple[str, ...] = ()

    def applies_to(self, file: TemplateFile) -> bool:
        return file.path in self.exact or file.path.startswith(self.prefixes)

    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        enabled = getattr(ctx.features, self.feature)
        return not enabled and self.applies_to(file)


@dataclass(frozen=True)
class ExistingFileRule(Rule):
    """A file at the same relative path is already in the target."""

    name: str = "skip-exists"
    outcome: ActionOutcome = ActionOutcome.SKIP_EXISTS

    def matches(self, file: TemplateFile, ctx: ClassificationContext) -> bool:
        return ctx.exists_in_target(file.path)


CONTENT_RULE = FeatureRule(
    name="feature-content",
    reason="content-disabled",
    feature="content",
    exact=frozenset({CONTENT_CONFIG_FILE}),
    prefixes=(CONTENT_DIR_PREFIX,),
)

TAILWIND_RULE = FeatureRule(
    name="feature-tailwind",
    reason="tailwind-disabled",
    feature="tailwind",
    exact=TAILWIND_CONFIG_FILES,
)


def default_rules() -> list[Rule]:
    """The rule chain in evaluation order. Files matching none are added."""
    return [
        AlwaysExcludeRule(),
        DocExcludeRule(),
        InfoExcludeRule(),
        CONTENT_RULE,
        TAILWIND_RULE,
        ExistingFileRule(),
    ]
