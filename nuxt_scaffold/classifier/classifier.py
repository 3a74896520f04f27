"""Turns a template file list into one :class:`Action` per file.

Classification never touches the filesystem except through the context's
``exists_in_target`` callback, which only reads.  That keeps ``--list`` and
``--dry-run`` free of side effects.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from nuxt_scaffold.classifier.models import Action, ActionOutcome
from nuxt_scaffold.classifier.rules import ClassificationContext, Rule, default_rules
from nuxt_scaffold.source.walker import TemplateFile


def target_exists(target_root: Path) -> Callable[[str], bool]:
    """Build an ``exists_in_target`` callback for a target directory."""
    root = Path(target_root)

    def _exists(rel_path: str) -> bool:
        return (root / rel_path).exists()

    return _exists


class Classifier:
    """Applies an ordered rule chain; the first matching rule wins."""

    def __init__(self, context: ClassificationContext, rules: list[Rule] | None = None) -> None:
        self.context = context
        self.rules = rules if rules is not None else default_rules()

    def classify_file(self, file: TemplateFile) -> Action:
        for rule in self.rules:
            if rule.matches(file, self.context):
                return Action(file=file.path, outcome=rule.outcome, reason=rule.reason)
        return Action(file=file.path, outcome=ActionOutcome.ADD)

    def classify(self, files: Iterable[TemplateFile]) -> list[Action]:
        """Classify every file and return the actions sorted by path."""
        actions = [self.classify_file(file) for file in files]
        actions.sort(key=lambda action: action.file)
        return actions


def classify(files: Iterable[TemplateFile], context: ClassificationContext) -> list[Action]:
    """Classify *files* with the default rule chain."""
    return Classifier(context).classify(files)
