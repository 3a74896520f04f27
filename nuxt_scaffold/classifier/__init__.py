"""Template file classification.

Key classes:
    Classifier             - first-match-wins rule chain over template files
    ClassificationContext  - feature signals, flags and target lookup
    Action                 - per-file outcome plus reason code
"""

from .classifier import Classifier, classify, target_exists
from .models import Action, ActionOutcome
from .rules import ClassificationContext, Rule, default_rules

__all__ = [
    "Action",
    "ActionOutcome",
    "ClassificationContext",
    "Classifier",
    "Rule",
    "classify",
    "default_rules",
    "target_exists",
]
