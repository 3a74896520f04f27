"""Pydantic v2 models for classification results."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActionOutcome(str, Enum):
    """What happens to a template file."""

    ADD = "add"
    SKIP_EXISTS = "skip-exists"
    EXCLUDE_ALWAYS = "exclude-always"
    EXCLUDE_DOCS = "exclude-docs"
    EXCLUDE_INFO = "exclude-info"
    EXCLUDE_FEATURE = "exclude-feature"

    @property
    def is_excluded(self) -> bool:
        return self.value.startswith("exclude")


class Action(BaseModel):
    """The classification of one template file. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Slash-normalised relative path")
    outcome: ActionOutcome
    reason: Optional[str] = Field(default=None, description="Short reason code for exclusions")
