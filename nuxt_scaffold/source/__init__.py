"""Template source handling.

Resolves the directory template files are read from and enumerates them.

Key classes:
    SourceResolver  - embedded / local / cloned template root selection
    ShallowCloner   - shallow git clone with optimized -> full fallback
    TemplateRoot    - resolved directory plus provenance
    TemplateFile    - one slash-normalised template path
"""

from .clone import CloneMode, CloneResult, ShallowCloner
from .resolver import Provenance, SourceResolver, TemplateRoot, is_remote
from .walker import TemplateFile, list_template_files

__all__ = [
    "CloneMode",
    "CloneResult",
    "Provenance",
    "ShallowCloner",
    "SourceResolver",
    "TemplateFile",
    "TemplateRoot",
    "is_remote",
    "list_template_files",
]
