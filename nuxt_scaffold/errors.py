"""Exception hierarchy for the scaffolder.

Every domain error carries the process exit code it maps to, so the CLI entry
point can translate any failure without a lookup table.  Components raise;
only :func:`nuxt_scaffold.pipeline.main` turns exceptions into exit codes.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes consumed by shell scripts and CI jobs."""

    OK = 0
    USAGE_ERROR = 1
    TEMPLATE_EMPTY = 2
    FILE_ERRORS = 3


class ScaffoldError(Exception):
    """Base class for all scaffolder failures."""

    exit_code: ExitCode = ExitCode.USAGE_ERROR


# ---------------------------------------------------------------------------
# Configuration / target
# ---------------------------------------------------------------------------


class ConfigurationError(ScaffoldError):
    """Bad flags, contradictory overrides, or an unusable target path."""


class TargetNotEligible(ScaffoldError):
    """The target is not a Nuxt project (no manifest or no nuxt.config.*)."""


class ConcurrentRunDetected(ScaffoldError):
    """Another live process holds the advisory lock on the target."""

    def __init__(self, message: str, pid: int | None = None) -> None:
        self.pid = pid
        super().__init__(message)


# ---------------------------------------------------------------------------
# Source resolution
# ---------------------------------------------------------------------------


class SourceUnavailable(ScaffoldError):
    """No template tree could be produced from the requested source."""


class TemplateSourceNotFound(SourceUnavailable):
    """A local template path does not exist or is not a directory."""


class VcsUnavailable(SourceUnavailable):
    """A remote source was requested but ``git`` is not usable."""


class CloneFailed(SourceUnavailable):
    """A git invocation failed while fetching the template repository."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class SelfTargetConflict(SourceUnavailable):
    """The resolved template root is the target directory itself."""


class TemplateEmpty(ScaffoldError):
    """The template source resolved but contains no files."""

    exit_code = ExitCode.TEMPLATE_EMPTY
