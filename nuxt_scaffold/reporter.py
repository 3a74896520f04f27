"""Rendering of scaffold results.

Three output shapes:

* the human summary printed after a normal or ``--dry-run`` run,
* the per-file classification listing printed by ``--list``,
* a single JSON document for ``--json``.
"""

from __future__ import annotations

import sys
from typing import TextIO

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from nuxt_scaffold import __version__
from nuxt_scaffold.classifier.models import Action, ActionOutcome
from nuxt_scaffold.executor import ExcludedFile, ExecutionResult, FileError
from nuxt_scaffold.features import FeatureSignals


# ---------------------------------------------------------------------------
# Report model
# ---------------------------------------------------------------------------


class EffectiveFlags(BaseModel):
    """Feature signals after overrides, plus the run switches."""

    content: bool
    tailwind: bool
    all: bool = False
    clean_info: bool = False
    dry_run: bool = False
    list_only: bool = False
    include_docs: bool = False


class ScaffoldReport(BaseModel):
    """Everything the reporter needs about one run."""

    version: str = Field(default=__version__)
    target: str
    source: str
    ref: str
    mode: str = Field(..., description="Template root provenance")
    detected: FeatureSignals
    effective: EffectiveFlags
    counts: dict[str, int] = Field(default_factory=dict)
    added: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    excluded: list[ExcludedFile] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        target: str,
        source: str,
        ref: str,
        mode: str,
        detected: FeatureSignals,
        effective: EffectiveFlags,
        result: ExecutionResult,
        actions: list[Action],
    ) -> "ScaffoldReport":
        return cls(
            target=target,
            source=source,
            ref=ref,
            mode=mode,
            detected=detected,
            effective=effective,
            counts=result.counts(),
            added=list(result.added),
            skipped=list(result.skipped),
            excluded=list(result.excluded),
            errors=list(result.errors),
            actions=list(actions),
        )


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

_LIST_TAGS: dict[ActionOutcome, tuple[str, str]] = {
    ActionOutcome.ADD: ("[ADD]", "green"),
    ActionOutcome.SKIP_EXISTS: ("[SKIP]", "magenta"),
    ActionOutcome.EXCLUDE_ALWAYS: ("[EXCL]", "yellow"),
    ActionOutcome.EXCLUDE_DOCS: ("[EXCL-DOC]", "yellow"),
    ActionOutcome.EXCLUDE_INFO: ("[EXCL-INFO]", "yellow"),
    ActionOutcome.EXCLUDE_FEATURE: ("[EXCL-FEAT]", "yellow"),
}


def render_json(report: ScaffoldReport, stream: TextIO | None = None) -> None:
    """Write the report as an indented JSON document."""
    out = stream or sys.stdout
    out.write(report.model_dump_json(indent=2))
    out.write("\n")


def _flags_line(report: ScaffoldReport) -> str:
    eff = report.effective
    return (
        f"all={eff.all} content={eff.content} tailwind={eff.tailwind} "
        f"cleanInfo={eff.clean_info} includeDocs={eff.include_docs} dryRun={eff.dry_run}"
    )


def _source_label(report: ScaffoldReport, embedded_label: str) -> str:
    return embedded_label if report.mode == "embedded" else report.source


def render_listing(report: ScaffoldReport, console: Console) -> None:
    """Print one tagged line per action, followed by totals."""
    console.print("[cyan]=== Template classification ===[/cyan]")
    console.print(f"Target: {escape(report.target)}")
    console.print(
        f"Source: {escape(_source_label(report, 'embedded'))} "
        f"Ref: {escape(report.ref)} Mode: {report.mode}"
    )
    console.print(f"Flags: {_flags_line(report)}")
    console.print()

    for action in report.actions:
        tag, style = _LIST_TAGS[action.outcome]
        reason = f" [dim]({escape(action.reason)})[/dim]" if action.reason else ""
        console.print(f"[{style}]{escape(tag)}[/{style}] {escape(action.file)}{reason}")

    adds = sum(1 for a in report.actions if a.outcome is ActionOutcome.ADD)
    skips = sum(1 for a in report.actions if a.outcome is ActionOutcome.SKIP_EXISTS)
    excluded = sum(1 for a in report.actions if a.outcome.is_excluded)
    console.print()
    console.print(f"Totals: add={adds} skip={skips} excluded={excluded}")


def render_summary(report: ScaffoldReport, console: Console) -> None:
    """Print the human-readable run summary."""
    console.print()
    console.print("[cyan]=== nuxt 4 scaffold ===[/cyan]")
    console.print(f"Target: {escape(report.target)}")
    console.print(f"Source: {escape(_source_label(report, 'embedded templates'))}")
    console.print(f"Ref: {escape(report.ref)}")
    console.print(f"Mode: {report.mode}")
    console.print(
        f"Detected deps: content={report.detected.content} tailwind={report.detected.tailwind}"
    )
    console.print(f"Effective: {_flags_line(report)}")
    console.print()

    if report.added:
        console.print("[green]Added (or would add):[/green]")
        for path in report.added:
            console.print(f"  + {escape(path)}")
    else:
        console.print("[yellow]No new files added.[/yellow]")

    if report.skipped:
        console.print("\n[magenta]Skipped:[/magenta]")
        for path in report.skipped:
            console.print(f"  - {escape(path)}")

    if report.excluded:
        console.print("\nExcluded:")
        for item in report.excluded:
            console.print(f"  x {escape(item.file)} [dim]({escape(item.reason)})[/dim]")

    if report.errors:
        console.print("\n[red]Errors:[/red]")
        for item in report.errors:
            console.print(f"  ! {escape(item.file)} => {escape(item.error)}")

    counts = report.counts
    console.print()
    console.print(
        f"Totals: added={counts.get('add', 0)} skipped={counts.get('skip', 0)} "
        f"excluded={counts.get('excluded', 0)} errors={counts.get('errors', 0)}"
    )
    console.print()
