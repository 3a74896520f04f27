"""Scaffold pipeline orchestrator and CLI entry point.

Runs one scaffold in strictly ordered phases:

1. TARGET    -- validate the target directory and take the advisory lock.
2. DETECT    -- read package.json, detect features, apply overrides.
3. RESOLVE   -- pick the template root (embedded / local / git clone).
4. CLASSIFY  -- one action per template file.
5. EXECUTE   -- copy (or simulate) the "add" set.
6. REPORT    -- human summary, listing, or JSON.

The lock and any temporary clone are released on every exit path, including
SIGINT / SIGTERM / SIGHUP.

Usage::

    python -m nuxt_scaffold ./my-nuxt-app --dry-run
    python -m nuxt_scaffold --all --json ~/projects/site
    nuxt-scaffold --template-url=git@gitlab.com:me/templates.git --template-ref=v2
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Any, NoReturn

from pydantic import ValidationError
from rich.console import Console

from nuxt_scaffold import __version__
from nuxt_scaffold.classifier import ClassificationContext, Classifier, target_exists
from nuxt_scaffold.config import (
    DEFAULT_REPO_REF,
    DEFAULT_REPO_URL,
    DEFAULT_TEMPLATE_DIR,
    FeatureOverrides,
    ScaffoldConfig,
)
from nuxt_scaffold.errors import ExitCode, ScaffoldError, TemplateEmpty
from nuxt_scaffold.executor import Executor
from nuxt_scaffold.features import detect_features
from nuxt_scaffold.lock import TargetLock
from nuxt_scaffold.reporter import (
    EffectiveFlags,
    ScaffoldReport,
    render_json,
    render_listing,
    render_summary,
)
from nuxt_scaffold.source import Provenance, SourceResolver, list_template_files
from nuxt_scaffold.target import TargetProject
from nuxt_scaffold.utils import configure_console, console, print_debug, print_error

_HANDLED_SIGNALS = tuple(
    sig for sig in (
        signal.SIGINT,
        signal.SIGTERM,
        getattr(signal, "SIGHUP", None),
    )
    if sig is not None
)


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Drives one additive scaffold run.

    Attributes:
        config: Settings for this run.
        report: The report of the last completed run, if any.
    """

    def __init__(self, config: ScaffoldConfig, output: Console | None = None) -> None:
        self.config = config
        self.output = output or console
        self.report: ScaffoldReport | None = None
        self._lock: TargetLock | None = None
        self._resolver: SourceResolver | None = None

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def cleanup(self) -> None:
        """Delete temporary clones and release the lock.

        Idempotent; called from ``finally`` blocks and signal handlers alike.
        """
        if self._resolver is not None:
            self._resolver.cleanup()
        if self._lock is not None:
            self._lock.release()

    def _on_signal(self, signum: int, frame: Any) -> NoReturn:
        print_debug(f"received signal {signum}; cleaning up")
        self.cleanup()
        raise SystemExit(128 + signum)

    def _install_signal_handlers(self) -> dict[int, Any]:
        if threading.current_thread() is not threading.main_thread():
            return {}
        previous: dict[int, Any] = {}
        for sig in _HANDLED_SIGNALS:
            previous[sig] = signal.signal(sig, self._on_signal)
        return previous

    @staticmethod
    def _restore_signal_handlers(previous: dict[int, Any]) -> None:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(self) -> ExitCode:
        """Execute the scaffold and return the process exit code.

        Raises:
            ScaffoldError: Any configuration, target, source or lock failure.
                Per-file copy errors do not raise; they yield
                ``ExitCode.FILE_ERRORS``.
        """
        target = TargetProject.open(self.config.target)
        self._lock = TargetLock(target.root)
        self._resolver = SourceResolver.from_config(self.config)

        previous = self._install_signal_handlers()
        try:
            with self._lock, self._resolver:
                return self._run(target)
        finally:
            self.cleanup()
            self._restore_signal_handlers(previous)

    def _run(self, target: TargetProject) -> ExitCode:
        config = self.config
        assert self._resolver is not None

        manifest = target.ensure_eligible()
        detected = detect_features(manifest)
        effective = config.overrides.apply(detected)
        print_debug(f"detected={detected.model_dump()} effective={effective.model_dump()}")

        root = self._resolver.resolve(
            config.source,
            config.ref,
            config.template_dir,
            optimized=config.optimized,
            is_default_source=config.uses_default_source,
            target=target.root,
        )

        files = list_template_files(root.path)
        print_debug(f"{len(files)} template files under {root.path}")
        if not files:
            raise TemplateEmpty("Template source has no files.")

        context = ClassificationContext(
            features=effective,
            exists_in_target=target_exists(target.root),
            clean=config.clean,
            include_docs=config.include_docs,
        )
        actions = Classifier(context).classify(files)
        result = Executor(root.path, target.root).execute(actions, simulate=config.simulate)

        self.report = ScaffoldReport.build(
            target=str(target.root),
            source="embedded" if root.provenance is Provenance.EMBEDDED else config.source,
            ref=config.ref,
            mode=root.provenance.value,
            detected=detected,
            effective=EffectiveFlags(
                content=effective.content,
                tailwind=effective.tailwind,
                all=config.overrides.force_all,
                clean_info=config.clean,
                dry_run=config.dry_run,
                list_only=config.list_only,
                include_docs=config.include_docs,
            ),
            result=result,
            actions=actions,
        )

        if config.json_output:
            render_json(self.report, self.output.file)
        elif config.list_only:
            render_listing(self.report, self.output)
        else:
            render_summary(self.report, self.output)

        return ExitCode.FILE_ERRORS if result.has_errors else ExitCode.OK


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with the usage-error code (1), not 2.

    Exit code 2 is reserved for an empty template source.
    """

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print_error(message)
        sys.exit(ExitCode.USAGE_ERROR)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="nuxt-scaffold",
        description="Scaffold Nuxt 4 (additive): add template files without overwriting anything.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  nuxt-scaffold\n"
            "  nuxt-scaffold ./nuxt-app\n"
            "  nuxt-scaffold --all --dry-run ~/nuxt\n"
            "  nuxt-scaffold --json --all ./nuxt-app\n"
            "\n"
            "Short flags can be combined: -cv, -ch.\n"
            "\n"
            "Env:\n"
            "  SCAFFOLD_REPO_URL   Remote or local template source\n"
            "  SCAFFOLD_REPO_REF   Branch/tag/commit\n"
            "  SCAFFOLD_FAST=1     Optimized clone (sparse + blob filter) with fallback\n"
            "  NO_COLOR=1          Disable colors\n"
        ),
    )

    parser.add_argument("target", nargs="?", default=None, help="Nuxt project directory (default: cwd)")
    parser.add_argument("-v", "--version", action="version", version=__version__)

    parser.add_argument("--all", dest="force_all", action="store_true",
                        help="Include every feature-gated file regardless of detection")
    content = parser.add_mutually_exclusive_group()
    content.add_argument("--with-content", action="store_true", help="Force @nuxt/content files in")
    content.add_argument("--without-content", action="store_true", help="Force @nuxt/content files out")
    tailwind = parser.add_mutually_exclusive_group()
    tailwind.add_argument("--with-tailwind", action="store_true", help="Force Tailwind files in")
    tailwind.add_argument("--without-tailwind", action="store_true", help="Force Tailwind files out")

    parser.add_argument("-c", "--clean", action="store_true", help="Exclude INFO.md files")
    parser.add_argument("--dry-run", action="store_true", help="Simulate only")
    parser.add_argument("--list", dest="list_only", action="store_true", help="Classification only")
    parser.add_argument("--json", dest="json_output", action="store_true", help="JSON output")
    parser.add_argument("--debug", action="store_true", help="Print internal state to stderr")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--include-docs", action="store_true",
                        help="Allow README/LICENSE/CHANGELOG copying")
    parser.add_argument("--fast", action="store_true",
                        help="Try a sparse, blob-filtered clone first (falls back to a full clone)")

    parser.add_argument("--template-url", default=None,
                        help=f"Template repo URL or local path (default: {DEFAULT_REPO_URL})")
    parser.add_argument("--template-ref", default=None,
                        help=f"Branch/tag/commit (default: {DEFAULT_REPO_REF})")
    parser.add_argument("--template-dir", default=None,
                        help=f"Template subdirectory (default: {DEFAULT_TEMPLATE_DIR})")
    return parser


def config_from_args(args: argparse.Namespace, cwd: Path | None = None) -> ScaffoldConfig:
    """Translate parsed arguments (plus environment) into a ``ScaffoldConfig``.

    Raises:
        pydantic.ValidationError: On contradictory feature overrides.
    """
    overrides = FeatureOverrides(
        force_all=args.force_all,
        with_content=args.with_content,
        without_content=args.without_content,
        with_tailwind=args.with_tailwind,
        without_tailwind=args.without_tailwind,
    )
    target = Path(args.target).expanduser() if args.target else (cwd or Path.cwd())
    return ScaffoldConfig.from_env(
        target=target,
        source=args.template_url,
        ref=args.template_ref,
        template_dir=args.template_dir,
        optimized=args.fast,
        overrides=overrides,
        clean=args.clean,
        include_docs=args.include_docs,
        dry_run=args.dry_run,
        list_only=args.list_only,
        json_output=args.json_output,
        debug=args.debug,
        color=not args.no_color,
    )


def _validation_message(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = str(err.get("msg", ""))
        messages.append(msg.removeprefix("Value error, "))
    return " ".join(messages) or str(exc)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``nuxt-scaffold`` / ``python -m nuxt_scaffold``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValidationError as exc:
        print_error(_validation_message(exc))
        sys.exit(ExitCode.USAGE_ERROR)

    configure_console(color=config.color, debug=config.debug)
    print_debug(f"config: {config.model_dump_json()}")

    try:
        code = ScaffoldPipeline(config).run()
    except ScaffoldError as exc:
        print_error(str(exc))
        sys.exit(exc.exit_code)

    sys.exit(code)


if __name__ == "__main__":
    main()
