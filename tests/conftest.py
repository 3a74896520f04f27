"""Shared pytest fixtures for the scaffolder test suite.

Provides reusable fixtures for:
- Nuxt target projects (package.json + nuxt.config.ts)
- Template trees built from a ``{relative path: content}`` mapping
- A real git repository holding a ``templates/`` folder
- Resetting the module-level console state between tests
"""

from __future__ import annotations

import json
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from nuxt_scaffold import utils


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

SAMPLE_TEMPLATE: dict[str, str] = {
    "content/index.md": "# Hello\n",
    "tailwind.config.ts": "export default {}\n",
    "package.json": "{}\n",
    "README.md": "# Template\n",
}

RICH_TEMPLATE: dict[str, str] = {
    **SAMPLE_TEMPLATE,
    "app/app.vue": "<template><NuxtPage /></template>\n",
    "app/pages/index.vue": "<template><h1>Home</h1></template>\n",
    "app/INFO.md": "info\n",
    "content.config.ts": "export default {}\n",
    "INFO.md": "top-level info\n",
    "pnpm-lock.yaml": "lockfileVersion: 9\n",
    "LICENSE": "MIT\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create every file of *files* under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Console state
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_console_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep --debug / --no-color from leaking between tests."""
    monkeypatch.setattr(utils, "_debug_enabled", False)
    monkeypatch.setattr(utils.console, "no_color", utils.console.no_color)
    monkeypatch.setattr(utils.err_console, "no_color", utils.err_console.no_color)
    for var in ("SCAFFOLD_REPO_URL", "SCAFFOLD_REPO_REF", "SCAFFOLD_FAST"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Targets & templates
# ---------------------------------------------------------------------------

@pytest.fixture
def make_target(tmp_path: Path) -> Callable[..., Path]:
    """Factory for Nuxt target directories.

    ``make_target(deps={"tailwindcss": "^3"}, files={"app/app.vue": "..."})``
    """
    counter = {"n": 0}

    def _make(
        deps: dict[str, str] | None = None,
        dev_deps: dict[str, str] | None = None,
        files: dict[str, str] | None = None,
        nuxt_config: str | None = "nuxt.config.ts",
        manifest: Any = None,
    ) -> Path:
        counter["n"] += 1
        root = tmp_path / f"target-{counter['n']}"
        root.mkdir()
        if manifest is None:
            manifest = {
                "name": "nuxt-app",
                "private": True,
                "dependencies": {"nuxt": "^4.0.0", **(deps or {})},
                "devDependencies": dict(dev_deps or {}),
            }
        if manifest is not False:
            text = manifest if isinstance(manifest, str) else json.dumps(manifest, indent=2)
            (root / "package.json").write_text(text, encoding="utf-8")
        if nuxt_config:
            (root / nuxt_config).write_text("export default defineNuxtConfig({})\n", encoding="utf-8")
        write_tree(root, files or {})
        return root

    return _make


@pytest.fixture
def nuxt_target(make_target: Callable[..., Path]) -> Path:
    """An eligible Nuxt target with no optional features installed."""
    return make_target()


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory for template trees: ``make_template({"a.txt": "..."})``."""
    counter = {"n": 0}

    def _make(files: dict[str, str] | None = None, subdir: str | None = None) -> Path:
        counter["n"] += 1
        root = tmp_path / f"template-{counter['n']}"
        tree = root / subdir if subdir else root
        write_tree(tree, SAMPLE_TEMPLATE if files is None else files)
        return root

    return _make


@pytest.fixture
def rich_template(make_template: Callable[..., Path]) -> Path:
    """Template covering every rule of the classifier chain."""
    return make_template(RICH_TEMPLATE)


# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------

def _git(*args: str, cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def git_template_repo(tmp_path: Path) -> Path:
    """Real git repository with the sample template under ``templates/``.

    A second branch ``v2`` adds ``app/extra.vue``.
    """
    if shutil.which("git") is None:
        pytest.skip("git binary not installed")

    repo = tmp_path / "template-repo"
    repo.mkdir()
    _git("init", "--quiet", cwd=repo)
    _git("symbolic-ref", "HEAD", "refs/heads/main", cwd=repo)
    _git("config", "user.email", "test@scaffold.local", cwd=repo)
    _git("config", "user.name", "Scaffold Test", cwd=repo)
    _git("config", "commit.gpgsign", "false", cwd=repo)
    write_tree(repo / "templates", {**SAMPLE_TEMPLATE, "app/app.vue": "<template />\n"})
    (repo / "README.md").write_text("# Template repo\n", encoding="utf-8")
    _git("add", ".", cwd=repo)
    _git("commit", "--quiet", "-m", "Initial template", cwd=repo)

    _git("checkout", "--quiet", "-b", "v2", cwd=repo)
    write_tree(repo / "templates", {"app/extra.vue": "<template />\n"})
    _git("add", ".", cwd=repo)
    _git("commit", "--quiet", "-m", "Add extra page", cwd=repo)
    _git("checkout", "--quiet", "main", cwd=repo)
    return repo
