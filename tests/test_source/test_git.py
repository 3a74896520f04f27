"""Unit tests for the git command wrapper (nuxt_scaffold.source.git)."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from nuxt_scaffold.errors import CloneFailed, SourceUnavailable
from nuxt_scaffold.source.git import git_available, run_git


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    proc = MagicMock(spec=subprocess.CompletedProcess)
    proc.returncode = returncode
    proc.stdout = stdout
    proc.stderr = stderr
    return proc


class TestRunGit:
    @pytest.mark.unit
    def test_returns_stripped_stdout(self):
        with patch("nuxt_scaffold.source.git.subprocess.run",
                   return_value=_completed(stdout="git version 2.45.0\n")) as run:
            assert run_git("--version") == "git version 2.45.0"
        cmd = run.call_args[0][0]
        assert cmd == ["git", "--version"]
        assert run.call_args.kwargs["stdin"] is subprocess.DEVNULL

    @pytest.mark.unit
    def test_cwd_forwarded_as_string(self, tmp_path):
        with patch("nuxt_scaffold.source.git.subprocess.run",
                   return_value=_completed()) as run:
            run_git("status", cwd=tmp_path)
        assert run.call_args.kwargs["cwd"] == str(tmp_path)

    @pytest.mark.unit
    def test_nonzero_exit_raises(self):
        proc = _completed(returncode=128, stderr="fatal: repository not found\n")
        with patch("nuxt_scaffold.source.git.subprocess.run", return_value=proc):
            with pytest.raises(CloneFailed) as info:
                run_git("clone", "https://example.com/x.git", "dest")
        assert info.value.stderr == "fatal: repository not found"
        assert info.value.command == "git clone https://example.com/x.git dest"
        assert "repository not found" in str(info.value)

    @pytest.mark.unit
    def test_missing_binary_raises(self):
        with patch("nuxt_scaffold.source.git.subprocess.run",
                   side_effect=FileNotFoundError("git")):
            with pytest.raises(CloneFailed, match="Could not run git"):
                run_git("--version")

    @pytest.mark.unit
    def test_clone_failed_is_source_unavailable(self):
        assert issubclass(CloneFailed, SourceUnavailable)


class TestGitAvailable:
    @pytest.mark.unit
    def test_true_when_version_runs(self):
        with patch("nuxt_scaffold.source.git.subprocess.run",
                   return_value=_completed(stdout="git version 2.45.0")):
            assert git_available() is True

    @pytest.mark.unit
    def test_false_when_missing(self):
        with patch("nuxt_scaffold.source.git.subprocess.run", side_effect=OSError):
            assert git_available() is False
