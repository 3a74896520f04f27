"""Unit tests for ScaffoldConfig and FeatureOverrides (nuxt_scaffold.config).

Tests cover:
- FeatureOverrides precedence (all > with > without > detected)
- FeatureOverrides rejection of contradictory switches
- ScaffoldConfig defaults and derived properties
- ScaffoldConfig.from_env environment handling and CLI precedence
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from nuxt_scaffold.config import (
    DEFAULT_REPO_REF,
    DEFAULT_REPO_URL,
    DEFAULT_TEMPLATE_DIR,
    PACKAGE_DIR,
    FeatureOverrides,
    ScaffoldConfig,
)
from nuxt_scaffold.features import FeatureSignals


# ---------------------------------------------------------------------------
# FeatureOverrides
# ---------------------------------------------------------------------------


class TestFeatureOverridesPrecedence:
    @pytest.mark.unit
    def test_no_overrides_uses_detection(self):
        detected = FeatureSignals(content=True, tailwind=False)
        assert FeatureOverrides().apply(detected) == detected

    @pytest.mark.unit
    def test_force_all_outranks_detection(self):
        effective = FeatureOverrides(force_all=True).apply(FeatureSignals())
        assert effective.content is True
        assert effective.tailwind is True

    @pytest.mark.unit
    def test_with_feature_enables_undetected(self):
        effective = FeatureOverrides(with_tailwind=True).apply(FeatureSignals())
        assert effective.tailwind is True
        assert effective.content is False

    @pytest.mark.unit
    def test_without_feature_disables_detected(self):
        detected = FeatureSignals(content=True, tailwind=True)
        effective = FeatureOverrides(without_content=True).apply(detected)
        assert effective.content is False
        assert effective.tailwind is True

    @pytest.mark.unit
    def test_force_all_with_redundant_with_flag(self):
        effective = FeatureOverrides(force_all=True, with_content=True).apply(FeatureSignals())
        assert effective.content is True


class TestFeatureOverridesValidation:
    @pytest.mark.unit
    def test_with_and_without_content_rejected(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            FeatureOverrides(with_content=True, without_content=True)

    @pytest.mark.unit
    def test_with_and_without_tailwind_rejected(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            FeatureOverrides(with_tailwind=True, without_tailwind=True)

    @pytest.mark.unit
    @pytest.mark.parametrize("flag", ["without_content", "without_tailwind"])
    def test_all_with_without_rejected(self, flag: str):
        with pytest.raises(ValidationError, match="--all cannot be combined"):
            FeatureOverrides(force_all=True, **{flag: True})

    @pytest.mark.unit
    def test_mixed_features_accepted(self):
        overrides = FeatureOverrides(with_content=True, without_tailwind=True)
        effective = overrides.apply(FeatureSignals(content=False, tailwind=True))
        assert effective == FeatureSignals(content=True, tailwind=False)


# ---------------------------------------------------------------------------
# ScaffoldConfig
# ---------------------------------------------------------------------------


class TestScaffoldConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self, tmp_path: Path):
        config = ScaffoldConfig(target=tmp_path)
        assert config.source == DEFAULT_REPO_URL
        assert config.ref == DEFAULT_REPO_REF
        assert config.template_dir == DEFAULT_TEMPLATE_DIR
        assert config.embedded_base == PACKAGE_DIR
        assert config.optimized is False
        assert config.color is True
        assert config.uses_default_source is True

    @pytest.mark.unit
    def test_custom_source_is_not_default(self, tmp_path: Path):
        config = ScaffoldConfig(target=tmp_path, source="/srv/templates")
        assert config.uses_default_source is False

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("dry_run", "list_only", "expected"),
        [(False, False, False), (True, False, True), (False, True, True)],
    )
    def test_simulate(self, tmp_path: Path, dry_run: bool, list_only: bool, expected: bool):
        config = ScaffoldConfig(target=tmp_path, dry_run=dry_run, list_only=list_only)
        assert config.simulate is expected

    @pytest.mark.unit
    def test_contradictory_overrides_fail_config(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            ScaffoldConfig(
                target=tmp_path,
                overrides={"with_content": True, "without_content": True},
            )


class TestScaffoldConfigFromEnv:
    @pytest.mark.unit
    def test_env_values_used(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("SCAFFOLD_REPO_URL", "https://example.com/t.git")
        monkeypatch.setenv("SCAFFOLD_REPO_REF", "develop")
        monkeypatch.setenv("SCAFFOLD_FAST", "1")
        config = ScaffoldConfig.from_env(target=tmp_path)
        assert config.source == "https://example.com/t.git"
        assert config.ref == "develop"
        assert config.optimized is True

    @pytest.mark.unit
    def test_fast_requires_exact_one(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("SCAFFOLD_FAST", "yes")
        assert ScaffoldConfig.from_env(target=tmp_path).optimized is False

    @pytest.mark.unit
    def test_cli_values_win_over_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("SCAFFOLD_REPO_URL", "https://example.com/t.git")
        config = ScaffoldConfig.from_env(target=tmp_path, source="/local/templates")
        assert config.source == "/local/templates"

    @pytest.mark.unit
    def test_none_values_ignored(self, tmp_path: Path):
        config = ScaffoldConfig.from_env(target=tmp_path, source=None, ref=None, template_dir=None)
        assert config.source == DEFAULT_REPO_URL
        assert config.ref == DEFAULT_REPO_REF
        assert config.template_dir == DEFAULT_TEMPLATE_DIR

    @pytest.mark.unit
    def test_unset_fast_flag_keeps_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("SCAFFOLD_FAST", "1")
        assert ScaffoldConfig.from_env(target=tmp_path, optimized=False).optimized is True

    @pytest.mark.unit
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("NO_COLOR", "1")
        assert ScaffoldConfig.from_env(target=tmp_path, color=True).color is False

    @pytest.mark.unit
    def test_no_color_flag(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert ScaffoldConfig.from_env(target=tmp_path, color=False).color is False
