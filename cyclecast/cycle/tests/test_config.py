"""Tests for cycle_config.yaml loading and validation."""

from __future__ import annotations

import textwrap
from datetime import date
from pathlib import Path

import pytest

from cyclecast.cycle import config_loader
from cyclecast.cycle.analyzer import CycleAnalyzer
from cyclecast.cycle.config_loader import (
    ConfigValidationError,
    CyclePolicy,
    _validate_and_build,
    load_cycle_policy,
    reload_cycle_policy,
)


class TestConfigLoading:
    def test_load_default_config(self, cycle_policy: CyclePolicy) -> None:
        """The bundled cycle_config.yaml loads and equals the named constants."""
        assert cycle_policy.version == "1.0"
        assert cycle_policy == CyclePolicy()

    def test_bundled_values(self, cycle_policy: CyclePolicy) -> None:
        assert cycle_policy.luteal_phase_days == 14
        assert cycle_policy.fertile_window_days == 6
        assert cycle_policy.menstrual_phase_days == 5
        assert cycle_policy.history_window == 3

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_cycle_policy(tmp_path / "nope.yaml")

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("menstrual_cycle: [unclosed\n")
        with pytest.raises(ConfigValidationError):
            load_cycle_policy(path)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_cycle_policy(path) == CyclePolicy()


class TestConfigValidation:
    def test_overrides_applied(self) -> None:
        policy = _validate_and_build(
            {
                "version": "2.0",
                "menstrual_cycle": {
                    "luteal_phase_days": 12,
                    "history_window": 6,
                    "cycle_length": {"min_cycle_days": 24},
                },
            }
        )
        assert policy.version == "2.0"
        assert policy.luteal_phase_days == 12
        assert policy.history_window == 6
        assert policy.min_cycle_days == 24
        assert policy.fertile_window_days == 6

    @pytest.mark.parametrize(
        "section",
        [
            {"luteal_phase_days": 0},
            {"fertile_window_days": 1},
            {"menstrual_phase_days": "five"},
            {"history_window": 1},
            {"luteal_phase_days": 13.5},
            {"cycle_length": {"min_cycle_days": 45, "max_cycle_days": 21}},
            {"regularity": {"regular_max_spread_days": 9, "irregular_min_spread_days": 7}},
        ],
    )
    def test_invalid_values_rejected(self, section: dict) -> None:
        with pytest.raises(ConfigValidationError):
            _validate_and_build({"menstrual_cycle": section})

    def test_all_errors_reported_together(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _validate_and_build(
                {"menstrual_cycle": {"luteal_phase_days": 0, "history_window": 0}}
            )
        assert "2 validation error(s)" in str(exc_info.value)

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(ConfigValidationError):
            _validate_and_build({"menstrual_cycle": [14, 6]})


class TestReload:
    def test_reload_replaces_singleton(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(config_loader, "_policy", None)
        path = tmp_path / "cycle.yaml"
        path.write_text(
            textwrap.dedent(
                """\
                version: "1.1"
                menstrual_cycle:
                  history_window: 4
                """
            )
        )
        assert config_loader.get_cycle_policy().version == "1.0"
        reloaded = reload_cycle_policy(path)
        assert reloaded.history_window == 4
        assert config_loader.get_cycle_policy() is reloaded

    def test_failed_reload_keeps_old_policy(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(config_loader, "_policy", None)
        original = config_loader.get_cycle_policy()
        path = tmp_path / "broken.yaml"
        path.write_text("menstrual_cycle:\n  luteal_phase_days: -1\n")
        with pytest.raises(ConfigValidationError):
            reload_cycle_policy(path)
        assert config_loader.get_cycle_policy() is original


class TestCyclePolicyBounds:
    def test_defaults_are_valid(self) -> None:
        assert CyclePolicy().fertile_window_days == 6

    @pytest.mark.parametrize(
        "overrides",
        [
            {"fertile_window_days": 1},
            {"luteal_phase_days": 0},
            {"menstrual_phase_days": 0},
            {"history_window": 1},
            {"min_cycle_days": 40, "max_cycle_days": 30},
            {"regular_max_spread_days": 8, "irregular_min_spread_days": 7},
        ],
    )
    def test_direct_construction_rejects_out_of_range(self, overrides: dict) -> None:
        with pytest.raises(ConfigValidationError):
            CyclePolicy(**overrides)

    def test_two_day_window_keeps_start_before_end(self) -> None:
        analyzer = CycleAnalyzer(CyclePolicy(fertile_window_days=2))
        p = analyzer.predict(["2024-01-01", "2024-01-29", "2024-02-26"], as_of=date(2024, 3, 1))
        assert p.fertile_window_start < p.fertile_window_end < p.next_period_start
