"""Tests for cycle_config.yaml loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.cycles.config_loader import (
    ConfigValidationError,
    CycleConfig,
    PatternConfig,
    _validate_and_build,
    get_cycle_config,
    load_cycle_config,
    reload_cycle_config,
)


class TestConfigLoading:
    """Tests for loading the bundled cycle_config.yaml."""

    def test_load_default_config(self, cycle_config: CycleConfig) -> None:
        """The bundled cycle_config.yaml loads without errors."""
        assert cycle_config.version == "1.0"

    def test_prediction_constants(self, cycle_config: CycleConfig) -> None:
        """Calendar model uses a 14-day luteal phase and a 7-day fertile window."""
        pr = cycle_config.prediction
        assert pr.default_cycle_length == 28
        assert pr.luteal_phase_days == 14
        assert pr.fertile_days_before_ovulation == 5
        assert pr.fertile_days_after_ovulation == 1
        assert pr.predicted_period_days == 5

    def test_pattern_thresholds(self, cycle_config: CycleConfig) -> None:
        pa = cycle_config.pattern
        assert pa.min_complete_cycles == 2
        assert (pa.very_regular_max, pa.regular_max, pa.somewhat_irregular_max) == (2, 4, 7)
        assert pa.trend_recent_window == 3
        assert pa.trend_shift_days == 2
        assert pa.short_cycle_below == 21
        assert pa.long_cycle_above == 35
        assert pa.strong_data_min_cycles == 6
        assert pa.building_data_min_cycles == 3

    def test_yaml_matches_dataclass_defaults(self, cycle_config: CycleConfig) -> None:
        """Bundled thresholds match the dataclass defaults."""
        assert cycle_config.pattern == PatternConfig()

    def test_reminder_messages_are_strings(self, cycle_config: CycleConfig) -> None:
        for message in cycle_config.reminders.water_messages + cycle_config.reminders.exercise_messages:
            assert isinstance(message, str) and message

    @pytest.mark.parametrize(
        "variation, band",
        [(0.0, "very_regular"), (2.0, "very_regular"), (2.01, "regular"),
         (4.0, "regular"), (6.9, "somewhat_irregular"), (7.0, "somewhat_irregular"),
         (7.01, "irregular")],
    )
    def test_regularity_for(self, variation: float, band: str) -> None:
        assert PatternConfig().regularity_for(variation) == band


class TestConfigValidation:
    """Tests for config validation logic."""

    def test_empty_config_uses_defaults(self) -> None:
        """Every section is optional."""
        config = _validate_and_build({})
        assert config.version == "1.0"
        assert config.prediction.luteal_phase_days == 14
        assert config.reminders.water_messages == []

    def test_partial_section_overrides(self) -> None:
        config = _validate_and_build({"prediction": {"luteal_phase_days": 12}})
        assert config.prediction.luteal_phase_days == 12
        assert config.prediction.default_cycle_length == 28

    def test_non_numeric_value_raises(self) -> None:
        raw = {"prediction": {"default_cycle_length": "monthly"}}
        with pytest.raises(ConfigValidationError, match="must be a number"):
            _validate_and_build(raw)

    def test_zero_cycle_length_raises(self) -> None:
        raw = {"prediction": {"default_cycle_length": 0}}
        with pytest.raises(ConfigValidationError, match="default_cycle_length"):
            _validate_and_build(raw)

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(ConfigValidationError, match="'reminders' must be a mapping"):
            _validate_and_build({"reminders": ["hourly"]})

    def test_descending_bands_raise(self) -> None:
        raw = {
            "pattern_analysis": {
                "regularity_thresholds": {"very_regular": 5, "regular": 4, "somewhat_irregular": 7}
            }
        }
        with pytest.raises(ConfigValidationError, match="ascending"):
            _validate_and_build(raw)

    def test_short_above_long_raises(self) -> None:
        raw = {"pattern_analysis": {"cycle_length": {"short_below": 40, "long_above": 35}}}
        with pytest.raises(ConfigValidationError, match="short_below"):
            _validate_and_build(raw)

    def test_messages_must_be_strings(self) -> None:
        raw = {"reminders": {"water_messages": ["Drink up", 42]}}
        with pytest.raises(ConfigValidationError, match="water_messages"):
            _validate_and_build(raw)

    def test_errors_are_reported_together(self) -> None:
        raw = {
            "prediction": {"luteal_phase_days": -1},
            "reminders": {"water_interval_seconds": 0},
        }
        with pytest.raises(ConfigValidationError, match="2 validation error"):
            _validate_and_build(raw)

    def test_hot_reload(self, tmp_path: Path) -> None:
        """reload_cycle_config() should replace the global singleton."""
        config_content = """
version: "2.0-test"
prediction:
  luteal_phase_days: 13
pattern_analysis:
  min_complete_cycles: 3
reminders:
  water_interval_seconds: 1800
  water_messages:
    - "Water time"
"""
        config_file = tmp_path / "cycle_config.yaml"
        config_file.write_text(config_content.strip())

        try:
            new_config = reload_cycle_config(path=config_file)
            assert new_config.version == "2.0-test"
            assert get_cycle_config() is new_config
            assert new_config.prediction.luteal_phase_days == 13
            assert new_config.reminders.water_messages == ["Water time"]
        finally:
            reload_cycle_config()

    def test_failed_reload_keeps_old_config(self, tmp_path: Path) -> None:
        before = get_cycle_config()
        bad = tmp_path / "cycle_config.yaml"
        bad.write_text("prediction:\n  default_cycle_length: -3\n")
        with pytest.raises(ConfigValidationError):
            reload_cycle_config(path=bad)
        assert get_cycle_config() is before

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "cycle_config.yaml"
        bad.write_text("prediction: [unclosed\n")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_cycle_config(path=bad)

    def test_load_nonexistent_file_raises(self) -> None:
        """Loading a nonexistent file should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_cycle_config(path=Path("/nonexistent/path/cycle_config.yaml"))
