"""Load, validate, and hot-reload the Bloom cycle configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after an edit; no restart is required.

Usage::

    from src.cycles.config_loader import get_cycle_config

    config = get_cycle_config()
    luteal = config.prediction.luteal_phase_days          # 14
    band = config.pattern.regularity_for(3.1)             # 'regular'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger("bloom.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class PredictionConfig:
    """Calendar prediction constants."""

    default_cycle_length: int = 28
    luteal_phase_days: int = 14
    fertile_days_before_ovulation: int = 5
    fertile_days_after_ovulation: int = 1
    predicted_period_days: int = 5


@dataclass
class PatternConfig:
    """Pattern analysis thresholds.

    Regularity bands are upper bounds (inclusive) on the population standard
    deviation of complete-cycle lengths.
    """

    min_complete_cycles: int = 2
    very_regular_max: float = 2.0
    regular_max: float = 4.0
    somewhat_irregular_max: float = 7.0
    trend_recent_window: int = 3
    trend_shift_days: float = 2.0
    improving_max_variation: float = 3.0
    improving_min_cycles: int = 4
    short_cycle_below: float = 21.0
    long_cycle_above: float = 35.0
    strong_data_min_cycles: int = 6
    building_data_min_cycles: int = 3

    def regularity_for(self, variation: float) -> str:
        """Return the regularity band for an unrounded standard deviation."""
        if variation <= self.very_regular_max:
            return "very_regular"
        if variation <= self.regular_max:
            return "regular"
        if variation <= self.somewhat_irregular_max:
            return "somewhat_irregular"
        return "irregular"


@dataclass
class ReminderConfig:
    """Hydration / exercise reminder settings."""

    water_interval_seconds: float = 3600.0
    exercise_interval_seconds: float = 10800.0
    water_messages: list[str] = field(default_factory=list)
    exercise_messages: list[str] = field(default_factory=list)


@dataclass
class CycleConfig:
    """Complete, validated cycle configuration.

    This is the single in-memory representation of cycle_config.yaml.
    The predictor, the pattern analyzer, and the reminder scheduler all read
    from this object.

    Attributes:
        version:    Config schema version string.
        prediction: Calendar prediction constants.
        pattern:    Pattern analysis thresholds.
        reminders:  Reminder scheduler settings.
    """

    version: str
    prediction: PredictionConfig
    pattern: PatternConfig
    reminders: ReminderConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    import yaml  # pyyaml

    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Every section is optional; missing keys fall back to the dataclass
    defaults.  All problems are collected and reported together.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated CycleConfig instance.

    Raises:
        ConfigValidationError: If any value is missing a sane type or range.
    """
    errors: list[str] = []

    def _number(section: dict, key: str, path: str, default: Any, cast=int, minimum=None) -> Any:
        value = section.get(key, default)
        try:
            num = cast(value)
        except (TypeError, ValueError):
            errors.append(f"{path}.{key} must be a number, got {value!r}")
            return default
        if minimum is not None and num < minimum:
            errors.append(f"{path}.{key} = {num} must be >= {minimum}")
        return num

    def _section(key: str) -> dict:
        value = raw.get(key) or {}
        if not isinstance(value, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return value

    version = str(raw.get("version", "1.0"))

    # ── Prediction ──
    pr_raw = _section("prediction")
    pr_default = PredictionConfig()
    prediction = PredictionConfig(
        default_cycle_length=_number(
            pr_raw, "default_cycle_length", "prediction", pr_default.default_cycle_length, minimum=1
        ),
        luteal_phase_days=_number(
            pr_raw, "luteal_phase_days", "prediction", pr_default.luteal_phase_days, minimum=0
        ),
        fertile_days_before_ovulation=_number(
            pr_raw, "fertile_days_before_ovulation", "prediction",
            pr_default.fertile_days_before_ovulation, minimum=0,
        ),
        fertile_days_after_ovulation=_number(
            pr_raw, "fertile_days_after_ovulation", "prediction",
            pr_default.fertile_days_after_ovulation, minimum=0,
        ),
        predicted_period_days=_number(
            pr_raw, "predicted_period_days", "prediction", pr_default.predicted_period_days, minimum=0
        ),
    )

    # ── Pattern analysis ──
    pa_raw = _section("pattern_analysis")
    pa_default = PatternConfig()
    bands = pa_raw.get("regularity_thresholds") or {}
    trend = pa_raw.get("trend") or {}
    lengths = pa_raw.get("cycle_length") or {}
    volume = pa_raw.get("data_volume") or {}
    path = "pattern_analysis"
    pattern = PatternConfig(
        min_complete_cycles=_number(
            pa_raw, "min_complete_cycles", path, pa_default.min_complete_cycles, minimum=1
        ),
        very_regular_max=_number(
            bands, "very_regular", f"{path}.regularity_thresholds",
            pa_default.very_regular_max, cast=float, minimum=0,
        ),
        regular_max=_number(
            bands, "regular", f"{path}.regularity_thresholds",
            pa_default.regular_max, cast=float, minimum=0,
        ),
        somewhat_irregular_max=_number(
            bands, "somewhat_irregular", f"{path}.regularity_thresholds",
            pa_default.somewhat_irregular_max, cast=float, minimum=0,
        ),
        trend_recent_window=_number(
            trend, "recent_window", f"{path}.trend", pa_default.trend_recent_window, minimum=1
        ),
        trend_shift_days=_number(
            trend, "shift_days", f"{path}.trend", pa_default.trend_shift_days, cast=float, minimum=0
        ),
        improving_max_variation=_number(
            trend, "improving_max_variation", f"{path}.trend",
            pa_default.improving_max_variation, cast=float, minimum=0,
        ),
        improving_min_cycles=_number(
            trend, "improving_min_cycles", f"{path}.trend", pa_default.improving_min_cycles, minimum=1
        ),
        short_cycle_below=_number(
            lengths, "short_below", f"{path}.cycle_length",
            pa_default.short_cycle_below, cast=float, minimum=0,
        ),
        long_cycle_above=_number(
            lengths, "long_above", f"{path}.cycle_length",
            pa_default.long_cycle_above, cast=float, minimum=0,
        ),
        strong_data_min_cycles=_number(
            volume, "strong_min_cycles", f"{path}.data_volume",
            pa_default.strong_data_min_cycles, minimum=1,
        ),
        building_data_min_cycles=_number(
            volume, "building_min_cycles", f"{path}.data_volume",
            pa_default.building_data_min_cycles, minimum=1,
        ),
    )

    if not (pattern.very_regular_max <= pattern.regular_max <= pattern.somewhat_irregular_max):
        errors.append(
            "pattern_analysis.regularity_thresholds must be ascending "
            "(very_regular <= regular <= somewhat_irregular)"
        )
    if pattern.short_cycle_below > pattern.long_cycle_above:
        errors.append("pattern_analysis.cycle_length.short_below must not exceed long_above")

    # ── Reminders ──
    rm_raw = _section("reminders")
    rm_default = ReminderConfig()
    water_messages = rm_raw.get("water_messages") or []
    exercise_messages = rm_raw.get("exercise_messages") or []
    for key, messages in (("water_messages", water_messages), ("exercise_messages", exercise_messages)):
        if not isinstance(messages, list) or not all(isinstance(m, str) for m in messages):
            errors.append(f"reminders.{key} must be a list of strings")
    reminders = ReminderConfig(
        water_interval_seconds=_number(
            rm_raw, "water_interval_seconds", "reminders",
            rm_default.water_interval_seconds, cast=float, minimum=1,
        ),
        exercise_interval_seconds=_number(
            rm_raw, "exercise_interval_seconds", "reminders",
            rm_default.exercise_interval_seconds, cast=float, minimum=1,
        ),
        water_messages=list(water_messages) if isinstance(water_messages, list) else [],
        exercise_messages=list(exercise_messages) if isinstance(exercise_messages, list) else [],
    )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        prediction=prediction,
        pattern=pattern,
        reminders=reminders,
        _raw=raw,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.

    Returns:
        Validated CycleConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_cycle_config()`` to refresh after YAML changes.

    Returns:
        The current CycleConfig instance.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is
    re-raised.

    Args:
        path: Override path to YAML. Defaults to bundled cycle_config.yaml.

    Returns:
        The newly loaded CycleConfig.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
