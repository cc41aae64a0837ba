"""Bloom cycle engine.

Pure, stateless cycle computations plus the reminder scheduler.

Modules:
    predictor        Next period / ovulation / fertile window, day labels
    pattern_analysis Regularity, trend and rule-based insights
    summary          Insights-page statistics over cycles and daily logs
    reminders        Hydration / exercise reminder scheduler
    config_loader    Load/validate/hot-reload cycle_config.yaml
"""

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.pattern_analysis import (
    CyclePattern,
    CycleRecord,
    PatternInsight,
    analyze_pattern,
    should_show_pattern_analysis,
)
from src.cycles.predictor import (
    CyclePrediction,
    DayType,
    InvalidCycleInput,
    classify_day,
    compute_predictions,
)
from src.cycles.summary import CycleSummary, DailyLog, summarize

__all__ = [
    "CycleConfig",
    "get_cycle_config",
    "CycleRecord",
    "CyclePattern",
    "PatternInsight",
    "analyze_pattern",
    "should_show_pattern_analysis",
    "CyclePrediction",
    "DayType",
    "InvalidCycleInput",
    "classify_day",
    "compute_predictions",
    "CycleSummary",
    "DailyLog",
    "summarize",
]
