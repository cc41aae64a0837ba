"""Cycle pattern analysis.

Summarizes a user's complete cycles into:
- Average length and variation (population standard deviation)
- A four-level regularity band
- A trend (recent cycles vs. older cycles)
- Human-readable insights produced by a fixed rule set

A cycle is *complete* only when it has both an end date and an explicit
length.  Records with just one of the two are left out of every statistic.
"""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from src.cycles.config_loader import PatternConfig, get_cycle_config

logger = logging.getLogger("bloom.cycles.pattern_analysis")


@dataclass
class CycleRecord:
    """A single menstrual cycle as stored by the tracking backend.

    Attributes:
        start_date: First day of bleeding.
        end_date:   Last day of bleeding, once known.
        length:     Cycle length in days, once known.
        is_active:  True for the cycle currently in progress.
    """

    start_date: date
    end_date: date | None = None
    length: int | None = None
    is_active: bool = True

    @property
    def is_complete(self) -> bool:
        return self.end_date is not None and bool(self.length)


@dataclass
class PatternInsight:
    """A single rule-triggered observation.

    Attributes:
        insight_id:     Stable identifier (e.g. 'regular-cycles').
        category:       'regular', 'irregular', 'short', 'long' or 'improving'.
        title:          Short title for display.
        description:    Full text; may quote computed numbers.
        icon:           Icon hint for the client.
        confidence:     0-100.
        recommendation: Optional advice.
    """

    insight_id: str
    category: str
    title: str
    description: str
    icon: str
    confidence: int
    recommendation: str | None = None


@dataclass
class CyclePattern:
    """Statistical summary of complete cycles."""

    average_length: int
    variation: float
    regularity: str
    trend: str
    insights: list[PatternInsight] = field(default_factory=list)
    cycles_analyzed: int = 0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values (27.5 → 28)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def complete_cycles(cycles: Iterable[CycleRecord]) -> list[CycleRecord]:
    return [c for c in cycles if c.is_complete]


def should_show_pattern_analysis(
    cycles: Iterable[CycleRecord], config: PatternConfig | None = None
) -> bool:
    """Return True once there are enough complete cycles to analyze."""
    cfg = config or get_cycle_config().pattern
    return len(complete_cycles(cycles)) >= cfg.min_complete_cycles


def pattern_confidence_level(cycle_count: int) -> str:
    if cycle_count >= 6:
        return "High"
    if cycle_count >= 4:
        return "Good"
    if cycle_count >= 2:
        return "Building"
    return "Insufficient"


def _trend(lengths: Sequence[int], variation: float, cfg: PatternConfig) -> str:
    """Compare the most recent cycles against everything before them."""
    window = cfg.trend_recent_window
    if len(lengths) < window:
        return "stable"

    recent = lengths[-window:]
    older = lengths[:-window]
    if not older:
        return "stable"

    recent_avg = statistics.fmean(recent)
    older_avg = statistics.fmean(older)

    if recent_avg < older_avg - cfg.trend_shift_days:
        return "getting_shorter"
    if recent_avg > older_avg + cfg.trend_shift_days:
        return "getting_longer"
    if variation < cfg.improving_max_variation and len(lengths) >= cfg.improving_min_cycles:
        return "improving"
    return "stable"


def analyze_pattern(
    cycles: Iterable[CycleRecord], config: PatternConfig | None = None
) -> CyclePattern | None:
    """Analyze complete cycles.

    Args:
        cycles: Cycle records, oldest first.
        config: Pattern thresholds (defaults to the global config).

    Returns:
        CyclePattern, or None if there are fewer than two complete cycles.
    """
    cfg = config or get_cycle_config().pattern
    complete = complete_cycles(cycles)

    if len(complete) < cfg.min_complete_cycles:
        logger.debug(
            "Insufficient cycle data: %d complete cycles (need %d)",
            len(complete), cfg.min_complete_cycles,
        )
        return None

    lengths = [c.length for c in complete]
    average = statistics.fmean(lengths)
    variation = statistics.pstdev(lengths, mu=average)

    regularity = cfg.regularity_for(variation)
    trend = _trend(lengths, variation, cfg)
    insights = generate_insights(average, variation, regularity, trend, len(complete), cfg)

    return CyclePattern(
        average_length=int(round_half_up(average)),
        variation=round_half_up(variation, 1),
        regularity=regularity,
        trend=trend,
        insights=insights,
        cycles_analyzed=len(complete),
    )


def generate_insights(
    average_length: float,
    variation: float,
    regularity: str,
    trend: str,
    cycle_count: int,
    config: PatternConfig | None = None,
) -> list[PatternInsight]:
    """Evaluate the insight rules in their fixed order.

    Each rule adds zero or one insight: regularity, length, trend, then
    data volume.
    """
    cfg = config or get_cycle_config().pattern
    insights: list[PatternInsight] = []
    shown_average = int(round_half_up(average_length))

    # 1. Regularity
    if regularity in ("very_regular", "regular"):
        insights.append(
            PatternInsight(
                insight_id="regular-cycles",
                category="regular",
                title="Regular Cycles Detected",
                description=(
                    f"Your cycles have been {'very ' if regularity == 'very_regular' else ''}"
                    "regular! Keep tracking for better predictions."
                ),
                icon="chart-bar",
                confidence=95 if regularity == "very_regular" else 85,
                recommendation="Continue your current routine as it's working well for cycle regularity.",
            )
        )
    elif regularity == "irregular":
        insights.append(
            PatternInsight(
                insight_id="irregular-cycles",
                category="irregular",
                title="Irregular Pattern Noticed",
                description=(
                    "Your cycles show some variation. This is normal, "
                    "but tracking helps identify triggers."
                ),
                icon="trending-up",
                confidence=70,
                recommendation=(
                    "Consider tracking stress, sleep, and exercise to identify "
                    "potential factors affecting your cycle."
                ),
            )
        )

    # 2. Length
    if average_length < cfg.short_cycle_below:
        insights.append(
            PatternInsight(
                insight_id="short-cycles",
                category="short",
                title="Short Cycle Pattern",
                description=(
                    f"Your average cycle is {shown_average} days, which is shorter than typical."
                ),
                icon="clock",
                confidence=80,
                recommendation=(
                    "Consider discussing this pattern with a healthcare provider "
                    "if it's a recent change."
                ),
            )
        )
    elif average_length > cfg.long_cycle_above:
        insights.append(
            PatternInsight(
                insight_id="long-cycles",
                category="long",
                title="Long Cycle Pattern",
                description=(
                    f"Your average cycle is {shown_average} days, which is longer than typical."
                ),
                icon="calendar",
                confidence=80,
                recommendation=(
                    "This could be normal for you, but mention it to your healthcare "
                    "provider at your next visit."
                ),
            )
        )

    # 3. Trend
    if trend == "improving":
        insights.append(
            PatternInsight(
                insight_id="improving-regularity",
                category="improving",
                title="Improving Regularity",
                description="Great news! Your cycles are becoming more regular over time.",
                icon="trending-up",
                confidence=85,
                recommendation="Whatever you're doing is working! Keep up your healthy habits.",
            )
        )

    # 4. Data volume
    if cycle_count >= cfg.strong_data_min_cycles:
        insights.append(
            PatternInsight(
                insight_id="strong-data",
                category="regular",
                title="Strong Pattern Data",
                description=(
                    f"With {cycle_count} cycles tracked, predictions are becoming more accurate."
                ),
                icon="database",
                confidence=90,
                recommendation="Your data is robust enough for reliable predictions and pattern analysis.",
            )
        )
    elif cycle_count >= cfg.building_data_min_cycles:
        insights.append(
            PatternInsight(
                insight_id="building-data",
                category="improving",
                title="Building Pattern Data",
                description=f"{cycle_count} cycles tracked. Keep going for even better insights!",
                icon="refresh",
                confidence=70,
                recommendation="Continue tracking for more accurate pattern recognition.",
            )
        )

    return insights
