"""Headline statistics for the insights screen.

Combines complete cycles with recent daily logs into the numbers shown on
the insights page: average cycle and period length, average water intake,
the most frequent symptoms, and the longest run of days with something
logged.
"""

from __future__ import annotations

import logging
import statistics
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from src.cycles.pattern_analysis import CycleRecord, complete_cycles, round_half_up

logger = logging.getLogger("bloom.cycles.summary")

DEFAULT_CYCLE_LENGTH = 28
DEFAULT_PERIOD_LENGTH = 5


@dataclass
class DailyLog:
    """One day of self-reported tracking data.

    Attributes:
        date:         Calendar date of the entry.
        water_intake: Glasses / units of water logged.
        mood:         Free-form mood label.
        symptoms:     Symptom keys (e.g. 'cramps', 'headache').
        notes:        Free-text notes.
    """

    date: date
    water_intake: int = 0
    mood: str | None = None
    symptoms: list[str] = field(default_factory=list)
    notes: str | None = None

    @property
    def has_entry(self) -> bool:
        return bool(self.symptoms) or bool(self.mood)


@dataclass
class CycleSummary:
    """Display-ready statistics.

    Attributes:
        average_cycle_length:   Rounded mean of complete-cycle lengths.
        average_period_length:  Rounded mean bleeding duration in days.
        average_water_intake:   Rounded mean over the recent log window.
        top_symptoms:           (symptom, count) pairs, most frequent first.
        longest_logging_streak: Longest run of consecutive logs with a
                                symptom or mood.
        complete_cycles:        Number of complete cycles used.
        logs_considered:        Number of daily logs in the window.
    """

    average_cycle_length: int
    average_period_length: int
    average_water_intake: int
    top_symptoms: list[tuple[str, int]] = field(default_factory=list)
    longest_logging_streak: int = 0
    complete_cycles: int = 0
    logs_considered: int = 0


def _period_days(cycle: CycleRecord) -> int:
    # complete cycles always carry an end date
    return (cycle.end_date - cycle.start_date).days


def longest_streak(logs: Sequence[DailyLog]) -> int:
    best = current = 0
    for log in logs:
        if log.has_entry:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def summarize(
    cycles: Iterable[CycleRecord],
    daily_logs: Sequence[DailyLog],
    recent_window: int = 30,
    top_n: int = 3,
) -> CycleSummary:
    """Compute the insights-page statistics.

    Args:
        cycles:        Cycle records in any order.
        daily_logs:    Daily logs, newest first.
        recent_window: How many of the newest logs to consider.
        top_n:         How many symptoms to report.

    Returns:
        CycleSummary with defaults (28 / 5 / 0) where there is no data.
    """
    complete = complete_cycles(cycles)
    recent = list(daily_logs[:recent_window])

    if complete:
        avg_cycle = int(round_half_up(statistics.fmean(c.length for c in complete)))
        avg_period = int(round_half_up(statistics.fmean(_period_days(c) for c in complete)))
    else:
        avg_cycle = DEFAULT_CYCLE_LENGTH
        avg_period = DEFAULT_PERIOD_LENGTH

    if recent:
        avg_water = int(round_half_up(statistics.fmean(log.water_intake or 0 for log in recent)))
    else:
        avg_water = 0

    # Counter.most_common keeps first-seen order among equal counts
    counts: Counter[str] = Counter()
    for log in recent:
        counts.update(log.symptoms)

    summary = CycleSummary(
        average_cycle_length=avg_cycle,
        average_period_length=avg_period,
        average_water_intake=avg_water,
        top_symptoms=counts.most_common(top_n),
        longest_logging_streak=longest_streak(recent),
        complete_cycles=len(complete),
        logs_considered=len(recent),
    )
    logger.debug(
        "Summary over %d complete cycles and %d logs", summary.complete_cycles, summary.logs_considered
    )
    return summary
