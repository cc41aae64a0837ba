"""Tests for insights-page summary statistics."""

from __future__ import annotations

from datetime import date, timedelta

from src.cycles.pattern_analysis import CycleRecord
from src.cycles.summary import DailyLog, longest_streak, summarize


def make_log(d: date, **kwargs) -> DailyLog:
    return DailyLog(date=d, **kwargs)


class TestSummarize:
    def test_fixture_summary(
        self, regular_cycles: list[CycleRecord], daily_logs: list[DailyLog]
    ) -> None:
        summary = summarize(regular_cycles, daily_logs)
        assert summary.complete_cycles == 6
        assert summary.average_cycle_length == 28
        assert summary.average_period_length == 4
        assert summary.average_water_intake == 7  # 6.5 rounds up
        assert summary.top_symptoms == [("cramps", 3), ("bloating", 2), ("fatigue", 1)]
        assert summary.longest_logging_streak == 3
        assert summary.logs_considered == 6

    def test_defaults_without_data(self) -> None:
        summary = summarize([], [])
        assert summary.average_cycle_length == 28
        assert summary.average_period_length == 5
        assert summary.average_water_intake == 0
        assert summary.top_symptoms == []
        assert summary.longest_logging_streak == 0

    def test_only_complete_cycles_count(self) -> None:
        cycles = [
            CycleRecord(date(2025, 1, 1), date(2025, 1, 6), 30),
            CycleRecord(date(2025, 1, 31), None, 26),
            CycleRecord(date(2025, 2, 26)),
        ]
        summary = summarize(cycles, [])
        assert summary.complete_cycles == 1
        assert summary.average_cycle_length == 30
        assert summary.average_period_length == 5

    def test_recent_window_limits_logs(self) -> None:
        start = date(2025, 3, 31)
        logs = [
            make_log(start - timedelta(days=i), water_intake=10 if i < 30 else 0, symptoms=["acne"])
            for i in range(45)
        ]
        summary = summarize([], logs)
        assert summary.logs_considered == 30
        assert summary.average_water_intake == 10
        assert summary.top_symptoms == [("acne", 30)]

    def test_top_n(self, daily_logs: list[DailyLog]) -> None:
        summary = summarize([], daily_logs, top_n=1)
        assert summary.top_symptoms == [("cramps", 3)]


class TestLongestStreak:
    def test_mood_or_symptom_counts_as_entry(self) -> None:
        d = date(2025, 1, 1)
        logs = [
            make_log(d, mood="happy"),
            make_log(d, symptoms=["cramps"]),
            make_log(d, water_intake=8),
            make_log(d, mood="calm"),
        ]
        assert longest_streak(logs) == 2

    def test_empty(self) -> None:
        assert longest_streak([]) == 0
