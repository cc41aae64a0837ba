"""Shared fixtures for cycle engine tests."""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path

import pytest

from src.cycles.config_loader import CycleConfig, load_cycle_config
from src.cycles.pattern_analysis import CycleRecord
from src.cycles.summary import DailyLog

# Fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Reference "today" used across prediction tests
TEST_DATE = date(2024, 1, 15)


def _cycle(raw: dict) -> CycleRecord:
    return CycleRecord(
        start_date=date.fromisoformat(raw["start_date"]),
        end_date=date.fromisoformat(raw["end_date"]) if raw.get("end_date") else None,
        length=raw.get("length"),
        is_active=raw.get("is_active", False),
    )


def make_cycles(lengths: list[int], start: date = date(2025, 1, 6)) -> list[CycleRecord]:
    """Build consecutive complete cycles with 5-day periods."""
    cycles = []
    for length in lengths:
        cycles.append(
            CycleRecord(
                start_date=start,
                end_date=start + timedelta(days=4),
                length=length,
                is_active=False,
            )
        )
        start += timedelta(days=length)
    return cycles


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real bundled cycle config for tests."""
    return load_cycle_config()


# ---------------------------------------------------------------------------
# JSON fixture loaders
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_history() -> dict:
    return json.loads((FIXTURES_DIR / "cycle_history.json").read_text())


@pytest.fixture
def regular_cycles(cycle_history: dict) -> list[CycleRecord]:
    return [_cycle(c) for c in cycle_history["regular_cycles"]]


@pytest.fixture
def irregular_cycles(cycle_history: dict) -> list[CycleRecord]:
    return [_cycle(c) for c in cycle_history["irregular_cycles"]]


@pytest.fixture
def daily_logs(cycle_history: dict) -> list[DailyLog]:
    return [
        DailyLog(
            date=date.fromisoformat(raw["date"]),
            water_intake=raw["water_intake"],
            mood=raw["mood"],
            symptoms=raw["symptoms"],
        )
        for raw in cycle_history["daily_logs"]
    ]
