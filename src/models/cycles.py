"""Pydantic request/response models for the cycle analysis endpoints."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from enum import Enum

from pydantic import Field, model_validator

from src.cycles.predictor import DayType
from src.models.base import BloomBase


# ---------- Enums ----------

class Regularity(str, Enum):
    very_regular = "very_regular"
    regular = "regular"
    somewhat_irregular = "somewhat_irregular"
    irregular = "irregular"


class Trend(str, Enum):
    stable = "stable"
    getting_shorter = "getting_shorter"
    getting_longer = "getting_longer"
    improving = "improving"


class InsightCategory(str, Enum):
    regular = "regular"
    irregular = "irregular"
    short = "short"
    long = "long"
    improving = "improving"


# ---------- Inputs ----------

class CycleIn(BloomBase):
    start_date: date
    end_date: date | None = None
    length: int | None = Field(default=None, ge=1)
    is_active: bool = True

    @model_validator(mode="after")
    def _end_not_before_start(self) -> CycleIn:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class DailyLogIn(BloomBase):
    date: dt.date
    water_intake: int = Field(default=0, ge=0)
    mood: str | None = None
    symptoms: list[str] = Field(default_factory=list)
    notes: str | None = None


class PredictionRequest(BloomBase):
    last_period_start: date
    average_cycle_length: int | None = None
    now: datetime | None = None


class CalendarRequest(PredictionRequest):
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    cycles: list[CycleIn] = Field(default_factory=list)


class PatternRequest(BloomBase):
    cycles: list[CycleIn]


class SummaryRequest(BloomBase):
    cycles: list[CycleIn] = Field(default_factory=list)
    daily_logs: list[DailyLogIn] = Field(default_factory=list)
    recent_window: int = Field(default=30, ge=1, le=365)
    top_n: int = Field(default=3, ge=1, le=20)


# ---------- Outputs ----------

class PredictionRead(BloomBase):
    next_period_date: date
    ovulation_date: date
    fertile_window_start: date
    fertile_window_end: date
    current_cycle_day: int
    days_until_period: int


class CalendarDayRead(BloomBase):
    date: dt.date
    day_type: DayType
    is_today: bool = False


class CalendarRead(BloomBase):
    year: int
    month: int
    prediction: PredictionRead
    days: list[CalendarDayRead]


class InsightRead(BloomBase):
    insight_id: str
    category: InsightCategory
    title: str
    description: str
    icon: str
    confidence: int = Field(ge=0, le=100)
    recommendation: str | None = None


class PatternRead(BloomBase):
    average_length: int
    variation: float
    regularity: Regularity
    trend: Trend
    insights: list[InsightRead]
    cycles_analyzed: int


class PatternResponse(BloomBase):
    show: bool
    confidence_level: str
    pattern: PatternRead | None = None


class SymptomCount(BloomBase):
    symptom: str
    count: int


class SummaryRead(BloomBase):
    average_cycle_length: int
    average_period_length: int
    average_water_intake: int
    top_symptoms: list[SymptomCount]
    longest_logging_streak: int
    complete_cycles: int
    logs_considered: int
