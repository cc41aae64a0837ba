"""Stateless cycle analysis endpoints.

Callers post their stored cycles / daily logs; nothing is persisted here.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter

from src.cycles.pattern_analysis import (
    CycleRecord,
    analyze_pattern,
    complete_cycles,
    pattern_confidence_level,
)
from src.cycles.predictor import build_calendar_month, compute_predictions, expand_period_dates
from src.cycles.summary import DailyLog, summarize
from src.dependencies import CycleSettings
from src.models.cycles import (
    CalendarRead,
    CalendarRequest,
    CycleIn,
    PatternRequest,
    PatternResponse,
    PredictionRead,
    PredictionRequest,
    SummaryRead,
    SummaryRequest,
)

router = APIRouter(prefix="/cycles", tags=["cycles"])
logger = logging.getLogger("bloom.routers.cycles")


def _records(cycles: list[CycleIn]) -> list[CycleRecord]:
    return [CycleRecord(**c.model_dump()) for c in cycles]


@router.post("/predictions", response_model=PredictionRead)
async def predictions(body: PredictionRequest, config: CycleSettings) -> Any:
    prediction = compute_predictions(
        body.last_period_start,
        body.average_cycle_length,
        now=body.now,
        config=config.prediction,
    )
    return asdict(prediction)


@router.post("/calendar", response_model=CalendarRead)
async def calendar_month(body: CalendarRequest, config: CycleSettings) -> Any:
    prediction = compute_predictions(
        body.last_period_start,
        body.average_cycle_length,
        now=body.now,
        config=config.prediction,
    )
    period_days = expand_period_dates(_records(body.cycles))
    today = body.now.date() if body.now else None
    days = build_calendar_month(
        body.year, body.month, prediction, period_days, today=today, config=config.prediction
    )
    return {
        "year": body.year,
        "month": body.month,
        "prediction": asdict(prediction),
        "days": [asdict(d) for d in days],
    }


@router.post("/patterns", response_model=PatternResponse)
async def patterns(body: PatternRequest, config: CycleSettings) -> Any:
    records = _records(body.cycles)
    pattern = analyze_pattern(records, config=config.pattern)
    count = len(complete_cycles(records))
    logger.debug("Pattern request: %d cycles, %d complete", len(records), count)
    return {
        "show": pattern is not None,
        "confidence_level": pattern_confidence_level(count),
        "pattern": asdict(pattern) if pattern else None,
    }


@router.post("/summary", response_model=SummaryRead)
async def summary(body: SummaryRequest) -> Any:
    result = summarize(
        _records(body.cycles),
        [DailyLog(**log.model_dump()) for log in body.daily_logs],
        recent_window=body.recent_window,
        top_n=body.top_n,
    )
    data = asdict(result)
    data["top_symptoms"] = [{"symptom": s, "count": n} for s, n in result.top_symptoms]
    return data
