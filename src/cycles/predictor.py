"""Calendar-based menstrual cycle prediction.

Given the start of the last period and an average cycle length, predicts:
- Next period start date
- Ovulation date (a fixed luteal phase before the next period)
- Fertile window (5 days before ovulation to 1 day after)
- Current cycle day and days until the next period

It also labels calendar days as ``period``, ``fertile``, ``predicted`` or
``normal`` for calendar rendering.

Every function here is pure.  "Now" is an explicit parameter that defaults
to the wall clock, so results are deterministic under test.
"""

from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, Protocol

from src.cycles.config_loader import PredictionConfig, get_cycle_config

logger = logging.getLogger("bloom.cycles.predictor")

_SECONDS_PER_DAY = 86400


class InvalidCycleInput(ValueError):
    """Raised when prediction inputs are outside their documented domain."""


class DayType(str, Enum):
    period = "period"
    fertile = "fertile"
    predicted = "predicted"
    normal = "normal"


class PeriodSource(Protocol):
    """Anything shaped like a stored cycle record."""

    start_date: date
    end_date: date | None


@dataclass(frozen=True)
class CyclePrediction:
    """Prediction for the cycle containing "now".

    Attributes:
        next_period_date:     Predicted start of the next period.
        ovulation_date:       next_period_date minus the luteal phase.
        fertile_window_start: First fertile day (inclusive).
        fertile_window_end:   Last fertile day (inclusive).
        current_cycle_day:    1-indexed day within the current cycle.
        days_until_period:    Whole days until next_period_date, rounded up;
                              always at least 1.
    """

    next_period_date: date
    ovulation_date: date
    fertile_window_start: date
    fertile_window_end: date
    current_cycle_day: int
    days_until_period: int


@dataclass(frozen=True)
class CalendarDay:
    """One classified day of a calendar month."""

    date: date
    day_type: DayType
    is_today: bool = False


def _as_datetime(value: date | datetime) -> datetime:
    """Return a naive datetime; plain dates are read as local midnight."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def compute_predictions(
    last_period_start: date | datetime,
    average_cycle_length: int | None = None,
    now: date | datetime | None = None,
    config: PredictionConfig | None = None,
) -> CyclePrediction:
    """Predict the next period, ovulation and fertile window.

    Args:
        last_period_start:    First day of the most recent logged period.
        average_cycle_length: Cycle length in days (default from config, 28).
        now:                  Evaluation instant (defaults to the wall clock).
        config:               Prediction constants (defaults to the global config).

    Returns:
        CyclePrediction for the cycle containing ``now``.

    Raises:
        InvalidCycleInput: If average_cycle_length is not a positive integer.
    """
    cfg = config or get_cycle_config().prediction
    length = cfg.default_cycle_length if average_cycle_length is None else average_cycle_length
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidCycleInput(
            f"average_cycle_length must be a positive integer, got {length!r}"
        )

    start = _as_date(last_period_start)
    current = _as_datetime(now if now is not None else datetime.now())
    elapsed = (current - datetime.combine(start, time.min)).total_seconds()
    days_diff = math.floor(elapsed / _SECONDS_PER_DAY)

    if days_diff < 0:
        # start date in the future counts as day 1
        logger.debug("last_period_start %s is after now %s; clamping", start, current)
        days_diff = 0

    current_cycle_day = (days_diff % length) + 1

    next_period = start + timedelta(days=length)
    if days_diff >= length:
        cycles_passed = days_diff // length
        next_period = start + timedelta(days=(cycles_passed + 1) * length)

    remaining = (datetime.combine(next_period, time.min) - current).total_seconds()
    days_until_period = math.ceil(remaining / _SECONDS_PER_DAY)

    ovulation = next_period - timedelta(days=cfg.luteal_phase_days)

    return CyclePrediction(
        next_period_date=next_period,
        ovulation_date=ovulation,
        fertile_window_start=ovulation - timedelta(days=cfg.fertile_days_before_ovulation),
        fertile_window_end=ovulation + timedelta(days=cfg.fertile_days_after_ovulation),
        current_cycle_day=current_cycle_day,
        days_until_period=days_until_period,
    )


def classify_day(
    day: date | datetime,
    prediction: CyclePrediction,
    known_period_dates: Iterable[date | datetime],
    config: PredictionConfig | None = None,
) -> DayType:
    """Label a calendar day for display.

    Rules are evaluated in priority order, first match wins:

    1. A logged period day                            → period
    2. Inside the fertile window (inclusive)          → fertile
    3. Within the predicted period after next_period  → predicted
    4. Anything else                                  → normal

    Time of day is ignored everywhere.

    Args:
        day:                Date to classify.
        prediction:         Result of ``compute_predictions``.
        known_period_dates: Logged period days.
        config:             Prediction constants (defaults to the global config).

    Returns:
        The DayType for ``day``.
    """
    cfg = config or get_cycle_config().prediction
    target = _as_date(day)

    if any(_as_date(d) == target for d in known_period_dates):
        return DayType.period

    if prediction.fertile_window_start <= target <= prediction.fertile_window_end:
        return DayType.fertile

    predicted_end = prediction.next_period_date + timedelta(days=cfg.predicted_period_days)
    if prediction.next_period_date <= target <= predicted_end:
        return DayType.predicted

    return DayType.normal


def expand_period_dates(cycles: Iterable[PeriodSource]) -> set[date]:
    """Return every logged bleeding day across ``cycles``.

    The start date is always included; when an end date is known, every day
    from start to end (inclusive) is included as well.
    """
    days: set[date] = set()
    for cycle in cycles:
        days.add(cycle.start_date)
        if cycle.end_date is None:
            continue
        d = cycle.start_date
        while d <= cycle.end_date:
            days.add(d)
            d += timedelta(days=1)
    return days


def build_calendar_month(
    year: int,
    month: int,
    prediction: CyclePrediction | None,
    known_period_dates: Iterable[date],
    today: date | None = None,
    config: PredictionConfig | None = None,
) -> list[CalendarDay]:
    """Classify every day of one calendar month.

    Without a prediction (no active cycle) every day is ``normal``.
    """
    today = today or date.today()
    period_days = set(known_period_dates)
    _, days_in_month = calendar.monthrange(year, month)

    days = []
    for n in range(1, days_in_month + 1):
        d = date(year, month, n)
        if prediction is None:
            day_type = DayType.normal
        else:
            day_type = classify_day(d, prediction, period_days, config=config)
        days.append(CalendarDay(date=d, day_type=day_type, is_today=d == today))
    return days
