"""Hydration and exercise reminder scheduling.

The scheduler owns its reminder loops as ``asyncio`` tasks and has an
explicit lifecycle: ``start()`` asks the notifier for permission and
schedules the loops, ``stop()`` cancels and awaits every task it owns.
There is no module-level instance; create one per user session and pass it
where it is needed.

Delivery is delegated to a ``Notifier`` (push service, websocket, browser
bridge, …) supplied by the caller.

Usage::

    scheduler = ReminderScheduler(notifier=push_notifier)
    async with scheduler:
        ...
        await scheduler.check_water_goal(water_intake=3000, goal_ml=3000)
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from src.cycles.config_loader import ReminderConfig, get_cycle_config

logger = logging.getLogger("bloom.cycles.reminders")

WATER = "water"
EXERCISE = "exercise"


@dataclass(frozen=True)
class Reminder:
    """A single notification to deliver.

    Attributes:
        kind:                'water', 'exercise' or 'goal'.
        title:               Notification title.
        body:                Notification text.
        tag:                 Replacement tag; a newer notice with the same
                             tag replaces the older one.
        require_interaction: Keep the notice on screen until dismissed.
    """

    kind: str
    title: str
    body: str
    tag: str
    require_interaction: bool = False


class Notifier(Protocol):
    """Delivers reminders to the user."""

    async def request_permission(self) -> bool: ...

    async def notify(self, reminder: Reminder) -> None: ...


GOAL_REACHED = Reminder(
    kind="goal",
    title="Hydration Goal Achieved!",
    body="Amazing! You've reached your water goal today! Keep up the great work!",
    tag="goal-reached",
    require_interaction=True,
)


class ReminderScheduler:
    """Schedule periodic hydration and exercise reminders."""

    def __init__(
        self,
        notifier: Notifier,
        config: ReminderConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            notifier: Delivery backend for reminders.
            config:   Intervals and message pools (defaults to the global config).
            rng:      Random source for message selection.
        """
        self._notifier = notifier
        self._config = config or get_cycle_config().reminders
        self._rng = rng or random.Random()
        self._tasks: dict[str, list[asyncio.Task]] = {WATER: [], EXERCISE: []}
        self._permission = False
        self._goal_notified_on: date | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return any(not t.done() for tasks in self._tasks.values() for t in tasks)

    async def start(self) -> bool:
        """Request permission and schedule both reminder loops.

        Returns:
            True if permission was granted and the loops were scheduled.
        """
        self._permission = await self._notifier.request_permission()
        if not self._permission:
            logger.info("Notification permission not granted; reminders disabled")
            return False
        self.schedule_water_reminders()
        self.schedule_exercise_reminders()
        return True

    async def stop(self) -> None:
        """Cancel every owned reminder loop and wait for it to finish."""
        tasks = [t for kind in self._tasks for t in self._tasks[kind]]
        self.clear_water_reminders()
        self.clear_exercise_reminders()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Reminder scheduler stopped (%d tasks cancelled)", len(tasks))

    async def __aenter__(self) -> ReminderScheduler:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule_water_reminders(self) -> None:
        self._schedule(
            WATER,
            self._config.water_interval_seconds,
            "Hydration Reminder",
            self._config.water_messages,
        )

    def schedule_exercise_reminders(self) -> None:
        self._schedule(
            EXERCISE,
            self._config.exercise_interval_seconds,
            "Exercise Reminder",
            self._config.exercise_messages,
        )

    def clear_water_reminders(self) -> None:
        self._cancel(WATER)

    def clear_exercise_reminders(self) -> None:
        self._cancel(EXERCISE)

    def _schedule(self, kind: str, interval: float, title: str, messages: list[str]) -> None:
        # Must be called from inside a running event loop
        self._cancel(kind)
        task = asyncio.get_running_loop().create_task(
            self._loop(kind, interval, title, messages), name=f"bloom-{kind}-reminders"
        )
        self._tasks[kind].append(task)
        logger.info("Scheduled %s reminders every %.0fs", kind, interval)

    def _cancel(self, kind: str) -> None:
        for task in self._tasks[kind]:
            task.cancel()
        self._tasks[kind] = []

    async def _loop(self, kind: str, interval: float, title: str, messages: list[str]) -> None:
        while True:
            await asyncio.sleep(interval)
            if not messages:
                continue
            reminder = Reminder(
                kind=kind,
                title=title,
                body=self._rng.choice(messages),
                tag=f"{kind}-reminder",
            )
            await self._deliver(reminder)

    async def _deliver(self, reminder: Reminder) -> bool:
        try:
            await self._notifier.notify(reminder)
        except Exception as exc:
            logger.warning("Failed to deliver %s reminder: %s", reminder.kind, exc)
            return False
        logger.debug("Delivered %s reminder: %s", reminder.kind, reminder.body)
        return True

    # ------------------------------------------------------------------
    # Goal notification
    # ------------------------------------------------------------------

    async def check_water_goal(
        self, water_intake: int, goal_ml: int, today: date | None = None
    ) -> bool:
        """Send the goal-reached notice once per day when the goal is met.

        Args:
            water_intake: Water logged today.
            goal_ml:      Daily goal, same unit as water_intake.
            today:        Calendar day the intake belongs to.

        Returns:
            True if a notice was sent.
        """
        today = today or date.today()
        if water_intake <= 0 or water_intake < goal_ml:
            return False
        if self._goal_notified_on == today:
            return False
        if not self._permission:
            logger.debug("Cannot show goal notice - permission not granted")
            return False

        sent = await self._deliver(GOAL_REACHED)
        if sent:
            self._goal_notified_on = today
        return sent
