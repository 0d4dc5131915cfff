"""Scheduled tasks: fire handlers on fixed intervals inside one event loop.

A handler that raises is logged and retried on its next tick; it never
stops the runner or the other tasks.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from scheduling.config import ScheduleSettings

logger = structlog.get_logger(__name__)


@dataclass
class ScheduledTask:
    name: str
    interval_seconds: float
    handler: Callable[[], Awaitable[object]]
    run_immediately: bool = False

    async def fire(self) -> bool:
        """Run the handler once; returns False when it raised."""
        try:
            await self.handler()
        except Exception as exc:
            logger.error("Scheduled task failed", task=self.name, error=str(exc))
            return False
        logger.debug("Scheduled task fired", task=self.name)
        return True


class TaskRunner:
    def __init__(self, tasks: list[ScheduledTask]):
        self.tasks = tasks

    async def _loop(self, task: ScheduledTask, stop: asyncio.Event) -> None:
        if task.run_immediately:
            await task.fire()
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=task.interval_seconds)
            except TimeoutError:
                await task.fire()

    async def run(self, stop: asyncio.Event) -> None:
        logger.info("Task runner started", tasks=[t.name for t in self.tasks])
        await asyncio.gather(*(self._loop(task, stop) for task in self.tasks))
        logger.info("Task runner stopped")


def build_scheduled_tasks(scheduler, schedule: ScheduleSettings) -> list[ScheduledTask]:
    """One task per enabled schedule entry, each enqueuing its job."""
    entries = [
        ("leg-start-reminders", schedule.leg_start_reminders, scheduler.schedule_booking_leg_start_reminders),
        ("leg-end-reminders", schedule.leg_end_reminders, scheduler.schedule_booking_leg_end_reminders),
        ("confirmed-to-active", schedule.confirmed_to_active, scheduler.schedule_confirmed_to_active_updates),
        ("active-to-completed", schedule.active_to_completed, scheduler.schedule_active_to_completed_updates),
        ("pending-payouts", schedule.pending_payouts, scheduler.schedule_pending_payout_processing),
        (
            "pending-notifications",
            schedule.pending_notifications,
            scheduler.schedule_pending_notification_processing,
        ),
    ]
    return [
        ScheduledTask(name=name, interval_seconds=settings.interval_seconds, handler=handler)
        for name, settings, handler in entries
        if settings.enabled
    ]
