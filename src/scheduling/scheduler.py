"""Scheduler: enqueues periodic and manual jobs onto the three queues.

Enqueue failures are logged and re-raised; the scheduled-task runner logs
them and tries again on the next tick.
"""

from datetime import UTC, datetime

import structlog

from scheduling.jobs import (
    LEG_REMINDER_OPTIONS,
    MANUAL_OPTIONS,
    NOTIFICATION_PROCESSING_OPTIONS,
    PAYOUT_OPTIONS,
    PROCESSING_QUEUE,
    REMINDER_QUEUE,
    STATUS_UPDATE_OPTIONS,
    STATUS_UPDATE_QUEUE,
    TRIP_REMINDER_OPTIONS,
    JobName,
    ProcessingJobData,
    ReminderJobData,
    StatusUpdateJobData,
)
from scheduling.queue import Job, JobQueue

logger = structlog.get_logger(__name__)


class SchedulerService:
    def __init__(self, queues: dict[str, JobQueue]):
        missing = {REMINDER_QUEUE, STATUS_UPDATE_QUEUE, PROCESSING_QUEUE} - set(queues)
        if missing:
            raise ValueError(f"Missing queues: {', '.join(sorted(missing))}")
        self.queues = queues

    async def _enqueue(self, queue_name: str, job_name: str, data, options) -> Job:
        try:
            job = await self.queues[queue_name].add(job_name, data, options)
        except Exception as exc:
            logger.error("Failed to enqueue job", queue=queue_name, job_name=job_name, error=str(exc))
            raise
        logger.info("Job scheduled", queue=queue_name, job_name=job_name, job_id=job.id)
        return job

    # -------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------
    async def schedule_booking_leg_start_reminders(self) -> Job:
        return await self._enqueue(
            REMINDER_QUEUE,
            JobName.BOOKING_LEG_START_REMINDER,
            ReminderJobData(type="leg-start"),
            LEG_REMINDER_OPTIONS,
        )

    async def schedule_booking_leg_end_reminders(self) -> Job:
        return await self._enqueue(
            REMINDER_QUEUE,
            JobName.BOOKING_LEG_END_REMINDER,
            ReminderJobData(type="leg-end"),
            LEG_REMINDER_OPTIONS,
        )

    async def schedule_booking_start_reminders(self) -> Job:
        """Trip-level alias kept for callers of the old job name; processed as leg-start."""
        return await self._enqueue(
            REMINDER_QUEUE,
            JobName.BOOKING_START_REMINDER,
            ReminderJobData(type="trip-start"),
            TRIP_REMINDER_OPTIONS,
        )

    async def schedule_booking_end_reminders(self) -> Job:
        """Trip-level alias kept for callers of the old job name; processed as leg-end."""
        return await self._enqueue(
            REMINDER_QUEUE,
            JobName.BOOKING_END_REMINDER,
            ReminderJobData(type="trip-end"),
            TRIP_REMINDER_OPTIONS,
        )

    # -------------------------------------------------------------------
    # Status updates
    # -------------------------------------------------------------------
    async def schedule_confirmed_to_active_updates(self) -> Job:
        return await self._enqueue(
            STATUS_UPDATE_QUEUE,
            JobName.CONFIRMED_TO_ACTIVE,
            StatusUpdateJobData(type="confirmed-to-active"),
            STATUS_UPDATE_OPTIONS,
        )

    async def schedule_active_to_completed_updates(self) -> Job:
        return await self._enqueue(
            STATUS_UPDATE_QUEUE,
            JobName.ACTIVE_TO_COMPLETED,
            StatusUpdateJobData(type="active-to-completed"),
            STATUS_UPDATE_OPTIONS,
        )

    # -------------------------------------------------------------------
    # Processing
    # -------------------------------------------------------------------
    async def schedule_pending_payout_processing(self) -> Job:
        return await self._enqueue(
            PROCESSING_QUEUE,
            JobName.PROCESS_PENDING_PAYOUTS,
            ProcessingJobData(type="pending-payouts"),
            PAYOUT_OPTIONS,
        )

    async def schedule_pending_notification_processing(self) -> Job:
        return await self._enqueue(
            PROCESSING_QUEUE,
            JobName.PROCESS_PENDING_NOTIFICATIONS,
            ProcessingJobData(type="pending-notifications"),
            NOTIFICATION_PROCESSING_OPTIONS,
        )

    # -------------------------------------------------------------------
    # Manual triggers
    # -------------------------------------------------------------------
    async def trigger_manual_reminder_job(self, reminder_type) -> Job:
        data = ReminderJobData(type=reminder_type)
        return await self._enqueue(REMINDER_QUEUE, JobName.manual_reminder(data.type), data, MANUAL_OPTIONS)

    async def trigger_manual_status_update(self, update_type) -> Job:
        data = StatusUpdateJobData(type=update_type)
        return await self._enqueue(STATUS_UPDATE_QUEUE, JobName.manual(data.type), data, MANUAL_OPTIONS)

    async def trigger_manual_processing(self, processing_type) -> Job:
        data = ProcessingJobData(type=processing_type)
        return await self._enqueue(PROCESSING_QUEUE, JobName.manual(data.type), data, MANUAL_OPTIONS)

    # -------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------
    async def get_queue_stats(self) -> dict:
        queues = {}
        for name, queue in self.queues.items():
            counts = await queue.get_counts()
            queues[name] = {
                "waiting": counts.get("waiting", 0),
                "active": counts.get("active", 0),
                "completed": counts.get("completed", 0),
                "failed": counts.get("failed", 0),
                "delayed": counts.get("delayed", 0),
            }
        return {"timestamp": datetime.now(UTC).isoformat(), "queues": queues}
