"""Operational endpoints: manual job triggers and queue statistics.

The scheduler instance is read from ``app.state.scheduler``.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from scheduling.api.schemas import JobScheduledResponse, QueueStatsResponse
from scheduling.jobs import ProcessingType, ReminderType, StatusUpdateType
from scheduling.queue import Job
from scheduling.scheduler import SchedulerService

router = APIRouter(prefix="/operations", tags=["operations"])


def get_scheduler(request: Request) -> SchedulerService:
    return request.app.state.scheduler


def _scheduled(job: Job, label: str) -> JobScheduledResponse:
    return JobScheduledResponse(
        job_id=job.id,
        queue=job.queue,
        job_name=job.name,
        message=f"{label} job scheduled",
    )


@router.post("/reminders/{reminder_type}", response_model=JobScheduledResponse, status_code=202)
async def trigger_reminders(
    reminder_type: ReminderType,
    scheduler: SchedulerService = Depends(get_scheduler),
) -> JobScheduledResponse:
    """Enqueue a one-off reminder scan at manual priority."""
    try:
        job = await scheduler.trigger_manual_reminder_job(reminder_type)
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Failed to schedule job: {e}")
    return _scheduled(job, "Reminder")


@router.post("/status-updates/{update_type}", response_model=JobScheduledResponse, status_code=202)
async def trigger_status_update(
    update_type: StatusUpdateType,
    scheduler: SchedulerService = Depends(get_scheduler),
) -> JobScheduledResponse:
    try:
        job = await scheduler.trigger_manual_status_update(update_type)
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Failed to schedule job: {e}")
    return _scheduled(job, "Status update")


@router.post("/processing/{processing_type}", response_model=JobScheduledResponse, status_code=202)
async def trigger_processing(
    processing_type: ProcessingType,
    scheduler: SchedulerService = Depends(get_scheduler),
) -> JobScheduledResponse:
    try:
        job = await scheduler.trigger_manual_processing(processing_type)
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Failed to schedule job: {e}")
    return _scheduled(job, "Processing")


@router.get("/queues", response_model=QueueStatsResponse)
async def queue_stats(scheduler: SchedulerService = Depends(get_scheduler)) -> QueueStatsResponse:
    return QueueStatsResponse.model_validate(await scheduler.get_queue_stats())
