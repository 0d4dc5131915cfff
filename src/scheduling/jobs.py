"""Job names, payloads and enqueue options.

Payloads carry only a type tag and an enqueue timestamp; processors always
re-read current state instead of trusting data captured at enqueue time.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Queues
# ---------------------------------------------------------------------------
REMINDER_QUEUE = "reminder-emails"
STATUS_UPDATE_QUEUE = "status-updates"
PROCESSING_QUEUE = "processing-jobs"

QUEUE_NAMES = (REMINDER_QUEUE, STATUS_UPDATE_QUEUE, PROCESSING_QUEUE)


# ---------------------------------------------------------------------------
# Job names
# ---------------------------------------------------------------------------
class JobName:
    BOOKING_LEG_START_REMINDER = "booking-leg-start-reminder"
    BOOKING_LEG_END_REMINDER = "booking-leg-end-reminder"
    BOOKING_START_REMINDER = "booking-start-reminder"
    BOOKING_END_REMINDER = "booking-end-reminder"
    CONFIRMED_TO_ACTIVE = "confirmed-to-active"
    ACTIVE_TO_COMPLETED = "active-to-completed"
    PROCESS_PENDING_PAYOUTS = "process-pending-payouts"
    PROCESS_PENDING_NOTIFICATIONS = "process-pending-notifications"

    @staticmethod
    def manual_reminder(reminder_type: str) -> str:
        return f"manual-{reminder_type}-reminder"

    @staticmethod
    def manual(job_type: str) -> str:
        return f"manual-{job_type}"


def _now() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------
ReminderType = Literal["trip-start", "trip-end", "leg-start", "leg-end"]
StatusUpdateType = Literal["confirmed-to-active", "active-to-completed"]
ProcessingType = Literal["pending-payouts", "pending-notifications"]


class JobData(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_now)


class ReminderJobData(JobData):
    type: ReminderType


class StatusUpdateJobData(JobData):
    type: StatusUpdateType


class ProcessingJobData(JobData):
    type: ProcessingType


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------
class BackoffType(Enum):
    EXPONENTIAL = "exponential"
    FIXED = "fixed"


class Backoff(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: BackoffType = BackoffType.EXPONENTIAL
    delay_ms: int

    def delay_for(self, retry_number: int) -> float:
        """Seconds to wait before retry ``retry_number`` (1 = first retry)."""
        if self.type == BackoffType.FIXED:
            return self.delay_ms / 1000
        return self.delay_ms * 2 ** (retry_number - 1) / 1000


class JobOptions(BaseModel):
    """Lower ``priority`` runs first. ``attempts`` None means a single attempt."""

    model_config = ConfigDict(frozen=True)

    priority: int
    attempts: int | None = None
    backoff: Backoff | None = None

    @property
    def max_attempts(self) -> int:
        return self.attempts or 1


def exponential(priority: int, attempts: int, delay_ms: int) -> JobOptions:
    return JobOptions(priority=priority, attempts=attempts, backoff=Backoff(delay_ms=delay_ms))


LEG_REMINDER_OPTIONS = exponential(priority=10, attempts=3, delay_ms=2000)
TRIP_REMINDER_OPTIONS = exponential(priority=8, attempts=3, delay_ms=2000)
STATUS_UPDATE_OPTIONS = exponential(priority=15, attempts=3, delay_ms=2000)
PAYOUT_OPTIONS = exponential(priority=20, attempts=5, delay_ms=5000)
NOTIFICATION_PROCESSING_OPTIONS = exponential(priority=25, attempts=3, delay_ms=2000)
MANUAL_OPTIONS = JobOptions(priority=30)
