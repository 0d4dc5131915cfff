"""Status update queue processor: runs the booking lifecycle scans.

The activation job also starts the legs of active bookings whose start
time has passed, so multi-day bookings move leg by leg on the hourly scan.
"""

from booking.booking.lifecycle import BookingLifecycleService
from scheduling.jobs import STATUS_UPDATE_QUEUE, JobName
from scheduling.processors.base import JobProcessor


class StatusUpdateProcessor(JobProcessor):
    queue_name = STATUS_UPDATE_QUEUE

    def __init__(self, lifecycle: BookingLifecycleService | None = None):
        self.lifecycle = lifecycle or BookingLifecycleService()

    def activate(self) -> str:
        activated = self.lifecycle.process_activations()
        started = self.lifecycle.process_leg_starts()
        return f"Activated {activated} booking(s), started {started} leg(s)"

    def complete(self) -> str:
        count = self.lifecycle.process_completions()
        return f"Completed {count} booking(s)"

    def handlers(self) -> dict:
        return {
            JobName.CONFIRMED_TO_ACTIVE: self.activate,
            JobName.ACTIVE_TO_COMPLETED: self.complete,
            JobName.manual("confirmed-to-active"): self.activate,
            JobName.manual("active-to-completed"): self.complete,
        }
