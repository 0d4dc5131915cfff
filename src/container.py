"""Composition root: builds the queues, workers and scheduled tasks.

Booking and notification state lives in the ``hyre`` domain's repositories.
The orchestration handlers find their collaborators through
``orchestration.collaborators``; the container installs its own there so a
deployment can swap the in-memory adapters for real ones.
"""

from dataclasses import dataclass, field

from booking.booking.lifecycle import BookingLifecycleService
from hyre.domain import init_domain
from notifications.channel import EMAIL, SMS, get_channel
from notifications.notification.service import NotificationService
from orchestration.adapters import InMemoryDirectory, InMemoryOtpStore, InMemoryPayoutService
from orchestration.collaborators import configure
from orchestration.leg_reminders import LegReminderScanner
from scheduling.config import Settings
from scheduling.jobs import QUEUE_NAMES
from scheduling.processors import ProcessingProcessor, ReminderProcessor, StatusUpdateProcessor
from scheduling.queue import InMemoryJobQueue, JobQueue
from scheduling.scheduler import SchedulerService
from scheduling.triggers import ScheduledTask, build_scheduled_tasks
from scheduling.worker import QueueWorker


@dataclass
class Container:
    settings: Settings = field(default_factory=Settings)
    directory: InMemoryDirectory = field(default_factory=InMemoryDirectory)
    otp_store: InMemoryOtpStore = field(default_factory=InMemoryOtpStore)
    email_sender: object = None
    sms_sender: object = None

    def __post_init__(self):
        self.domain = init_domain()

        self.email_sender = self.email_sender or get_channel(EMAIL)
        self.sms_sender = self.sms_sender or get_channel(SMS)
        self.notifications = NotificationService(self.email_sender, self.sms_sender)
        self.payouts = InMemoryPayoutService()
        self.lifecycle = BookingLifecycleService()

        configure(
            profiles=self.directory,
            fleet=self.directory,
            payouts=self.payouts,
            otp_store=self.otp_store,
            notifications=self.notifications,
        )

        self.queues: dict[str, JobQueue] = {
            name: InMemoryJobQueue(
                name,
                keep_completed=self.settings.queue_keep_completed,
                keep_failed=self.settings.queue_keep_failed,
            )
            for name in QUEUE_NAMES
        }
        self.scheduler = SchedulerService(self.queues)

    def workers(self) -> list[QueueWorker]:
        processors = [
            ReminderProcessor(LegReminderScanner(window_minutes=self.settings.reminder_window_minutes)),
            StatusUpdateProcessor(self.lifecycle),
            ProcessingProcessor(self.payouts, self.notifications),
        ]
        poll = self.settings.worker_poll_interval
        return [QueueWorker(self.queues[p.queue_name], p, poll_interval=poll) for p in processors]

    def scheduled_tasks(self) -> list[ScheduledTask]:
        return build_scheduled_tasks(self.scheduler, self.settings.schedule)
