"""Processing queue processor: pending payouts and pending notifications."""

from orchestration.collaborators import NOTIFICATIONS, PAYOUTS, get_collaborator
from scheduling.jobs import PROCESSING_QUEUE, JobName
from scheduling.processors.base import JobProcessor


class ProcessingProcessor(JobProcessor):
    queue_name = PROCESSING_QUEUE

    def __init__(self, payouts=None, notifications=None):
        self.payouts = payouts or get_collaborator(PAYOUTS)
        self.notifications = notifications or get_collaborator(NOTIFICATIONS)

    def handlers(self) -> dict:
        payouts = self.payouts.process_pending_payouts
        notifications = self.notifications.process_pending_notifications
        return {
            JobName.PROCESS_PENDING_PAYOUTS: payouts,
            JobName.PROCESS_PENDING_NOTIFICATIONS: notifications,
            JobName.manual("pending-payouts"): payouts,
            JobName.manual("pending-notifications"): notifications,
        }
