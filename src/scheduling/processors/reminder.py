"""Reminder queue processor.

Trip-level job names route to the same leg reminder scan as their leg-level
counterparts.
"""

from orchestration.leg_reminders import LegReminderScanner
from scheduling.jobs import REMINDER_QUEUE, JobName
from scheduling.processors.base import JobProcessor


class ReminderProcessor(JobProcessor):
    queue_name = REMINDER_QUEUE

    def __init__(self, leg_reminders: LegReminderScanner | None = None):
        self.leg_reminders = leg_reminders or LegReminderScanner()

    def handlers(self) -> dict:
        start = self.leg_reminders.process_leg_start_reminders
        end = self.leg_reminders.process_leg_end_reminders
        return {
            JobName.BOOKING_LEG_START_REMINDER: start,
            JobName.BOOKING_LEG_END_REMINDER: end,
            JobName.manual_reminder("leg-start"): start,
            JobName.manual_reminder("leg-end"): end,
            JobName.BOOKING_START_REMINDER: start,
            JobName.BOOKING_END_REMINDER: end,
            JobName.manual_reminder("trip-start"): start,
            JobName.manual_reminder("trip-end"): end,
        }
