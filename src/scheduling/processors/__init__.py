from scheduling.processors.processing import ProcessingProcessor
from scheduling.processors.reminder import ReminderProcessor
from scheduling.processors.status_update import StatusUpdateProcessor

__all__ = ["ProcessingProcessor", "ReminderProcessor", "StatusUpdateProcessor"]
