"""Booking leg reminders: sent about an hour before a leg starts or ends."""

from notifications.notification.notification import NotificationType
from notifications.notification.recipient import RecipientRole
from notifications.templates.base import NotificationTemplate


class CustomerLegStartReminderTemplate(NotificationTemplate):
    notification_type = NotificationType.BOOKING_LEG_START_REMINDER
    role = RecipientRole.CUSTOMER
    subject = "Booking Leg Reminder - Your service leg starts in approximately 1 hour"
    body = """\
        Dear {{customerName}},

        This is a reminder that your next service leg is starting in approximately 1 hour.

        Pickup: {{pickupLocation}} at {{legStartTime}}
        Duration: Until {{legEndTime}}
        Vehicle: {{carName}}
        Chauffeur: {{chauffeurName}}

        Please be ready.

        Best regards,
        The Hyre Team
        """


class ChauffeurLegStartReminderTemplate(NotificationTemplate):
    notification_type = NotificationType.BOOKING_LEG_START_REMINDER
    role = RecipientRole.CHAUFFEUR
    subject = "Booking Leg Reminder - You have a service leg starting in approximately 1 hour"
    body = """\
        Dear {{chauffeurName}},

        This is a reminder that you have a service leg starting in approximately 1 hour.

        Customer: {{customerName}}
        Vehicle: {{carName}}
        Pickup: {{pickupLocation}} at {{legStartTime}}
        Duration: Until {{legEndTime}}

        Best regards,
        The Hyre Team
        """


class CustomerLegEndReminderTemplate(NotificationTemplate):
    notification_type = NotificationType.BOOKING_LEG_END_REMINDER
    role = RecipientRole.CUSTOMER
    subject = "Booking Reminder - Your service ends in approximately 1 hour"
    body = """\
        Dear {{customerName}},

        This is a reminder that today's service with {{carName}} is ending in approximately 1 hour.

        Drop-off: {{returnLocation}} at {{legEndTime}}
        Chauffeur: {{chauffeurName}}

        Best regards,
        The Hyre Team
        """


class ChauffeurLegEndReminderTemplate(NotificationTemplate):
    notification_type = NotificationType.BOOKING_LEG_END_REMINDER
    role = RecipientRole.CHAUFFEUR
    subject = "Booking Reminder - Your service ends in approximately 1 hour"
    body = """\
        Dear {{chauffeurName}},

        This is a reminder that your current service leg is ending in approximately 1 hour.

        Customer: {{customerName}}
        Vehicle: {{carName}}
        Please ensure the vehicle is returned to {{returnLocation}} by {{legEndTime}}.

        Best regards,
        The Hyre Team
        """
