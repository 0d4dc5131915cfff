"""Booking status updates and the new-booking alert for fleet owners."""

from notifications.notification.notification import NotificationType
from notifications.notification.recipient import RecipientRole
from notifications.templates.base import NotificationTemplate


class _StatusUpdateTemplate(NotificationTemplate):
    notification_type = NotificationType.BOOKING_STATUS_UPDATE

    def render_subject(self, context: dict) -> str:
        return f"Your booking has been {context.get('status', 'updated').lower()}"


class CustomerStatusUpdateTemplate(_StatusUpdateTemplate):
    role = RecipientRole.CUSTOMER
    body = """\
        Dear {{recipientName}},

        Your booking status has been updated to: {{status}}

        Booking Details:
        - Reference: {{bookingReference}}
        - Vehicle: {{carName}}
        - Start: {{startDate}}
        - End: {{endDate}}
        - Pickup: {{pickupLocation}}
        - Return: {{returnLocation}}

        Thank you for choosing Hyre.

        Best regards,
        The Hyre Team
        """


class ChauffeurStatusUpdateTemplate(_StatusUpdateTemplate):
    role = RecipientRole.CHAUFFEUR
    body = """\
        Dear {{recipientName}},

        Booking {{bookingReference}} has been updated to: {{status}}

        Customer: {{customerName}}
        Vehicle: {{carName}}
        Start: {{startDate}}
        End: {{endDate}}
        Pickup: {{pickupLocation}}

        Best regards,
        The Hyre Team
        """


class FleetOwnerStatusUpdateTemplate(_StatusUpdateTemplate):
    role = RecipientRole.FLEET_OWNER
    body = """\
        Dear {{recipientName}},

        Booking {{bookingReference}} for your vehicle {{carName}} has been updated to: {{status}}

        Customer: {{customerName}}
        Start: {{startDate}}
        End: {{endDate}}

        Best regards,
        The Hyre Team
        """


class FleetOwnerBookingAlertTemplate(NotificationTemplate):
    notification_type = NotificationType.FLEET_OWNER_BOOKING_ALERT
    role = RecipientRole.FLEET_OWNER
    subject = "New Booking Alert"
    body = """\
        Dear {{fleetOwnerName}},

        You have a new booking for your vehicle!

        Booking Details:
        - Reference: {{bookingReference}}
        - Vehicle: {{carName}}
        - Customer: {{customerName}}
        - Start: {{startDate}}
        - End: {{endDate}}
        - Pickup: {{pickupLocation}}
        - Return: {{returnLocation}}

        Please ensure your vehicle is ready for the booking period.

        Best regards,
        The Hyre Team
        """
