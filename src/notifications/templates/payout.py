"""Payout notifications for fleet owners."""

from notifications.notification.notification import NotificationType
from notifications.notification.recipient import RecipientRole
from notifications.templates.base import NotificationTemplate


class PayoutCompletedTemplate(NotificationTemplate):
    notification_type = NotificationType.PAYOUT_COMPLETED
    role = RecipientRole.FLEET_OWNER
    subject = "Your Hyre payout has been sent"
    body = """\
        Dear {{fleetOwnerName}},

        We've sent {{currency}} {{amount}} to your bank account.

        Payout reference: {{payoutId}}
        Booking: {{bookingReference}}

        Best regards,
        The Hyre Team
        """


class PayoutFailedTemplate(NotificationTemplate):
    notification_type = NotificationType.PAYOUT_FAILED
    role = RecipientRole.FLEET_OWNER
    subject = "Action needed: your Hyre payout could not be completed"
    body = """\
        Dear {{fleetOwnerName}},

        We couldn't complete your payout of {{currency}} {{amount}}.

        Payout reference: {{payoutId}}
        Reason: {{failureReason}}

        Please contact support to resolve this issue.

        Best regards,
        The Hyre Team
        """
