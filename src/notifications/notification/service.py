"""Delivery pipeline: build, persist, send and record every notification.

Each ``send_*`` method runs factory → save → deliver for every notification
it builds and returns a human-readable summary. The first delivery or
persistence failure propagates to the caller; notifications already sent
in the same call stay sent.

Batch maintenance (``process_pending_notifications`` and
``retry_failed_notifications``) delivers items independently and reports
all failures together in one ``BatchProcessingError``.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from notifications.channel import EMAIL, SMS, get_channel
from notifications.channel.email_port import EmailPort
from notifications.channel.messages import EmailRequest, SmsRequest
from notifications.channel.sms_port import SMSPort
from notifications.notification.errors import (
    BatchProcessingError,
    EmailDeliveryError,
    NotificationError,
    SmsDeliveryError,
)
from notifications.notification.factory import NotificationFactory
from notifications.notification.notification import Notification
from notifications.notification.payloads import (
    BookingLegReminderData,
    BookingStatusUpdateData,
    FleetOwnerApprovalData,
    FleetOwnerBookingAlertData,
    LoginConfirmationData,
    OtpNotificationData,
    PayoutNotificationData,
    WelcomeNotificationData,
)
from notifications.notification.repository import NotificationRepository

logger = structlog.get_logger(__name__)

NO_CONTACT_SUMMARY = "No notification sent - recipient has no contact information"


class NotificationService:
    """Senders default to the configured channel adapters; tests pass fakes in."""

    def __init__(
        self,
        email_sender: EmailPort | None = None,
        sms_sender: SMSPort | None = None,
        factory: NotificationFactory | None = None,
    ):
        self.email_sender = email_sender or get_channel(EMAIL)
        self.sms_sender = sms_sender or get_channel(SMS)
        self.factory = factory or NotificationFactory()

    @property
    def repository(self) -> NotificationRepository:
        return current_domain.repository_for(Notification)

    # -------------------------------------------------------------------
    # Booking notifications
    # -------------------------------------------------------------------
    def send_booking_leg_start_reminders(self, data: BookingLegReminderData) -> str:
        notifications = self.factory.create_booking_leg_start_reminders(data)
        self._send_all(notifications, "booking leg start reminders", booking_leg_id=data.booking_leg_id)
        return f"Sent {len(notifications)} booking leg start reminders"

    def send_booking_leg_end_reminders(self, data: BookingLegReminderData) -> str:
        notifications = self.factory.create_booking_leg_end_reminders(data)
        self._send_all(notifications, "booking leg end reminders", booking_leg_id=data.booking_leg_id)
        return f"Sent {len(notifications)} booking leg end reminders"

    def send_booking_status_update(self, data: BookingStatusUpdateData) -> str:
        notification = self.factory.create_booking_status_update(data)
        if notification is None:
            logger.info(
                "Skipping booking status update, recipient has no contact information",
                booking_id=data.booking_id,
                recipient_id=data.recipient_id,
            )
            return NO_CONTACT_SUMMARY
        self._send_all([notification], "booking status update", booking_id=data.booking_id)
        return "Sent booking status update notification"

    def send_fleet_owner_booking_alert(self, data: FleetOwnerBookingAlertData) -> str:
        notification = self.factory.create_fleet_owner_booking_alert(data)
        if notification is None:
            logger.info(
                "Skipping fleet owner booking alert, recipient has no contact information",
                booking_id=data.booking_id,
                fleet_owner_id=data.fleet_owner_id,
            )
            return NO_CONTACT_SUMMARY
        self._send_all([notification], "fleet owner booking alert", booking_id=data.booking_id)
        return "Sent fleet owner booking alert"

    # -------------------------------------------------------------------
    # Account and payout notifications
    # -------------------------------------------------------------------
    def send_otp(self, data: OtpNotificationData) -> str:
        self.send_notification(self.factory.create_otp_notification(data))
        return "Sent OTP notification"

    def send_welcome(self, data: WelcomeNotificationData) -> str:
        self.send_notification(self.factory.create_welcome_notification(data))
        return "Sent welcome notification"

    def send_login_confirmation(self, data: LoginConfirmationData) -> str:
        self.send_notification(self.factory.create_login_confirmation(data))
        return "Sent login confirmation notification"

    def send_fleet_owner_approval(self, data: FleetOwnerApprovalData) -> str:
        notification = self.factory.create_fleet_owner_approval(data)
        if notification is None:
            return NO_CONTACT_SUMMARY
        self.send_notification(notification)
        return "Sent fleet owner approval notification"

    def send_payout_notification(self, data: PayoutNotificationData) -> str:
        notification = self.factory.create_payout_notification(data)
        if notification is None:
            logger.info(
                "Skipping payout notification, fleet owner has no contact information",
                payout_id=data.payout_id,
            )
            return NO_CONTACT_SUMMARY
        self.send_notification(notification)
        return f"Sent payout {data.outcome} notification"

    def send_notification(self, notification: Notification) -> None:
        """Persist a notification and attempt its first delivery."""
        self._save(notification)
        self.deliver_notification(notification)

    def _send_all(self, notifications: list[Notification], label: str, **log_context) -> None:
        try:
            for notification in notifications:
                self.send_notification(notification)
        except Exception as exc:
            logger.error(f"Failed to send {label}", error=str(exc), **log_context)
            raise
        logger.info(f"Sent {label}", count=len(notifications), **log_context)

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    def deliver_notification(self, notification: Notification) -> None:
        """Attempt delivery on every channel the notification needs.

        The attempt is recorded first, so an attempt that fails still counts
        towards the retry limit.
        """
        notification.record_attempt()

        try:
            if notification.needs_email_delivery():
                self._deliver_email(notification)
            if notification.needs_sms_delivery():
                self._deliver_sms(notification)
        except Exception as exc:
            notification.mark_as_failed(str(exc) or type(exc).__name__)
            self._save(notification)
            logger.warning(
                "Notification delivery failed",
                notification_id=str(notification.id),
                attempt_count=notification.attempt_count,
                error=str(exc),
            )
            raise

        notification.mark_as_sent()
        self._save(notification)
        logger.info(
            "Notification delivered",
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            channel=notification.channel,
        )

    def _deliver_email(self, notification: Notification) -> None:
        recipient = notification.recipient
        if not recipient.has_email():
            raise EmailDeliveryError(notification.id, "Recipient has no email address", recipient.id)

        content = notification.content.interpolate()
        try:
            html_content = self.email_sender.render_template(content)
            response = self.email_sender.send_email(
                EmailRequest(
                    to=recipient.email,
                    subject=content.subject,
                    html_content=html_content,
                    text_content=content.body,
                )
            )
        except NotificationError:
            raise
        except Exception as exc:
            raise EmailDeliveryError(notification.id, str(exc), recipient.id) from exc

        if not response.success:
            raise EmailDeliveryError(notification.id, response.error or "Unknown error", recipient.id)

    def _deliver_sms(self, notification: Notification) -> None:
        recipient = notification.recipient
        if not recipient.has_phone():
            raise SmsDeliveryError(notification.id, "Recipient has no phone number", recipient.id)

        content = notification.content.interpolate()
        try:
            response = self.sms_sender.send(
                SmsRequest(
                    to=recipient.phone,
                    message=content.body,
                    template_key=notification.notification_type,
                    variables=content.template_variables,
                )
            )
        except NotificationError:
            raise
        except Exception as exc:
            raise SmsDeliveryError(notification.id, str(exc), recipient.id) from exc

        if not response.success:
            raise SmsDeliveryError(notification.id, response.error or "Unknown error", recipient.id)

    # -------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------
    def process_pending_notifications(self) -> str:
        pending = self.repository.find_pending()
        success_count = 0
        errors = []

        for notification in pending:
            try:
                self.deliver_notification(notification)
                success_count += 1
            except Exception as exc:
                errors.append(f"{notification.id}: {exc}")
                logger.error(
                    "Failed to deliver pending notification",
                    notification_id=str(notification.id),
                    error=str(exc),
                )

        if errors:
            raise BatchProcessingError("pending", len(pending), success_count, len(errors), errors)

        summary = f"Processed {len(pending)} pending notifications: {success_count} successful, 0 failed"
        logger.info(summary)
        return summary

    def retry_failed_notifications(self) -> str:
        retryable = self.repository.find_to_retry()
        success_count = 0
        errors = []

        for notification in retryable:
            try:
                notification.retry()
                self._save(notification)
                self.deliver_notification(notification)
                success_count += 1
            except Exception as exc:
                errors.append(f"{notification.id}: {exc}")
                logger.error(
                    "Failed to retry notification",
                    notification_id=str(notification.id),
                    error=str(exc),
                )

        if errors:
            raise BatchProcessingError("retry", len(retryable), success_count, len(errors), errors)

        summary = f"Retried {success_count} failed notifications"
        logger.info(summary)
        return summary

    def retry_notification(self, notification_id: str) -> Notification:
        """Retry one failed notification; raises if it cannot be retried or delivery fails again."""
        notification = self._get(notification_id)
        notification.retry()
        self._save(notification)
        self.deliver_notification(notification)
        return notification

    def mark_delivered(self, notification_id: str) -> Notification:
        """Record a provider delivery receipt."""
        notification = self._get(notification_id)
        notification.mark_as_delivered()
        self._save(notification)
        return notification

    def _get(self, notification_id: str) -> Notification:
        notification = self.repository.find_by_id(notification_id)
        if notification is None:
            raise ObjectNotFoundError(f"Notification {notification_id} not found")
        return notification

    def _save(self, notification: Notification) -> None:
        self.repository.add(notification)
