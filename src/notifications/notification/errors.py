"""Notification failure taxonomy.

Every error carries a stable ``code`` and the identifiers needed to find the
affected notification in logs.
"""

from shared.exceptions import DomainError


class NotificationError(DomainError):
    code = "NOTIFICATION_ERROR"

    def __init__(self, message, code=None, details=None):
        super().__init__(message, code=code, context="notification", details=details)


class InvalidRecipientError(NotificationError):
    code = "NOTIFICATION_INVALID_RECIPIENT"


class InvalidContentError(NotificationError):
    code = "NOTIFICATION_INVALID_CONTENT"


class InvalidChannelError(NotificationError):
    """The recipient lacks the contact method the channel requires."""

    code = "NOTIFICATION_INVALID_CHANNEL"

    def __init__(self, channel: str, recipient_id: str, missing: str):
        self.channel = channel
        self.recipient_id = recipient_id
        self.missing = missing
        super().__init__(
            f"Recipient {recipient_id} has no {missing} for {channel} notification",
            details={"channel": channel, "recipient_id": recipient_id, "missing": missing},
        )


class EmailDeliveryError(NotificationError):
    code = "NOTIFICATION_EMAIL_DELIVERY_ERROR"

    def __init__(self, notification_id: str, service_error: str, recipient_id: str | None = None):
        self.notification_id = notification_id
        self.service_error = service_error
        super().__init__(
            f"Email delivery failed for notification {notification_id}: {service_error}",
            details={"notification_id": notification_id, "recipient_id": recipient_id},
        )


class SmsDeliveryError(NotificationError):
    code = "NOTIFICATION_SMS_DELIVERY_ERROR"

    def __init__(self, notification_id: str, service_error: str, recipient_id: str | None = None):
        self.notification_id = notification_id
        self.service_error = service_error
        super().__init__(
            f"SMS delivery failed for notification {notification_id}: {service_error}",
            details={"notification_id": notification_id, "recipient_id": recipient_id},
        )


class RetryExhaustedError(NotificationError):
    """``retry()`` was refused; ``reason`` says whether attempts ran out or the status was wrong."""

    code = "NOTIFICATION_CANNOT_BE_RETRIED"

    MAX_ATTEMPTS_EXCEEDED = "Maximum retry attempts exceeded"
    WRONG_STATUS = "Only failed notifications can be retried"

    def __init__(self, notification_id: str, reason: str):
        self.notification_id = notification_id
        self.reason = reason
        super().__init__(
            f"Notification {notification_id} cannot be retried: {reason}",
            details={"notification_id": notification_id, "reason": reason},
        )


class TemplateNotFoundError(NotificationError):
    code = "NOTIFICATION_TEMPLATE_NOT_FOUND"

    def __init__(self, notification_type: str, role: str):
        super().__init__(
            f"No template registered for {notification_type} and role {role}",
            details={"notification_type": notification_type, "role": role},
        )


class BatchProcessingError(NotificationError):
    """One or more deliveries in a pending or retry batch failed."""

    code = "NOTIFICATION_BATCH_PROCESSING_ERROR"

    def __init__(
        self,
        batch_type: str,
        total: int,
        success_count: int,
        failure_count: int,
        errors: list[str],
    ):
        self.batch_type = batch_type
        self.total = total
        self.success_count = success_count
        self.failure_count = failure_count
        self.errors = errors
        super().__init__(
            f"Batch processing failed for {batch_type} notifications: "
            f"{success_count}/{total} successful, {failure_count} failed",
            details={
                "batch_type": batch_type,
                "total": total,
                "success_count": success_count,
                "failure_count": failure_count,
                "errors": errors,
            },
        )
