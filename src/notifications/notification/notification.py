"""Notification aggregate: one message to one recipient over a channel.

State Machine:
    PENDING → SENT → DELIVERED
    PENDING → FAILED
    SENT → FAILED
    FAILED → (retry, while attempts < 3) → PENDING

``attempt_count`` counts delivery attempts, not retries: the delivery
pipeline calls ``record_attempt()`` before every send.
"""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from hyre.domain import hyre
from notifications.notification.content import NotificationContent
from notifications.notification.errors import InvalidChannelError, RetryExhaustedError
from notifications.notification.events import (
    NotificationCreated,
    NotificationDelivered,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from notifications.notification.recipient import Recipient
from shared.utils.clock import utcnow

MAX_DELIVERY_ATTEMPTS = 3


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    BOOKING_START_REMINDER = "BOOKING_START_REMINDER"
    BOOKING_END_REMINDER = "BOOKING_END_REMINDER"
    BOOKING_LEG_START_REMINDER = "BOOKING_LEG_START_REMINDER"
    BOOKING_LEG_END_REMINDER = "BOOKING_LEG_END_REMINDER"
    BOOKING_STATUS_UPDATE = "BOOKING_STATUS_UPDATE"
    FLEET_OWNER_BOOKING_ALERT = "FLEET_OWNER_BOOKING_ALERT"
    FLEET_OWNER_APPROVED = "FLEET_OWNER_APPROVED"
    OTP_LOGIN = "OTP_LOGIN"
    OTP_REGISTRATION = "OTP_REGISTRATION"
    USER_REGISTERED = "USER_REGISTERED"
    LOGIN_CONFIRMATION = "LOGIN_CONFIRMATION"
    PAYOUT_COMPLETED = "PAYOUT_COMPLETED"
    PAYOUT_FAILED = "PAYOUT_FAILED"


class DeliveryChannel(Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    BOTH = "BOTH"


class NotificationStatus(Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    DELIVERED = "DELIVERED"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.SENT,
        NotificationStatus.FAILED,
    },
    NotificationStatus.SENT: {
        NotificationStatus.DELIVERED,
        NotificationStatus.FAILED,
    },
    NotificationStatus.FAILED: {
        NotificationStatus.FAILED,  # Repeated failure while retrying
        NotificationStatus.PENDING,  # Via retry
    },
    NotificationStatus.DELIVERED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@hyre.aggregate
class Notification:
    """A single notification addressed to one recipient.

    Created by the notification factory and mutated only through the
    transition methods below.
    """

    notification_type: String(choices=NotificationType, required=True)
    recipient: ValueObject(Recipient, required=True)
    content: ValueObject(NotificationContent, required=True)
    channel: String(choices=DeliveryChannel, required=True)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)

    # Delivery tracking
    attempt_count: Integer(default=0)
    last_attempt_at: DateTime()
    sent_at: DateTime()
    delivered_at: DateTime()
    failure_reason: String(max_length=1000, sanitize=False)

    # Correlation
    booking_id: Identifier()
    booking_leg_id: Identifier()

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        notification_type,
        recipient,
        content,
        channel,
        booking_id=None,
        booking_leg_id=None,
    ):
        """Create a PENDING notification after checking the channel against the recipient."""
        notification_type = NotificationType(notification_type)
        channel = DeliveryChannel(channel)
        _assert_channel_reachable(channel, recipient)

        now = utcnow()
        notification = cls(
            notification_type=notification_type.value,
            recipient=recipient,
            content=content,
            channel=channel.value,
            booking_id=booking_id,
            booking_leg_id=booking_leg_id,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                notification_type=notification_type.value,
                recipient_id=recipient.id,
                recipient_role=recipient.role,
                channel=channel.value,
                booking_id=booking_id,
                booking_leg_id=booking_leg_id,
                created_at=now,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def needs_email_delivery(self) -> bool:
        return DeliveryChannel(self.channel) in (DeliveryChannel.EMAIL, DeliveryChannel.BOTH)

    def needs_sms_delivery(self) -> bool:
        return DeliveryChannel(self.channel) in (DeliveryChannel.SMS, DeliveryChannel.BOTH)

    def can_retry(self) -> bool:
        return (
            NotificationStatus(self.status) == NotificationStatus.FAILED
            and self.attempt_count < MAX_DELIVERY_ATTEMPTS
        )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def record_attempt(self, attempted_at=None):
        """Count a delivery attempt. Called before every send."""
        now = attempted_at or utcnow()
        self.attempt_count = self.attempt_count + 1
        self.last_attempt_at = now
        self.updated_at = now

    def mark_as_sent(self, sent_at=None):
        self._assert_can_transition(NotificationStatus.SENT)

        now = sent_at or utcnow()
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_id=self.recipient.id,
                channel=self.channel,
                attempt_count=self.attempt_count,
                sent_at=now,
            )
        )

    def mark_as_delivered(self, delivered_at=None):
        """Mark notification as confirmed delivered by the provider."""
        self._assert_can_transition(NotificationStatus.DELIVERED)

        now = delivered_at or utcnow()
        self.status = NotificationStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now

        self.raise_(
            NotificationDelivered(
                notification_id=str(self.id),
                recipient_id=self.recipient.id,
                channel=self.channel,
                delivered_at=now,
            )
        )

    def mark_as_failed(self, reason):
        if reason is None or not str(reason).strip():
            raise ValidationError({"failure_reason": [f"Failure reason cannot be empty for notification {self.id}"]})
        self._assert_can_transition(NotificationStatus.FAILED)

        now = utcnow()
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = str(reason).strip()[:1000]
        self.last_attempt_at = now
        self.updated_at = now

        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient_id=self.recipient.id,
                channel=self.channel,
                reason=self.failure_reason,
                attempt_count=self.attempt_count,
                can_retry=self.can_retry(),
                failed_at=now,
            )
        )

    def retry(self):
        """Return a failed notification to PENDING for another delivery attempt."""
        if NotificationStatus(self.status) != NotificationStatus.FAILED:
            raise RetryExhaustedError(str(self.id), RetryExhaustedError.WRONG_STATUS)
        if self.attempt_count >= MAX_DELIVERY_ATTEMPTS:
            raise RetryExhaustedError(str(self.id), RetryExhaustedError.MAX_ATTEMPTS_EXCEEDED)

        now = utcnow()
        self.status = NotificationStatus.PENDING.value
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient_id=self.recipient.id,
                channel=self.channel,
                attempt_count=self.attempt_count,
                retried_at=now,
            )
        )


def _assert_channel_reachable(channel: DeliveryChannel, recipient: Recipient):
    if channel in (DeliveryChannel.EMAIL, DeliveryChannel.BOTH) and not recipient.has_email():
        raise InvalidChannelError(channel.value, recipient.id, "email")
    if channel in (DeliveryChannel.SMS, DeliveryChannel.BOTH) and not recipient.has_phone():
        raise InvalidChannelError(channel.value, recipient.id, "phone number")
