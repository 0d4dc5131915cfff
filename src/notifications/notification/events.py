"""Domain events raised by the Notification aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from hyre.domain import hyre


@hyre.event(part_of="Notification")
class NotificationCreated:
    __version__ = 1

    notification_id = Identifier(required=True)
    notification_type = String(required=True)
    recipient_id = String(required=True)
    recipient_role = String(required=True)
    channel = String(required=True)
    booking_id = Identifier()
    booking_leg_id = Identifier()
    created_at = DateTime(required=True)


@hyre.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = String(required=True)
    channel = String(required=True)
    attempt_count = Integer(default=0)
    sent_at = DateTime(required=True)


@hyre.event(part_of="Notification")
class NotificationDelivered:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = String(required=True)
    channel = String(required=True)
    delivered_at = DateTime(required=True)


@hyre.event(part_of="Notification")
class NotificationFailed:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = String(required=True)
    channel = String(required=True)
    reason = String(required=True, max_length=1000, sanitize=False)
    attempt_count = Integer(default=0)
    can_retry = Boolean(default=False)
    failed_at = DateTime(required=True)


@hyre.event(part_of="Notification")
class NotificationRetried:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = String(required=True)
    channel = String(required=True)
    attempt_count = Integer(default=0)
    retried_at = DateTime(required=True)
