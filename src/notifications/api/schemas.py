"""Pydantic request/response models for the Notifications API.

API schemas are separate from the aggregate so storage fields never leak
into responses.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"
    message: str | None = None


class NotificationResponse(BaseModel):
    notification_id: str
    notification_type: str
    recipient_id: str
    recipient_role: str
    channel: str
    subject: str
    status: str
    attempt_count: int
    failure_reason: str | None = None
    booking_id: str | None = None
    booking_leg_id: str | None = None
    created_at: str
    sent_at: str | None = None
    delivered_at: str | None = None

    @classmethod
    def from_notification(cls, notification) -> "NotificationResponse":
        return cls(
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            recipient_id=notification.recipient.id,
            recipient_role=notification.recipient.role,
            channel=notification.channel,
            subject=notification.content.subject,
            status=notification.status,
            attempt_count=notification.attempt_count,
            failure_reason=notification.failure_reason,
            booking_id=str(notification.booking_id) if notification.booking_id else None,
            booking_leg_id=str(notification.booking_leg_id) if notification.booking_leg_id else None,
            created_at=notification.created_at.isoformat(),
            sent_at=notification.sent_at.isoformat() if notification.sent_at else None,
            delivered_at=notification.delivered_at.isoformat() if notification.delivered_at else None,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int


class BatchResultResponse(BaseModel):
    batch_type: str
    failed: bool = False
    total: int | None = None
    success_count: int | None = None
    failure_count: int | None = None
    errors: list[str] = []
    message: str
