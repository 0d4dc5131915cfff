"""Repository for the Notification aggregate.

Results are ordered by ``created_at`` so delivery batches run oldest first.
"""

from hyre.domain import hyre
from notifications.notification.notification import (
    Notification,
    NotificationStatus,
    NotificationType,
)


@hyre.repository(part_of=Notification)
class NotificationRepository:
    def find_by_id(self, notification_id) -> Notification | None:
        return self._dao.query.filter(id=str(notification_id)).all().first

    def find_by_booking_id(self, booking_id) -> list[Notification]:
        return self._select(booking_id=str(booking_id))

    def find_by_booking_leg_id(self, booking_leg_id) -> list[Notification]:
        return self._select(booking_leg_id=str(booking_leg_id))

    def find_by_status(self, status: NotificationStatus) -> list[Notification]:
        return self._select(status=NotificationStatus(status).value)

    def find_by_type(self, notification_type: NotificationType) -> list[Notification]:
        return self._select(notification_type=NotificationType(notification_type).value)

    def find_pending(self) -> list[Notification]:
        return self.find_by_status(NotificationStatus.PENDING)

    def find_failed(self) -> list[Notification]:
        return self.find_by_status(NotificationStatus.FAILED)

    def find_to_retry(self) -> list[Notification]:
        """Failed notifications that still have delivery attempts left."""
        return [n for n in self.find_failed() if n.can_retry()]

    def _select(self, **filters) -> list[Notification]:
        matches = self._dao.query.filter(**filters).limit(None).all().items
        return sorted(matches, key=lambda n: n.created_at)
