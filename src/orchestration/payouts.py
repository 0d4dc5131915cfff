"""Payout sagas: tell the fleet owner how their transfer went."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from booking.booking.booking import Booking
from hyre.domain import hyre
from notifications.notification.notification import Notification
from notifications.notification.payloads import PayoutNotificationData
from orchestration.base import FLEET_OWNER_FALLBACK, contained
from orchestration.collaborators import NOTIFICATIONS, PROFILES, get_collaborator
from shared.events.payments import PayoutCompleted, PayoutFailed
from shared.settle import join_tolerant

logger = structlog.get_logger(__name__)

hyre.register_external_event(PayoutCompleted, "Payments.PayoutCompleted.v1")
hyre.register_external_event(PayoutFailed, "Payments.PayoutFailed.v1")


@hyre.event_handler(part_of=Notification, stream_category="payments::payout")
class PayoutNotificationOrchestrator:
    """Handles both ``PayoutCompleted`` and ``PayoutFailed``.

    A failed payout also raises an admin alert in the logs.
    """

    @handle(PayoutCompleted)
    @contained
    def on_payout_completed(self, event: PayoutCompleted) -> None:
        _notify_fleet_owner(event, failed=False)

    @handle(PayoutFailed)
    @contained
    def on_payout_failed(self, event: PayoutFailed) -> None:
        logger.warning(
            "Admin alert: fleet owner payout failed",
            payout_id=str(event.payout_id),
            fleet_owner_id=str(event.fleet_owner_id),
            booking_id=event.booking_id,
            amount=event.amount,
            reason=event.reason,
        )
        _notify_fleet_owner(event, failed=True)


def _find_booking(booking_id):
    if not booking_id:
        return None
    return current_domain.repository_for(Booking).find_booking_by_id(booking_id)


def _notify_fleet_owner(event: PayoutCompleted | PayoutFailed, failed: bool) -> None:
    settled = join_tolerant(
        owner=lambda: get_collaborator(PROFILES).get_user_by_id(str(event.fleet_owner_id)),
        booking=lambda: _find_booking(event.booking_id),
    )
    owner = settled.get("owner")
    if owner is None:
        logger.warning(
            "Fleet owner not found, skipping payout notification",
            payout_id=str(event.payout_id),
            fleet_owner_id=str(event.fleet_owner_id),
        )
        return
    booking = settled.get("booking")

    get_collaborator(NOTIFICATIONS).send_payout_notification(
        PayoutNotificationData(
            outcome="failed" if failed else "completed",
            payout_id=str(event.payout_id),
            fleet_owner_id=owner.id,
            fleet_owner_name=owner.name or FLEET_OWNER_FALLBACK,
            fleet_owner_email=owner.email,
            fleet_owner_phone=owner.phone,
            amount=event.amount,
            currency=event.currency,
            booking_id=str(event.booking_id) if event.booking_id else None,
            booking_reference=booking.booking_reference if booking else None,
            failure_reason=event.reason if failed else None,
        )
    )
