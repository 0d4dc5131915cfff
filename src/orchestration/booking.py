"""Booking sagas: status notifications, fleet-owner alerts and payouts.

Every orchestrator re-reads the booking first; a booking that no longer
exists is logged and the event dropped. Independent branches (customer,
chauffeur, fleet owner, payout) run concurrently and a failing branch
never stops the others.
"""

import structlog
from protean.utils.mixins import handle

from booking.booking.booking import Booking
from booking.booking.events import (
    BookingActivated,
    BookingCancelled,
    BookingChauffeurAssigned,
    BookingChauffeurUnassigned,
    BookingCompleted,
    BookingPaymentConfirmed,
)
from booking.booking.lifecycle import BookingLifecycleService
from hyre.domain import hyre
from notifications.notification.payloads import FleetOwnerBookingAlertData
from notifications.notification.recipient import RecipientRole
from orchestration.base import (
    BookingParties,
    contained,
    fan_out,
    format_time,
    gather_parties,
    load_booking,
    notify_status,
)
from orchestration.collaborators import NOTIFICATIONS, PAYOUTS, get_collaborator
from orchestration.ports import PayoutRequest
from shared.events.payments import PaymentVerified

logger = structlog.get_logger(__name__)

hyre.register_external_event(PaymentVerified, "Payments.PaymentVerified.v1")


@hyre.event_handler(part_of=Booking)
class BookingActivationOrchestrator:
    @handle(BookingActivated)
    @contained
    def on_booking_activated(self, event: BookingActivated) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking)
        fan_out(
            type(self).__name__,
            booking,
            customer=notify_status(booking, parties, "ACTIVE", RecipientRole.CUSTOMER),
        )


@hyre.event_handler(part_of=Booking)
class BookingCompletionOrchestrator:
    """Tells the customer the trip is over and starts the fleet owner's payout."""

    @handle(BookingCompleted)
    @contained
    def on_booking_completed(self, event: BookingCompleted) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking)
        fan_out(
            type(self).__name__,
            booking,
            customer=notify_status(booking, parties, "COMPLETED", RecipientRole.CUSTOMER),
            payout=lambda: _initiate_payout(booking, parties),
        )


def _initiate_payout(booking: Booking, parties: BookingParties) -> str | None:
    amount = booking.fleet_owner_payout_amount or 0.0
    if amount <= 0:
        logger.info("No payout required", booking_id=str(booking.id), amount=amount)
        return None
    if parties.car is None or not parties.car.owner_id:
        logger.warning("Cannot initiate payout, fleet owner unknown", booking_id=str(booking.id))
        return None

    return get_collaborator(PAYOUTS).initiate_payout(
        PayoutRequest(fleet_owner_id=parties.car.owner_id, booking_id=str(booking.id), amount=amount)
    )


@hyre.event_handler(part_of=Booking)
class BookingCancellationOrchestrator:
    @handle(BookingCancelled)
    @contained
    def on_booking_cancelled(self, event: BookingCancelled) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking, chauffeur_id=event.chauffeur_id, include_fleet_owner=True)
        fan_out(
            type(self).__name__,
            booking,
            customer=notify_status(booking, parties, "CANCELLED", RecipientRole.CUSTOMER),
            chauffeur=notify_status(booking, parties, "CANCELLED", RecipientRole.CHAUFFEUR),
            fleet_owner=notify_status(booking, parties, "CANCELLED", RecipientRole.FLEET_OWNER),
        )


@hyre.event_handler(part_of=Booking)
class PaymentConfirmationOrchestrator:
    """Confirms the booking to the customer and alerts the car's owner."""

    @handle(BookingPaymentConfirmed)
    @contained
    def on_payment_confirmed(self, event: BookingPaymentConfirmed) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking, include_fleet_owner=True)
        fan_out(
            type(self).__name__,
            booking,
            customer=notify_status(booking, parties, "CONFIRMED", RecipientRole.CUSTOMER),
            fleet_owner=lambda: _alert_fleet_owner(booking, parties),
        )


def _alert_fleet_owner(booking: Booking, parties: BookingParties) -> str | None:
    owner = parties.fleet_owner
    if owner is None or parties.car is None:
        logger.info("Skipping fleet owner alert, owner unavailable", booking_id=str(booking.id))
        return None

    return get_collaborator(NOTIFICATIONS).send_fleet_owner_booking_alert(
        FleetOwnerBookingAlertData(
            booking_id=str(booking.id),
            booking_reference=booking.booking_reference,
            customer_name=parties.customer_name,
            car_name=parties.car_name,
            start_date=format_time(booking.start_date),
            end_date=format_time(booking.end_date),
            pickup_location=booking.pickup_location,
            return_location=booking.return_location,
            fleet_owner_id=owner.id,
            fleet_owner_name=parties.fleet_owner_name,
            fleet_owner_email=owner.email,
            fleet_owner_phone=owner.phone,
        )
    )


@hyre.event_handler(part_of=Booking)
class ChauffeurAssignmentOrchestrator:
    @handle(BookingChauffeurAssigned)
    @contained
    def on_chauffeur_assigned(self, event: BookingChauffeurAssigned) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking, chauffeur_id=event.chauffeur_id, include_fleet_owner=True)
        fan_out(
            type(self).__name__,
            booking,
            chauffeur=notify_status(booking, parties, "ASSIGNED", RecipientRole.CHAUFFEUR),
            customer=notify_status(booking, parties, "ASSIGNED", RecipientRole.CUSTOMER),
            fleet_owner=notify_status(booking, parties, "ASSIGNED", RecipientRole.FLEET_OWNER),
        )


@hyre.event_handler(part_of=Booking)
class ChauffeurUnassignmentOrchestrator:
    """Tells the removed chauffeur and the customer about the change."""

    @handle(BookingChauffeurUnassigned)
    @contained
    def on_chauffeur_unassigned(self, event: BookingChauffeurUnassigned) -> None:
        booking = load_booking(event.booking_id, type(self).__name__)
        if booking is None:
            return

        parties = gather_parties(booking, chauffeur_id=event.chauffeur_id)
        fan_out(
            type(self).__name__,
            booking,
            chauffeur=notify_status(booking, parties, "UNASSIGNED", RecipientRole.CHAUFFEUR),
            customer=notify_status(booking, parties, "UNASSIGNED", RecipientRole.CUSTOMER),
        )


@hyre.event_handler(part_of=Booking, stream_category="payments::payment")
class PaymentVerificationOrchestrator:
    """Confirms a booking once its payment is verified; declined payments leave it pending."""

    @handle(PaymentVerified)
    @contained
    def on_payment_verified(self, event: PaymentVerified) -> None:
        if not event.succeeded:
            logger.warning(
                "Payment verification failed, booking remains pending",
                booking_id=str(event.booking_id),
                payment_id=str(event.payment_id),
                error=event.error_message,
            )
            return

        BookingLifecycleService().confirm_payment(event.booking_id, str(event.payment_id))
        logger.info("Booking confirmed after payment verification", booking_id=str(event.booking_id))
