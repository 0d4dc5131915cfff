"""Shared orchestration plumbing: error containment and party lookups."""

import functools
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from booking.booking.booking import Booking
from notifications.notification.factory import DISPLAY_TIME_FORMAT
from notifications.notification.payloads import BookingStatusUpdateData
from notifications.notification.recipient import RecipientRole
from orchestration.collaborators import FLEET, NOTIFICATIONS, PROFILES, get_collaborator
from orchestration.ports import CarSummary, UserProfile
from shared.settle import join_tolerant

logger = structlog.get_logger(__name__)

CUSTOMER_FALLBACK = "Customer"
CHAUFFEUR_FALLBACK = "Chauffeur"
FLEET_OWNER_FALLBACK = "Fleet Owner"
VEHICLE_FALLBACK = "Vehicle"


def format_time(moment) -> str:
    return moment.strftime(DISPLAY_TIME_FORMAT)


def contained(method):
    """Log a handler method's failure instead of raising it.

    Goes under ``@handle`` so the event dispatch never sees the error.
    """

    @functools.wraps(method)
    def wrapper(self, event):
        try:
            return method(self, event)
        except Exception as exc:
            logger.error(
                "Orchestration failed",
                orchestrator=type(self).__name__,
                event_type=type(event).__name__,
                error=str(exc),
            )

    return wrapper


@dataclass
class BookingParties:
    customer: UserProfile | None = None
    chauffeur: UserProfile | None = None
    car: CarSummary | None = None
    fleet_owner: UserProfile | None = None

    @property
    def customer_name(self) -> str:
        return (self.customer and self.customer.name) or CUSTOMER_FALLBACK

    @property
    def chauffeur_name(self) -> str:
        return (self.chauffeur and self.chauffeur.name) or CHAUFFEUR_FALLBACK

    @property
    def fleet_owner_name(self) -> str:
        return (self.fleet_owner and self.fleet_owner.name) or FLEET_OWNER_FALLBACK

    @property
    def car_name(self) -> str:
        return (self.car and self.car.display_name) or VEHICLE_FALLBACK


def _optional_user(user_id: str | None):
    def _lookup():
        if not user_id:
            return None
        return get_collaborator(PROFILES).get_user_by_id(user_id)

    return _lookup


def gather_parties(
    booking: Booking,
    chauffeur_id: str | None = None,
    include_fleet_owner: bool = False,
) -> BookingParties:
    """Fetch everyone involved in a booking; a failed lookup leaves that party as None."""
    fleet = get_collaborator(FLEET)
    settled = join_tolerant(
        customer=_optional_user(booking.customer_id),
        chauffeur=_optional_user(chauffeur_id or booking.chauffeur_id),
        car=lambda: fleet.get_car_by_id(booking.car_id),
    )
    parties = BookingParties(
        customer=settled.get("customer"),
        chauffeur=settled.get("chauffeur"),
        car=settled.get("car"),
    )

    if include_fleet_owner and parties.car is not None:
        owner = join_tolerant(fleet_owner=_optional_user(parties.car.owner_id))
        parties.fleet_owner = owner.get("fleet_owner")
    return parties


def load_booking(booking_id, orchestrator: str) -> Booking | None:
    booking = current_domain.repository_for(Booking).find_booking_by_id(booking_id)
    if booking is None:
        logger.warning(
            "Booking not found, skipping orchestration",
            orchestrator=orchestrator,
            booking_id=str(booking_id),
        )
    return booking


def status_update(
    booking: Booking,
    parties: BookingParties,
    status: str,
    role: RecipientRole = RecipientRole.CUSTOMER,
) -> BookingStatusUpdateData | None:
    """Status update for the participant in ``role``; None when that participant is unknown."""
    match role:
        case RecipientRole.CUSTOMER:
            profile, name = parties.customer, parties.customer_name
        case RecipientRole.CHAUFFEUR:
            profile, name = parties.chauffeur, parties.chauffeur_name
        case RecipientRole.FLEET_OWNER:
            profile, name = parties.fleet_owner, parties.fleet_owner_name

    if profile is None:
        return None

    return BookingStatusUpdateData(
        booking_id=str(booking.id),
        booking_reference=booking.booking_reference,
        status=status,
        recipient_id=profile.id,
        recipient_name=name,
        recipient_email=profile.email,
        recipient_phone=profile.phone,
        recipient_role=role,
        customer_name=parties.customer_name,
        car_name=parties.car_name,
        start_date=format_time(booking.start_date),
        end_date=format_time(booking.end_date),
        pickup_location=booking.pickup_location,
        return_location=booking.return_location,
    )


def notify_status(booking: Booking, parties: BookingParties, status: str, role: RecipientRole):
    """Branch for ``join_tolerant`` sending one participant's status update."""

    def _send() -> str:
        data = status_update(booking, parties, status, role)
        if data is None:
            logger.info(
                "Skipping status update, participant unavailable",
                booking_id=str(booking.id),
                role=role.value,
                status=status,
            )
            return "skipped"
        return get_collaborator(NOTIFICATIONS).send_booking_status_update(data)

    return _send


def fan_out(orchestrator: str, booking: Booking, **branches) -> None:
    settled = join_tolerant(**branches)
    logger.info(
        "Orchestration finished",
        orchestrator=orchestrator,
        booking_id=str(booking.id),
        succeeded=sorted(settled.results),
        failed=sorted(settled.errors),
    )
