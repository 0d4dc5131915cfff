"""Domain events for the Booking aggregate.

The orchestration handlers react to these once the unit of work that
saved the booking commits.
"""

from protean.fields import DateTime, Float, Identifier, String

from hyre.domain import hyre


@hyre.event(part_of="Booking")
class BookingActivated:
    """Booking moved from CONFIRMED to ACTIVE after its first leg began."""

    __version__ = 1

    booking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    activated_at = DateTime(required=True)


@hyre.event(part_of="Booking")
class BookingCompleted:
    """Booking reached its end date while ACTIVE."""

    __version__ = 1

    booking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    fleet_owner_payout_amount = Float(default=0.0)
    completed_at = DateTime(required=True)


@hyre.event(part_of="Booking")
class BookingCancelled:
    __version__ = 1

    booking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chauffeur_id = Identifier()
    reason = String(required=True, max_length=500)
    cancelled_at = DateTime(required=True)


@hyre.event(part_of="Booking")
class BookingPaymentConfirmed:
    """Payment was captured and the booking moved to CONFIRMED."""

    __version__ = 1

    booking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    confirmed_at = DateTime(required=True)


@hyre.event(part_of="Booking")
class BookingChauffeurAssigned:
    __version__ = 1

    booking_id = Identifier(required=True)
    booking_reference = String(required=True, max_length=20)
    chauffeur_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@hyre.event(part_of="Booking")
class BookingChauffeurUnassigned:
    __version__ = 1

    booking_id = Identifier(required=True)
    booking_reference = String(required=True, max_length=20)
    chauffeur_id = Identifier(required=True)
    unassigned_at = DateTime(required=True)
