"""Booking aggregate and BookingLeg entity.

Booking State Machine:
    PENDING → CONFIRMED → ACTIVE → COMPLETED
    PENDING → CANCELLED
    CONFIRMED → CANCELLED

Leg State Machine (mirrors the parent booking per service day):
    PENDING → ACTIVE → COMPLETED
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, HasMany, Identifier, String

from booking.booking.events import (
    BookingActivated,
    BookingCancelled,
    BookingChauffeurAssigned,
    BookingChauffeurUnassigned,
    BookingCompleted,
    BookingPaymentConfirmed,
)
from hyre.domain import hyre
from shared.utils.clock import ensure_aware, utcnow

DEFAULT_CANCELLATION_REASON = "Booking cancelled by customer"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class BookingStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


class LegStatus(Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


# ---------------------------------------------------------------------------
# State Machines
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.ACTIVE,
        BookingStatus.CANCELLED,
    },
    BookingStatus.ACTIVE: {
        BookingStatus.COMPLETED,
    },
    BookingStatus.COMPLETED: set(),  # Terminal
    BookingStatus.CANCELLED: set(),  # Terminal
}

_VALID_LEG_TRANSITIONS = {
    LegStatus.PENDING: {LegStatus.ACTIVE},
    LegStatus.ACTIVE: {LegStatus.COMPLETED},
    LegStatus.COMPLETED: set(),
}


@hyre.value_object
class TimeWindow:
    """Half-open interval ``[start, end)``.

    A moment exactly at ``end`` belongs to the next window, so back-to-back
    hourly scans never both match the same leg.
    """

    start: DateTime(required=True)
    end: DateTime(required=True)

    @classmethod
    def ahead(cls, now: datetime, minutes: int = 60) -> "TimeWindow":
        now = ensure_aware(now)
        return cls(start=now, end=now + timedelta(minutes=minutes))

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_aware(moment) < self.end


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------
@hyre.entity(part_of="Booking")
class BookingLeg:
    """One calendar day of service within a booking."""

    leg_date: Date(required=True)
    leg_start_time: DateTime(required=True)
    leg_end_time: DateTime(required=True)
    status: String(choices=LegStatus, default=LegStatus.PENDING.value)
    pickup_location: String(required=True, max_length=255)
    return_location: String(required=True, max_length=255)

    @invariant.post
    def leg_must_end_after_it_starts(self):
        if self.leg_start_time >= self.leg_end_time:
            raise ValidationError({"leg_end_time": ["Leg end time must be after leg start time"]})

    def _transition(self, target: LegStatus):
        current = LegStatus(self.status)
        if target not in _VALID_LEG_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition leg from {current.value} to {target.value}"]})
        self.status = target.value

    def start(self):
        self._transition(LegStatus.ACTIVE)

    def finish(self):
        if LegStatus(self.status) == LegStatus.PENDING:
            self.start()
        self._transition(LegStatus.COMPLETED)

    def has_started(self, now: datetime) -> bool:
        return ensure_aware(self.leg_start_time) <= ensure_aware(now)


def service_days(start_date: datetime, end_date: datetime) -> list[date]:
    """Calendar days that get a leg.

    Every day from the start date through the end date. An end at exactly
    midnight closes the previous day, so that final day gets no leg.
    """
    last_day = end_date.date()
    if end_date.time() == time.min:
        last_day -= timedelta(days=1)

    days = []
    current = start_date.date()
    while current <= last_day:
        days.append(current)
        current += timedelta(days=1)
    return days


def generate_legs(start_date, end_date, pickup_location, return_location) -> list[BookingLeg]:
    """Split a booking's date range into daily legs at the booking's start and end times of day.

    When the end time of day is not after the start time of day each leg
    runs overnight and ends on the following day.
    """
    start_time = start_date.timetz()
    end_time = end_date.timetz()
    overnight = end_date.time() <= start_date.time()

    legs = []
    for day in service_days(start_date, end_date):
        end_day = day + timedelta(days=1) if overnight else day
        legs.append(
            BookingLeg(
                leg_date=day,
                leg_start_time=datetime.combine(day, start_time),
                leg_end_time=datetime.combine(end_day, end_time),
                pickup_location=pickup_location,
                return_location=return_location,
            )
        )
    return legs


def _as_booking_start(value) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.combine(value, time.min))


def _as_booking_end(value) -> datetime:
    # A bare date books the whole of that day.
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.combine(value + timedelta(days=1), time.min))


def generate_booking_reference() -> str:
    return f"BK-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@hyre.aggregate
class Booking:
    """A customer's hire of one car, with optional chauffeur, over a date range."""

    booking_reference: String(max_length=20, default=generate_booking_reference)
    customer_id: Identifier(required=True)
    car_id: Identifier(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    pickup_location: String(required=True, max_length=255)
    return_location: String(required=True, max_length=255)

    status: String(choices=BookingStatus, default=BookingStatus.PENDING.value)
    payment_status: String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_id: String(max_length=255)
    chauffeur_id: Identifier()

    cancelled_at: DateTime()
    cancellation_reason: String(max_length=500)

    fleet_owner_payout_amount: Float(default=0.0)

    legs: HasMany(BookingLeg)

    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def dates_must_be_timezone_aware(self):
        if self.start_date.tzinfo is None or self.end_date.tzinfo is None:
            raise ValidationError({"start_date": ["Booking dates must be timezone-aware"]})

    @invariant.post
    def end_date_must_follow_start_date(self):
        if self.end_date <= self.start_date:
            raise ValidationError({"end_date": ["End date must be after start date"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id,
        car_id,
        start_date,
        end_date,
        pickup_location,
        return_location,
        chauffeur_id=None,
        fleet_owner_payout_amount=0.0,
        booking_reference=None,
    ):
        """Create a PENDING booking and split it into daily legs.

        ``start_date`` and ``end_date`` take datetimes or bare dates; a bare
        end date includes that whole day. Naive datetimes are read as UTC.
        """
        start_date = _as_booking_start(start_date)
        end_date = _as_booking_end(end_date)
        now = utcnow()

        booking = cls(
            customer_id=customer_id,
            car_id=car_id,
            start_date=start_date,
            end_date=end_date,
            pickup_location=pickup_location,
            return_location=return_location,
            chauffeur_id=chauffeur_id,
            fleet_owner_payout_amount=fleet_owner_payout_amount,
            booking_reference=booking_reference or generate_booking_reference(),
            created_at=now,
            updated_at=now,
        )
        booking.add_legs(generate_legs(start_date, end_date, pickup_location, return_location))
        return booking

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    def has_chauffeur(self) -> bool:
        return bool(self.chauffeur_id)

    def is_eligible_for_activation(self, now: datetime) -> bool:
        return (
            self.status == BookingStatus.CONFIRMED.value
            and self.is_paid()
            and self.has_chauffeur()
            and self.start_date <= ensure_aware(now)
        )

    def is_eligible_for_completion(self, now: datetime) -> bool:
        return self.status == BookingStatus.ACTIVE.value and self.end_date <= ensure_aware(now)

    def is_eligible_for_leg_start_reminder(self) -> bool:
        return self.status == BookingStatus.CONFIRMED.value and self.is_paid() and self.has_chauffeur()

    def is_eligible_for_leg_end_reminder(self) -> bool:
        return self.status == BookingStatus.ACTIVE.value and self.is_paid() and self.has_chauffeur()

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = BookingStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def confirm_with_payment(self, payment_id: str, confirmed_at=None):
        """Record captured payment and confirm the booking."""
        self._assert_can_transition(BookingStatus.CONFIRMED)
        if not payment_id:
            raise ValidationError({"payment_id": ["Payment ID is required"]})

        now = ensure_aware(confirmed_at) or utcnow()
        self.status = BookingStatus.CONFIRMED.value
        self.payment_status = PaymentStatus.PAID.value
        self.payment_id = payment_id
        self.updated_at = now

        self.raise_(
            BookingPaymentConfirmed(
                booking_id=str(self.id),
                customer_id=str(self.customer_id),
                payment_id=payment_id,
                confirmed_at=now,
            )
        )

    def activate(self, now=None):
        self._assert_can_transition(BookingStatus.ACTIVE)

        now = ensure_aware(now) or utcnow()
        self.status = BookingStatus.ACTIVE.value
        self.updated_at = now
        self.start_legs_due(now)

        self.raise_(
            BookingActivated(
                booking_id=str(self.id),
                customer_id=str(self.customer_id),
                activated_at=now,
            )
        )

    def complete(self, now=None):
        self._assert_can_transition(BookingStatus.COMPLETED)

        now = ensure_aware(now) or utcnow()
        self.status = BookingStatus.COMPLETED.value
        self.updated_at = now
        for leg in self.legs:
            if LegStatus(leg.status) != LegStatus.COMPLETED:
                leg.finish()

        self.raise_(
            BookingCompleted(
                booking_id=str(self.id),
                customer_id=str(self.customer_id),
                fleet_owner_payout_amount=self.fleet_owner_payout_amount,
                completed_at=now,
            )
        )

    def start_legs_due(self, now: datetime) -> int:
        """Mark legs of an ACTIVE booking whose window has begun as ACTIVE."""
        if BookingStatus(self.status) != BookingStatus.ACTIVE:
            return 0
        started = 0
        for leg in self.legs:
            if LegStatus(leg.status) == LegStatus.PENDING and leg.has_started(now):
                leg.start()
                started += 1
        return started

    def cancel(self, reason=None, cancelled_at=None):
        self._assert_can_transition(BookingStatus.CANCELLED)

        now = ensure_aware(cancelled_at) or utcnow()
        reason = (reason or "").strip() or DEFAULT_CANCELLATION_REASON
        self.status = BookingStatus.CANCELLED.value
        self.payment_status = PaymentStatus.REFUNDED.value
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            BookingCancelled(
                booking_id=str(self.id),
                customer_id=str(self.customer_id),
                chauffeur_id=self.chauffeur_id,
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Chauffeur assignment
    # -------------------------------------------------------------------
    def assign_chauffeur(self, chauffeur_id: str):
        if BookingStatus(self.status) in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
            raise ValidationError({"chauffeur_id": ["Cannot assign chauffeur to completed or cancelled booking"]})
        if not chauffeur_id or not chauffeur_id.strip():
            raise ValidationError({"chauffeur_id": ["Chauffeur ID is required"]})

        now = utcnow()
        previous = self.chauffeur_id
        if previous and previous != chauffeur_id:
            self.raise_(
                BookingChauffeurUnassigned(
                    booking_id=str(self.id),
                    booking_reference=self.booking_reference,
                    chauffeur_id=previous,
                    unassigned_at=now,
                )
            )

        self.chauffeur_id = chauffeur_id
        self.updated_at = now

        self.raise_(
            BookingChauffeurAssigned(
                booking_id=str(self.id),
                booking_reference=self.booking_reference,
                chauffeur_id=chauffeur_id,
                assigned_at=now,
            )
        )

    def unassign_chauffeur(self):
        if not self.chauffeur_id:
            raise ValidationError({"chauffeur_id": ["No chauffeur assigned to this booking"]})
        status = BookingStatus(self.status)
        if status == BookingStatus.COMPLETED:
            raise ValidationError({"chauffeur_id": ["Cannot unassign chauffeur from completed booking"]})
        if status == BookingStatus.ACTIVE:
            raise ValidationError({"chauffeur_id": ["Cannot unassign chauffeur from active booking"]})

        now = utcnow()
        previous = self.chauffeur_id
        self.chauffeur_id = None
        self.updated_at = now

        self.raise_(
            BookingChauffeurUnassigned(
                booking_id=str(self.id),
                booking_reference=self.booking_reference,
                chauffeur_id=previous,
                unassigned_at=now,
            )
        )
