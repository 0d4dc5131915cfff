"""Booking lifecycle service: scheduled transitions and booking commands.

``process_activations``, ``process_leg_starts`` and ``process_completions``
are the hourly status scans. A booking that fails to transition is logged
and skipped so one bad record never blocks the rest of the batch.

Saving a booking dispatches its events to the orchestration handlers
before ``repo.add`` returns.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from booking.booking.booking import Booking
from shared.utils.clock import ensure_aware, utcnow

logger = structlog.get_logger(__name__)


class BookingLifecycleService:
    @property
    def repository(self):
        return current_domain.repository_for(Booking)

    # -------------------------------------------------------------------
    # Scheduled scans
    # -------------------------------------------------------------------
    def process_activations(self, now=None) -> int:
        """Activate every confirmed, paid, chauffeured booking whose start has passed."""
        now = ensure_aware(now) or utcnow()
        repo = self.repository
        candidates = repo.find_bookings_eligible_for_activation(now)

        activated = 0
        for booking in candidates:
            try:
                booking.activate(now)
                repo.add(booking)
                activated += 1
            except Exception as exc:
                logger.error("Failed to activate booking", booking_id=str(booking.id), error=str(exc))

        logger.info("Processed booking activations", candidates=len(candidates), activated=activated)
        return activated

    def process_leg_starts(self, now=None) -> int:
        """Move the legs of ACTIVE bookings whose start time has passed to ACTIVE."""
        now = ensure_aware(now) or utcnow()
        repo = self.repository

        started = 0
        for booking in repo.find_active_bookings():
            try:
                count = booking.start_legs_due(now)
                if count:
                    repo.add(booking)
                    started += count
            except Exception as exc:
                logger.error("Failed to start booking legs", booking_id=str(booking.id), error=str(exc))

        logger.info("Processed leg starts", started=started)
        return started

    def process_completions(self, now=None) -> int:
        """Complete every active booking whose end date has passed."""
        now = ensure_aware(now) or utcnow()
        repo = self.repository
        candidates = repo.find_bookings_eligible_for_completion(now)

        completed = 0
        for booking in candidates:
            try:
                booking.complete(now)
                repo.add(booking)
                completed += 1
            except Exception as exc:
                logger.error("Failed to complete booking", booking_id=str(booking.id), error=str(exc))

        logger.info("Processed booking completions", candidates=len(candidates), completed=completed)
        return completed

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def create_booking(self, **attributes) -> Booking:
        booking = Booking.create(**attributes)
        self.repository.add(booking)
        logger.info(
            "Booking created",
            booking_id=str(booking.id),
            booking_reference=booking.booking_reference,
            legs=len(booking.legs),
        )
        return booking

    def confirm_payment(self, booking_id, payment_id: str) -> Booking:
        booking = self.get(booking_id)
        booking.confirm_with_payment(payment_id)
        self.repository.add(booking)
        return booking

    def cancel_booking(self, booking_id, reason=None) -> Booking:
        booking = self.get(booking_id)
        booking.cancel(reason)
        self.repository.add(booking)
        logger.info("Booking cancelled", booking_id=str(booking_id), reason=booking.cancellation_reason)
        return booking

    def assign_chauffeur(self, booking_id, chauffeur_id: str) -> Booking:
        booking = self.get(booking_id)
        booking.assign_chauffeur(chauffeur_id)
        self.repository.add(booking)
        return booking

    def unassign_chauffeur(self, booking_id) -> Booking:
        booking = self.get(booking_id)
        booking.unassign_chauffeur()
        self.repository.add(booking)
        return booking

    def get(self, booking_id) -> Booking:
        booking = self.repository.find_booking_by_id(booking_id)
        if booking is None:
            raise ObjectNotFoundError(f"Booking {booking_id} not found")
        return booking
