"""Leg reminder scan: finds legs starting or ending within the next hour.

Each eligible leg gets its customer, chauffeur and car looked up
concurrently; a failed lookup falls back to a generic name. A leg that
fails to notify is logged and skipped, and the summary counts only legs
whose reminders went out.
"""

import structlog
from protean.utils.globals import current_domain

from booking.booking.booking import Booking, TimeWindow
from booking.booking.repository import LegWithBooking
from notifications.notification.payloads import BookingLegReminderData
from orchestration.base import format_time, gather_parties
from orchestration.collaborators import NOTIFICATIONS, get_collaborator
from shared.utils.clock import utcnow

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW_MINUTES = 60


class LegReminderScanner:
    def __init__(self, window_minutes: int = DEFAULT_WINDOW_MINUTES):
        self.window_minutes = window_minutes

    @property
    def bookings(self):
        return current_domain.repository_for(Booking)

    def process_leg_start_reminders(self, now=None) -> str:
        window = TimeWindow.ahead(now or utcnow(), self.window_minutes)
        found = self.bookings.find_legs_starting_in_window(window)
        eligible = [item for item in found if item.booking.is_eligible_for_leg_start_reminder()]

        notifications = get_collaborator(NOTIFICATIONS)
        processed = self._remind(eligible, notifications.send_booking_leg_start_reminders, "start")
        summary = f"Processed {processed} booking leg start reminders"
        logger.info(summary, eligible=len(eligible))
        return summary

    def process_leg_end_reminders(self, now=None) -> str:
        window = TimeWindow.ahead(now or utcnow(), self.window_minutes)
        found = self.bookings.find_legs_ending_in_window(window)
        eligible = [item for item in found if item.booking.is_eligible_for_leg_end_reminder()]

        notifications = get_collaborator(NOTIFICATIONS)
        processed = self._remind(eligible, notifications.send_booking_leg_end_reminders, "end")
        summary = f"Processed {processed} booking leg end reminders"
        logger.info(summary, eligible=len(eligible))
        return summary

    def _remind(self, items: list[LegWithBooking], send, kind: str) -> int:
        processed = 0
        for item in items:
            try:
                send(self.build_reminder_data(item))
                processed += 1
            except Exception as exc:
                logger.error(
                    f"Failed to process booking leg {kind} reminder",
                    booking_id=str(item.booking.id),
                    booking_leg_id=str(item.leg.id),
                    error=str(exc),
                )
        return processed

    def build_reminder_data(self, item: LegWithBooking) -> BookingLegReminderData:
        booking, leg = item
        parties = gather_parties(booking)
        customer, chauffeur = parties.customer, parties.chauffeur

        return BookingLegReminderData(
            booking_id=str(booking.id),
            booking_leg_id=str(leg.id),
            booking_reference=booking.booking_reference,
            customer_id=booking.customer_id,
            customer_name=parties.customer_name,
            customer_email=customer.email if customer else None,
            customer_phone=customer.phone if customer else None,
            chauffeur_id=booking.chauffeur_id,
            chauffeur_name=parties.chauffeur_name,
            chauffeur_email=chauffeur.email if chauffeur else None,
            chauffeur_phone=chauffeur.phone if chauffeur else None,
            car_name=parties.car_name,
            leg_start_time=format_time(leg.leg_start_time),
            leg_end_time=format_time(leg.leg_end_time),
            pickup_location=leg.pickup_location,
            return_location=leg.return_location,
        )
