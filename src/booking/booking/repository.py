"""Repository for the Booking aggregate.

Window queries filter on leg times only; status, payment and chauffeur
eligibility are decided by the caller from the returned booking.
"""

from datetime import datetime
from typing import NamedTuple

from booking.booking.booking import Booking, BookingLeg, BookingStatus, TimeWindow
from hyre.domain import hyre

_OPEN_STATUSES = [
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
    BookingStatus.ACTIVE.value,
]


class LegWithBooking(NamedTuple):
    booking: Booking
    leg: BookingLeg


@hyre.repository(part_of=Booking)
class BookingRepository:
    def find_booking_by_id(self, booking_id) -> Booking | None:
        return self._dao.query.filter(id=str(booking_id)).all().first

    def find_legs_starting_in_window(self, window: TimeWindow) -> list[LegWithBooking]:
        return self._legs_where(lambda leg: window.contains(leg.leg_start_time))

    def find_legs_ending_in_window(self, window: TimeWindow) -> list[LegWithBooking]:
        return self._legs_where(lambda leg: window.contains(leg.leg_end_time))

    def find_bookings_eligible_for_activation(self, now: datetime) -> list[Booking]:
        return [b for b in self._by_status(BookingStatus.CONFIRMED) if b.is_eligible_for_activation(now)]

    def find_bookings_eligible_for_completion(self, now: datetime) -> list[Booking]:
        return [b for b in self._by_status(BookingStatus.ACTIVE) if b.is_eligible_for_completion(now)]

    def find_active_bookings(self) -> list[Booking]:
        return self._by_status(BookingStatus.ACTIVE)

    def _by_status(self, status: BookingStatus) -> list[Booking]:
        return self._dao.query.filter(status=status.value).limit(None).all().items

    def _legs_where(self, predicate) -> list[LegWithBooking]:
        matches = []
        for booking in self._dao.query.filter(status__in=_OPEN_STATUSES).limit(None).all().items:
            matches.extend(LegWithBooking(booking, leg) for leg in booking.legs if predicate(leg))
        matches.sort(key=lambda m: m.leg.leg_start_time)
        return matches
