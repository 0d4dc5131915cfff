"""In-memory collaborators for local runs and tests."""

from uuid import uuid4

import structlog

from orchestration.ingress import publish
from orchestration.ports import (
    CarSummary,
    FleetLookup,
    OtpStore,
    PayoutRequest,
    PayoutService,
    ProfileLookup,
    UserProfile,
)
from shared.events.payments import PayoutCompleted
from shared.utils.clock import utcnow

logger = structlog.get_logger(__name__)


class InMemoryDirectory(ProfileLookup, FleetLookup):
    """Users and cars keyed by id."""

    def __init__(self):
        self.users: dict[str, UserProfile] = {}
        self.cars: dict[str, CarSummary] = {}

    def add_user(self, profile: UserProfile) -> UserProfile:
        self.users[profile.id] = profile
        return profile

    def add_car(self, car: CarSummary) -> CarSummary:
        self.cars[car.id] = car
        return car

    def get_user_by_id(self, user_id: str) -> UserProfile | None:
        return self.users.get(user_id)

    def get_car_by_id(self, car_id: str) -> CarSummary | None:
        return self.cars.get(car_id)


class InMemoryPayoutService(PayoutService):
    """Records payout requests, one per booking, and settles them on demand.

    Settling publishes ``PayoutCompleted`` to the payout handlers unless
    ``publish_settlements`` is off.
    """

    def __init__(self, publish_settlements: bool = True):
        self.publish_settlements = publish_settlements
        self.requests: dict[str, PayoutRequest] = {}
        self._by_booking: dict[str, str] = {}
        self.pending: list[str] = []

    def initiate_payout(self, request: PayoutRequest) -> str:
        existing = self._by_booking.get(request.booking_id)
        if existing is not None:
            logger.info("Payout already initiated", booking_id=request.booking_id, payout_id=existing)
            return existing

        payout_id = str(uuid4())
        self.requests[payout_id] = request
        self._by_booking[request.booking_id] = payout_id
        self.pending.append(payout_id)
        logger.info(
            "Payout initiated",
            payout_id=payout_id,
            booking_id=request.booking_id,
            amount=request.amount,
        )
        return payout_id

    def process_pending_payouts(self) -> str:
        settled, self.pending = self.pending, []
        for payout_id in settled:
            request = self.requests[payout_id]
            if self.publish_settlements:
                publish(
                    PayoutCompleted(
                        payout_id=payout_id,
                        booking_id=request.booking_id,
                        fleet_owner_id=request.fleet_owner_id,
                        amount=request.amount,
                        currency=request.currency,
                        completed_at=utcnow(),
                    )
                )
        return f"Processed {len(settled)} pending payouts"


class InMemoryOtpStore(OtpStore):
    def __init__(self):
        self._codes: dict[str, str] = {}

    def put(self, email: str, code: str) -> None:
        self._codes[email.lower()] = code

    def get_otp(self, email: str) -> str | None:
        return self._codes.get(email.lower())
