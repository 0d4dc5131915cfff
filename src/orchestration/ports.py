"""Collaborator ports the orchestrators depend on.

Profiles, fleet and payouts are owned by other services; only the shapes
consumed here are modelled.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class UserProfile(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str = "customer"


class CarSummary(BaseModel):
    id: str
    display_name: str
    owner_id: str | None = None


class PayoutRequest(BaseModel):
    fleet_owner_id: str
    booking_id: str
    amount: float
    currency: str = "NGN"


class ProfileLookup(ABC):
    @abstractmethod
    def get_user_by_id(self, user_id: str) -> UserProfile | None: ...


class FleetLookup(ABC):
    @abstractmethod
    def get_car_by_id(self, car_id: str) -> CarSummary | None: ...


class PayoutService(ABC):
    @abstractmethod
    def process_pending_payouts(self) -> str: ...

    @abstractmethod
    def initiate_payout(self, request: PayoutRequest) -> str:
        """Start a payout and return its id; repeated requests for one booking return the same id."""


class OtpStore(ABC):
    @abstractmethod
    def get_otp(self, email: str) -> str | None: ...
