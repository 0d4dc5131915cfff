"""Flat payloads the factory turns into notifications.

Orchestrators and the leg scanner assemble these from cross-domain lookups;
missing names are replaced with fallbacks before they get here, missing
contact details are left as None.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from notifications.notification.recipient import RecipientRole


class BookingLegReminderData(BaseModel):
    booking_id: str
    booking_leg_id: str
    booking_reference: str
    customer_id: str
    customer_name: str
    customer_email: str | None = None
    customer_phone: str | None = None
    chauffeur_id: str
    chauffeur_name: str
    chauffeur_email: str | None = None
    chauffeur_phone: str | None = None
    car_name: str
    leg_start_time: str
    leg_end_time: str
    pickup_location: str
    return_location: str


class BookingStatusUpdateData(BaseModel):
    """Status change addressed to one booking participant (the customer by default)."""

    booking_id: str
    booking_reference: str
    status: str
    recipient_id: str
    recipient_name: str
    recipient_email: str | None = None
    recipient_phone: str | None = None
    recipient_role: RecipientRole = RecipientRole.CUSTOMER
    customer_name: str
    car_name: str
    start_date: str
    end_date: str
    pickup_location: str
    return_location: str


class FleetOwnerBookingAlertData(BaseModel):
    booking_id: str
    booking_reference: str
    customer_name: str
    car_name: str
    start_date: str
    end_date: str
    pickup_location: str
    return_location: str
    fleet_owner_id: str
    fleet_owner_name: str
    fleet_owner_email: str | None = None
    fleet_owner_phone: str | None = None


class OtpNotificationData(BaseModel):
    email: str
    otp_code: str
    otp_type: Literal["registration", "login"]
    expires_at: datetime
    user_id: str | None = None


class WelcomeNotificationData(BaseModel):
    user_id: str
    email: str
    role: str
    name: str | None = None


class LoginConfirmationData(BaseModel):
    user_id: str
    email: str
    login_time: datetime
    name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class FleetOwnerApprovalData(BaseModel):
    fleet_owner_id: str
    name: str
    email: str | None = None
    phone: str | None = None


class PayoutNotificationData(BaseModel):
    outcome: Literal["completed", "failed"]
    payout_id: str
    fleet_owner_id: str
    fleet_owner_name: str
    fleet_owner_email: str | None = None
    fleet_owner_phone: str | None = None
    amount: float
    currency: str = "NGN"
    booking_id: str | None = None
    booking_reference: str | None = None
    failure_reason: str | None = None
