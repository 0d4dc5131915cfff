"""Cross-domain event contracts for Payments domain events.

Published by the payments collaborator when a booking charge is verified
and when a transfer to a fleet owner settles or fails.
"""

from protean.core.event import BaseEvent
from protean.fields import Boolean, DateTime, Float, Identifier, String


class PayoutCompleted(BaseEvent):
    """Transfer to the fleet owner's bank account succeeded."""

    __version__ = 1

    payout_id = Identifier(required=True)
    booking_id = Identifier()
    fleet_owner_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(default="NGN", max_length=3)
    provider_reference = String()
    completed_at = DateTime(required=True)


class PayoutFailed(BaseEvent):
    """Transfer to the fleet owner's bank account failed."""

    __version__ = 1

    payout_id = Identifier(required=True)
    booking_id = Identifier()
    fleet_owner_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(default="NGN", max_length=3)
    reason = String(required=True, max_length=1000, sanitize=False)
    failed_at = DateTime(required=True)


class PaymentVerified(BaseEvent):
    """Payment provider verified a booking charge; ``succeeded`` is False on a declined charge."""

    __version__ = 1

    payment_id = Identifier(required=True)
    booking_id = Identifier(required=True)
    succeeded = Boolean(default=True)
    error_message = String()
    verified_at = DateTime(required=True)
