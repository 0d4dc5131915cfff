"""Cross-domain event contracts for Identity domain events.

Identity itself lives outside this service. These classes define the shape
its publisher sends; the account orchestrator registers them as external
events with matching ``__type__`` strings.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class UserRegistered(BaseEvent):
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    name = String(required=True)
    role = String(default="customer")
    registered_at = DateTime(required=True)


class UserLoggedIn(BaseEvent):
    __version__ = 1

    user_id = Identifier(required=True)
    login_time = DateTime(required=True)
    ip_address = String()
    user_agent = String(max_length=500)


class FleetOwnerApproved(BaseEvent):
    __version__ = 1

    fleet_owner_id = Identifier(required=True)
    approved_by = String(required=True)
    approved_at = DateTime(required=True)


class OtpGenerated(BaseEvent):
    """A one-time passcode was issued; the code itself stays in the OTP store."""

    __version__ = 1

    email = String(required=True)
    otp_type = String(required=True, choices=("registration", "login"))
    user_id = Identifier()
    expires_at = DateTime(required=True)
    generated_at = DateTime(required=True)
