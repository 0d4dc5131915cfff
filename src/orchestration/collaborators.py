"""Collaborator registry for the orchestration handlers.

Event handlers are instantiated without arguments, so they look up the
services they talk to here. In-memory adapters are used until
``configure`` installs real ones.
"""

PROFILES = "profiles"
FLEET = "fleet"
PAYOUTS = "payouts"
OTP_STORE = "otp_store"
NOTIFICATIONS = "notifications"

_KNOWN = (PROFILES, FLEET, PAYOUTS, OTP_STORE, NOTIFICATIONS)

_instances: dict[str, object] = {}


def get_collaborator(name: str):
    """Return the configured collaborator, building the in-memory default on first use."""
    if name not in _instances:
        if name in (PROFILES, FLEET):
            from orchestration.adapters import InMemoryDirectory

            # One directory serves both lookups.
            directory = InMemoryDirectory()
            _instances.setdefault(PROFILES, directory)
            _instances.setdefault(FLEET, directory)
        elif name == PAYOUTS:
            from orchestration.adapters import InMemoryPayoutService

            _instances[name] = InMemoryPayoutService()
        elif name == OTP_STORE:
            from orchestration.adapters import InMemoryOtpStore

            _instances[name] = InMemoryOtpStore()
        elif name == NOTIFICATIONS:
            from notifications.notification.service import NotificationService

            _instances[name] = NotificationService()
        else:
            raise ValueError(f"Unknown collaborator: {name}")

    return _instances[name]


def configure(**collaborators) -> None:
    unknown = set(collaborators) - set(_KNOWN)
    if unknown:
        raise ValueError(f"Unknown collaborator(s): {sorted(unknown)}")
    _instances.update(collaborators)


def reset_collaborators():
    """Drop every configured collaborator (useful for testing)."""
    _instances.clear()
