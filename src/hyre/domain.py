"""Hyre reminders domain.

Booking, notifications and the orchestrators that join them register on a
single protean domain. Events raised by a Booking are dispatched in-process
to the orchestration handlers inside the same unit of work, which only
holds when both sides belong to one domain.

Events are processed synchronously: the reminder engine has no broker, and
the scheduled scans expect the notification pipeline to have run by the
time they return.
"""

import importlib

import structlog
from protean.domain import Domain

hyre = Domain(
    name="hyre",
    config={
        "event_processing": "sync",
        "command_processing": "sync",
    },
)

logger = structlog.get_logger(__name__)

# Modules that register elements on ``hyre``. Importing them is enough to
# register; ``init`` then resolves associations and handler routes.
ELEMENT_MODULES = (
    "booking.booking.events",
    "booking.booking.booking",
    "booking.booking.repository",
    "notifications.notification.recipient",
    "notifications.notification.content",
    "notifications.notification.events",
    "notifications.notification.notification",
    "notifications.notification.repository",
    "orchestration.booking",
    "orchestration.accounts",
    "orchestration.payouts",
)

_initialized = False


def load_elements() -> Domain:
    for module in ELEMENT_MODULES:
        importlib.import_module(module)
    return hyre


def init_domain() -> Domain:
    """Import every element module and initialize the domain once per process."""
    global _initialized
    if not _initialized:
        load_elements()
        hyre.init(traverse=False)
        _initialized = True
        logger.info("Domain initialized", domain=hyre.name)
    return hyre
