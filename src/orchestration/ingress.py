"""Entry point for events published by other services.

Identity and payments events arrive here and are dispatched to the
handlers registered for their ``__type__``. A handler that raises surfaces
to the publisher; most orchestrators log their own failures instead.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.sync_dispatch import dispatch_events_sync

logger = structlog.get_logger(__name__)


def publish(event) -> None:
    handlers = current_domain.handlers_for(event)
    if not handlers:
        logger.debug("No handlers for event", event_type=type(event).__name__)
        return
    dispatch_events_sync([event], current_domain.handlers_for)
