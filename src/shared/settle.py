"""Settle-all fan-out for independent lookups and side effects.

``join_tolerant`` runs every named callable concurrently and never lets one
failure cancel or mask the others. Callers read successful values from
``results`` and apply their own fallbacks for keys found in ``errors``.

Each branch runs on a worker thread inside its own domain context, so a
branch that persists an aggregate commits in its own unit of work.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import structlog
from protean.domain.context import has_domain_context
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


@dataclass
class Settled:
    results: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, BaseException] = field(default_factory=dict)

    def get(self, key: str, default=None):
        """Return the settled value for ``key``, or ``default`` when it failed or was None."""
        value = self.results.get(key)
        return default if value is None else value

    @property
    def ok(self) -> bool:
        return not self.errors


def _run(domain, call):
    if domain is None:
        return call()
    with domain.domain_context():
        return call()


def join_tolerant(**calls) -> Settled:
    """Run all zero-argument callables concurrently, partitioning outcomes by key."""
    settled = Settled()
    if not calls:
        return settled

    domain = current_domain._get_current_object() if has_domain_context() else None
    with ThreadPoolExecutor(max_workers=len(calls), thread_name_prefix="settle") as pool:
        futures = {key: pool.submit(_run, domain, call) for key, call in calls.items()}

    for key, future in futures.items():
        error = future.exception()
        if error is not None:
            logger.warning("Settled branch failed", branch=key, error=str(error))
            settled.errors[key] = error
        else:
            settled.results[key] = future.result()
    return settled
