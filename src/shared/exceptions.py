"""Base class for the application-level failures of every bounded context.

Invariant and state-machine violations raise protean's ``ValidationError``
and identity lookups raise its ``ObjectNotFoundError``. ``DomainError``
covers failures that carry a machine-readable code for callers and logs,
such as notification delivery errors and unknown jobs.
"""


class DomainError(Exception):
    """Base class for domain failures carrying a machine-readable code."""

    code = "DOMAIN_ERROR"

    def __init__(self, message, code=None, context=None, details=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.context = context
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "context": self.context,
            "details": self.details,
        }
