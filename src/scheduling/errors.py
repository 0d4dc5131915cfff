"""Scheduling failures."""

from shared.exceptions import DomainError


class UnknownJobError(DomainError):
    code = "UNKNOWN_JOB"

    def __init__(self, queue: str, job_name: str):
        self.queue = queue
        self.job_name = job_name
        super().__init__(f"Unknown job type: {job_name}", context="scheduling", details={"queue": queue})
