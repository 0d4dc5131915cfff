"""Queue processor base: dispatch a job to its handler by job name.

Handlers are the synchronous domain services. Each runs on a worker thread
inside its own domain context so the event loop keeps serving other queues.
"""

import asyncio

import structlog

from hyre.domain import hyre
from scheduling.errors import UnknownJobError
from scheduling.queue import Job

logger = structlog.get_logger(__name__)


def _in_domain_context(handler):
    with hyre.domain_context():
        return handler()


class JobProcessor:
    queue_name: str = ""

    def handlers(self) -> dict:
        """Map job name to a callable returning the job result."""
        raise NotImplementedError

    async def process(self, job: Job) -> dict:
        handler = self.handlers().get(job.name)
        if handler is None:
            logger.error("Unknown job", queue=self.queue_name, job_name=job.name, job_id=job.id)
            raise UnknownJobError(self.queue_name, job.name)

        logger.info("Processing job", queue=self.queue_name, job_name=job.name, job_id=job.id)
        try:
            result = await asyncio.to_thread(_in_domain_context, handler)
        except Exception as exc:
            logger.error(
                "Job processing failed",
                queue=self.queue_name,
                job_name=job.name,
                job_id=job.id,
                attempt=job.attempts_made,
                error=str(exc),
            )
            raise

        logger.info("Job processed", queue=self.queue_name, job_name=job.name, job_id=job.id, result=result)
        return {"success": True, "result": result}
