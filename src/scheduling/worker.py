"""Queue worker: pulls ready jobs from one queue and runs its processor.

A job that raises is reported back to the queue, which decides between a
delayed retry and permanent failure. Jobs never share failure state.
"""

import asyncio

import structlog

from scheduling.processors.base import JobProcessor
from scheduling.queue import JobQueue
from shared.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


class QueueWorker:
    def __init__(self, queue: JobQueue, processor: JobProcessor, poll_interval: float = 1.0):
        self.queue = queue
        self.processor = processor
        self.poll_interval = poll_interval

    async def run_once(self, now=None) -> bool:
        """Process at most one job. Returns False when nothing was ready."""
        job = await self.queue.next_job(now)
        if job is None:
            return False

        add_context(queue=self.queue.name, job_id=job.id, job_name=job.name)
        try:
            result = await self.processor.process(job)
        except Exception as exc:
            await self.queue.fail(job, exc, now)
        else:
            await self.queue.complete(job, result)
        finally:
            clear_context()
        return True

    async def drain(self, now=None) -> int:
        """Process ready jobs until the queue has none; returns how many ran."""
        processed = 0
        while await self.run_once(now):
            processed += 1
        return processed

    async def run(self, stop: asyncio.Event) -> None:
        logger.info("Queue worker started", queue=self.queue.name)
        while not stop.is_set():
            worked = await self.run_once()
            if not worked:
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self.poll_interval)
                except TimeoutError:
                    pass
        logger.info("Queue worker stopped", queue=self.queue.name)
