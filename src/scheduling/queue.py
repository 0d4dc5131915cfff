"""Job queue port and the in-memory priority queue.

The in-memory queue orders waiting jobs by priority (lower first) and then
by enqueue order. A failed job goes back to the delayed set with backoff
while it has attempts left, otherwise it stays FAILED.

Only the most recent finished jobs are retained (``keep_completed`` and
``keep_failed``); older ones are evicted while ``get_counts`` keeps
counting every job that ever finished.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from collections import Counter, deque
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

from scheduling.jobs import JobData, JobOptions

logger = structlog.get_logger(__name__)


class JobState(Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    DELAYED = "delayed"


def _now() -> datetime:
    return datetime.now(UTC)


class Job(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    queue: str
    name: str
    data: JobData
    options: JobOptions
    state: JobState = JobState.WAITING
    attempts_made: int = 0
    failed_reason: str | None = None
    result: Any = None
    created_at: datetime = Field(default_factory=_now)
    ready_at: datetime = Field(default_factory=_now)
    finished_at: datetime | None = None

    def has_attempts_left(self) -> bool:
        return self.attempts_made < self.options.max_attempts


class JobQueue(ABC):
    name: str

    @abstractmethod
    async def add(self, job_name: str, data: JobData, options: JobOptions) -> Job:
        """Enqueue a job. Raises if the backing store is unavailable."""

    @abstractmethod
    async def next_job(self, now=None) -> Job | None:
        """Claim the highest-priority ready job, marking it ACTIVE."""

    @abstractmethod
    async def complete(self, job: Job, result: Any = None) -> None: ...

    @abstractmethod
    async def fail(self, job: Job, error: BaseException, now=None) -> None: ...

    @abstractmethod
    async def get_counts(self) -> dict[str, int]: ...


class InMemoryJobQueue(JobQueue):
    def __init__(self, name: str, keep_completed: int = 100, keep_failed: int = 500):
        self.name = name
        self._jobs: dict[str, Job] = {}
        self._waiting: list[tuple[int, int, str]] = []
        self._sequence = itertools.count()
        self._lock = asyncio.Lock()
        self._retained = {
            JobState.COMPLETED: deque(),
            JobState.FAILED: deque(),
        }
        self._limits = {
            JobState.COMPLETED: keep_completed,
            JobState.FAILED: keep_failed,
        }
        self._finished = Counter()

    async def add(self, job_name: str, data: JobData, options: JobOptions) -> Job:
        job = Job(queue=self.name, name=job_name, data=data, options=options)
        async with self._lock:
            self._jobs[job.id] = job
            self._push(job)
        logger.debug("Job enqueued", queue=self.name, job_name=job_name, job_id=job.id, priority=options.priority)
        return job

    async def next_job(self, now=None) -> Job | None:
        now = now or _now()
        async with self._lock:
            self._promote_delayed(now)
            while self._waiting:
                _, _, job_id = heapq.heappop(self._waiting)
                job = self._jobs.get(job_id)
                if job is None or job.state != JobState.WAITING:
                    continue
                job.state = JobState.ACTIVE
                job.attempts_made += 1
                return job
        return None

    async def complete(self, job: Job, result: Any = None) -> None:
        async with self._lock:
            job.state = JobState.COMPLETED
            job.result = result
            job.failed_reason = None
            job.finished_at = _now()
            self._retire(job)

    async def fail(self, job: Job, error: BaseException, now=None) -> None:
        now = now or _now()
        async with self._lock:
            job.failed_reason = str(error) or type(error).__name__
            if job.has_attempts_left():
                delay = job.options.backoff.delay_for(job.attempts_made) if job.options.backoff else 0
                job.state = JobState.DELAYED
                job.ready_at = now + timedelta(seconds=delay)
                logger.info(
                    "Job scheduled for retry",
                    queue=self.name,
                    job_name=job.name,
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    delay_seconds=delay,
                )
            else:
                job.state = JobState.FAILED
                job.finished_at = now
                self._retire(job)
                logger.error(
                    "Job failed permanently",
                    queue=self.name,
                    job_name=job.name,
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    error=job.failed_reason,
                )

    async def get_counts(self) -> dict[str, int]:
        """Live jobs per state; completed and failed count every job that ever finished."""
        counts = {state.value: 0 for state in JobState}
        async with self._lock:
            for job in self._jobs.values():
                if job.state not in self._retained:
                    counts[job.state.value] += 1
            for state, total in self._finished.items():
                counts[state.value] = total
        return counts

    def jobs(self, state: JobState | None = None) -> list[Job]:
        """Jobs still held by the queue; evicted finished jobs are not listed."""
        return [job for job in self._jobs.values() if state is None or job.state == state]

    def _retire(self, job: Job) -> None:
        self._finished[job.state] += 1
        retained = self._retained[job.state]
        retained.append(job.id)
        while len(retained) > self._limits[job.state]:
            self._jobs.pop(retained.popleft(), None)

    def _push(self, job: Job) -> None:
        heapq.heappush(self._waiting, (job.options.priority, next(self._sequence), job.id))

    def _promote_delayed(self, now: datetime) -> None:
        for job in self._jobs.values():
            if job.state == JobState.DELAYED and job.ready_at <= now:
                job.state = JobState.WAITING
                self._push(job)
