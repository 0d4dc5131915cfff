"""Pydantic schemas for the operations API."""

from datetime import datetime

from pydantic import BaseModel


class JobScheduledResponse(BaseModel):
    job_id: str
    queue: str
    job_name: str
    message: str


class QueueCounts(BaseModel):
    waiting: int = 0
    active: int = 0
    completed: int = 0
    failed: int = 0
    delayed: int = 0


class QueueStatsResponse(BaseModel):
    timestamp: datetime
    queues: dict[str, QueueCounts]
