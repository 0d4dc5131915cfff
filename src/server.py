"""Background runner for the reminder engine.

Starts the interval scheduler that enqueues periodic jobs and one worker
per queue that processes them.

Usage:
    python src/server.py                       # Scheduler and all workers
    python src/server.py --no-scheduler        # Workers only
    python src/server.py --config reminders.toml
"""

import argparse
import asyncio
import signal

import structlog

from container import Container
from scheduling.config import load_settings
from scheduling.triggers import TaskRunner
from shared.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


async def run(container: Container, with_scheduler: bool = True) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    runners = [worker.run(stop) for worker in container.workers()]
    if with_scheduler:
        runners.append(TaskRunner(container.scheduled_tasks()).run(stop))

    logger.info("Reminder engine starting", workers=len(container.queues), scheduler=with_scheduler)
    await asyncio.gather(*runners)
    logger.info("Reminder engine stopped")


def main():
    parser = argparse.ArgumentParser(description="Reminder engine runner")
    parser.add_argument("--config", help="Path to a reminders TOML file")
    parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Run queue workers without enqueuing periodic jobs",
    )
    args = parser.parse_args()

    configure_logging()
    container = Container(settings=load_settings(args.config))
    asyncio.run(run(container, with_scheduler=not args.no_scheduler))


if __name__ == "__main__":
    main()
