"""Runtime settings loaded from ``reminders.toml`` with environment overrides.

Every periodic task's interval lives here; the reminder and status scans
default to hourly, which bounds how late an activation or reminder can be.
"""

import os
import tomllib
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILE = "reminders.toml"


class TaskSettings(BaseModel):
    interval_seconds: int = Field(gt=0)
    enabled: bool = True


class ScheduleSettings(BaseModel):
    leg_start_reminders: TaskSettings = TaskSettings(interval_seconds=3600)
    leg_end_reminders: TaskSettings = TaskSettings(interval_seconds=3600)
    confirmed_to_active: TaskSettings = TaskSettings(interval_seconds=3600)
    active_to_completed: TaskSettings = TaskSettings(interval_seconds=3600)
    pending_payouts: TaskSettings = TaskSettings(interval_seconds=1800)
    pending_notifications: TaskSettings = TaskSettings(interval_seconds=300)


class Settings(BaseModel):
    environment: str = "development"
    reminder_window_minutes: int = Field(default=60, gt=0)
    worker_poll_interval: float = Field(default=1.0, gt=0)
    # Finished jobs kept for inspection; older ones survive only as counts.
    queue_keep_completed: int = Field(default=100, ge=0)
    queue_keep_failed: int = Field(default=500, ge=0)
    schedule: ScheduleSettings = ScheduleSettings()


def load_settings(path: str | Path | None = None) -> Settings:
    """Read settings from TOML; a missing file yields the defaults."""
    config_path = Path(path or os.getenv("REMINDERS_CONFIG", DEFAULT_CONFIG_FILE))

    raw = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
        logger.debug("Loaded settings file", path=str(config_path))
    else:
        logger.debug("Settings file not found, using defaults", path=str(config_path))

    env = os.getenv("APP_ENV")
    if env:
        raw["environment"] = env

    return Settings.model_validate(raw)
