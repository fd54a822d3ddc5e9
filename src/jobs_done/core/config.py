"""Configuration management for jobs-done."""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SACCT_COMMAND = "sacct"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_WINDOW_HOURS = 24


def default_state_dir() -> Path:
    """Per-user state directory, following the XDG base directory layout."""
    xdg_state = os.getenv("XDG_STATE_HOME")
    if xdg_state and xdg_state.strip():
        return Path(xdg_state) / "jobs_done"
    return Path.home() / ".local" / "state" / "jobs_done"


class SettingsManager:
    """Manages user settings and configuration.

    Lookup order for every setting is environment variable, then the
    ``settings.json`` file in the state directory, then the built-in default.
    """

    def __init__(self, settings_dir: str | None = None):
        env_dir = os.getenv("JOBS_DONE_STATE_DIR")
        if settings_dir:
            self.settings_dir = Path(settings_dir)
        elif env_dir and env_dir.strip():
            self.settings_dir = Path(env_dir.strip())
        else:
            self.settings_dir = default_state_dir()
        self.settings_file = self.settings_dir / "settings.json"

    def load_user_settings(self) -> dict[str, Any]:
        """Load user settings from file."""
        if not self.settings_file.exists():
            return {}

        try:
            with open(self.settings_file, encoding="utf-8") as f:
                settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")
            return {}

        if not isinstance(settings, dict):
            logger.warning(f"Ignoring settings file {self.settings_file}: not an object")
            return {}
        return settings

    def get_state_file(self) -> Path:
        """Path of the persisted session checkpoint."""
        return self.settings_dir / "session.json"

    def get_job_log_file(self) -> Path:
        """Path of the append-only log of reported jobs."""
        return self.settings_dir / "jobs.log"

    def get_sacct_command(self) -> str:
        """Get the accounting command from environment or settings."""
        command = os.getenv("JOBS_DONE_SACCT")
        if command and command.strip():
            return command.strip()

        settings = self.load_user_settings()
        command = settings.get("sacctCommand")
        if isinstance(command, str) and command.strip():
            return command.strip()

        return DEFAULT_SACCT_COMMAND

    def get_timeout(self) -> float:
        """Get the accounting query timeout in seconds.

        Returns:
            Timeout, defaults to 30 seconds if not configured or invalid
        """
        value = os.getenv("JOBS_DONE_TIMEOUT")
        if value is None:
            value = self.load_user_settings().get("timeoutSeconds")
        if value is None:
            return DEFAULT_TIMEOUT_SECONDS

        try:
            timeout = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid timeout {value!r}, using {DEFAULT_TIMEOUT_SECONDS:g}s")
            return DEFAULT_TIMEOUT_SECONDS

        if timeout <= 0:
            logger.warning(f"Invalid timeout {value!r}, using {DEFAULT_TIMEOUT_SECONDS:g}s")
            return DEFAULT_TIMEOUT_SECONDS
        return timeout

    def get_default_window_hours(self) -> int:
        """Get the first-run fallback window in hours."""
        value = os.getenv("JOBS_DONE_DEFAULT_HOURS")
        if value is None:
            value = self.load_user_settings().get("defaultWindowHours")
        if value is None:
            return DEFAULT_WINDOW_HOURS

        try:
            hours = int(value)
        except (TypeError, ValueError):
            hours = -1
        if hours < 0:
            logger.warning(f"Invalid default window {value!r}, using {DEFAULT_WINDOW_HOURS}h")
            return DEFAULT_WINDOW_HOURS
        return hours

    def get_log_jobs(self) -> bool:
        """Whether reported jobs are appended to the job log."""
        value = os.getenv("JOBS_DONE_LOG_JOBS")
        if value is not None:
            return value.strip().lower() in ("1", "true", "yes", "on")

        setting = self.load_user_settings().get("logJobs")
        if isinstance(setting, bool):
            return setting
        return True
