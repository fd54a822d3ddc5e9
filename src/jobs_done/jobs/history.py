"""Append-only log of the jobs reported to the user."""

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from jobs_done.jobs.models import JobRecord

logger = logging.getLogger(__name__)

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_time(value: datetime | None) -> str:
    return value.strftime(LOG_DATE_FORMAT) if value is not None else "None"


def format_log_line(record: JobRecord) -> str:
    """One ``;``-separated line per job."""
    exit_code = "" if record.exit_code is None else str(record.exit_code)
    return ";".join(
        [
            record.job_id,
            record.name,
            record.state_label,
            _format_time(record.start_time),
            _format_time(record.end_time),
            exit_code,
        ]
    )


class JobLog:
    """Keeps a running record of every job that was shown."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def append(self, records: Iterable[JobRecord]) -> int:
        """Append records to the log file.

        Returns:
            Number of lines written. Write failures are logged and reported as
            zero lines; they never abort the run.
        """
        lines = [format_log_line(record) for record in records]
        if not lines:
            return 0

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            logger.warning(f"Could not write job log {self.path}: {e}")
            return 0

        return len(lines)
