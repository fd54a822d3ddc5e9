"""Queries against the SLURM accounting database via ``sacct``."""

import logging
import subprocess
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from jobs_done.core.config import DEFAULT_SACCT_COMMAND, DEFAULT_TIMEOUT_SECONDS
from jobs_done.error_handling import (
    BackendQueryFailed,
    BackendTimeout,
    BackendUnavailable,
)
from jobs_done.jobs.models import JobState

logger = logging.getLogger(__name__)

SACCT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
FIELD_DELIMITER = "|"
# Order matters: RecordParser reads fields positionally.
SACCT_FIELDS = ["JobID", "JobName", "User", "State", "Start", "End", "ExitCode"]


class AccountingBackend(Protocol):
    """Anything that can answer "which jobs ended after this time"."""

    def query(
        self,
        lower_bound: datetime,
        states: Iterable[JobState] = (),
        user: str | None = None,
    ) -> str:
        """Return raw delimited job rows, one per line."""
        ...


class SacctAdapter:
    """Runs ``sacct`` and returns its parsable output.

    Failures are raised as typed errors and never retried.
    """

    def __init__(
        self,
        command: str = DEFAULT_SACCT_COMMAND,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.command = command
        self.timeout = timeout

    def build_args(
        self,
        lower_bound: datetime,
        states: Iterable[JobState] = (),
        user: str | None = None,
    ) -> list[str]:
        """Build the sacct argument vector.

        The state filter is only pushed to sacct when every requested state is
        one sacct knows; UNKNOWN stands for "anything else", so it is filtered
        locally instead.
        """
        args = [
            self.command,
            "--noheader",
            "--parsable2",
            "--allocations",
            f"--delimiter={FIELD_DELIMITER}",
            "--starttime",
            lower_bound.strftime(SACCT_DATE_FORMAT),
            "--endtime",
            "now",
            f"--format={','.join(SACCT_FIELDS)}",
        ]
        if user:
            args.extend(["--user", user])

        requested = list(dict.fromkeys(states))
        if requested and JobState.UNKNOWN not in requested:
            args.extend(["--state", ",".join(state.value for state in requested)])

        return args

    def query(
        self,
        lower_bound: datetime,
        states: Iterable[JobState] = (),
        user: str | None = None,
    ) -> str:
        """Run sacct for jobs ending after ``lower_bound``.

        Args:
            lower_bound: Start of the window, naive local time
            states: States to match (OR-combined); empty means all
            user: Account whose jobs are listed

        Returns:
            Raw sacct stdout

        Raises:
            BackendUnavailable: If the sacct binary cannot be found
            BackendTimeout: If sacct does not finish within the timeout
            BackendQueryFailed: If sacct exits with a non-zero status
        """
        args = self.build_args(lower_bound, states, user)
        logger.debug(f"Running: {' '.join(args)}")

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise BackendUnavailable(self.command, original_error=exc) from exc
        except subprocess.TimeoutExpired as exc:
            raise BackendTimeout(self.timeout, original_error=exc) from exc

        if result.returncode != 0:
            raise BackendQueryFailed(result.stderr or "", result.returncode)

        if result.stderr:
            logger.debug(f"sacct stderr: {result.stderr.strip()}")
        return result.stdout
