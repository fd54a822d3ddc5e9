"""Parsing of delimited sacct output into JobRecords."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

from jobs_done.jobs.accounting import FIELD_DELIMITER, SACCT_FIELDS
from jobs_done.jobs.models import JobRecord, JobState, normalize_state
from jobs_done.utils.validation import to_local_naive

logger = logging.getLogger(__name__)

EXPECTED_FIELDS = len(SACCT_FIELDS)
# Fields after the job name: user, state, start, end, exit code
TRAILING_FIELDS = EXPECTED_FIELDS - 2

# sacct placeholders for "not yet" / "never"
TIMESTAMP_PLACEHOLDERS = {"", "unknown", "none", "n/a"}

# Jobs in these states have not finished yet
ACTIVE_STATES = {
    "PENDING",
    "RUNNING",
    "REQUEUED",
    "REQUEUE_FED",
    "REQUEUE_HOLD",
    "RESIZING",
    "SUSPENDED",
    "CONFIGURING",
    "COMPLETING",
    "SIGNALING",
    "STAGE_OUT",
    "STOPPED",
    "RESV_DEL_HOLD",
    "REVOKED",
}


@dataclass
class ParseStats:
    """Counters for rows that were dropped or only partly understood."""

    skipped: int = 0
    anomalies: int = 0
    unknown_states: int = 0

    @property
    def warning_count(self) -> int:
        return self.skipped + self.anomalies


def parse_sacct_timestamp(value: str) -> datetime | None:
    """Parse a sacct Start/End value; placeholders and garbage become None."""
    text = value.strip()
    if text.lower() in TIMESTAMP_PLACEHOLDERS:
        return None
    try:
        return to_local_naive(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def parse_exit_code(value: str) -> int | None:
    """Parse a sacct ExitCode (``"1:0"`` is exit status 1, signal 0)."""
    text = value.strip().split(":", 1)[0]
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def is_job_step(job_id: str) -> bool:
    """Whether the id names a step (``123.batch``, ``123_4.0``) not a job."""
    return "." in job_id


class RecordParser:
    """Line-oriented parser for ``sacct --parsable2`` output.

    A parser instance keeps counters of what it had to skip or guess, so the
    caller can report a summary after consuming :meth:`parse`.
    """

    def __init__(self, delimiter: str = FIELD_DELIMITER):
        self.delimiter = delimiter
        self.stats = ParseStats()

    def parse(self, raw: str) -> Iterator[JobRecord]:
        """Yield one JobRecord per finished job, in backend order.

        Malformed lines are skipped with a warning; they never abort parsing.
        The returned generator can be consumed once.
        """
        for line_number, line in enumerate(raw.splitlines(), start=1):
            if not line.strip():
                continue
            record = self.parse_line(line, line_number)
            if record is not None:
                yield record

    def split_fields(self, line: str) -> list[str] | None:
        """Split a row into exactly EXPECTED_FIELDS fields.

        Extra delimiters are assumed to come from the job name, which is the
        only free-text field.
        """
        fields = line.split(self.delimiter)
        if len(fields) < EXPECTED_FIELDS:
            return None
        if len(fields) > EXPECTED_FIELDS:
            name = self.delimiter.join(fields[1:-TRAILING_FIELDS])
            fields = [fields[0], name, *fields[-TRAILING_FIELDS:]]
        return fields

    def parse_line(self, line: str, line_number: int = 0) -> JobRecord | None:
        """Parse a single row, or return None if it is not a reportable job."""
        fields = self.split_fields(line)
        if fields is None:
            self.stats.skipped += 1
            logger.warning(
                f"Skipping line {line_number}: expected {EXPECTED_FIELDS} fields, "
                f"got {len(line.split(self.delimiter))}"
            )
            return None

        job_id, name, user, raw_state, raw_start, raw_end, raw_exit = fields
        job_id = job_id.strip()
        raw_state = raw_state.strip()

        if not job_id:
            self.stats.skipped += 1
            logger.warning(f"Skipping line {line_number}: empty job id")
            return None

        if is_job_step(job_id):
            logger.debug(f"Skipping job step {job_id}")
            return None

        if normalize_state(raw_state) in ACTIVE_STATES:
            logger.debug(f"Skipping unfinished job {job_id} ({raw_state})")
            return None

        state = JobState.from_backend(raw_state)
        if state == JobState.UNKNOWN:
            self.stats.unknown_states += 1
            logger.info(f"Job {job_id} has unrecognised state {raw_state!r}")

        start_time = self._parse_time(raw_start, job_id, "start")
        end_time = self._parse_time(raw_end, job_id, "end")
        if start_time is not None and end_time is not None and end_time < start_time:
            self.stats.anomalies += 1
            logger.warning(f"Job {job_id} ends before it starts; dropping end time")
            end_time = None

        return JobRecord(
            job_id=job_id,
            name=name.strip(),
            user=user.strip(),
            state=state,
            start_time=start_time,
            end_time=end_time,
            exit_code=parse_exit_code(raw_exit),
            raw_state=raw_state,
        )

    def _parse_time(self, value: str, job_id: str, field: str) -> datetime | None:
        parsed = parse_sacct_timestamp(value)
        if parsed is None and value.strip().lower() not in TIMESTAMP_PLACEHOLDERS:
            self.stats.anomalies += 1
            logger.warning(f"Job {job_id}: unparseable {field} time {value.strip()!r}")
        return parsed
