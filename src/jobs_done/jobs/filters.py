"""Local filtering and ordering of parsed job records."""

from collections.abc import Iterable
from datetime import datetime

from jobs_done.jobs.models import JobRecord, JobState


class JobFilter:
    """Re-checks the state and user filters locally and orders records.

    sacct's own ``--state`` selection is not exact (it matches jobs that were
    in a state at any point in the window), so the requested states are
    applied again here. Rows for any other user than ``user`` are dropped as
    well, whatever the backend returned.
    """

    def __init__(
        self, states: Iterable[JobState] = (), user: str | None = None
    ):
        self.states = frozenset(states)
        self.user = user

    def matches(self, record: JobRecord) -> bool:
        if self.user and record.user != self.user:
            return False
        return not self.states or record.state in self.states

    def apply(self, records: Iterable[JobRecord]) -> list[JobRecord]:
        """Keep matching records, preserving their order."""
        return [record for record in records if self.matches(record)]

    @staticmethod
    def sort(records: Iterable[JobRecord]) -> list[JobRecord]:
        """Sort ascending by end time; records without one go last."""
        return sorted(records, key=_end_time_key)

    def select(self, records: Iterable[JobRecord]) -> list[JobRecord]:
        """Filter and sort in one step."""
        return self.sort(self.apply(records))


def _end_time_key(record: JobRecord) -> tuple[bool, datetime]:
    if record.end_time is None:
        return (True, datetime.max)
    return (False, record.end_time)
