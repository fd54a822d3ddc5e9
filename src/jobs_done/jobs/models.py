"""Job data models and types."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class JobState(Enum):
    """Terminal job states reported by the accounting backend."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    TIMEOUT = "TIMEOUT"
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    NODE_FAIL = "NODE_FAIL"
    PREEMPTED = "PREEMPTED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_backend(cls, raw: str | None) -> "JobState":
        """Map a backend state string onto the enumeration.

        sacct decorates some states (``CANCELLED by 1234``, ``CANCELLED+``), so
        only the first token is considered. Anything unrecognised becomes
        UNKNOWN; this never raises.
        """
        token = normalize_state(raw)
        if not token:
            return cls.UNKNOWN
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def choices(cls) -> list[str]:
        """State names accepted on the command line."""
        return [state.value for state in cls]


def normalize_state(raw: str | None) -> str:
    """Reduce a raw backend state to its bare upper-case name."""
    if not raw:
        return ""
    parts = raw.strip().split()
    if not parts:
        return ""
    return parts[0].rstrip("+").upper()


@dataclass(frozen=True)
class JobRecord:
    """One finished job as reported by the accounting backend.

    Array tasks (``123_4``) are plain records; no aggregation happens.
    """

    job_id: str
    name: str
    user: str
    state: JobState
    start_time: datetime | None = None
    end_time: datetime | None = None
    exit_code: int | None = None
    raw_state: str = ""

    def __post_init__(self):
        if not self.job_id:
            raise ValueError("job_id must not be empty")
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.end_time < self.start_time
        ):
            raise ValueError(
                f"Job {self.job_id} ends ({self.end_time}) before it starts "
                f"({self.start_time})"
            )

    @property
    def state_label(self) -> str:
        """State name for display; UNKNOWN keeps the backend's wording."""
        if self.state == JobState.UNKNOWN and self.raw_state:
            return self.raw_state
        return self.state.value
