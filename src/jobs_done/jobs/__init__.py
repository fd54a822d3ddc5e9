"""Job accounting: querying, parsing and filtering finished jobs."""

from .accounting import AccountingBackend, SacctAdapter
from .filters import JobFilter
from .history import JobLog
from .models import JobRecord, JobState
from .parser import ParseStats, RecordParser

__all__ = [
    "AccountingBackend",
    "JobFilter",
    "JobLog",
    "JobRecord",
    "JobState",
    "ParseStats",
    "RecordParser",
    "SacctAdapter",
]
