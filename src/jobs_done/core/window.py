"""Resolution of the query time window."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from jobs_done.core.config import DEFAULT_WINDOW_HOURS
from jobs_done.core.session import SessionState
from jobs_done.error_handling import InvalidDuration
from jobs_done.utils.validation import parse_duration, parse_timestamp

logger = logging.getLogger(__name__)


def look_back(now: datetime, value, unit: str) -> datetime:
    """Subtract a validated number of hours or days from ``now``.

    Raises:
        InvalidDuration: If the value is not a non-negative integer or reaches
            past the earliest representable date
    """
    amount = parse_duration(value, unit)
    try:
        return now - timedelta(**{unit: amount})
    except OverflowError as e:
        raise InvalidDuration(value, unit) from e


class WindowSource(Enum):
    """Which piece of input decided the lower bound."""

    SINCE = "since"
    HOURS = "hours"
    DAYS = "days"
    DAY = "day"
    SESSION = "session"
    FIRST_RUN = "first_run"


@dataclass(frozen=True)
class TimeIntent:
    """Time-related command-line input, still unvalidated."""

    since: str | None = None
    hours: str | int | None = None
    days: str | int | None = None
    day: bool = False


@dataclass(frozen=True)
class TimeWindow:
    """Absolute query window; the upper bound is always "now"."""

    lower_bound: datetime
    upper_bound: datetime
    source: WindowSource


class TimeWindowResolver:
    """Turns CLI time intent and the stored session into one lower bound.

    Priority is ``--since``, then relative hours, then ``--days``, then
    ``--day``, and finally the last session (or a fixed fallback window on the
    first run).
    """

    def __init__(
        self,
        default_hours: int = DEFAULT_WINDOW_HOURS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.default_hours = default_hours
        self.clock = clock

    def resolve(
        self,
        intent: TimeIntent,
        session: SessionState | None,
        current_user: str,
    ) -> TimeWindow:
        """Resolve the window for this run.

        Args:
            intent: Time options given on the command line
            session: Previously stored checkpoint, if any
            current_user: User the query runs for; a checkpoint owned by
                somebody else is ignored

        Returns:
            The resolved TimeWindow

        Raises:
            InvalidTimestamp: If ``since`` cannot be parsed
            InvalidDuration: If ``hours`` or ``days`` is not a non-negative integer
        """
        now = self.clock()

        if intent.since is not None:
            lower, source = parse_timestamp(intent.since), WindowSource.SINCE
        elif intent.hours is not None:
            lower = look_back(now, intent.hours, "hours")
            source = WindowSource.HOURS
        elif intent.days is not None:
            lower = look_back(now, intent.days, "days")
            source = WindowSource.DAYS
        elif intent.day:
            lower = now.replace(hour=0, minute=0, second=0, microsecond=0)
            source = WindowSource.DAY
        elif session is not None and session.owner_user == current_user:
            lower, source = session.last_invocation_time, WindowSource.SESSION
        else:
            if session is not None:
                logger.info(
                    f"Ignoring session state owned by {session.owner_user!r} "
                    f"(running as {current_user!r})"
                )
            lower = now - timedelta(hours=self.default_hours)
            source = WindowSource.FIRST_RUN

        if lower > now:
            logger.debug(
                f"Lower bound {lower.isoformat()} is in the future; expecting no jobs"
            )

        return TimeWindow(lower_bound=lower, upper_bound=now, source=source)
