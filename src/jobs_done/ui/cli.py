"""Command-line interface for jobs-done."""

import getpass
import logging
import os
import sys
from collections.abc import Sequence

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from jobs_done import __version__
from jobs_done.core.config import SettingsManager
from jobs_done.core.session import SessionState, SessionStateStore
from jobs_done.core.window import TimeIntent, TimeWindow, TimeWindowResolver
from jobs_done.error_handling import JobsDoneError
from jobs_done.jobs.accounting import AccountingBackend, SacctAdapter
from jobs_done.jobs.filters import JobFilter
from jobs_done.jobs.history import JobLog
from jobs_done.jobs.models import JobState
from jobs_done.jobs.parser import RecordParser
from jobs_done.ui.console import ConsoleInterface

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def default_user() -> str:
    """Name of the user running the command."""
    return os.environ.get("USER") or getpass.getuser()


def configure_logging(verbose: bool) -> None:
    """Send package log records to stderr through rich."""
    package_logger = logging.getLogger("jobs_done")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run_report(
    intent: TimeIntent,
    states: Sequence[JobState],
    user: str,
    *,
    backend: AccountingBackend,
    store: SessionStateStore,
    resolver: TimeWindowResolver,
    ui: ConsoleInterface,
    job_log: JobLog | None = None,
) -> TimeWindow:
    """Resolve the window, query, parse, render and advance the checkpoint.

    The checkpoint is only written after the jobs were shown; any
    JobsDoneError raised on the way leaves it untouched.

    Returns:
        The window that was reported on

    Raises:
        JobsDoneError: On invalid input or a failed accounting query
    """
    session = store.load()
    window = resolver.resolve(intent, session, user)
    logger.debug(
        f"Window from {window.lower_bound.isoformat()} ({window.source.value})"
    )

    raw = backend.query(window.lower_bound, states, user)

    parser = RecordParser()
    records = JobFilter(states, user).select(parser.parse(raw))
    ui.show_jobs(records, window.lower_bound, parser.stats.warning_count)

    if job_log is not None:
        job_log.append(records)

    try:
        store.save(SessionState(last_invocation_time=window.upper_bound, owner_user=user))
    except OSError as e:
        logger.debug(f"Saving session state failed: {e}")
        ui.show_warning(f"Could not save session state to {store.path}: {e}")

    return window


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument("hours", required=False)
@click.option(
    "--day", is_flag=True, help="Get finished jobs since midnight today"
)
@click.option(
    "--since",
    default=None,
    metavar="YYYY-MM-DDTHH:MM:SS",
    help="Get finished jobs since a specific time (ISO-8601, local or UTC)",
)
@click.option(
    "--days", default=None, metavar="N", help="Get finished jobs from the last N days"
)
@click.option(
    "--state",
    "states",
    multiple=True,
    type=click.Choice(JobState.choices(), case_sensitive=False),
    help="Only show jobs in this state (repeatable)",
)
@click.option("-u", "--user", default=None, help="SLURM username (default: you)")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(
    hours: str | None,
    day: bool,
    since: str | None,
    days: str | None,
    states: tuple[str, ...],
    user: str | None,
    no_color: bool,
    verbose: bool,
):
    """Show SLURM jobs that finished since you last checked.

    HOURS is an optional number of hours to look back instead.
    """
    window_options = [hours is not None, day, since is not None, days is not None]
    if sum(window_options) > 1:
        raise click.UsageError(
            "HOURS, --day, --since and --days are mutually exclusive"
        )

    configure_logging(verbose)
    ui = ConsoleInterface(Console(no_color=True if no_color else None))

    settings_manager = SettingsManager()
    user = user or default_user()
    job_states = [JobState(state.upper()) for state in states]

    store = SessionStateStore(settings_manager.get_state_file())
    backend = SacctAdapter(
        command=settings_manager.get_sacct_command(),
        timeout=settings_manager.get_timeout(),
    )
    resolver = TimeWindowResolver(
        default_hours=settings_manager.get_default_window_hours()
    )
    job_log = (
        JobLog(settings_manager.get_job_log_file())
        if settings_manager.get_log_jobs()
        else None
    )

    intent = TimeIntent(since=since, hours=hours, days=days, day=day)

    try:
        run_report(
            intent,
            job_states,
            user,
            backend=backend,
            store=store,
            resolver=resolver,
            ui=ui,
            job_log=job_log,
        )
    except JobsDoneError as e:
        logger.debug(f"Run aborted: {e!r}")
        ui.show_system_error(e.get_user_message())
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        ui.show_info("Interrupted")
        sys.exit(130)
