"""Terminal output for jobs-done."""

from collections.abc import Sequence
from datetime import datetime

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from jobs_done.jobs.models import JobRecord, JobState

DISPLAY_DATE_FORMAT = "%b-%d %H:%M"

STATE_STYLES = {
    JobState.COMPLETED: "green",
    JobState.FAILED: "red",
    JobState.TIMEOUT: "red",
    JobState.NODE_FAIL: "red",
    JobState.OUT_OF_MEMORY: "red",
    JobState.CANCELLED: "yellow",
    JobState.PREEMPTED: "yellow",
    JobState.UNKNOWN: "dim",
}

COLUMNS = ["Job ID", "Name", "State", "Start", "End", "Exit"]


def format_time(value: datetime | None, placeholder: str) -> Text:
    if value is None:
        return Text(placeholder, style="yellow")
    return Text(value.strftime(DISPLAY_DATE_FORMAT))


class JobTablePresenter:
    """Renders finished jobs as a table.

    Color handling is left to the rich Console: a console created with
    ``no_color=True`` (or with ``NO_COLOR`` set) prints the same table without
    styles.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def build_table(self, records: Sequence[JobRecord]) -> Table:
        table = Table(
            show_header=True,
            header_style="bold",
            border_style="color(240)",
            box=box.HORIZONTALS,
        )
        for column in COLUMNS:
            table.add_column(column, no_wrap=column != "Name")

        for record in records:
            table.add_row(
                record.job_id,
                record.name,
                Text(record.state_label, style=STATE_STYLES[record.state]),
                format_time(record.start_time, "NOT STARTED"),
                format_time(record.end_time, "UNKNOWN"),
                "-" if record.exit_code is None else str(record.exit_code),
            )
        return table

    def render(
        self,
        records: Sequence[JobRecord],
        lower_bound: datetime,
        warning_count: int = 0,
    ) -> None:
        """Print the header, the job table and a parse-warning summary."""
        since = lower_bound.strftime(DISPLAY_DATE_FORMAT)

        if not records:
            self.console.print(
                f"[bold underline]No jobs have finished since[/bold underline] "
                f"[yellow]{since}[/yellow]"
            )
        else:
            self.console.print(
                f"[bold underline]Jobs finished since:[/bold underline] "
                f"[yellow]{since}[/yellow]"
            )
            self.console.print(self.build_table(records))

        if warning_count:
            noun = "line" if warning_count == 1 else "lines"
            self.console.print(
                f"[yellow]⚠️ {warning_count} backend {noun} could not be fully "
                "parsed (use --verbose for details)[/yellow]"
            )


class ConsoleInterface:
    """Console facade used by the CLI for status messages and job tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.presenter = JobTablePresenter(self.console)

    def show_jobs(
        self,
        records: Sequence[JobRecord],
        lower_bound: datetime,
        warning_count: int = 0,
    ) -> None:
        self.presenter.render(records, lower_bound, warning_count)

    def show_system_error(self, message: str) -> None:
        self.console.print(f"❌ {message}", style="red", markup=False)

    def show_warning(self, message: str) -> None:
        self.console.print(f"⚠️ {message}", style="yellow", markup=False)

    def show_info(self, message: str) -> None:
        self.console.print(message, markup=False)
