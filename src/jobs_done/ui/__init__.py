"""User interface components for jobs-done."""

from jobs_done.ui.cli import cli
from jobs_done.ui.console import ConsoleInterface, JobTablePresenter

__all__ = [
    "cli",
    "ConsoleInterface",
    "JobTablePresenter",
]
