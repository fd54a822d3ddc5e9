"""jobs-done: report SLURM jobs that finished since you last checked."""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for jobs-done."""
    from jobs_done.ui.cli import cli

    cli()
