"""Shared fixtures for jobs-done tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep every test away from the real state directory and settings."""
    for name in (
        "JOBS_DONE_SACCT",
        "JOBS_DONE_TIMEOUT",
        "JOBS_DONE_DEFAULT_HOURS",
        "JOBS_DONE_LOG_JOBS",
        "XDG_STATE_HOME",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    state_dir = tmp_path / "state"
    monkeypatch.setenv("JOBS_DONE_STATE_DIR", str(state_dir))
    monkeypatch.setenv("USER", "alice")
    monkeypatch.setenv("COLUMNS", "200")
    yield state_dir

    package_logger = logging.getLogger("jobs_done")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_sacct_output() -> str:
    """Two finished jobs in sacct --parsable2 form."""
    return (
        "123|run1|alice|COMPLETED|2025-01-01T10:00:00|2025-01-01T10:05:00|0\n"
        "124|run2|alice|FAILED|2025-01-01T11:00:00|2025-01-01T11:01:00|1\n"
    )
