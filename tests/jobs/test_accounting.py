"""Tests for the sacct adapter."""

from __future__ import annotations

import subprocess
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from jobs_done.error_handling import (
    BackendQueryFailed,
    BackendTimeout,
    BackendUnavailable,
    ErrorCategory,
)
from jobs_done.jobs.accounting import SACCT_FIELDS, SacctAdapter
from jobs_done.jobs.models import JobState

LOWER = datetime(2025, 1, 1, 9, 30, 15)


@pytest.fixture
def adapter():
    return SacctAdapter(command="sacct", timeout=30)


def completed(stdout="", stderr="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


def test_build_args_requests_parsable_output(adapter):
    args = adapter.build_args(LOWER, user="alice")

    assert args[0] == "sacct"
    assert "--noheader" in args
    assert "--parsable2" in args
    assert "--allocations" in args
    assert "--delimiter=|" in args
    assert args[args.index("--starttime") + 1] == "2025-01-01T09:30:15"
    assert args[args.index("--endtime") + 1] == "now"
    assert args[args.index("--user") + 1] == "alice"
    assert f"--format={','.join(SACCT_FIELDS)}" in args
    assert "--state" not in args


def test_build_args_pushes_state_filter(adapter):
    args = adapter.build_args(
        LOWER, [JobState.FAILED, JobState.TIMEOUT, JobState.FAILED], "alice"
    )
    assert args[args.index("--state") + 1] == "FAILED,TIMEOUT"


def test_unknown_state_filter_stays_local(adapter):
    """UNKNOWN means "anything sacct reports that we don't know", so no pushdown."""
    args = adapter.build_args(LOWER, [JobState.FAILED, JobState.UNKNOWN], "alice")
    assert "--state" not in args


def test_build_args_without_user(adapter):
    assert "--user" not in adapter.build_args(LOWER)


def test_query_returns_stdout(adapter, sample_sacct_output):
    with patch(
        "jobs_done.jobs.accounting.subprocess.run",
        return_value=completed(stdout=sample_sacct_output),
    ) as mock_run:
        output = adapter.query(LOWER, [], "alice")

    assert output == sample_sacct_output
    call_args = mock_run.call_args
    assert call_args[0][0] == adapter.build_args(LOWER, [], "alice")
    assert call_args[1]["timeout"] == 30
    assert call_args[1]["capture_output"] is True


def test_missing_command_raises_unavailable(adapter):
    with patch(
        "jobs_done.jobs.accounting.subprocess.run",
        side_effect=FileNotFoundError("sacct"),
    ):
        with pytest.raises(BackendUnavailable) as exc_info:
            adapter.query(LOWER, [], "alice")

    assert exc_info.value.command == "sacct"
    assert exc_info.value.category == ErrorCategory.BACKEND


def test_timeout_raises_backend_timeout(adapter):
    with patch(
        "jobs_done.jobs.accounting.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="sacct", timeout=30),
    ):
        with pytest.raises(BackendTimeout) as exc_info:
            adapter.query(LOWER, [], "alice")

    assert exc_info.value.timeout == 30
    assert exc_info.value.exit_code == 1


def test_non_zero_exit_raises_query_failed(adapter):
    stderr = "sacct: error: Problem talking to the database: Connection refused\n"
    with patch(
        "jobs_done.jobs.accounting.subprocess.run",
        return_value=completed(stderr=stderr, returncode=1),
    ) as mock_run:
        with pytest.raises(BackendQueryFailed) as exc_info:
            adapter.query(LOWER, [], "alice")

    assert exc_info.value.stderr == stderr
    assert exc_info.value.returncode == 1
    assert "Connection refused" in exc_info.value.get_user_message()
    # No retries
    assert mock_run.call_count == 1


def test_real_missing_binary(tmp_path):
    """A path that does not exist surfaces as BackendUnavailable."""
    adapter = SacctAdapter(command=str(tmp_path / "no-such-sacct"))
    with pytest.raises(BackendUnavailable):
        adapter.query(LOWER)
