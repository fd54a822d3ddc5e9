"""Tests for the job log."""

from datetime import datetime
from unittest.mock import patch

from jobs_done.jobs.history import JobLog, format_log_line
from jobs_done.jobs.models import JobRecord, JobState


def sample_records():
    return [
        JobRecord(
            job_id="123",
            name="run1",
            user="alice",
            state=JobState.COMPLETED,
            start_time=datetime(2025, 1, 1, 10, 0),
            end_time=datetime(2025, 1, 1, 10, 5),
            exit_code=0,
        ),
        JobRecord(
            job_id="125",
            name="boot",
            user="alice",
            state=JobState.UNKNOWN,
            raw_state="BOOT_FAIL",
        ),
    ]


def test_format_log_line():
    first, second = sample_records()
    assert format_log_line(first) == "123;run1;COMPLETED;2025-01-01 10:00:00;2025-01-01 10:05:00;0"
    assert format_log_line(second) == "125;boot;BOOT_FAIL;None;None;"


def test_append_creates_and_extends_log(tmp_path):
    log_path = tmp_path / "nested" / "jobs.log"
    job_log = JobLog(log_path)

    assert job_log.append(sample_records()) == 2
    assert job_log.append(sample_records()[:1]) == 1

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("123;")
    assert lines[2].startswith("123;")


def test_append_nothing_does_not_create_file(tmp_path):
    log_path = tmp_path / "jobs.log"
    assert JobLog(log_path).append([]) == 0
    assert not log_path.exists()


def test_write_failure_is_not_fatal(tmp_path, caplog):
    job_log = JobLog(tmp_path / "jobs.log")
    with patch("builtins.open", side_effect=PermissionError("read-only")):
        with caplog.at_level("WARNING"):
            assert job_log.append(sample_records()) == 0

    assert any("Could not write job log" in rec.message for rec in caplog.records)
