"""
Unit tests for domain models.
"""

import pytest
from datetime import datetime
from pathlib import Path

from motion_notify.domain.models import Job, UploadResult, WorkerStats


class TestJob:
    """Test Job model."""

    def test_create_valid_job(self):
        """Test creating valid job."""
        job = Job(
            timestamp=datetime(2024, 3, 1, 14, 5, 30),
            sequence_tag="7",
            source_path=Path("/tmp/a.jpg"),
        )

        assert job.sequence_tag == "7"
        assert job.source_path == Path("/tmp/a.jpg")
        assert job.delete_after_upload is True

    def test_names_derived_from_timestamp(self):
        """Test container title and blob name."""
        job = Job(
            timestamp=datetime(2024, 3, 1, 14, 5, 30),
            sequence_tag="7",
            source_path=Path("/tmp/a.jpg"),
        )

        assert job.date_title == "2024-03-01"
        assert job.blob_name == "14:05:30-7"

    def test_string_path_is_converted(self):
        """Test that a str source path becomes a Path."""
        job = Job(datetime(2024, 3, 1), "1", "/tmp/b.jpg")

        assert isinstance(job.source_path, Path)

    def test_timestamp_truncated_to_seconds(self):
        """Test microseconds are dropped."""
        job = Job(datetime(2024, 3, 1, 0, 0, 1, 999), "1", Path("/tmp/b.jpg"))

        assert job.timestamp.microsecond == 0
        assert job.blob_name == "00:00:01-1"

    def test_job_is_immutable(self):
        """Test job cannot be modified."""
        job = Job(datetime(2024, 3, 1), "1", Path("/tmp/b.jpg"))

        with pytest.raises(AttributeError):
            job.sequence_tag = "2"

    def test_empty_sequence_tag_rejected(self):
        """Test job validation fails for empty tag."""
        with pytest.raises(ValueError):
            Job(datetime(2024, 3, 1), "", Path("/tmp/b.jpg"))


class TestUploadResult:
    """Test UploadResult model."""

    def test_failed_upload(self):
        """Test failed upload result."""
        result = UploadResult(
            success=False,
            error="Connection timeout"
        )

        assert result.success is False
        assert result.error == "Connection timeout"
        assert result.url is None


def test_worker_stats_defaults():
    stats = WorkerStats(pid=42)

    assert stats.queued == stats.delivered == stats.failed == stats.pending == 0
