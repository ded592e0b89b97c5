"""
Unit tests for trigger_common.models.

Tests parsing of GitLab API records and serialization of trigger results.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from trigger_common.models import (
    Commit,
    Job,
    Pipeline,
    TriggerOutcome,
    TriggerResult,
    parse_timestamp,
)


class TestParseTimestamp:
    """Test suite for parse_timestamp."""

    def test_zulu_suffix(self):
        """Test that a trailing Z is read as UTC."""
        dt = parse_timestamp("2024-01-15T10:00:00Z")
        assert dt == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

    def test_offset_is_preserved(self):
        """Test GitLab's usual format with milliseconds and an offset."""
        dt = parse_timestamp("2024-01-15T12:00:00.000+02:00")
        assert dt.utcoffset() == timedelta(hours=2)
        assert dt == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

    def test_naive_is_utc(self):
        """Test that timestamps without an offset are taken as UTC."""
        dt = parse_timestamp("2024-01-15T10:00:00")
        assert dt.tzinfo is UTC

    def test_invalid_string_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            parse_timestamp(1705312800)


class TestCommit:
    """Test suite for Commit."""

    def test_from_dict(self):
        """Test creating a commit from a commits API entry."""
        commit = Commit.from_dict(
            {
                "id": "abc123",
                "short_id": "abc",
                "title": "Fix build",
                "committed_date": "2024-01-15T10:00:00.000+00:00",
            }
        )

        assert commit.id == "abc123"
        assert commit.short_id == "abc"
        assert commit.title == "Fix build"
        assert commit.committed_date == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_from_dict_minimal(self):
        """Test that only id and committed_date are required."""
        commit = Commit.from_dict({"id": "abc123", "committed_date": "2024-01-15T10:00:00Z"})
        assert commit.short_id is None
        assert commit.title is None

    def test_from_dict_missing_date(self):
        with pytest.raises(KeyError):
            Commit.from_dict({"id": "abc123"})

    def test_to_dict(self):
        commit = Commit(id="abc123", committed_date=datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        assert commit.to_dict() == {
            "id": "abc123",
            "short_id": None,
            "title": None,
            "committed_date": "2024-01-15T10:00:00+00:00",
        }


class TestPipelineAndJob:
    """Test suite for Pipeline and Job."""

    def test_pipeline_from_dict(self):
        pipeline = Pipeline.from_dict(
            {"id": 555, "ref": "master", "status": "created", "web_url": "https://x/555"}
        )
        assert pipeline.id == 555
        assert pipeline.ref == "master"
        assert pipeline.status == "created"

    def test_pipeline_missing_id(self):
        """Test that an error body without an id is rejected."""
        with pytest.raises(KeyError):
            Pipeline.from_dict({"message": "403 Forbidden"})

    def test_job_from_dict(self):
        job = Job.from_dict({"id": 900, "name": "deploy", "stage": "deploy", "status": "manual"})
        assert job.id == 900
        assert job.name == "deploy"
        assert job.status == "manual"

    def test_job_numeric_string_id(self):
        assert Job.from_dict({"id": "901"}).id == 901

    def test_job_rejects_bool_id(self):
        with pytest.raises(TypeError):
            Job.from_dict({"id": True})

    def test_job_rejects_non_numeric_id(self):
        with pytest.raises(ValueError):
            Job.from_dict({"id": "abc"})


class TestTriggerResult:
    """Test suite for TriggerResult."""

    @pytest.mark.parametrize(
        "outcome",
        [
            TriggerOutcome.NO_COMMITS,
            TriggerOutcome.STALE_COMMIT,
            TriggerOutcome.NO_JOBS,
            TriggerOutcome.JOB_STARTED,
        ],
    )
    def test_non_failed_outcomes_succeed(self, outcome):
        """Test that no-op endings count as success."""
        assert TriggerResult(outcome=outcome).succeeded is True

    def test_failed_outcome(self):
        result = TriggerResult(outcome=TriggerOutcome.FAILED, error="boom", failed_step="play_job")
        assert result.succeeded is False

    def test_to_dict(self):
        """Test serialization of a completed run."""
        result = TriggerResult(
            outcome=TriggerOutcome.JOB_STARTED,
            commit=Commit(id="abc123", committed_date=datetime(2024, 1, 15, tzinfo=UTC)),
            pipeline=Pipeline(id=555),
            job=Job(id=900),
        )
        data = result.to_dict()

        assert data["outcome"] == "job_started"
        assert data["commit"]["id"] == "abc123"
        assert data["pipeline"]["id"] == 555
        assert data["job"]["id"] == 900
        assert data["error"] is None
        assert data["failed_step"] is None

    def test_to_dict_empty(self):
        data = TriggerResult(outcome=TriggerOutcome.NO_COMMITS).to_dict()
        assert data["commit"] is None
        assert data["pipeline"] is None
        assert data["job"] is None
