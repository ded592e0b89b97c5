"""
Data models for GitLab API records and trigger results.

These models mirror the parts of the GitLab API responses the trigger flow
reads. They are transient: built from a response, used once, never stored.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, treating naive values as UTC."""
    if not isinstance(value, str):
        raise TypeError(f"Expected ISO timestamp string, got {type(value).__name__}")
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def _parse_id(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"Expected integer id, got {type(value).__name__}")
    return int(value)


@dataclass
class Commit:
    """
    Represents the head commit of a branch.

    Only id and committed_date are required; the flow uses the date for the
    recency check and the id for logging.
    """

    id: str
    committed_date: datetime
    short_id: str | None = None
    title: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commit":
        """Create a commit from a GitLab commits API entry."""
        return cls(
            id=str(data["id"]),
            committed_date=parse_timestamp(data["committed_date"]),
            short_id=data.get("short_id"),
            title=data.get("title"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert commit to dictionary format (for JSON output)."""
        return {
            "id": self.id,
            "short_id": self.short_id,
            "title": self.title,
            "committed_date": self.committed_date.isoformat(),
        }


@dataclass
class Pipeline:
    """Represents a pipeline created for a branch."""

    id: int
    ref: str | None = None
    status: str | None = None
    web_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pipeline":
        """Create a pipeline from a GitLab pipeline API response."""
        return cls(
            id=_parse_id(data["id"]),
            ref=data.get("ref"),
            status=data.get("status"),
            web_url=data.get("web_url"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ref": self.ref,
            "status": self.status,
            "web_url": self.web_url,
        }


@dataclass
class Job:
    """Represents a single job within a pipeline."""

    id: int
    name: str | None = None
    stage: str | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        """Create a job from a GitLab jobs API entry."""
        return cls(
            id=_parse_id(data["id"]),
            name=data.get("name"),
            stage=data.get("stage"),
            status=data.get("status"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "stage": self.stage,
            "status": self.status,
        }


class TriggerOutcome(str, Enum):
    """How a single run of the trigger flow ended."""

    NO_COMMITS = "no_commits"
    STALE_COMMIT = "stale_commit"
    NO_JOBS = "no_jobs"
    JOB_STARTED = "job_started"
    FAILED = "failed"


@dataclass
class TriggerResult:
    """
    Record of one trigger flow invocation.

    Holds whatever the flow got to before it stopped: a failed run that
    already created a pipeline still reports that pipeline.
    """

    outcome: TriggerOutcome
    commit: Commit | None = None
    pipeline: Pipeline | None = None
    job: Job | None = None
    error: str | None = None  # Message of the caught failure
    failed_step: str | None = None  # Client operation that raised

    @property
    def succeeded(self) -> bool:
        """True for every outcome except FAILED, including no-op endings."""
        return self.outcome is not TriggerOutcome.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary format (for JSON output)."""
        return {
            "outcome": self.outcome.value,
            "commit": self.commit.to_dict() if self.commit else None,
            "pipeline": self.pipeline.to_dict() if self.pipeline else None,
            "job": self.job.to_dict() if self.job else None,
            "error": self.error,
            "failed_step": self.failed_step,
        }
