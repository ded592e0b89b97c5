"""
The pipeline trigger flow.

Runs once to completion or early exit:
1. Fetch the latest commit on the branch
2. Stop unless it falls within the recency window
3. Create a pipeline for the branch
4. Fetch the pipeline's first job
5. Play that job

Steps run strictly in sequence. A failed API call ends the run; anything
already created on the server (e.g. the pipeline) is left in place.
"""

import logging
from datetime import UTC, datetime, timedelta

from trigger_client.client import GitLabClient, GitLabError
from trigger_common.models import TriggerOutcome, TriggerResult

from .config import DEFAULT_BRANCH, DEFAULT_WEEKS_LIMIT

logger = logging.getLogger(__name__)


def is_recent(commit_timestamp: datetime, now: datetime, window: timedelta) -> bool:
    """Return True iff the commit is strictly newer than now - window."""
    return commit_timestamp > now - window


def run_trigger_flow(
    client: GitLabClient,
    branch: str = DEFAULT_BRANCH,
    weeks_limit: int = DEFAULT_WEEKS_LIMIT,
    now: datetime | None = None,
) -> TriggerResult:
    """
    Trigger a pipeline for a branch if its latest commit is recent.

    Args:
        client: GitLab client for the target project
        branch: Branch to check and build
        weeks_limit: Recency window in weeks
        now: Reference time for the recency check (default: current UTC time)

    Returns:
        TriggerResult describing where the run stopped. API failures are
        logged and returned with outcome FAILED rather than raised.
    """
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    window = timedelta(weeks=weeks_limit)
    result = TriggerResult(outcome=TriggerOutcome.FAILED)
    step = "get_latest_commit"

    try:
        logger.info("Fetching latest commit...")
        commit = client.get_latest_commit(branch)
        if commit is None:
            logger.info("No commits found.")
            result.outcome = TriggerOutcome.NO_COMMITS
            return result

        result.commit = commit
        logger.info(f"Latest commit: {commit.id} on {commit.committed_date.isoformat()}")
        if not is_recent(commit.committed_date, now, window):
            logger.info("Latest commit is too old. No action taken.")
            result.outcome = TriggerOutcome.STALE_COMMIT
            return result

        step = "trigger_pipeline"
        logger.info("Triggering pipeline...")
        pipeline = client.trigger_pipeline(branch)
        result.pipeline = pipeline
        logger.info(f"Pipeline {pipeline.id} triggered.")

        step = "get_first_job"
        logger.info("Fetching first job...")
        job = client.get_first_job(pipeline.id)
        if job is None:
            logger.info("No jobs found in the pipeline.")
            result.outcome = TriggerOutcome.NO_JOBS
            return result

        step = "play_job"
        result.job = job
        logger.info(f"Playing job {job.id}...")
        client.play_job(job.id)
        logger.info(f"Job {job.id} started successfully.")
        result.outcome = TriggerOutcome.JOB_STARTED
        return result

    except GitLabError as e:
        logger.error(f"Error: {e}")
        result.outcome = TriggerOutcome.FAILED
        result.error = str(e)
        result.failed_step = step
        return result
