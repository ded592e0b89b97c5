"""
HTTP client for the GitLab REST API (v4).

Each operation is one blocking request. Failures are raised as a GitLabError
subclass naming the kind of failure, so the caller decides per call whether
to abort, retry or continue.
"""

import logging
from typing import Any
from urllib.parse import quote

import requests

from trigger_common.models import Commit, Job, Pipeline

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://gitlab.com/api/v4"


class GitLabError(RuntimeError):
    """Base class for failed GitLab API calls."""

    def __init__(self, message: str, method: str, path: str):
        super().__init__(message)
        self.method = method
        self.path = path


class GitLabTransportError(GitLabError):
    """The request never produced a response (connection error, timeout)."""


class GitLabHTTPError(GitLabError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, method: str, path: str, status_code: int):
        super().__init__(message, method, path)
        self.status_code = status_code


class GitLabResponseError(GitLabError):
    """The response body was not JSON, or not the expected shape."""


class GitLabClient:
    """
    Client for a single GitLab project.

    Args:
        project_id: Numeric id or "group/project" path
        private_token: Token sent in the PRIVATE-TOKEN header
        api_url: Base URL of the API, e.g. https://gitlab.com/api/v4
        timeout: Seconds to wait for each request
        verify_ssl: Whether to verify TLS certificates
    """

    def __init__(
        self,
        project_id: str,
        private_token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30,
        verify_ssl: bool = True,
    ):
        self.api_url = api_url.rstrip("/")
        self.project_id = str(project_id)
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._headers = {
            "PRIVATE-TOKEN": private_token,
            "Content-Type": "application/json",
        }

    @property
    def project_path(self) -> str:
        """URL path of the project, with the id encoded for group/project paths."""
        return f"/projects/{quote(self.project_id, safe='')}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        url = f"{self.api_url}{path}"
        logger.debug(f"{method} {url} params={params or {}}")
        try:
            response = requests.request(
                method,
                url,
                headers=self._headers,
                params=params,
                json=payload,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise GitLabTransportError(
                f"{method} {path} failed: {e}", method, path
            ) from e
        except UnicodeEncodeError as e:
            raise GitLabTransportError(
                f"{method} {path} failed: request headers are not latin-1 encodable ({e.reason})",
                method,
                path,
            ) from e

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise GitLabHTTPError(
                f"{method} {path} returned HTTP {response.status_code}: {response.text[:200]}",
                method,
                path,
                response.status_code,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise GitLabResponseError(
                f"Invalid JSON response from {method} {path}: {response.text[:200]}",
                method,
                path,
            ) from e

    def _expect_list(self, body: Any, method: str, path: str) -> list:
        if not isinstance(body, list):
            raise GitLabResponseError(
                f"Expected a JSON array from {method} {path}, got {type(body).__name__}",
                method,
                path,
            )
        return body

    def _build(self, model: type, data: Any, method: str, path: str) -> Any:
        if not isinstance(data, dict):
            raise GitLabResponseError(
                f"Expected a JSON object from {method} {path}, got {type(data).__name__}",
                method,
                path,
            )
        try:
            return model.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise GitLabResponseError(
                f"Malformed {model.__name__.lower()} in response from {method} {path}: {e!r}",
                method,
                path,
            ) from e

    def get_latest_commit(self, branch: str) -> Commit | None:
        """
        Fetch the most recent commit on a branch.

        Returns:
            The head commit, or None if the branch has no commits
        """
        path = f"{self.project_path}/repository/commits"
        body = self._request("GET", path, params={"ref_name": branch, "per_page": 1})
        commits = self._expect_list(body, "GET", path)
        if not commits:
            return None
        return self._build(Commit, commits[0], "GET", path)

    def trigger_pipeline(self, branch: str) -> Pipeline:
        """Create a new pipeline for a branch. Calling twice creates two pipelines."""
        path = f"{self.project_path}/pipeline"
        body = self._request("POST", path, payload={"ref": branch})
        return self._build(Pipeline, body, "POST", path)

    def get_first_job(self, pipeline_id: int) -> Job | None:
        """Return the first job of a pipeline in API order, or None if it has none."""
        path = f"{self.project_path}/pipelines/{pipeline_id}/jobs"
        body = self._request("GET", path)
        jobs = self._expect_list(body, "GET", path)
        if not jobs:
            return None
        return self._build(Job, jobs[0], "GET", path)

    def play_job(self, job_id: int) -> Job:
        """Start a manual or pending job."""
        path = f"{self.project_path}/jobs/{job_id}/play"
        body = self._request("POST", path)
        return self._build(Job, body, "POST", path)
