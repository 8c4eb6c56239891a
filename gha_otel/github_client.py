import asyncio
import logging
import random
from typing import Any, Optional

import httpx

from gha_otel.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT, SDK_VERSION
from gha_otel.models import WorkflowJob, WorkflowRun

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 502, 503, 504)
JOBS_PAGE_SIZE = 100


def _retry_after_seconds(value: Optional[str]) -> Optional[float]:
    """Seconds from a delta-seconds Retry-After header; None otherwise."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        logger.debug(f"Ignoring non-numeric Retry-After header: {value}")
        return None


class GitHubClient:

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize async GitHub Actions API client."""
        self.base_url = api_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"gha-otel-export/{SDK_VERSION}",
        }
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_connections=20,
                                max_keepalive_connections=10),
            follow_redirects=True,
            transport=transport,
        )
        self.retries = 5
        self.initial_backoff = 1.0

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(self, method: str, url: str,
                    **kwargs) -> tuple[Optional[httpx.Response],
                                       Optional[str]]:
        """Send a request with retries and backoff; returns (response, error)."""
        backoff = self.initial_backoff
        for attempt in range(self.retries):
            try:
                r = await self.client.request(method, url, **kwargs)
                if r.status_code in RETRYABLE_STATUS_CODES:
                    retry_after = _retry_after_seconds(r.headers.get("Retry-After"))
                    logger.debug(f"GitHub API returned {r.status_code} for {url}, retrying")
                    if retry_after is not None:
                        await asyncio.sleep(retry_after)
                    else:
                        await asyncio.sleep(backoff)
                        backoff = min(backoff * 2, 20) + random.random()
                    continue

                if r.status_code >= 400:
                    return r, f"GitHub API error {r.status_code}: {r.text}"

                return r, None

            except httpx.RequestError as e:
                if attempt == self.retries - 1:
                    return None, f"Network error: {e}"
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, 20) + random.random()

        return None, "Max retries exceeded"

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """JSON request wrapper; failures are returned as {"error": ..., "status": ...}."""
        r, error = await self._send(method, url, **kwargs)
        if error:
            return {"error": error, "status": r.status_code if r is not None else None}
        return r.json()

    async def get_workflow_run(
        self,
        owner: str,
        repo_name: str,
        run_id: int,
    ) -> tuple[Optional[WorkflowRun],
               Optional[str]]:
        """Get a workflow run."""
        r = await self._request("GET", f"/repos/{owner}/{repo_name}/actions/runs/{run_id}")
        if "error" in r:
            return None, r["error"]
        return WorkflowRun.model_validate(r), None

    async def list_jobs(
        self,
        owner: str,
        repo_name: str,
        run_id: int,
    ) -> tuple[list[WorkflowJob],
               Optional[str]]:
        """List all jobs (with their steps) of a workflow run's latest attempt."""
        jobs: list[WorkflowJob] = []
        page = 1
        while True:
            r = await self._request(
                "GET",
                f"/repos/{owner}/{repo_name}/actions/runs/{run_id}/jobs",
                params={"per_page": JOBS_PAGE_SIZE, "page": page},
            )
            if "error" in r:
                return jobs, r["error"]

            batch = r.get("jobs", [])
            jobs.extend(WorkflowJob.model_validate(job) for job in batch)
            if not batch or len(jobs) >= r.get("total_count", 0):
                return jobs, None
            page += 1

    async def get_job_logs(
        self,
        owner: str,
        repo_name: str,
        job_id: int,
    ) -> tuple[Optional[str],
               Optional[str]]:
        """Download the plain-text log of a job (the API redirects to storage)."""
        r, error = await self._send("GET", f"/repos/{owner}/{repo_name}/actions/jobs/{job_id}/logs")
        if error:
            return None, error
        return r.text, None

    async def find_artifact(
        self,
        owner: str,
        repo_name: str,
        run_id: int,
        name: str,
    ) -> tuple[Optional[dict],
               Optional[str]]:
        """Find a non-expired artifact of a run by name; (None, None) when absent."""
        r = await self._request(
            "GET",
            f"/repos/{owner}/{repo_name}/actions/runs/{run_id}/artifacts",
            params={"name": name},
        )
        if "error" in r:
            if r.get("status") == 404:
                return None, None
            return None, r["error"]

        for artifact in r.get("artifacts", []):
            if artifact.get("name") == name and not artifact.get("expired", False):
                return artifact, None
        return None, None

    async def download_artifact(
        self,
        owner: str,
        repo_name: str,
        artifact_id: int,
    ) -> tuple[Optional[bytes],
               Optional[str]]:
        """Download an artifact as a zip archive."""
        r, error = await self._send(
            "GET",
            f"/repos/{owner}/{repo_name}/actions/artifacts/{artifact_id}/zip",
        )
        if error:
            return None, error
        return r.content, None

    async def close(self):
        """Gracefully close the HTTPX client session."""
        await self.client.aclose()
