from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from statusboard.config import settings
from statusboard.services.github.exceptions import (
    GithubApiError,
    GithubConfigurationError,
    GithubRateLimitError,
    GithubRequestError,
    GithubResponseError,
)


API_PREVIEW_HEADERS = {
    "Accept": "application/vnd.github+json",
}

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async client for the handful of GitHub REST endpoints the dashboard reads."""

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize GitHubClient.

        Args:
            token: Raw GitHub token for authentication
            api_url: GitHub API URL (defaults to api.github.com)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._token = token

        if not self._token:
            raise GithubConfigurationError("GitHub token is required to call the API")

        self._api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        self._rest = httpx.AsyncClient(
            base_url=self._api_url,
            timeout=timeout or settings.GITHUB_HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": settings.GITHUB_API_VERSION,
        }
        headers.update(API_PREVIEW_HEADERS)
        return headers

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.status_code in (403, 429):
            remaining = response.headers.get("X-RateLimit-Remaining")
            if remaining == "0" or "rate limit" in response.text.lower():
                self._handle_rate_limit(response)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GithubApiError(
                f"GitHub API error ({response.status_code}) for "
                f"{response.request.url}: {response.text}",
                status_code=response.status_code,
            ) from exc
        return response

    def _handle_rate_limit(self, response: httpx.Response) -> None:
        reset_header = response.headers.get("X-RateLimit-Reset")
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = None

        if retry_after_header:
            try:
                wait_seconds = float(retry_after_header)
            except ValueError:
                pass
        elif reset_header:
            try:
                reset_epoch = float(reset_header)
                now_epoch = datetime.now(timezone.utc).timestamp()
                wait_seconds = max(reset_epoch - now_epoch, 1.0)
            except ValueError:
                pass

        raise GithubRateLimitError(
            "GitHub rate limit reached",
            status_code=response.status_code,
            retry_after=wait_seconds,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._rest.request(
                method, url, headers=self._headers(), **kwargs
            )
        except httpx.RequestError as exc:
            raise GithubRequestError(f"Request to {url} failed: {exc}") from exc
        return self._handle_response(response)

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self._request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise GithubResponseError(f"Invalid JSON from {url}: {exc}") from exc

    @staticmethod
    def _expect_list(data: Any, url: str, key: str | None = None) -> List[Dict[str, Any]]:
        if key is not None:
            data = data.get(key) if isinstance(data, dict) else None
        if not isinstance(data, list):
            raise GithubResponseError(
                f"Unexpected payload from {url}: expected a list"
                + (f" under '{key}'" if key else "")
            )
        return data

    async def list_deployments(
        self, full_name: str, environment: str, per_page: int = 100
    ) -> List[Dict[str, Any]]:
        """List deployments for one environment, newest first."""
        url = f"/repos/{full_name}/deployments"
        params = {"environment": environment, "per_page": per_page}
        return self._expect_list(await self._get_json(url, params), url)

    async def list_deployment_statuses(self, statuses_url: str) -> List[Dict[str, Any]]:
        """Follow a deployment's ``statuses_url`` (absolute URL from the API)."""
        return self._expect_list(await self._get_json(statuses_url), statuses_url)

    async def list_workflow_runs(
        self, full_name: str, workflow_id: str, per_page: int = 5
    ) -> List[Dict[str, Any]]:
        url = f"/repos/{full_name}/actions/runs"
        params = {"workflow_id": workflow_id, "per_page": per_page}
        return self._expect_list(
            await self._get_json(url, params), url, key="workflow_runs"
        )

    async def list_workflow_jobs(self, full_name: str, run_id: int) -> List[Dict[str, Any]]:
        url = f"/repos/{full_name}/actions/runs/{run_id}/jobs"
        return self._expect_list(await self._get_json(url), url, key="jobs")

    async def download_job_logs(self, full_name: str, job_id: int) -> str:
        """
        Download the plain-text log of a job.

        GitHub answers with a redirect to short-lived blob storage; the
        Authorization header is dropped by httpx on the cross-origin hop.
        """
        response = await self._request(
            "GET",
            f"/repos/{full_name}/actions/jobs/{job_id}/logs",
            follow_redirects=True,
        )
        return response.text

    async def aclose(self) -> None:
        await self._rest.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
