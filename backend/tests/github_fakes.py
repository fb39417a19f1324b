"""Test doubles: an in-memory Redis and a routed fake GitHub API."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from statusboard.services.github.github_client import GitHubClient

API_URL = "https://api.github.test"


class InMemoryRedis:
    """Implements the few string commands the settings repository uses."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def pipeline(self, transaction: bool = True) -> "InMemoryPipeline":
        return InMemoryPipeline(self)


class InMemoryPipeline:
    """Buffers SETs and applies them together on ``execute()``."""

    def __init__(self, redis_client: InMemoryRedis):
        self._redis = redis_client
        self._pending: List[tuple] = []

    def set(self, key: str, value: str) -> "InMemoryPipeline":
        self._pending.append((key, value))
        return self

    def execute(self) -> List[bool]:
        results = [self._redis.set(key, value) for key, value in self._pending]
        self._pending = []
        return results


class FakeGitHub:
    """
    Routes requests by URL path.

    A route value may be JSON data, a ``str`` (plain-text body), an
    ``httpx.Response``, an exception instance (raised as a transport error),
    or a sync/async callable taking the request and returning one of those.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})

        route = self.routes[request.url.path]
        if callable(route):
            route = route(request)
            if asyncio.iscoroutine(route):
                route = await route
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, json=route)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, token: str = "ghp_testtoken") -> GitHubClient:
        return GitHubClient(token=token, api_url=API_URL, transport=self.transport())


def deployment(
    deployment_id: int,
    state: Optional[str],
    created_at: str,
    repo: str = "org/a",
) -> Dict[str, Any]:
    return {
        "id": deployment_id,
        "url": f"{API_URL}/repos/{repo}/deployments/{deployment_id}",
        "statuses_url": f"{API_URL}/repos/{repo}/deployments/{deployment_id}/statuses",
        "environment": "prod",
        "state": state,
        "created_at": created_at,
    }


def statuses_path(deployment_id: int, repo: str = "org/a") -> str:
    return f"/repos/{repo}/deployments/{deployment_id}/statuses"


def deployment_status(status_id: int, state: str, created_at: str) -> Dict[str, Any]:
    return {
        "id": status_id,
        "state": state,
        "url": f"{API_URL}/repos/org/a/deployments/statuses/{status_id}",
        "created_at": created_at,
    }


def workflow_run(run_id: int, conclusion: Optional[str] = "success") -> Dict[str, Any]:
    return {
        "id": run_id,
        "conclusion": conclusion,
        "html_url": f"https://github.com/org/a/actions/runs/{run_id}",
        "created_at": f"2024-05-{run_id:02d}T10:00:00Z",
    }


TRIVY_LOG = """
2024-05-01T10:00:01.000Z Run aquasecurity/trivy-action@master
2024-05-01T10:00:09.000Z app:latest (alpine 3.19.1)
2024-05-01T10:00:09.000Z ===================================
2024-05-01T10:00:09.000Z Total: 7 (LOW: 2, MEDIUM: 3, HIGH: 1, CRITICAL: 1)
2024-05-01T10:00:10.000Z Post job cleanup.
""".strip()


def run_async(coro):
    return asyncio.run(coro)
