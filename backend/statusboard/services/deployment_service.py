"""Resolves the current deployment status of one repository environment."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import ValidationError

from statusboard.config import settings
from statusboard.dtos.dashboard import DeploymentAggregate, DeploymentInfo
from statusboard.dtos.github import GithubDeployment, GithubDeploymentStatus
from statusboard.entities.enums import DeploymentState
from statusboard.services.github.exceptions import GithubError
from statusboard.services.github.github_client import GitHubClient

logger = logging.getLogger(__name__)

ERROR_REFERENCE_URL = "#"


def error_deployment_aggregate() -> DeploymentAggregate:
    """Sentinel shown as a red error badge."""
    return DeploymentAggregate(
        latest=DeploymentInfo(
            status=DeploymentState.ERROR.value,
            timestamp=datetime.now(timezone.utc),
            reference_url=ERROR_REFERENCE_URL,
        ),
        last_success_timestamp=None,
    )


class DeploymentStatusFetcher:
    """
    Reads deployments and their status history.

    A deployment object's own ``state`` can lag behind its statuses
    sub-resource, so the effective status comes from the newest status entry.
    """

    def __init__(self, client: GitHubClient, per_page: int | None = None):
        self.client = client
        self.per_page = per_page or settings.DEPLOYMENTS_PER_PAGE

    async def get_deployment_info(
        self, owner: str, repo: str, environment: str
    ) -> DeploymentAggregate:
        """Never raises; failures yield the error sentinel."""
        full_name = f"{owner}/{repo}"
        try:
            return await self._fetch(full_name, environment)
        except (GithubError, ValidationError, KeyError, TypeError) as e:
            logger.error(
                f"Error fetching deployment info for {full_name} ({environment}): {e}"
            )
            return error_deployment_aggregate()

    async def _fetch(self, full_name: str, environment: str) -> DeploymentAggregate:
        raw_deployments = await self.client.list_deployments(
            full_name, environment, per_page=self.per_page
        )
        if not raw_deployments:
            return DeploymentAggregate()

        deployments = [GithubDeployment.model_validate(d) for d in raw_deployments]
        history: Dict[str, List[GithubDeploymentStatus]] = {}

        latest_deployment = deployments[0]
        statuses = await self._statuses(latest_deployment, history)
        latest = self._effective_status(latest_deployment, statuses)

        last_success = await self._last_success_timestamp(deployments, history)
        return DeploymentAggregate(latest=latest, last_success_timestamp=last_success)

    async def _statuses(
        self,
        deployment: GithubDeployment,
        history: Dict[str, List[GithubDeploymentStatus]],
    ) -> List[GithubDeploymentStatus]:
        url = deployment.statuses_url
        if url not in history:
            raw = await self.client.list_deployment_statuses(url)
            history[url] = [GithubDeploymentStatus.model_validate(s) for s in raw]
        return history[url]

    @staticmethod
    def _effective_status(
        deployment: GithubDeployment, statuses: List[GithubDeploymentStatus]
    ) -> DeploymentInfo:
        if statuses:
            # sorted() is stable, so equal timestamps keep the API order
            newest = sorted(statuses, key=lambda s: s.created_at, reverse=True)[0]
            return DeploymentInfo(
                status=newest.state,
                timestamp=newest.created_at,
                reference_url=newest.url,
            )
        return DeploymentInfo(
            status=deployment.state,
            timestamp=deployment.created_at,
            reference_url=deployment.url,
        )

    async def _last_success_timestamp(
        self,
        deployments: List[GithubDeployment],
        history: Dict[str, List[GithubDeploymentStatus]],
    ) -> Optional[datetime]:
        for deployment in deployments:
            if deployment.state != DeploymentState.SUCCESS.value:
                continue
            statuses = await self._statuses(deployment, history)
            confirmed = next(
                (s for s in statuses if s.state == DeploymentState.SUCCESS.value),
                None,
            )
            if confirmed:
                return confirmed.created_at
        return None
