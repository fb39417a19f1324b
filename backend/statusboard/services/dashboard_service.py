"""Aggregation pipeline: turns GitHub responses into per-repository dashboard state."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from statusboard.dtos.dashboard import DashboardState, RepositoryAggregate
from statusboard.entities.repository_identifier import RepositoryIdentifier
from statusboard.entities.settings import DashboardSettings
from statusboard.services.deployment_service import DeploymentStatusFetcher
from statusboard.services.github.github_client import GitHubClient
from statusboard.services.workflow_scan_service import WorkflowScanFetcher

logger = logging.getLogger(__name__)

MISSING_TOKEN_ERROR = "Please enter your GitHub Personal Access Token."
NO_REPOSITORIES_ERROR = "Add at least one repository to start monitoring."
INVALID_REPOSITORY_ERROR = "Invalid repository format"


def configuration_error(settings: DashboardSettings) -> Optional[str]:
    """Return the user-facing reason a refresh cannot run, if any."""
    if not settings.github_token:
        return MISSING_TOKEN_ERROR
    if not settings.repositories:
        return NO_REPOSITORIES_ERROR
    return None


class StatusAggregationPipeline:
    """
    Builds a fresh ``DashboardState`` from one settings snapshot.

    Repositories and environments are resolved one at a time to keep the
    number of simultaneous requests against the API low; only the per-run
    scan details inside ``WorkflowScanFetcher`` fan out.
    """

    def __init__(
        self,
        settings: DashboardSettings,
        client: GitHubClient,
        deployment_fetcher: Optional[DeploymentStatusFetcher] = None,
        scan_fetcher: Optional[WorkflowScanFetcher] = None,
    ):
        self.settings = settings
        self.deployment_fetcher = deployment_fetcher or DeploymentStatusFetcher(client)
        self.scan_fetcher = scan_fetcher or WorkflowScanFetcher(client)

    async def refresh_all(self) -> DashboardState:
        error = configuration_error(self.settings)
        if error:
            logger.warning(f"Skipping refresh: {error}")
            return DashboardState(error=error)

        logger.info(
            f"Refreshing {len(self.settings.repositories)} repositories across "
            f"{len(self.settings.environments)} environments"
        )
        repositories = {}
        for full_name in self.settings.repositories:
            repositories[full_name] = await self.aggregate_repository(full_name)

        return DashboardState(
            repositories=repositories,
            refreshed_at=datetime.now(timezone.utc),
        )

    async def aggregate_repository(self, full_name: str) -> RepositoryAggregate:
        try:
            identifier = RepositoryIdentifier.parse(full_name)
        except ValueError:
            logger.warning(f"Skipping malformed repository entry {full_name!r}")
            return RepositoryAggregate(error=INVALID_REPOSITORY_ERROR)

        deployments = {}
        for environment in self.settings.environments:
            deployments[environment] = await self.deployment_fetcher.get_deployment_info(
                identifier.owner, identifier.name, environment
            )

        trivy_scans = await self.scan_fetcher.get_latest_workflow_runs(
            identifier.owner, identifier.name, self.settings.workflow_file_name
        )
        return RepositoryAggregate(deployments=deployments, trivy_scans=trivy_scans)
