"""Builds the browser-facing dashboard view from aggregated state."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from statusboard.config import settings as app_config
from statusboard.dtos.dashboard import (
    DashboardResponse,
    DashboardState,
    DeploymentAggregate,
    DeploymentView,
    RepositoryAggregate,
    RepositoryCard,
    ScanRunView,
    WorkflowRunSummary,
)
from statusboard.entities.enums import (
    DeploymentFreshness,
    DeploymentState,
    WorkflowConclusion,
)
from statusboard.entities.settings import DashboardSettings

DEFAULT_COLOR = "blue"

DEPLOYMENT_STATUS_COLORS: Dict[str, str] = {
    DeploymentState.SUCCESS.value: "green",
    DeploymentState.FAILURE.value: "red",
    DeploymentState.ERROR.value: "red",
    DeploymentState.PENDING.value: "yellow",
    DeploymentState.IN_PROGRESS.value: "yellow",
    DeploymentState.INACTIVE.value: "gray",
    "cancelled": "gray",
}

CONCLUSION_COLORS: Dict[str, str] = {
    WorkflowConclusion.SUCCESS.value: "green",
    WorkflowConclusion.FAILURE.value: "red",
    WorkflowConclusion.NEUTRAL.value: "gray",
    WorkflowConclusion.CANCELLED.value: "yellow",
    WorkflowConclusion.SKIPPED.value: "indigo",
    WorkflowConclusion.TIMED_OUT.value: "orange",
    WorkflowConclusion.ACTION_REQUIRED.value: "purple",
}

FRESHNESS_COLORS: Dict[DeploymentFreshness, str] = {
    DeploymentFreshness.FRESH: "green",
    DeploymentFreshness.AGING: "yellow",
    DeploymentFreshness.STALE: "red",
    DeploymentFreshness.UNKNOWN: "gray",
}


def deployment_status_color(status: Optional[str]) -> str:
    return DEPLOYMENT_STATUS_COLORS.get(status or "", DEFAULT_COLOR)


def conclusion_color(conclusion: Optional[str]) -> str:
    return CONCLUSION_COLORS.get(conclusion or "", DEFAULT_COLOR)


def deployment_freshness(
    last_success: Optional[datetime], now: Optional[datetime] = None
) -> DeploymentFreshness:
    """Bucket the age of the last successful deployment."""
    if last_success is None:
        return DeploymentFreshness.UNKNOWN
    now = now or datetime.now(timezone.utc)
    if last_success.tzinfo is None:
        last_success = last_success.replace(tzinfo=timezone.utc)

    age = now - last_success
    if age < timedelta(weeks=app_config.FRESH_DEPLOYMENT_WEEKS):
        return DeploymentFreshness.FRESH
    if age < timedelta(weeks=app_config.STALE_DEPLOYMENT_WEEKS):
        return DeploymentFreshness.AGING
    return DeploymentFreshness.STALE


def _deployment_view(
    environment: str, aggregate: DeploymentAggregate, now: datetime
) -> DeploymentView:
    latest = aggregate.latest
    freshness = deployment_freshness(aggregate.last_success_timestamp, now)
    return DeploymentView(
        environment=environment,
        status=latest.status if latest else None,
        status_color=deployment_status_color(latest.status if latest else None),
        timestamp=latest.timestamp if latest else None,
        reference_url=latest.reference_url if latest else None,
        last_success_timestamp=aggregate.last_success_timestamp,
        freshness=freshness,
        freshness_color=FRESHNESS_COLORS[freshness],
    )


def _scan_view(run: WorkflowRunSummary) -> ScanRunView:
    return ScanRunView(
        run_id=run.run_id,
        conclusion=run.conclusion,
        conclusion_color=conclusion_color(run.conclusion),
        timestamp=run.timestamp,
        run_url=run.run_url,
        vulnerability_summary=run.vulnerability_summary,
        low_count=run.low_count,
        medium_count=run.medium_count,
        high_count=run.high_count,
        critical_count=run.critical_count,
        highlight=run.has_vulnerabilities,
    )


def _repository_card(
    full_name: str, aggregate: Optional[RepositoryAggregate], now: datetime
) -> RepositoryCard:
    card = RepositoryCard(
        full_name=full_name, html_url=f"https://github.com/{full_name}"
    )
    if aggregate is None:
        card.pending = True
        return card

    card.error = aggregate.error
    card.deployments = [
        _deployment_view(env, deployment, now)
        for env, deployment in aggregate.deployments.items()
    ]
    card.scans = [_scan_view(run) for run in aggregate.trivy_scans]
    return card


def build_dashboard_response(
    state: DashboardState,
    settings: DashboardSettings,
    refreshing: bool = False,
    now: Optional[datetime] = None,
) -> DashboardResponse:
    """Cards follow the configured repository order, not the fetch order."""
    now = now or datetime.now(timezone.utc)
    cards = [
        _repository_card(full_name, state.repositories.get(full_name), now)
        for full_name in settings.repositories
    ]
    return DashboardResponse(
        repositories=cards,
        error=state.error,
        refreshing=refreshing,
        refreshed_at=state.refreshed_at,
    )
