from datetime import datetime, timedelta, timezone

import pytest

from statusboard.dtos.dashboard import (
    DashboardState,
    DeploymentAggregate,
    DeploymentInfo,
    RepositoryAggregate,
    WorkflowRunSummary,
)
from statusboard.entities.enums import DeploymentFreshness
from statusboard.entities.settings import DashboardSettings
from statusboard.services.dashboard_presenter import (
    DEFAULT_COLOR,
    build_dashboard_response,
    conclusion_color,
    deployment_freshness,
    deployment_status_color,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "age, expected",
    [
        (timedelta(days=1), DeploymentFreshness.FRESH),
        (timedelta(weeks=2) - timedelta(seconds=1), DeploymentFreshness.FRESH),
        (timedelta(weeks=2), DeploymentFreshness.AGING),
        (timedelta(weeks=4) - timedelta(seconds=1), DeploymentFreshness.AGING),
        (timedelta(weeks=4), DeploymentFreshness.STALE),
        (timedelta(days=365), DeploymentFreshness.STALE),
    ],
)
def test_freshness_buckets(age, expected):
    assert deployment_freshness(NOW - age, NOW) == expected


def test_freshness_unknown_without_success():
    assert deployment_freshness(None, NOW) == DeploymentFreshness.UNKNOWN


def test_naive_timestamp_is_treated_as_utc():
    naive = (NOW - timedelta(days=3)).replace(tzinfo=None)

    assert deployment_freshness(naive, NOW) == DeploymentFreshness.FRESH


def test_status_colors():
    assert deployment_status_color("success") == "green"
    assert deployment_status_color("failure") == "red"
    assert deployment_status_color("error") == "red"
    assert deployment_status_color("in_progress") == "yellow"
    assert deployment_status_color("queued") == DEFAULT_COLOR
    assert deployment_status_color("cancelled") == "gray"
    assert deployment_status_color("something-new") == DEFAULT_COLOR
    assert deployment_status_color(None) == DEFAULT_COLOR

    assert conclusion_color("success") == "green"
    assert conclusion_color("failure") == "red"
    assert conclusion_color(None) == DEFAULT_COLOR


def test_cards_follow_settings_order_and_mark_pending():
    state = DashboardState(
        repositories={
            "org/b": RepositoryAggregate(
                deployments={
                    "prod": DeploymentAggregate(
                        latest=DeploymentInfo(
                            status="success",
                            timestamp=NOW - timedelta(days=1),
                            reference_url="https://api.github.test/x",
                        ),
                        last_success_timestamp=NOW - timedelta(days=20),
                    ),
                    "canary": DeploymentAggregate(),
                },
                trivy_scans=[
                    WorkflowRunSummary(
                        conclusion="failure",
                        timestamp=NOW,
                        run_url="https://github.com/org/b/actions/runs/1",
                        run_id=1,
                        vulnerability_summary="Total: 1 (LOW: 0, MEDIUM: 0, HIGH: 0, CRITICAL: 1)",
                        critical_count=1,
                    ),
                    WorkflowRunSummary(conclusion="success", timestamp=NOW, run_id=2),
                ],
            ),
        },
        refreshed_at=NOW,
    )
    settings = DashboardSettings(github_token="t", repositories=["org/a", "org/b"])

    response = build_dashboard_response(state, settings, refreshing=True, now=NOW)

    assert response.refreshing
    assert response.refreshed_at == NOW
    pending, card = response.repositories
    assert pending.full_name == "org/a"
    assert pending.pending
    assert card.html_url == "https://github.com/org/b"
    assert not card.pending

    prod, canary = card.deployments
    assert prod.environment == "prod"
    assert prod.status_color == "green"
    assert prod.freshness == DeploymentFreshness.AGING
    assert prod.freshness_color == "yellow"
    assert canary.status is None
    assert canary.freshness == DeploymentFreshness.UNKNOWN

    flagged, clean = card.scans
    assert flagged.highlight
    assert flagged.conclusion_color == "red"
    assert not clean.highlight


def test_repository_error_is_shown_on_card():
    state = DashboardState(
        repositories={"broken": RepositoryAggregate(error="Invalid repository format")}
    )
    settings = DashboardSettings(github_token="t", repositories=["broken"])

    [card] = build_dashboard_response(state, settings, now=NOW).repositories

    assert card.error == "Invalid repository format"
    assert card.deployments == []


def test_global_error_is_forwarded():
    state = DashboardState(error="Please enter your GitHub Personal Access Token.")

    response = build_dashboard_response(state, DashboardSettings(), now=NOW)

    assert response.error == state.error
    assert response.repositories == []
