"""Tests for DeploymentStatusFetcher."""

from datetime import datetime, timezone

import httpx

from github_fakes import (
    FakeGitHub,
    deployment,
    deployment_status,
    run_async,
    statuses_path,
)
from statusboard.services.deployment_service import (
    ERROR_REFERENCE_URL,
    DeploymentStatusFetcher,
)

DEPLOYMENTS = "/repos/org/a/deployments"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _fetch(fake: FakeGitHub, environment: str = "prod"):
    async with fake.client() as client:
        return await DeploymentStatusFetcher(client).get_deployment_info(
            "org", "a", environment
        )


class TestLatestStatus:
    def test_no_deployments_yields_empty_aggregate(self):
        fake = FakeGitHub({DEPLOYMENTS: []})

        result = run_async(_fetch(fake))

        assert result.latest is None
        assert result.last_success_timestamp is None
        assert fake.paths() == [DEPLOYMENTS]

    def test_newest_status_entry_wins_over_deployment_state(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [deployment(2, "success", "2024-05-02T00:00:00Z")],
                statuses_path(2): [
                    deployment_status(20, "in_progress", "2024-05-02T00:01:00Z"),
                    deployment_status(22, "failure", "2024-05-02T00:09:00Z"),
                    deployment_status(21, "queued", "2024-05-02T00:00:30Z"),
                ],
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "failure"
        assert result.latest.timestamp == _ts("2024-05-02T00:09:00Z")
        assert result.latest.reference_url.endswith("/statuses/22")

    def test_empty_history_falls_back_to_deployment_fields(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [deployment(3, "pending", "2024-05-03T00:00:00Z")],
                statuses_path(3): [],
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "pending"
        assert result.latest.timestamp == _ts("2024-05-03T00:00:00Z")
        assert result.latest.reference_url.endswith("/deployments/3")


class TestLastSuccess:
    def test_most_recent_confirmed_success(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [
                    deployment(3, "failure", "2024-05-03T00:00:00Z"),
                    deployment(2, "success", "2024-05-02T00:00:00Z"),
                    deployment(1, "success", "2024-05-01T00:00:00Z"),
                ],
                statuses_path(3): [deployment_status(30, "failure", "2024-05-03T00:05:00Z")],
                statuses_path(2): [
                    deployment_status(21, "in_progress", "2024-05-02T00:01:00Z"),
                    deployment_status(22, "success", "2024-05-02T00:05:00Z"),
                ],
                statuses_path(1): [deployment_status(10, "success", "2024-05-01T00:05:00Z")],
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "failure"
        assert result.last_success_timestamp == _ts("2024-05-02T00:05:00Z")
        # Scan stops at the first confirmed success
        assert statuses_path(1) not in fake.paths()

    def test_unconfirmed_success_continues_to_next_candidate(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [
                    deployment(2, "success", "2024-05-02T00:00:00Z"),
                    deployment(1, "success", "2024-05-01T00:00:00Z"),
                ],
                statuses_path(2): [deployment_status(20, "inactive", "2024-05-02T00:05:00Z")],
                statuses_path(1): [deployment_status(10, "success", "2024-05-01T00:05:00Z")],
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "inactive"
        assert result.last_success_timestamp == _ts("2024-05-01T00:05:00Z")

    def test_no_top_level_success_means_no_timestamp(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [deployment(2, None, "2024-05-02T00:00:00Z")],
                statuses_path(2): [deployment_status(20, "success", "2024-05-02T00:05:00Z")],
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "success"
        assert result.last_success_timestamp is None

    def test_latest_history_is_fetched_once(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [deployment(2, "success", "2024-05-02T00:00:00Z")],
                statuses_path(2): [deployment_status(20, "success", "2024-05-02T00:05:00Z")],
            }
        )

        result = run_async(_fetch(fake))

        assert result.last_success_timestamp == _ts("2024-05-02T00:05:00Z")
        assert fake.paths().count(statuses_path(2)) == 1


class TestFailures:
    def test_deployments_error_yields_sentinel(self):
        fake = FakeGitHub({DEPLOYMENTS: httpx.Response(502, text="bad gateway")})
        before = datetime.now(timezone.utc)

        result = run_async(_fetch(fake))

        assert result.latest.status == "error"
        assert result.latest.reference_url == ERROR_REFERENCE_URL
        assert result.latest.timestamp >= before
        assert result.last_success_timestamp is None

    def test_statuses_error_aborts_whole_lookup(self):
        fake = FakeGitHub(
            {
                DEPLOYMENTS: [
                    deployment(2, "failure", "2024-05-02T00:00:00Z"),
                    deployment(1, "success", "2024-05-01T00:00:00Z"),
                ],
                statuses_path(2): [deployment_status(20, "failure", "2024-05-02T00:05:00Z")],
                statuses_path(1): httpx.Response(404, json={"message": "Not Found"}),
            }
        )

        result = run_async(_fetch(fake))

        assert result.latest.status == "error"
        assert result.last_success_timestamp is None

    def test_network_failure_yields_sentinel(self):
        fake = FakeGitHub({DEPLOYMENTS: httpx.ConnectTimeout("timed out")})

        result = run_async(_fetch(fake))

        assert result.latest.status == "error"

    def test_malformed_payload_yields_sentinel(self):
        fake = FakeGitHub({DEPLOYMENTS: [{"id": 1, "state": "success"}]})

        result = run_async(_fetch(fake))

        assert result.latest.status == "error"
