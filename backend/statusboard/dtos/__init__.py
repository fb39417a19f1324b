"""Data Transfer Objects (DTOs) for API requests and responses"""

from .dashboard import (
    DashboardResponse,
    DashboardState,
    DeploymentAggregate,
    DeploymentInfo,
    DeploymentView,
    RepositoryAggregate,
    RepositoryCard,
    ScanRunView,
    WorkflowRunSummary,
)
from .github import (
    GithubDeployment,
    GithubDeploymentStatus,
    GithubWorkflowJob,
    GithubWorkflowRun,
)
from .settings import (
    DashboardSettingsResponse,
    EnvironmentRequest,
    RepositoryRequest,
    TokenUpdateRequest,
    WorkflowUpdateRequest,
)

__all__ = [
    # Dashboard
    "DashboardResponse",
    "DashboardState",
    "DeploymentAggregate",
    "DeploymentInfo",
    "DeploymentView",
    "RepositoryAggregate",
    "RepositoryCard",
    "ScanRunView",
    "WorkflowRunSummary",
    # GitHub payloads
    "GithubDeployment",
    "GithubDeploymentStatus",
    "GithubWorkflowJob",
    "GithubWorkflowRun",
    # Settings
    "DashboardSettingsResponse",
    "EnvironmentRequest",
    "RepositoryRequest",
    "TokenUpdateRequest",
    "WorkflowUpdateRequest",
]
