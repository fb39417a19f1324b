from .enums import DeploymentFreshness, DeploymentState, WorkflowConclusion
from .repository_identifier import RepositoryIdentifier
from .settings import DashboardSettings

__all__ = [
    "DashboardSettings",
    "DeploymentFreshness",
    "DeploymentState",
    "RepositoryIdentifier",
    "WorkflowConclusion",
]
