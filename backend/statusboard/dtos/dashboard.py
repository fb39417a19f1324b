"""Dashboard DTOs: aggregated repository state and the presented view."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from statusboard.entities.enums import DeploymentFreshness


# Aggregated state


class DeploymentInfo(BaseModel):
    """Most recent deployment status for one repository and environment."""

    status: Optional[str] = None
    timestamp: datetime
    reference_url: str = ""


class DeploymentAggregate(BaseModel):
    latest: Optional[DeploymentInfo] = None
    last_success_timestamp: Optional[datetime] = None


class WorkflowRunSummary(BaseModel):
    conclusion: Optional[str] = None
    timestamp: datetime
    run_url: str = ""
    run_id: int
    vulnerability_summary: Optional[str] = None
    low_count: int = Field(0, ge=0)
    medium_count: int = Field(0, ge=0)
    high_count: int = Field(0, ge=0)
    critical_count: int = Field(0, ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def has_vulnerabilities(self) -> bool:
        return (
            self.low_count > 0
            or self.medium_count > 0
            or self.high_count > 0
            or self.critical_count > 0
        )


class RepositoryAggregate(BaseModel):
    deployments: Dict[str, DeploymentAggregate] = Field(default_factory=dict)
    trivy_scans: List[WorkflowRunSummary] = Field(default_factory=list)
    error: Optional[str] = None


class DashboardState(BaseModel):
    """Everything fetched in one refresh, keyed by ``owner/name``."""

    repositories: Dict[str, RepositoryAggregate] = Field(default_factory=dict)
    error: Optional[str] = None
    refreshed_at: Optional[datetime] = None


# Presented view


class DeploymentView(BaseModel):
    environment: str
    status: Optional[str] = None
    status_color: str
    timestamp: Optional[datetime] = None
    reference_url: Optional[str] = None
    last_success_timestamp: Optional[datetime] = None
    freshness: DeploymentFreshness
    freshness_color: str


class ScanRunView(BaseModel):
    run_id: int
    conclusion: Optional[str] = None
    conclusion_color: str
    timestamp: datetime
    run_url: str
    vulnerability_summary: Optional[str] = None
    low_count: int = 0
    medium_count: int = 0
    high_count: int = 0
    critical_count: int = 0
    highlight: bool = False


class RepositoryCard(BaseModel):
    full_name: str
    html_url: str
    pending: bool = False
    error: Optional[str] = None
    deployments: List[DeploymentView] = Field(default_factory=list)
    scans: List[ScanRunView] = Field(default_factory=list)


class DashboardResponse(BaseModel):
    repositories: List[RepositoryCard]
    error: Optional[str] = None
    refreshing: bool = False
    refreshed_at: Optional[datetime] = None
