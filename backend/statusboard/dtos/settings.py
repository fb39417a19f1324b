"""DTOs for dashboard settings."""

from typing import List

from pydantic import BaseModel, Field


class DashboardSettingsResponse(BaseModel):
    """Settings as shown to the browser; the token is never returned in clear."""

    github_token: str = Field("", description="Masked token (last 4 chars)")
    has_token: bool = False
    repositories: List[str]
    workflow_file_name: str
    environments: List[str]


class TokenUpdateRequest(BaseModel):
    token: str = Field("", description="GitHub personal access token (write-only)")


class WorkflowUpdateRequest(BaseModel):
    workflow_file_name: str = Field(..., min_length=1)


class RepositoryRequest(BaseModel):
    full_name: str = Field(..., description="Repository as owner/name")


class EnvironmentRequest(BaseModel):
    environment: str = Field(..., min_length=1)
