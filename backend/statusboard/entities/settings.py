"""Dashboard settings entity persisted in Redis."""

from typing import List

from pydantic import BaseModel, Field

from statusboard.config import settings as app_config


class DashboardSettings(BaseModel):
    """User-editable dashboard configuration (one record per deployment)."""

    github_token: str = ""
    repositories: List[str] = Field(default_factory=list)
    workflow_file_name: str = Field(
        default_factory=lambda: app_config.DEFAULT_WORKFLOW_FILE
    )
    environments: List[str] = Field(
        default_factory=lambda: list(app_config.DEFAULT_ENVIRONMENTS)
    )
