"""GitHub REST payload DTOs (only the fields the dashboard reads)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class GithubDeployment(BaseModel):
    id: int
    url: str = ""
    statuses_url: str
    environment: Optional[str] = None
    state: Optional[str] = None
    created_at: datetime


class GithubDeploymentStatus(BaseModel):
    id: Optional[int] = None
    state: str
    url: str = ""
    created_at: datetime


class GithubWorkflowRun(BaseModel):
    id: int
    conclusion: Optional[str] = None
    html_url: str = ""
    created_at: datetime


class GithubWorkflowJob(BaseModel):
    id: int
    name: Optional[str] = None
