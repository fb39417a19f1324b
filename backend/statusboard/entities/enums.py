"""
Shared enums for entities.

Values are GitHub's wire strings so they compare equal to raw payload fields.
"""

from enum import Enum


class DeploymentState(str, Enum):
    """Deployment status states reported by the deployments API."""

    ERROR = "error"
    FAILURE = "failure"
    INACTIVE = "inactive"
    IN_PROGRESS = "in_progress"
    QUEUED = "queued"
    PENDING = "pending"
    SUCCESS = "success"


class WorkflowConclusion(str, Enum):
    """Workflow run conclusion - indicates final result when completed."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    STALE = "stale"


class DeploymentFreshness(str, Enum):
    """Age bucket of the last successful deployment."""

    FRESH = "fresh"
    AGING = "aging"
    STALE = "stale"
    UNKNOWN = "unknown"
