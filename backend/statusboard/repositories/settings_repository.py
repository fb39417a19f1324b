"""Repository for dashboard settings (one record, four Redis keys)."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import redis

from statusboard.config import settings as app_config
from statusboard.core.redis import get_redis
from statusboard.entities.settings import DashboardSettings

logger = logging.getLogger(__name__)

KEY_TOKEN = "githubToken"
KEY_REPOSITORIES = "githubRepos"
KEY_WORKFLOW_FILE = "trivyWorkflowFileName"
KEY_ENVIRONMENTS = "deploymentEnvironments"


class SettingsRepository:
    """
    Stores ``DashboardSettings`` as plain string keys.

    Lists are JSON-encoded. The token is stored exactly as given; encryption
    is the caller's concern.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        key_prefix: Optional[str] = None,
    ):
        self._redis = redis_client if redis_client is not None else get_redis()
        self._prefix = app_config.SETTINGS_KEY_PREFIX if key_prefix is None else key_prefix

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def _load_list(self, name: str) -> Optional[List[str]]:
        raw = self._redis.get(self._key(name))
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring unreadable settings key {self._key(name)}")
            return None
        if not isinstance(value, list):
            logger.warning(f"Ignoring settings key {self._key(name)}: not a list")
            return None
        return [str(item) for item in value]

    def get_settings(self) -> DashboardSettings:
        """Load settings, falling back to defaults for missing keys."""
        values = {}

        token = self._redis.get(self._key(KEY_TOKEN))
        if token is not None:
            values["github_token"] = token

        repositories = self._load_list(KEY_REPOSITORIES)
        if repositories is not None:
            values["repositories"] = repositories

        workflow = self._redis.get(self._key(KEY_WORKFLOW_FILE))
        if workflow:
            values["workflow_file_name"] = workflow

        environments = self._load_list(KEY_ENVIRONMENTS)
        if environments is not None:
            values["environments"] = environments

        return DashboardSettings(**values)

    def save_settings(self, settings: DashboardSettings) -> None:
        """Write all four keys in one MULTI/EXEC transaction."""
        pipe = self._redis.pipeline(transaction=True)
        pipe.set(self._key(KEY_TOKEN), settings.github_token)
        pipe.set(self._key(KEY_REPOSITORIES), json.dumps(settings.repositories))
        pipe.set(self._key(KEY_WORKFLOW_FILE), settings.workflow_file_name)
        pipe.set(self._key(KEY_ENVIRONMENTS), json.dumps(settings.environments))
        pipe.execute()
