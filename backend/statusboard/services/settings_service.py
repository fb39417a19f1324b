"""Credential and settings store for the dashboard."""

import base64
import hashlib
import logging
from typing import Callable, List, Optional

from cryptography.fernet import Fernet, InvalidToken

from statusboard.config import settings as app_config
from statusboard.dtos.settings import DashboardSettingsResponse
from statusboard.entities.settings import DashboardSettings
from statusboard.repositories.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)

SettingsHook = Callable[[DashboardSettings], None]


class SettingsStore:
    """
    Holds the current ``DashboardSettings`` and applies user edits.

    An edit is applied to a copy, persisted, and only then made current, so
    a failed save leaves both memory and Redis unchanged. Subscribed
    ``on_change`` hooks then receive a snapshot.
    """

    def __init__(self, repo: Optional[SettingsRepository] = None):
        self.repo = repo if repo is not None else SettingsRepository()
        self._cipher = self._get_cipher()
        self._settings = DashboardSettings()
        self._hooks: List[SettingsHook] = []

    def _get_cipher(self) -> Fernet:
        """Get Fernet cipher for encrypting tokens."""
        key = hashlib.sha256(app_config.SECRET_KEY.encode()).digest()
        key_base64 = base64.urlsafe_b64encode(key)
        return Fernet(key_base64)

    def _encrypt_token(self, token: str) -> str:
        if not token:
            return ""
        return self._cipher.encrypt(token.encode()).decode()

    def _decrypt_token(self, encrypted: str) -> str:
        if not encrypted:
            return ""
        try:
            return self._cipher.decrypt(encrypted.encode()).decode()
        except InvalidToken:
            logger.error("Failed to decrypt stored GitHub token; it must be re-entered")
            return ""

    def _mask_token(self, token: Optional[str]) -> str:
        """Mask token for display (show last 4 chars)."""
        if not token:
            return ""
        if len(token) < 8:
            return "****"
        return f"****{token[-4:]}"

    def _persist(self, settings: DashboardSettings) -> None:
        stored = settings.model_copy(
            update={"github_token": self._encrypt_token(settings.github_token)}
        )
        self.repo.save_settings(stored)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> DashboardSettings:
        """Restore settings persisted by a previous session."""
        stored = self.repo.get_settings()
        self._settings = stored.model_copy(
            update={"github_token": self._decrypt_token(stored.github_token)}
        )
        if not self._settings.github_token and app_config.GITHUB_TOKEN:
            logger.info("Seeding GitHub token from GITHUB_TOKEN environment variable")
            self.set_token(app_config.GITHUB_TOKEN)
        return self.settings

    def subscribe(self, hook: SettingsHook) -> None:
        self._hooks.append(hook)

    @property
    def settings(self) -> DashboardSettings:
        """Snapshot; mutating it does not affect the store."""
        return self._settings.model_copy(deep=True)

    def _commit(self, updated: DashboardSettings) -> bool:
        self._persist(updated)
        self._settings = updated
        snapshot = self.settings
        for hook in self._hooks:
            hook(snapshot)
        return True

    def to_response(self) -> DashboardSettingsResponse:
        return DashboardSettingsResponse(
            github_token=self._mask_token(self._settings.github_token),
            has_token=bool(self._settings.github_token),
            repositories=list(self._settings.repositories),
            workflow_file_name=self._settings.workflow_file_name,
            environments=list(self._settings.environments),
        )

    # ------------------------------------------------------------------
    # Edits (each returns True when something changed)
    # ------------------------------------------------------------------

    def set_token(self, token: str) -> bool:
        token = (token or "").strip()
        if token == self._settings.github_token:
            return False
        return self._commit(self._settings.model_copy(update={"github_token": token}))

    def set_workflow_file_name(self, workflow_file_name: str) -> bool:
        workflow_file_name = (workflow_file_name or "").strip()
        if not workflow_file_name or workflow_file_name == self._settings.workflow_file_name:
            return False
        return self._commit(
            self._settings.model_copy(update={"workflow_file_name": workflow_file_name})
        )

    def add_repository(self, full_name: str) -> bool:
        full_name = (full_name or "").strip()
        if not full_name or full_name in self._settings.repositories:
            return False
        repositories = [*self._settings.repositories, full_name]
        return self._commit(self._settings.model_copy(update={"repositories": repositories}))

    def remove_repository(self, full_name: str) -> bool:
        if full_name not in self._settings.repositories:
            return False
        repositories = [repo for repo in self._settings.repositories if repo != full_name]
        return self._commit(self._settings.model_copy(update={"repositories": repositories}))

    def clear_repositories(self) -> bool:
        if not self._settings.repositories:
            return False
        return self._commit(self._settings.model_copy(update={"repositories": []}))

    def add_environment(self, environment: str) -> bool:
        environment = (environment or "").strip().lower()
        if not environment or environment in self._settings.environments:
            return False
        environments = [*self._settings.environments, environment]
        return self._commit(self._settings.model_copy(update={"environments": environments}))

    def remove_environment(self, environment: str) -> bool:
        if environment not in self._settings.environments:
            return False
        environments = [env for env in self._settings.environments if env != environment]
        return self._commit(self._settings.model_copy(update={"environments": environments}))
