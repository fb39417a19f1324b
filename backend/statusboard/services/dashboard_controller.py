"""Owns the current dashboard state and runs refreshes on request."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from statusboard.dtos.dashboard import DashboardResponse, DashboardState
from statusboard.entities.settings import DashboardSettings
from statusboard.services.dashboard_presenter import build_dashboard_response
from statusboard.services.dashboard_service import (
    StatusAggregationPipeline,
    configuration_error,
)
from statusboard.services.github.github_client import GitHubClient
from statusboard.services.settings_service import SettingsStore

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], GitHubClient]
PipelineFactory = Callable[[DashboardSettings, GitHubClient], StatusAggregationPipeline]


class DashboardController:
    """
    Entry point used by the API.

    ``refresh()`` is explicit: callers invoke it after a settings change or on
    a manual request. Overlapping refreshes are not coordinated; whichever
    finishes last replaces the whole state.
    """

    def __init__(
        self,
        store: SettingsStore,
        client_factory: ClientFactory = GitHubClient,
        pipeline_factory: PipelineFactory = StatusAggregationPipeline,
    ):
        self.store = store
        self._client_factory = client_factory
        self._pipeline_factory = pipeline_factory
        self._state = DashboardState()
        self._refreshes_in_flight = 0

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._refreshes_in_flight > 0

    async def refresh(self) -> DashboardState:
        snapshot = self.store.settings
        error = configuration_error(snapshot)
        if error:
            logger.warning(f"Refresh skipped: {error}")
            self._state = DashboardState(error=error)
            return self._state

        self._refreshes_in_flight += 1
        try:
            async with self._client_factory(snapshot.github_token) as client:
                pipeline = self._pipeline_factory(snapshot, client)
                new_state = await pipeline.refresh_all()
        finally:
            self._refreshes_in_flight -= 1

        self._state = new_state
        logger.info(f"Dashboard refreshed ({len(new_state.repositories)} repositories)")
        return self._state

    def view(self, now: Optional[datetime] = None) -> DashboardResponse:
        return build_dashboard_response(
            self._state,
            self.store.settings,
            refreshing=self.is_refreshing,
            now=now,
        )

    # ------------------------------------------------------------------
    # Settings edits. Each returns True when a refresh is due.
    # ------------------------------------------------------------------

    def set_token(self, token: str) -> bool:
        return self.store.set_token(token)

    def set_workflow_file_name(self, workflow_file_name: str) -> bool:
        return self.store.set_workflow_file_name(workflow_file_name)

    def add_repository(self, full_name: str) -> bool:
        return self.store.add_repository(full_name)

    def remove_repository(self, full_name: str) -> bool:
        changed = self.store.remove_repository(full_name)
        if full_name in self._state.repositories:
            remaining = {
                name: aggregate
                for name, aggregate in self._state.repositories.items()
                if name != full_name
            }
            self._state = self._state.model_copy(update={"repositories": remaining})
        return changed

    def add_environment(self, environment: str) -> bool:
        return self.store.add_environment(environment)

    def remove_environment(self, environment: str) -> bool:
        return self.store.remove_environment(environment)

    def clear_all(self) -> None:
        """Forget every tracked repository and all fetched data."""
        self.store.clear_repositories()
        self._state = DashboardState()
