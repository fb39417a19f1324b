"""Dashboard settings endpoints.

Every edit that changes something schedules a background refresh.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from statusboard.api.deps import get_controller
from statusboard.dtos.settings import (
    DashboardSettingsResponse,
    EnvironmentRequest,
    RepositoryRequest,
    TokenUpdateRequest,
    WorkflowUpdateRequest,
)
from statusboard.services.dashboard_controller import DashboardController

router = APIRouter(prefix="/settings", tags=["Settings"])


def _respond(
    controller: DashboardController, changed: bool, background_tasks: BackgroundTasks
) -> DashboardSettingsResponse:
    if changed:
        background_tasks.add_task(controller.refresh)
    return controller.store.to_response()


@router.get("/", response_model=DashboardSettingsResponse)
def get_settings(controller: DashboardController = Depends(get_controller)):
    """Get current settings (token masked)."""
    return controller.store.to_response()


@router.put("/token", response_model=DashboardSettingsResponse)
def update_token(
    request: TokenUpdateRequest,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.set_token(request.token)
    return _respond(controller, changed, background_tasks)


@router.put("/workflow", response_model=DashboardSettingsResponse)
def update_workflow(
    request: WorkflowUpdateRequest,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.set_workflow_file_name(request.workflow_file_name)
    return _respond(controller, changed, background_tasks)


@router.post("/repositories", response_model=DashboardSettingsResponse)
def add_repository(
    request: RepositoryRequest,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.add_repository(request.full_name)
    return _respond(controller, changed, background_tasks)


@router.delete("/repositories", response_model=DashboardSettingsResponse)
def remove_repository(
    background_tasks: BackgroundTasks,
    full_name: str = Query(..., description="Repository as owner/name"),
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.remove_repository(full_name)
    return _respond(controller, changed, background_tasks)


@router.post("/environments", response_model=DashboardSettingsResponse)
def add_environment(
    request: EnvironmentRequest,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.add_environment(request.environment)
    return _respond(controller, changed, background_tasks)


@router.delete("/environments/{environment}", response_model=DashboardSettingsResponse)
def remove_environment(
    environment: str,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    changed = controller.remove_environment(environment)
    return _respond(controller, changed, background_tasks)


@router.post("/clear", response_model=DashboardSettingsResponse)
def clear_all(controller: DashboardController = Depends(get_controller)):
    """Remove every repository and drop all fetched data."""
    controller.clear_all()
    return controller.store.to_response()
