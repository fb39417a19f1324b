"""Dashboard endpoints."""

from fastapi import APIRouter, Depends

from statusboard.api.deps import get_controller
from statusboard.dtos.dashboard import DashboardResponse, DashboardState
from statusboard.services.dashboard_controller import DashboardController

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
def get_dashboard(controller: DashboardController = Depends(get_controller)):
    """Return the last refreshed state as repository cards."""
    return controller.view()


@router.get("/state", response_model=DashboardState)
def get_dashboard_state(controller: DashboardController = Depends(get_controller)):
    """Return the raw aggregated state keyed by repository."""
    return controller.state


@router.post("/refresh", response_model=DashboardResponse)
async def refresh_dashboard(controller: DashboardController = Depends(get_controller)):
    """Fetch everything again and wait for the result."""
    await controller.refresh()
    return controller.view()
