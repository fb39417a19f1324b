"""FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from statusboard.services.dashboard_controller import DashboardController


def get_controller(request: Request) -> DashboardController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dashboard is still starting up",
        )
    return controller
