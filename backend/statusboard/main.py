"""FastAPI application entry point."""

import asyncio
import logging
import os

# Configure logging based on ENV environment variable
# ENV=dev: INFO level with detailed format (default)
# ENV=prod/staging: WARNING level, minimal logs
_env = os.getenv("ENV", "dev").lower()
_is_dev = _env == "dev"
_log_level = logging.INFO if _is_dev else logging.WARNING

logging.basicConfig(
    level=_log_level,
    format=(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if _is_dev
        else "%(levelname)s | %(message)s"
    ),
    datefmt="%H:%M:%S",
)

if _is_dev:
    logging.getLogger("statusboard.request").setLevel(logging.INFO)
    logging.getLogger("statusboard.exception").setLevel(logging.INFO)

import redis
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from statusboard.api import dashboard, health, settings as settings_api
from statusboard.config import settings
from statusboard.middleware.exception_handlers import (
    general_exception_handler,
    github_exception_handler,
    http_exception_handler,
    storage_exception_handler,
    validation_exception_handler,
)
from statusboard.middleware.request_logging import RequestLoggingMiddleware
from statusboard.services.dashboard_controller import DashboardController
from statusboard.services.github.exceptions import GithubError
from statusboard.services.settings_service import SettingsStore

logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Deployment status and Trivy scan results for tracked GitHub repositories",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(GithubError, github_exception_handler)
app.add_exception_handler(redis.RedisError, storage_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(settings_api.router, prefix="/api", tags=["Settings"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


@app.on_event("startup")
async def startup_event():
    """Restore persisted settings and start the first refresh."""
    store = SettingsStore()
    try:
        loaded = store.load()
        logger.info(
            f"Loaded settings: {len(loaded.repositories)} repositories, "
            f"{len(loaded.environments)} environments"
        )
    except redis.RedisError as e:
        logger.warning(f"Failed to load persisted settings, using defaults: {e}")

    controller = DashboardController(store)
    app.state.controller = controller
    app.state.initial_refresh = asyncio.create_task(controller.refresh())
    app.state.initial_refresh.add_done_callback(log_refresh_failure)


def log_refresh_failure(task: asyncio.Task) -> None:
    """Report an exception from a refresh nobody awaits."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Initial dashboard refresh failed",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
