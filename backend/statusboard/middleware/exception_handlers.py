"""Exception handlers that give every API failure the same JSON shape.

Body: ``{"success": false, "error": {"code", "message", "request_id"[, "details"]},
"timestamp"}``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import redis
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from statusboard.middleware.error_codes import ErrorCode, get_error_code
from statusboard.services.github.exceptions import GithubError

logger = logging.getLogger("statusboard.exception")


def error_body(
    request: Request,
    code: ErrorCode,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "code": code.value,
        "message": message,
        "request_id": getattr(request.state, "request_id", None),
    }
    if details:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    body = error_body(request, get_error_code(exc.status_code), str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        {
            "field": " -> ".join(str(part) for part in err.get("loc", [])),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    body = error_body(
        request, ErrorCode.VALIDATION_ERROR, "Request validation failed", details
    )
    return JSONResponse(status_code=422, content=body)


async def github_exception_handler(request: Request, exc: GithubError) -> JSONResponse:
    """GitHub failures that escaped the fetchers (e.g. a client that cannot be built)."""
    logger.warning(f"GitHub error on {request.url.path}: {exc}")
    body = error_body(request, ErrorCode.SERVICE_UNAVAILABLE, str(exc))
    return JSONResponse(status_code=503, content=body)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled exception request_id={getattr(request.state, 'request_id', None)} "
        f"path={request.url.path}"
    )
    body = error_body(
        request, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred."
    )
    return JSONResponse(status_code=500, content=body)


async def storage_exception_handler(request: Request, exc: redis.RedisError) -> JSONResponse:
    """Settings could not be saved; the edit was not applied."""
    logger.error(f"Settings storage error on {request.url.path}: {exc}")
    body = error_body(
        request,
        ErrorCode.SERVICE_UNAVAILABLE,
        "Settings storage is unavailable; nothing was changed.",
    )
    return JSONResponse(status_code=503, content=body)
