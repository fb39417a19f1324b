"""Liveness endpoint."""

from fastapi import APIRouter

from statusboard.config import settings

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok", "version": settings.APP_VERSION}
