"""Health and diagnostics endpoints."""
from __future__ import annotations

from fastapi import APIRouter

from src.core.config import get_settings

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/", summary="Health Check", description="Simple health check endpoint.", operation_id="health_check")
def health_check():
    """Return a simple health status and the active persistence provider."""
    return {"status": "ok", "provider": get_settings().data_provider}
