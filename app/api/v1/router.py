"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from typing import Any

from fastapi import APIRouter

from app.api.v1.endpoints import cases, health, notes
from app.schemas.common import ErrorResponse

# Documented error envelopes for authenticated resources.
_AUTHED_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    cases.router, prefix="/cases", tags=["cases"], responses=_AUTHED_ERRORS
)
api_router.include_router(
    notes.router, prefix="/notes", tags=["notes"], responses=_AUTHED_ERRORS
)
