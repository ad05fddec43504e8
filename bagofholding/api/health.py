"""
Health check endpoint.

Liveness only; the service has no external dependencies to check.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Returns healthy if the service is running."""
    return HealthResponse(status="healthy")
