"""Health check endpoint for service monitoring."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from src import __version__
from src.domain.entities.payment import utcnow

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    timestamp: datetime


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, timestamp=utcnow())
