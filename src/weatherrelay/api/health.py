"""Health check endpoint.

Liveness only: the service has no database or broker to probe, and the
upstream provider is deliberately not called here.
"""

from fastapi import APIRouter

from weatherrelay.schemas.weather import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return {"status": "ok"}
