"""API route aggregation.

All routers registered here get mounted in main.py under /api. Every
route is open: the service has no notion of users.
"""

from fastapi import APIRouter

from weatherrelay.api.health import router as health_router
from weatherrelay.api.weather import router as weather_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(weather_router, tags=["weather"])
