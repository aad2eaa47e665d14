"""Weather API — the fetch-trigger endpoint.

POST /api/get-weather {"city": "..."} asks the relay to fetch fresh data
and broadcast it to every subscriber. The caller only learns whether the
fetch worked; the data itself arrives over the WebSocket, for the caller
and everyone else alike.

Error bodies are fixed strings. Upstream detail is logged, never echoed.
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from weatherrelay.dependencies import get_relay
from weatherrelay.schemas.weather import ErrorResponse, FetchResponse
from weatherrelay.services.fetch_relay import BadRequestError, RelayError, WeatherRelay

logger = structlog.get_logger()
router = APIRouter()

CITY_REQUIRED = "City is required."
FETCH_FAILED = "Failed to fetch weather data."
FETCH_OK = "Weather data fetched and broadcasted successfully."


@router.post(
    "/get-weather",
    response_model=FetchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_weather(
    request: Request,
    relay: WeatherRelay = Depends(get_relay),
):
    """Fetch weather for a city and broadcast it to all subscribers."""
    # Parsed by hand so a missing/garbled body maps to the 400 body
    # clients expect instead of FastAPI's 422 validation error.
    try:
        body = await request.json()
    except ValueError:
        body = None
    city = body.get("city") if isinstance(body, dict) else None

    try:
        await relay.fetch_and_broadcast(city)
    except BadRequestError:
        return JSONResponse(status_code=400, content={"error": CITY_REQUIRED})
    except RelayError:
        return JSONResponse(status_code=500, content={"error": FETCH_FAILED})
    except Exception:
        logger.exception("weather.fetch_unexpected_error", city=city)
        return JSONResponse(status_code=500, content={"error": FETCH_FAILED})

    return {"message": FETCH_OK}
