"""FastAPI application factory.

create_app() returns a configured FastAPI instance that owns exactly one
set of relay components:

  ConnectionRegistry → Broadcaster → WeatherRelay ← WeatherProvider

Learn: App factory pattern. The components live on app.state and reach
routes through weatherrelay.dependencies, so nothing is a module global
and every create_app() call (one per test) starts with an empty registry.
The lifespan closes them on shutdown: subscribers get a going-away close
frame and the provider's HTTP client is released.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherrelay import __version__
from weatherrelay.api import api_router
from weatherrelay.config import Settings, settings as default_settings
from weatherrelay.realtime import Broadcaster, ConnectionRegistry
from weatherrelay.services.fetch_relay import WeatherRelay
from weatherrelay.services.weather_provider import HttpWeatherProvider, WeatherProvider

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    cfg: Settings = app.state.settings
    logger.info(
        "weatherrelay.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
        provider_url=cfg.provider_url,
    )

    yield

    logger.info("weatherrelay.shutdown", subscribers=len(app.state.registry))
    await app.state.registry.close_all(code=cfg.shutdown_close_code)
    await app.state.provider.aclose()


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[WeatherProvider] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    settings and provider default to the env-driven Settings singleton and
    an HTTP provider pointed at settings.provider_url.
    """
    cfg = settings or default_settings

    app = FastAPI(
        title="Weather Relay",
        description="Fetches weather on demand and broadcasts it to live viewers",
        version=__version__,
        debug=cfg.debug,
        lifespan=lifespan,
    )

    registry = ConnectionRegistry()
    broadcaster = Broadcaster(registry, send_timeout=cfg.send_timeout_seconds)
    if provider is None:
        provider = HttpWeatherProvider(
            cfg.provider_url, timeout=cfg.provider_timeout_seconds
        )

    app.state.settings = cfg
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.provider = provider
    app.state.relay = WeatherRelay(provider, broadcaster)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette runs middleware in reverse order of registration:
    # RequestId → CORS → handler
    from weatherrelay.middleware.request_id import RequestIdMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    from weatherrelay.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: weatherrelay.main:app)
app = create_app()
