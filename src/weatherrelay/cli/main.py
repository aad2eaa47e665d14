"""weatherrelay CLI — run the relay server and drive it from a terminal.

Usage:
    weatherrelay serve --port 3000          # Run the server (uvicorn)
    weatherrelay health                     # Ping /api/health
    weatherrelay fetch "Mogi das Cruzes"    # Trigger a fetch + broadcast
    weatherrelay watch                      # Print every broadcast event
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx
import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from weatherrelay import __version__
from weatherrelay.schemas.weather import WeatherEvent

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"


def _api_url(override: Optional[str] = None) -> str:
    return (override or os.environ.get("WEATHERRELAY_API_URL", DEFAULT_API_URL)).rstrip("/")


def _ws_url(api_url: str) -> str:
    if api_url.startswith("https://"):
        return "wss://" + api_url[len("https://"):] + "/ws"
    if api_url.startswith("http://"):
        return "ws://" + api_url[len("http://"):] + "/ws"
    return api_url + "/ws"


def _client(api_url: str) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the relay server."""
    return httpx.AsyncClient(base_url=api_url, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous click handler.

    Offloads to a thread when an event loop is already running (click's
    CliRunner inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def format_event(raw: str) -> str:
    """One-line summary of a broadcast frame; falls back to the raw JSON."""
    try:
        event = WeatherEvent.model_validate_json(raw)
    except ValidationError:
        return raw
    current = event.current
    return (
        f"{event.location.name}: {current.temp_c:g}°C, {current.condition.text}, "
        f"humidity {current.humidity:g}%, wind {current.wind_kph:g} km/h"
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="weatherrelay")
def main():
    """weatherrelay — fetch weather on demand and broadcast it to live viewers."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: WEATHERRELAY_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: WEATHERRELAY_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the relay server."""
    import uvicorn

    from weatherrelay.config import settings

    uvicorn.run(
        "weatherrelay.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.option("--api-url", help="Server URL (or set WEATHERRELAY_API_URL)")
def health(api_url: Optional[str]):
    """Check that a running server answers."""
    _run(_health_impl(_api_url(api_url)))


async def _health_impl(api_url: str):
    async with _client(api_url) as c:
        try:
            r = await c.get("/api/health")
            r.raise_for_status()
        except httpx.HTTPError as e:
            click.secho(f"Server unreachable at {api_url}: {e}", fg="red", err=True)
            sys.exit(1)
    click.secho(f"{api_url}: {r.json().get('status', 'unknown')}", fg="green")


@main.command()
@click.argument("city")
@click.option("--api-url", help="Server URL (or set WEATHERRELAY_API_URL)")
def fetch(city: str, api_url: Optional[str]):
    """Fetch weather for CITY and broadcast it to every viewer."""
    _run(_fetch_impl(city, _api_url(api_url)))


async def _fetch_impl(city: str, api_url: str):
    async with _client(api_url) as c:
        try:
            r = await c.post("/api/get-weather", json={"city": city})
        except httpx.HTTPError as e:
            click.secho(f"Server unreachable at {api_url}: {e}", fg="red", err=True)
            sys.exit(1)

    try:
        body = r.json()
    except json.JSONDecodeError:
        body = {}

    if r.is_success:
        click.secho(body.get("message", "ok"), fg="green")
    else:
        click.secho(
            f"Error ({r.status_code}): {body.get('error', r.text)}", fg="red", err=True
        )
        sys.exit(1)


@main.command()
@click.option("--api-url", help="Server URL (or set WEATHERRELAY_API_URL)")
@click.option("--count", "-n", type=int, default=0, help="Stop after N events (0 = forever)")
@click.option("--raw", is_flag=True, help="Print raw JSON frames")
def watch(api_url: Optional[str], count: int, raw: bool):
    """Subscribe to the broadcast channel and print events as they arrive."""
    try:
        _run(_watch_impl(_ws_url(_api_url(api_url)), count, raw))
    except KeyboardInterrupt:
        pass


async def _watch_impl(ws_url: str, count: int, raw: bool):
    seen = 0
    try:
        async with websockets.connect(ws_url) as ws:
            click.echo(f"Connected to {ws_url}, waiting for weather events...")
            async for frame in ws:
                if isinstance(frame, bytes):
                    frame = frame.decode()
                click.echo(frame if raw else format_event(frame))
                seen += 1
                if count and seen >= count:
                    break
    except (OSError, WebSocketException) as e:
        click.secho(f"Connection to {ws_url} failed: {e}", fg="red", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
