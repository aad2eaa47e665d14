"""Test fixtures — an app wired to a stub provider, plus fake subscribers.

Testing pattern:

1. Every test builds a fresh app with create_app(provider=StubProvider()),
   so the registry starts empty and nothing leaks between tests.
2. HTTP routes are exercised with httpx.AsyncClient over ASGITransport.
3. WebSocket flows need a real upgrade, so those tests use Starlette's
   TestClient (which also runs the lifespan).
4. Broadcaster/registry unit tests use FakeConnection instead of sockets.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from fakes import StubProvider
from weatherrelay.config import Settings
from weatherrelay.main import create_app
from weatherrelay.realtime import Broadcaster, ConnectionRegistry


@pytest.fixture()
def provider():
    return StubProvider()


@pytest.fixture()
def registry():
    return ConnectionRegistry()


@pytest.fixture()
def broadcaster(registry):
    return Broadcaster(registry)


@pytest.fixture()
def app(provider):
    return create_app(Settings(), provider=provider)


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def ws_client(app):
    """Starlette TestClient for WebSocket flows (runs startup/shutdown)."""
    with TestClient(app) as tc:
        yield tc
