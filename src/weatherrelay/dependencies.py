"""FastAPI dependencies that hand out the app-scoped relay components.

create_app() builds exactly one registry/broadcaster/relay set and stores
it on app.state. Routes never reach for module globals; they declare
these dependencies, and tests can swap them with dependency_overrides.
"""

from starlette.requests import HTTPConnection

from weatherrelay.realtime.registry import ConnectionRegistry
from weatherrelay.services.fetch_relay import WeatherRelay


def get_registry(conn: HTTPConnection) -> ConnectionRegistry:
    return conn.app.state.registry


def get_relay(conn: HTTPConnection) -> WeatherRelay:
    return conn.app.state.relay
