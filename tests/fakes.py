"""Test doubles shared across the suite: a stub provider and fake sockets."""

import asyncio
from typing import Any, Optional

from starlette.websockets import WebSocketState


MOGI_EVENT = {
    "location": {"name": "Mogi"},
    "current": {
        "temp_c": 21,
        "condition": {"text": "Clear", "icon": "x"},
        "humidity": 60,
        "wind_kph": 5,
    },
}


class StubProvider:
    """Stands in for the upstream provider; records every call."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = [MOGI_EVENT] if response is None else response
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, place_name: str) -> Any:
        self.calls.append(place_name)
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self) -> None:
        self.closed = True


class FakeConnection:
    """Minimal WebSocket stand-in: records sends, optionally fails them."""

    def __init__(self, *, fail: bool = False, open: bool = True):
        self.fail = fail
        self.sent: list[str] = []
        self.closed_with: Optional[int] = None
        state = WebSocketState.CONNECTED if open else WebSocketState.DISCONNECTED
        self.client_state = state
        self.application_state = state

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is gone")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        if self.fail:
            raise RuntimeError("socket is gone")
        self.closed_with = code
        self.client_state = WebSocketState.DISCONNECTED
        self.application_state = WebSocketState.DISCONNECTED


def weather_for(city: str) -> dict:
    return {**MOGI_EVENT, "location": {"name": city}}


class GatedProvider(StubProvider):
    """Holds fetches for gated cities until gate is set; others answer at once."""

    def __init__(self, gated: set[str]):
        super().__init__()
        self.gated = gated
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()

    async def fetch(self, place_name: str) -> Any:
        self.calls.append(place_name)
        if place_name in self.gated:
            self.entered.set()
            await self.gate.wait()
        return [weather_for(place_name)]


class StalledConnection(FakeConnection):
    """A subscriber whose send never completes (peer stopped reading)."""

    async def send_text(self, data: str) -> None:
        await asyncio.Event().wait()
