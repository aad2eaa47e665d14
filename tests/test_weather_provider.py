"""HTTP provider client tests, using httpx.MockTransport as the upstream."""

import json

import httpx
import pytest

from fakes import MOGI_EVENT, FakeConnection
from weatherrelay.services.fetch_relay import UpstreamUnavailableError, WeatherRelay
from weatherrelay.services.weather_provider import (
    HttpWeatherProvider,
    ProviderError,
    ProviderPayloadError,
)

PROVIDER_URL = "https://provider.test/webhook/clima"


def make_provider(handler) -> HttpWeatherProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpWeatherProvider(PROVIDER_URL, client=client)


@pytest.mark.asyncio
async def test_fetch_posts_place_name():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[MOGI_EVENT])

    provider = make_provider(handler)
    data = await provider.fetch("Mogi")
    await provider.aclose()

    assert data == [MOGI_EVENT]
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == PROVIDER_URL
    assert json.loads(seen[0].content) == {"name": "Mogi"}


@pytest.mark.asyncio
async def test_error_status_raises_provider_error():
    provider = make_provider(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(ProviderError, match="502"):
        await provider.fetch("Mogi")


@pytest.mark.asyncio
async def test_network_failure_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(ProviderError):
        await provider.fetch("Mogi")


@pytest.mark.asyncio
async def test_non_json_body_raises_payload_error():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ProviderPayloadError):
        await provider.fetch("Mogi")


@pytest.mark.asyncio
async def test_relay_maps_http_failure_to_upstream_unavailable(registry, broadcaster):
    subscriber = FakeConnection()
    registry.admit(subscriber)
    provider = make_provider(lambda request: httpx.Response(503))
    relay = WeatherRelay(provider, broadcaster)

    with pytest.raises(UpstreamUnavailableError):
        await relay.fetch_and_broadcast("Mogi")

    assert subscriber.sent == []
