"""Outbound client for the upstream weather provider.

The provider is an opaque HTTP endpoint: POST {"name": <city>} and it
answers with a JSON list of weather records. This module only knows how
to make that call; deciding whether the answer is usable is the fetch
relay's job.
"""

from typing import Any, Optional, Protocol

import httpx
import structlog

logger = structlog.get_logger()


class ProviderError(Exception):
    """Provider unreachable, timed out, or answered with a non-2xx status."""


class ProviderPayloadError(Exception):
    """Provider answered 2xx but the body is not JSON."""


class WeatherProvider(Protocol):
    async def fetch(self, place_name: str) -> Any: ...

    async def aclose(self) -> None: ...


class HttpWeatherProvider:
    """WeatherProvider backed by a shared httpx.AsyncClient.

    One client per process; create_app() builds it and the lifespan
    closes it on shutdown.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, place_name: str) -> Any:
        try:
            response = await self._client.post(self.url, json={"name": place_name})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"provider returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"provider request failed: {e!r}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ProviderPayloadError("provider response is not JSON") from e

    async def aclose(self) -> None:
        await self._client.aclose()
