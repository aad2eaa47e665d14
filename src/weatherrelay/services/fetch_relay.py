"""Fetch relay — turn a "fetch weather for X" request into a broadcast.

Each call is a stateless transaction:

  received → validate input → call provider → validate response
           → broadcast → completed

Any validating or calling step can fail instead, and the failure is
raised as one of the RelayError kinds below. Nothing is broadcast on
failure. How many subscribers actually got the event never affects the
result: once the broadcast is attempted the fetch has succeeded.

Learn: Concurrent calls are independent. The provider call is the only
await before the broadcast, so while one fetch waits on a slow provider
the event loop keeps admitting subscribers and serving other fetches.
Two requests for the same city make two provider calls and two
broadcasts; nothing is coalesced.
"""

import json
from dataclasses import dataclass
from typing import Any

import structlog

from weatherrelay.realtime.broadcaster import Broadcaster, BroadcastReport
from weatherrelay.services.weather_provider import (
    ProviderError,
    ProviderPayloadError,
    WeatherProvider,
)

logger = structlog.get_logger()


class RelayError(Exception):
    """Base for every fetch-path failure."""


class BadRequestError(RelayError):
    """Caller input invalid (missing or empty place name)."""


class UpstreamUnavailableError(RelayError):
    """Provider unreachable or answered with an error status."""


class UpstreamDataInvalidError(RelayError):
    """Provider answered, but not with a usable weather record."""


@dataclass
class FetchResult:
    event: dict[str, Any]
    report: BroadcastReport


def validate_place_name(place_name: Any) -> str:
    if not isinstance(place_name, str) or not place_name.strip():
        raise BadRequestError("place name is required")
    return place_name.strip()


def extract_weather_event(data: Any) -> dict[str, Any]:
    """Pull the weather event out of a provider response.

    The provider contract is "a non-empty list, first element is the
    record". The record must carry both a location and a current-conditions
    object. The record is returned as-is; fields are never rewritten.

    Learn: Python's json module happily parses NaN/Infinity, but browsers'
    JSON.parse rejects them, so a record carrying one would reach every
    subscriber as an unparseable frame. Such records are refused here.
    """
    if not isinstance(data, list) or not data:
        raise UpstreamDataInvalidError("invalid data format from weather service")

    event = data[0]
    if not isinstance(event, dict):
        raise UpstreamDataInvalidError("weather record is not an object")

    location = event.get("location")
    current = event.get("current")
    if not isinstance(location, dict) or not isinstance(current, dict):
        raise UpstreamDataInvalidError("incomplete weather data received")

    try:
        json.dumps(event, allow_nan=False)
    except ValueError as e:
        raise UpstreamDataInvalidError("weather record is not strict JSON") from e

    return event


class WeatherRelay:
    def __init__(self, provider: WeatherProvider, broadcaster: Broadcaster):
        self.provider = provider
        self.broadcaster = broadcaster

    async def fetch_and_broadcast(self, place_name: Any) -> FetchResult:
        name = validate_place_name(place_name)

        try:
            data = await self.provider.fetch(name)
        except ProviderError as e:
            logger.error("fetch_relay.upstream_unavailable", city=name, error=str(e))
            raise UpstreamUnavailableError(str(e)) from e
        except ProviderPayloadError as e:
            logger.error("fetch_relay.upstream_data_invalid", city=name, error=str(e))
            raise UpstreamDataInvalidError(str(e)) from e

        try:
            event = extract_weather_event(data)
        except UpstreamDataInvalidError as e:
            logger.error("fetch_relay.upstream_data_invalid", city=name, error=str(e))
            raise

        report = await self.broadcaster.broadcast(event)
        logger.info(
            "fetch_relay.completed",
            city=name,
            delivered=report.delivered,
        )
        return FetchResult(event=event, report=report)
