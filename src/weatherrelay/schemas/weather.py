"""Pydantic schemas for the weather API.

- FetchResponse / ErrorResponse / HealthResponse: what the API returns
- WeatherEvent: the broadcast payload, as the upstream provider shapes it

The relay itself broadcasts the provider's record verbatim; WeatherEvent
documents the fields consumers can rely on and is what the CLI uses to
render events. Unknown fields are kept (extra="allow").
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class FetchResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str


class Condition(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str
    icon: str


class Location(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    region: Optional[str] = None
    country: Optional[str] = None


class CurrentConditions(BaseModel):
    model_config = ConfigDict(extra="allow")

    temp_c: float
    condition: Condition
    humidity: float
    wind_kph: float


class WeatherEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    location: Location
    current: CurrentConditions
