"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with WEATHERRELAY_ prefix.
Nothing is read from files; tests pass a Settings instance to create_app().
"""

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via WEATHERRELAY_* env vars."""

    # Upstream weather provider (n8n webhook fronting the weather API)
    provider_url: str = "https://n8n-n8n.gkm8su.easypanel.host/webhook/clima"
    provider_timeout_seconds: float = 10.0

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Upper bound on a single subscriber send; slower sockets are dropped
    send_timeout_seconds: float = 5.0

    # WebSocket close code sent to subscribers on shutdown (1001 = going away)
    shutdown_close_code: int = 1001

    model_config = {"env_prefix": "WEATHERRELAY_"}

    @field_validator("provider_url")
    @classmethod
    def validate_provider_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("WEATHERRELAY_PROVIDER_URL must be an http(s) URL")
        return value

    @field_validator("provider_timeout_seconds", "send_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float, info: ValidationInfo) -> float:
        if value <= 0:
            raise ValueError(f"WEATHERRELAY_{info.field_name.upper()} must be positive")
        return value


# Singleton — import this everywhere
settings = Settings()
