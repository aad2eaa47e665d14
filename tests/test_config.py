"""Settings tests — env overrides and validation."""

import pytest
from pydantic import ValidationError

from fakes import StubProvider
from weatherrelay.config import Settings
from weatherrelay.main import create_app


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WEATHERRELAY_PROVIDER_URL", "http://localhost:5678/webhook/clima")
    monkeypatch.setenv("WEATHERRELAY_PORT", "8080")
    cfg = Settings()
    assert cfg.provider_url == "http://localhost:5678/webhook/clima"
    assert cfg.port == 8080


def test_rejects_non_http_provider_url():
    with pytest.raises(ValidationError):
        Settings(provider_url="ftp://provider.test")


def test_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        Settings(provider_timeout_seconds=0)


def test_send_timeout_from_env(monkeypatch):
    monkeypatch.setenv("WEATHERRELAY_SEND_TIMEOUT_SECONDS", "0.5")
    assert Settings().send_timeout_seconds == 0.5


def test_rejects_non_positive_send_timeout():
    with pytest.raises(ValidationError):
        Settings(send_timeout_seconds=-1)


def test_app_broadcaster_uses_configured_send_timeout():
    app = create_app(Settings(send_timeout_seconds=0.25), provider=StubProvider())
    assert app.state.broadcaster.send_timeout == 0.25
