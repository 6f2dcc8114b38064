"""Tests for environment-driven settings."""

import pytest
from fastapi.middleware.cors import CORSMiddleware

from cardbinder.config import Settings
from cardbinder.main import app


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CARDBINDER_CORS_ORIGINS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["*"]
        assert settings.price_ttl_hours == 24.0

    def test_cors_origins_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARDBINDER_CORS_ORIGINS", '["http://localhost:3000"]')

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["http://localhost:3000"]

    def test_app_uses_configured_origins(self) -> None:
        (cors,) = [m for m in app.user_middleware if m.cls is CORSMiddleware]

        assert cors.kwargs["allow_origins"] == Settings(_env_file=None).cors_origins
