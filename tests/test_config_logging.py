"""Tests for settings loading and structlog configuration."""

from __future__ import annotations

import pytest
import structlog
from pydantic import ValidationError

from src.deal_pipeline import deals
from src.deal_pipeline.config import Environment, Settings, get_settings
from src.deal_pipeline.core.currency import CurrencyType
from src.deal_pipeline.core.logging import configure_structlog


class TestSettings:
    """Tests for Settings and get_settings."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.ENVIRONMENT == Environment.development
        assert settings.DEFAULT_CURRENCY == "EUR"
        assert settings.UNTITLED_DEAL_NAME == "Untitled Deal"

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_settings().ENVIRONMENT == Environment.production

    def test_default_currency_is_enum(self, monkeypatch) -> None:
        monkeypatch.setenv("DEFAULT_CURRENCY", "USD")
        assert get_settings().DEFAULT_CURRENCY == CurrencyType.USD

    def test_unknown_currency_rejected_at_load(self, monkeypatch) -> None:
        monkeypatch.setenv("DEFAULT_CURRENCY", "GBP")
        with pytest.raises(ValidationError):
            Settings()

    def test_cached(self) -> None:
        assert get_settings() is get_settings()


class TestConfigureStructlog:
    """Tests for configure_structlog."""

    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_console_renderer_in_development(self) -> None:
        configure_structlog()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer_in_production(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        configure_structlog()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_exported_for_embedding_applications(self) -> None:
        assert deals.configure_structlog is configure_structlog
        assert "configure_structlog" in deals.__all__
