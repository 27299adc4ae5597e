"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.deal_pipeline.core.currency import CurrencyType


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # Deal defaults
    DEFAULT_CURRENCY: CurrencyType = CurrencyType.EUR
    UNTITLED_DEAL_NAME: str = "Untitled Deal"  # Placeholder when neither deal_name nor project_name is set


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
