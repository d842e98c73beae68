"""Dispatcher settings."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatcherSettings(BaseSettings):
    """Deployment-level configuration for outbound webhook delivery."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore")

    max_retries: int = Field(default=2, ge=0)
    backoff_base_seconds: float = Field(default=0.1, ge=0)
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    response_body_limit: int = Field(default=2000, ge=0)


@lru_cache
def get_settings() -> DispatcherSettings:
    """Cached settings instance."""
    return DispatcherSettings()
