"""Application settings using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    timezone: str = "UTC"

    # Rate Limits (requests per minute)
    rate_limit_dexscreener: int = 30
    rate_limit_nitter: int = 10  # Nitter instances ban aggressively
    rate_limit_agent_trends: int = 20
    rate_limit_problems: int = 10

    # Retry policy
    retry_max_retries: int = 3
    retry_base_delay: float = 1.0  # seconds
    retry_status_codes: list[int] = [429, 502, 503, 504]

    # HTTP
    http_timeout: float = 15.0
    # Per-provider deadline for one collection; below the Celery soft time limit
    provider_timeout: float = 300.0
    http_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )

    # Endpoints
    dexscreener_base_url: str = "https://api.dexscreener.com"
    nitter_instances: list[str] = [
        "https://nitter.net",
        "https://nitter.cz",
        "https://nitter.privacydev.net",
    ]
    agent_news_urls: list[str] = [
        "https://decrypt.co/artificial-intelligence",
        "https://cointelegraph.com/tags/artificial-intelligence",
    ]

    # Telegram delivery
    telegram_bot_token: SecretStr | None = None
    telegram_chat_id: str = ""
    telegram_api_url: str = "https://api.telegram.org"

    # Scheduling (Celery beat)
    redis_url: str = "redis://localhost:6379/0"
    schedule_hour: int = 9
    schedule_minute: int = 0

    # Idea output
    ideas_per_kind: int = 5

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("retry_max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("retry_max_retries must be >= 0")
        return v

    @field_validator("retry_base_delay")
    @classmethod
    def validate_base_delay(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("retry_base_delay must be positive")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def telegram_enabled(self) -> bool:
        return self.telegram_bot_token is not None and bool(self.telegram_chat_id)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
