"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_fallback(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return ""


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Providers
    gemini_api_key: str = Field(
        default_factory=lambda: _env_fallback("GEMINI_API_KEY"), description="Gemini API key"
    )
    openai_api_key: str = Field(
        default_factory=lambda: _env_fallback("OPENAI_API_KEY"), description="OpenAI API key"
    )
    serp_api_key: str = Field(
        default_factory=lambda: _env_fallback("SERP_API_KEY", "GOOGLE_SEARCH_API_KEY"),
        description="Design inspiration search API key",
    )
    gemini_model: str = Field(default="gemini-1.5-flash", description="Primary Gemini model")
    openai_model: str = Field(default="gpt-4-turbo-preview", description="Fallback OpenAI model")

    # Generation
    http_timeout: float = Field(default=60.0, gt=0, description="LLM HTTP timeout (seconds)")

    # Circuit breaker for optional collaborators
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before opening breaker")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Breaker reset timeout (seconds)")

    # Pages API
    pages_api_url: str = Field(default="http://localhost:3000", description="Pages API base URL")
    pages_api_timeout: float = Field(default=5.0, gt=0, description="Pages API timeout")

    # Analytics
    analytics_endpoint: str = Field(default="/api/analytics/track", description="Tracking endpoint")
    analytics_batch_size: int = Field(default=10, gt=0, description="Events per flush")
    analytics_batch_interval: float = Field(default=5.0, gt=0, description="Flush interval (seconds)")

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=8000, gt=0, description="HTTP port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Editor
    max_history_size: int = Field(default=50, gt=0, description="Max undo history entries")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
