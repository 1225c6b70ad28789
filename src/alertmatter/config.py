"""Configuration management for alertmatter."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at startup and passed explicitly to the application; the value
    is frozen so request handlers cannot mutate it.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALERTMATTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080
    verbose: bool = False

    # Mattermost settings
    webhook_url: str
    request_timeout: float = Field(default=10.0, gt=0)  # Seconds, per outbound POST
    username: str = "alertmatter"
    icon_emoji: str = ":bell:"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # Metrics
    metrics_enabled: bool = True
    metrics_path: str = "/metrics"

    @field_validator("webhook_url")
    @classmethod
    def _require_webhook_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Mattermost webhook URL is not provided")
        return value.strip()

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the verbose flag."""
        return "DEBUG" if self.verbose else self.log_level.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings read from the environment."""
    return Settings()  # type: ignore[call-arg]
