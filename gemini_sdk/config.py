"""Configuration management for the SDK."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_sdk.exceptions import GeminiValidationError


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True, description="Whether caching is enabled")
    max_size: int = Field(default=256, description="Maximum number of cached responses")
    ttl: float = Field(default=3600.0, description="Entry time-to-live in seconds")

    @model_validator(mode="after")
    def _check_bounds(self) -> "CacheConfig":
        errors: dict[str, str] = {}
        if self.max_size <= 0:
            errors["max_size"] = "Max cache size must be positive"
        if self.ttl <= 0:
            errors["ttl"] = "TTL must be positive"
        if errors:
            raise GeminiValidationError("Invalid cache config", errors)
        return self


class GeminiConfig(BaseSettings):
    """Client settings, overridable through ``GEMINI_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # API Configuration
    api_key: SecretStr | None = Field(default=None, description="API key sent as x-goog-api-key")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="Gemini API base URL",
    )
    api_version: Literal["v1", "v1beta"] = Field(default="v1", description="API version")

    # Proxy Configuration
    proxy: str | None = Field(default=None, description="HTTP proxy URL")

    # Timeout Configuration
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    # Retry Configuration
    max_retries: int = Field(default=3, description="Retries after the first attempt")
    retry_base_delay: float = Field(
        default=1.0, description="Base delay for retry backoff in seconds"
    )
    retry_max_delay: float = Field(
        default=30.0, description="Maximum delay for retry backoff in seconds"
    )
    retry_backoff_multiplier: float = Field(
        default=2.0, description="Multiplier applied to the delay after each attempt"
    )

    # Logging Configuration
    enable_logging: bool = Field(default=False, description="Emit SDK logs")
    log_level: str = Field(default="INFO", description="Log level when logging is enabled")

    # Cache Configuration
    cache: CacheConfig | None = Field(default=None, description="Response cache settings")

    @model_validator(mode="after")
    def _check_values(self) -> "GeminiConfig":
        errors: dict[str, str] = {}
        if not self.base_url.startswith(("http://", "https://")):
            errors["base_url"] = "Base URL must be an absolute http(s) URL"
        if self.timeout <= 0:
            errors["timeout"] = "Timeout must be positive"
        if self.max_retries < 0:
            errors["max_retries"] = "Max retries cannot be negative"
        if self.retry_base_delay < 0:
            errors["retry_base_delay"] = "Retry base delay cannot be negative"
        if self.retry_max_delay < self.retry_base_delay:
            errors["retry_max_delay"] = "Retry max delay must be >= retry base delay"
        if self.retry_backoff_multiplier <= 0:
            errors["retry_backoff_multiplier"] = "Backoff multiplier must be positive"
        if errors:
            raise GeminiValidationError("Invalid client config", errors)
        return self

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-based)."""
        if attempt <= 0:
            return 0.0
        delay = self.retry_base_delay * self.retry_backoff_multiplier ** (attempt - 1)
        return min(delay, self.retry_max_delay)

    def api_key_value(self) -> str | None:
        return self.api_key.get_secret_value() if self.api_key else None
