"""
Configuration management for healthgate.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LimiterConfig(BaseSettings):
    """Rate limiter policy configuration."""

    model_config = SettingsConfigDict(env_prefix="HEALTHGATE_LIMITER_")

    window_seconds: int = Field(
        default=30,
        ge=1,
        description="Suppression window per (subject, metric) key (seconds)"
    )
    count_threshold: int = Field(
        default=10,
        ge=1,
        description="Reserved count threshold; not used by the admission policy"
    )


class ClientConfig(BaseSettings):
    """Reporting client configuration."""

    model_config = SettingsConfigDict(env_prefix="HEALTHGATE_CLIENT_")

    server_url: str = Field(
        default="http://localhost:6688",
        description="Health-reporting service URL"
    )
    observer: str = Field(
        default="localhost",
        description="Identity this process reports as"
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per report before giving up"
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        description="Worker threads for asynchronous reports"
    )


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTHGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Nested configurations
    limiter: LimiterConfig = Field(default_factory=LimiterConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v


# Cached config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the cached configuration instance.

    Lazily loads configuration on first access.

    Returns:
        AppConfig: The configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(limiter=LimiterConfig(), client=ClientConfig())
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.

    Useful for testing or when environment changes.

    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
