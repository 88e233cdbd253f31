"""
Core configuration module for the ClickHouse MCP server.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the CLICKHOUSE_
prefix, optionally from a local .env file.

Example:
    CLICKHOUSE_API_KEY_ID=... CLICKHOUSE_API_SECRET=... mcp-server-clickhouse
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clickhouse_mcp.core.exceptions import ConfigurationError
from clickhouse_mcp.models.domain import ApiCredentials

DEFAULT_API_BASE_URL = "https://api.clickhouse.cloud"

MISSING_CREDENTIALS_MESSAGE = (
    "ClickHouse API Key ID or Secret not configured. "
    "Set CLICKHOUSE_API_KEY_ID and CLICKHOUSE_API_SECRET environment variables."
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the CLICKHOUSE_ prefix for environment variables,
    e.g. CLICKHOUSE_API_BASE_URL=http://localhost:8123 for local testing.
    The SSE port is also read from the conventional PORT variable.
    """

    # =========================================================================
    # API Credentials
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    api_key_id: str = Field(
        default="",
        description="ClickHouse Cloud API key ID",
    )
    api_secret: SecretStr = Field(
        default=SecretStr(""),
        description="ClickHouse Cloud API key secret",
    )

    # =========================================================================
    # Upstream API
    # =========================================================================
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the ClickHouse Cloud API (override for local testing)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout in seconds for ClickHouse Cloud API calls",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log renderer",
    )

    # =========================================================================
    # SSE Transport
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Interface the SSE server binds to",
    )
    port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("CLICKHOUSE_PORT", "PORT"),
        description="Port the SSE server listens on",
    )
    environment: Literal["development", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    model_config = SettingsConfigDict(
        env_prefix="CLICKHOUSE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate API base URL format and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {sorted(valid_levels)}")
        return v.upper()

    # =========================================================================
    # Credentials
    # =========================================================================
    @property
    def has_credentials(self) -> bool:
        """True when both the key ID and the secret are set."""
        return bool(self.api_key_id) and bool(self.api_secret.get_secret_value())

    def get_credentials(self) -> ApiCredentials:
        """
        Resolve the API credentials for a single tool call.

        Checked on every call rather than once at startup.

        Returns:
            ApiCredentials built from the configured key ID and secret.

        Raises:
            ConfigurationError: If either value is empty.
        """
        if not self.has_credentials:
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        return ApiCredentials(key_id=self.api_key_id, key_secret=self.api_secret)


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
