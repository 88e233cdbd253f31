"""
Tests for Settings.

Covers:
- Defaults
- Environment variables with the CLICKHOUSE_ prefix and the PORT alias
- Field validation
- Credential resolution
"""

import pytest
from pydantic import ValidationError

from clickhouse_mcp.core.config import (
    DEFAULT_API_BASE_URL,
    MISSING_CREDENTIALS_MESSAGE,
    Settings,
    get_settings,
)
from clickhouse_mcp.core.exceptions import ConfigurationError, ErrorCode

ENV_VARS = (
    "CLICKHOUSE_API_KEY_ID",
    "CLICKHOUSE_API_SECRET",
    "CLICKHOUSE_API_BASE_URL",
    "CLICKHOUSE_REQUEST_TIMEOUT_SECONDS",
    "CLICKHOUSE_LOG_LEVEL",
    "CLICKHOUSE_LOG_FORMAT",
    "CLICKHOUSE_ENVIRONMENT",
    "CLICKHOUSE_PORT",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env) -> None:
        settings = Settings(_env_file=None)

        assert settings.api_key_id == ""
        assert settings.api_secret.get_secret_value() == ""
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.request_timeout_seconds == 30.0
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.port == 3001
        assert settings.environment == "development"
        assert not settings.has_credentials


class TestEnvironment:
    def test_credentials_from_env(self, clean_env) -> None:
        clean_env.setenv("CLICKHOUSE_API_KEY_ID", "key")
        clean_env.setenv("CLICKHOUSE_API_SECRET", "secret")

        settings = Settings(_env_file=None)

        assert settings.api_key_id == "key"
        assert settings.api_secret.get_secret_value() == "secret"
        assert settings.has_credentials

    def test_port_alias(self, clean_env) -> None:
        clean_env.setenv("PORT", "8080")

        assert Settings(_env_file=None).port == 8080

    def test_prefixed_port(self, clean_env) -> None:
        clean_env.setenv("CLICKHOUSE_PORT", "9000")

        assert Settings(_env_file=None).port == 9000

    def test_env_file(self, clean_env, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("CLICKHOUSE_API_KEY_ID=file-key\nCLICKHOUSE_API_SECRET=file-secret\n")

        settings = Settings(_env_file=env_file)

        assert settings.api_key_id == "file-key"
        assert settings.has_credentials

    def test_secret_is_masked(self, clean_env) -> None:
        settings = Settings(_env_file=None, api_key_id="key", api_secret="hunter2")

        assert "hunter2" not in repr(settings)


class TestValidation:
    def test_base_url_trailing_slash_is_dropped(self) -> None:
        settings = Settings(_env_file=None, api_base_url="http://localhost:8080/")

        assert settings.api_base_url == "http://localhost:8080"

    def test_base_url_requires_scheme(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, api_base_url="api.clickhouse.cloud")

    def test_log_level_is_normalized(self) -> None:
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_bounds(self, timeout: float) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_timeout_seconds=timeout)


class TestCredentials:
    def test_get_credentials(self, test_settings: Settings) -> None:
        credentials = test_settings.get_credentials()

        assert credentials.key_id == "test-key-id"
        assert credentials.key_secret.get_secret_value() == "test-key-secret"

    @pytest.mark.parametrize(
        "key_id,secret",
        [("", ""), ("key", ""), ("", "secret")],
    )
    def test_missing_credentials(self, key_id: str, secret: str) -> None:
        settings = Settings(_env_file=None, api_key_id=key_id, api_secret=secret)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.get_credentials()

        assert exc_info.value.message == MISSING_CREDENTIALS_MESSAGE
        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR


def test_get_settings_is_cached(clean_env) -> None:
    assert get_settings() is get_settings()
