"""
Configuration management for testmail-inbox.

This module provides configuration loading from environment variables,
TOML files and plain mappings (as handed over by the pytest plugin),
with type-safe settings classes.
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import InvalidConfigError, MissingConfigError

DEFAULT_ENDPOINT = "https://api.testmail.app/api/graphql"

# camelCase option names, as used in CodeceptJS helper configuration.
CAMEL_CASE_KEYS = {
    "apiKey": "api_key",
    "sleepDelay": "sleep_delay",
    "defaultTimeout": "default_timeout",
    "tagLength": "tag_length",
    "requestTimeout": "request_timeout",
}


class TestmailSettings(BaseSettings):
    """testmail.app account and polling settings."""

    __test__ = False

    model_config = SettingsConfigDict(
        env_prefix="TESTMAIL_",
        extra="ignore",
    )

    api_key: Optional[str] = Field(None, description="testmail.app API key")
    namespace: Optional[str] = Field(None, description="testmail.app namespace")
    sleep_delay: float = Field(
        default=5, gt=0, description="Seconds to wait between inbox queries"
    )
    default_timeout: float = Field(
        default=240, gt=0, description="Seconds to wait for emails"
    )
    tag_length: int = Field(
        default=8, ge=1, description="Length of randomly generated tags"
    )
    endpoint: str = Field(
        default=DEFAULT_ENDPOINT, description="GraphQL API endpoint"
    )
    request_timeout: float = Field(
        default=30, gt=0, description="HTTP request timeout in seconds"
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("api_key", "namespace", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_toml(cls, path: str | Path) -> "TestmailSettings":
        """
        Load settings from the ``[testmail]`` table of a TOML file.

        Environment variables still fill in anything the file leaves out.

        Args:
            path: Path to the TOML configuration file.

        Returns:
            TestmailSettings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        path = Path(path)
        if not path.exists():
            raise MissingConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise InvalidConfigError(
                config_key="config_file",
                value=str(path),
                reason=f"Failed to parse TOML: {e}",
            ) from e

        return cls.from_dict(config_data.get("testmail", {}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TestmailSettings":
        """
        Create settings from a dictionary.

        Keys may use either the camelCase helper names (``apiKey``,
        ``sleepDelay``...) or the snake_case field names. ``None`` values
        are skipped so that they do not shadow environment variables.

        Args:
            data: Configuration dictionary.

        Returns:
            TestmailSettings instance.

        Raises:
            InvalidConfigError: If a value fails validation.
        """
        settings_kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            settings_kwargs[CAMEL_CASE_KEYS.get(key, key)] = value

        try:
            return cls(**settings_kwargs)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            raise InvalidConfigError(
                config_key=field,
                value=error.get("input"),
                reason=error["msg"],
            ) from e

    def validate_required(self) -> None:
        """
        Validate that all required configuration is present.

        Raises:
            MissingConfigError: If required configuration is missing.
        """
        if not self.api_key:
            raise MissingConfigError("TESTMAIL_API_KEY")
        if not self.namespace:
            raise MissingConfigError("TESTMAIL_NAMESPACE")


@lru_cache()
def get_settings() -> TestmailSettings:
    """
    Get cached settings.

    Settings come from environment variables and, when
    ``TESTMAIL_CONFIG_FILE`` points at an existing file, from that TOML
    file. The result is cached for the lifetime of the process.

    Returns:
        TestmailSettings instance.
    """
    config_file = os.getenv("TESTMAIL_CONFIG_FILE")

    if config_file and Path(config_file).exists():
        return TestmailSettings.from_toml(config_file)
    return TestmailSettings.from_dict({})


def reload_settings() -> TestmailSettings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh TestmailSettings instance.
    """
    get_settings.cache_clear()
    return get_settings()
