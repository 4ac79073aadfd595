"""
Shared configuration management for the Matcher gateway.

Settings are resolved from (highest precedence first) constructor
arguments, ``MATCHER_*`` environment variables, a ``.env`` file and the
YAML file named by ``MATCHER_CONFIG_FILE`` (``config/config.yaml`` by
default).
"""

import os
from typing import Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = "config/config.yaml"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="MATCHER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = os.getenv("MATCHER_CONFIG_FILE", DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            file_secret_settings,
        )


class MatcherConfig(BaseConfig):
    """Matcher service configuration."""

    # Driver service (upstream)
    driver_service_url: str = "http://localhost:8081"
    driver_service_api_key: str = ""
    upstream_timeout: float = Field(default=5.0, gt=0)

    # Security
    jwt_secret_key: str = ""

    # Circuit breaker
    breaker_failure_threshold: int = Field(default=3, ge=1)
    breaker_success_threshold: int = Field(default=1, ge=1)
    breaker_recovery_timeout: float = Field(default=5.0, ge=0)
    breaker_open_status: int = 503

    @field_validator("breaker_open_status")
    @classmethod
    def _check_breaker_open_status(cls, value: int) -> int:
        if value not in (404, 503):
            raise ValueError("breaker_open_status must be 404 or 503")
        return value


def get_config(**overrides) -> MatcherConfig:
    """Get configuration for the matcher service."""
    return MatcherConfig(**overrides)
