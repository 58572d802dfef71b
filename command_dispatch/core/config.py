"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables with
the ``DISPATCH_`` prefix. These values form the lowest layer of the
per-invocation options (see ``command_dispatch.application.options``).

Usage:
    from command_dispatch.core.config import get_settings

    settings = get_settings()
    settings.default_role        # "UNAUTHORIZED"
    settings.validator_format    # ValidatorFormat.ERROR_FORMATTER

Environment variables:
    DISPATCH_ENVIRONMENT=testing
    DISPATCH_LOG_LEVEL=DEBUG
    DISPATCH_DEFAULT_ROLE=GUEST
    DISPATCH_CHECK_ACCESS_ON_ALIASES=true
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from command_dispatch.core.enums import Environment, ValidatorFormat


class Settings(BaseSettings):
    """
    Dispatcher settings (flat structure).

    Configuration precedence:
        1. Environment variables (DISPATCH_*)
        2. Default values

    Returns:
        Settings: Configuration loaded from environment.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Pipeline defaults
    default_role: str = Field(
        default="UNAUTHORIZED",
        description="Role used when the caller context carries none",
    )
    validator_format: ValidatorFormat = Field(
        default=ValidatorFormat.ERROR_FORMATTER,
        description="Output shape for parameter validation failures",
    )
    check_access_on_aliases: bool = Field(
        default=False,
        description="Authorize aliased commands against the alias name instead of its target",
    )

    # Access control
    casbin_model_path: str | None = Field(
        default=None,
        description="Casbin model file; the bundled model.conf is used when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Level name in any case.

        Returns:
            str: Upper-case level name.

        Raises:
            ValueError: If the name is not a standard logging level.
        """
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_level_number(self) -> int:
        """Numeric logging level for structlog filtering."""
        return logging.getLevelNamesMapping()[self.log_level]

    @property
    def use_json_logs(self) -> bool:
        """
        Check whether logs should be rendered as JSON.

        Returns:
            bool: True outside of the development environment.
        """
        return self.environment != Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
