"""Unit tests for Settings (pydantic-settings).

Tests cover:
- Default values
- DISPATCH_ prefixed environment overrides
- Log level validation
- Cached singleton behavior
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from command_dispatch.core.config import Settings, get_settings
from command_dispatch.core.enums import Environment, ValidatorFormat


@pytest.mark.unit
class TestSettingsDefaults:
    """Test Settings defaults without any environment."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.default_role == "UNAUTHORIZED"
        assert settings.validator_format == ValidatorFormat.ERROR_FORMATTER
        assert settings.check_access_on_aliases is False
        assert settings.casbin_model_path is None
        assert settings.log_level == "INFO"

    def test_development_uses_console_logs(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Settings().use_json_logs is False


@pytest.mark.unit
class TestSettingsEnvironment:
    """Test environment variable overrides."""

    def test_prefixed_variables_override_defaults(self):
        env = {
            "DISPATCH_ENVIRONMENT": "testing",
            "DISPATCH_DEFAULT_ROLE": "GUEST",
            "DISPATCH_VALIDATOR_FORMAT": "grouped",
            "DISPATCH_CHECK_ACCESS_ON_ALIASES": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.environment == Environment.TESTING
        assert settings.default_role == "GUEST"
        assert settings.validator_format == ValidatorFormat.GROUPED
        assert settings.check_access_on_aliases is True
        assert settings.use_json_logs is True

    def test_unprefixed_variables_are_ignored(self):
        with patch.dict(os.environ, {"DEFAULT_ROLE": "GUEST"}, clear=True):
            assert Settings().default_role == "UNAUTHORIZED"

    def test_log_level_is_normalized(self):
        with patch.dict(os.environ, {"DISPATCH_LOG_LEVEL": "debug"}, clear=True):
            settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.log_level_number == 10

    def test_unknown_log_level_rejected(self):
        with patch.dict(os.environ, {"DISPATCH_LOG_LEVEL": "chatty"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()


@pytest.mark.unit
class TestGetSettings:
    """Test cached settings accessor."""

    def test_returns_cached_instance(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads_environment(self):
        with patch.dict(os.environ, {"DISPATCH_DEFAULT_ROLE": "FIRST"}, clear=True):
            get_settings.cache_clear()
            assert get_settings().default_role == "FIRST"

        with patch.dict(os.environ, {"DISPATCH_DEFAULT_ROLE": "SECOND"}, clear=True):
            get_settings.cache_clear()
            assert get_settings().default_role == "SECOND"
