"""Pytest configuration for dispatch tests.

Provides:
1. A mock structured logger (no structlog output during tests)
2. A shared constraint validator
3. A dispatcher wired with the sample HelloGroup
4. Caller payloads for common roles
"""

import inspect
from unittest.mock import MagicMock

import pytest

from command_dispatch import Dispatcher
from command_dispatch.core.config import get_settings
from command_dispatch.core.container import get_logger, get_validator
from command_dispatch.infrastructure.validation import ConstraintValidator
from tests.utils.handlers import HelloGroup


@pytest.fixture(autouse=True)
def reset_container():
    """Rebuild cached settings and singletons around every test."""
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_validator.cache_clear()
    yield
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_validator.cache_clear()


@pytest.fixture
def mock_logger():
    """Structured logger double; bind() returns the same mock."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest.fixture
def validator():
    return ConstraintValidator()


@pytest.fixture
def dispatcher(mock_logger, validator):
    """Dispatcher with HelloGroup registered under ``hello``."""
    return Dispatcher({"hello": HelloGroup}, logger=mock_logger, validator=validator)


@pytest.fixture
def admin_context():
    return {"user": {"role": "ADMIN"}}


@pytest.fixture
def guest_context():
    return {"role": "GUEST"}


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real Casbin policies"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
