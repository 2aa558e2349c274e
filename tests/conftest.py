"""Shared pytest fixtures for all tests."""

import pytest

from modelmeta.core.logging import configure_logging
from modelmeta.dialects import MySQLDialect, PostgresDialect, SQLiteDialect
from modelmeta.schema import ModelRegistry, NamingStrategy


@pytest.fixture(autouse=True)
def uncached_logging():
    """Keep structlog loggers uncached so capture_logs sees every event."""
    configure_logging(log_level="DEBUG", show_timestamps=False, color=False, cache_loggers=False)
    yield


@pytest.fixture
def registry() -> ModelRegistry:
    """Create a fresh descriptor registry.

    Each test gets its own cache, so models are described from scratch.
    """
    return ModelRegistry()


@pytest.fixture
def singular_registry() -> ModelRegistry:
    """Create a registry using singular table names."""
    return ModelRegistry(NamingStrategy(singular_table=True))


@pytest.fixture
def postgres() -> PostgresDialect:
    return PostgresDialect()


@pytest.fixture
def mysql() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture
def sqlite() -> SQLiteDialect:
    return SQLiteDialect()
