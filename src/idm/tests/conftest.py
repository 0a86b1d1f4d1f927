"""
Core pytest configuration for the entire test suite.

Every test gets its own SQLite file (aiosqlite driver) under pytest's
tmp_path, with the schema created from the models. Ids therefore start at 1
in each test, and services can commit for real without leaking rows into the
next test.

Domain-specific fixtures live in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/api_fixtures.py
and are imported at the bottom of this module so they are available everywhere.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


import pytest
from pytest import FixtureRequest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from idm.config.settings import Settings
from idm.core.logging.builder import setup_logging
from idm.database.session import create_engine_from_settings, create_schema, create_session_factory

JWT_TEST_KEY = "idm-test-secret"


def make_settings(**overrides) -> Settings:
    """
    Settings isolated from the developer's .env file. Keyword arguments win
    over environment variables, so CI variables cannot leak in either.
    """
    values = {
        "ENV": "testing",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "JWT_KEY": JWT_TEST_KEY,
        "JWT_ALGORITHMS": "HS256",
        "LOG_FORMAT": "text",
        "LOG_LEVEL": "INFO",
        "LOG_TO_STDOUT": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def install_test_logging(config: pytest.Config) -> None:
    """
    Install application logging.

    dictConfig replaces the root handlers, which removes pytest's capture
    handler; it is re-attached so `caplog` keeps working.
    """
    setup_logging(make_settings())

    caplog_plugin = config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    install_test_logging(request.config)
    yield


@pytest.fixture
def restore_logging(request: FixtureRequest):
    """For tests that call setup_logging themselves: put the suite config back afterwards."""
    yield
    install_test_logging(request.config)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'idm.db'}")


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine_from_settings(settings)
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    employee_repository,
    role_repository,
    employee_service,
    role_service,
    sample_employee_data,
    create_employee,
    multiple_employees,
    count_employees,
)
from .test_fixtures.api_fixtures import (  # noqa: E402,F401
    app,
    client,
    make_token,
    admin_headers,
    user_headers,
)
