"""
Core pytest configuration for the entire test suite.

This module provides only the database setup and the settings/logging helpers
that every kind of test needs.

Domain-specific fixtures live in:
- tests/test_fixtures/repository_fixtures.py   (SQLAlchemy repositories, Faker data)
- tests/test_fixtures/service_fixtures.py      (in-memory fake repositories, services)
- tests/test_fixtures/api_fixtures.py          (ASGI app + httpx client)

and are imported at the bottom of this file so every test module can use them.
"""

from __future__ import annotations

import os
import logging
from pathlib import Path
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Silence noisy third-party loggers before they are imported.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
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
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.tests.test_fixtures.settings_fixtures import make_test_settings
from postboard.core.logging.builder import setup_logging
from postboard.database.session import Database, safe_db_url

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application's dictConfig once for the session so formatters and
    filters (request_id) are active in every test.
    """
    setup_logging(make_test_settings())
    yield


# ------------------------------------------------------------------------------------------------
# Database
# ------------------------------------------------------------------------------------------------


def get_test_database_url(tmp_path: Path) -> str:
    """
    Determine the test database URL.

    1. `TEST_DATABASE_URL` environment variable (CI against a real Postgres)
    2. otherwise a fresh SQLite file inside the test's tmp_path
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url
    return f"sqlite+aiosqlite:///{tmp_path / 'test_database.db'}"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """
    A `Database` with freshly created tables, dropped and disposed after the test.

    Repositories commit their own writes, so isolation comes from rebuilding the
    schema per test rather than from an outer transaction.
    """
    url = get_test_database_url(tmp_path)
    logger.debug(f"Using test DB: {safe_db_url(url)}")

    db = Database(url)
    # A shared Postgres test database may hold tables from an aborted run
    await db.drop_schema()
    await db.create_schema()

    yield db

    await db.drop_schema()
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture
def fake() -> Faker:
    """Seeded Faker so failures are reproducible."""
    faker = Faker()
    faker.seed_instance(20240601)
    return faker


from postboard.tests.test_fixtures.repository_fixtures import (  # noqa: E402,F401
    user_repository,
    post_repository,
    user_data,
    post_data,
    create_user,
    create_post,
    created_user,
    created_post,
)
from postboard.tests.test_fixtures.service_fixtures import (  # noqa: E402,F401
    fake_user_repository,
    fake_post_repository,
    user_service,
    post_service,
)
from postboard.tests.test_fixtures.api_fixtures import (  # noqa: E402,F401
    api_settings,
    app,
    client,
)
