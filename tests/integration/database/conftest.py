# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for central database integration tests.

Every test runs against a freshly migrated schema. Set TEST_CENTRAL_DB_URL
to an asyncpg URL of a disposable PostgreSQL database.
"""

import io
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.core.config.settings import EmailSettings, Settings
from src.domains.system.console import GovernanceConsole
from src.infrastructure.database.connection import Database
from src.infrastructure.database.migrations.runner import run_central_migrations
from src.infrastructure.database.models import Base
from src.infrastructure.database.seeds.central import seed_super_admin
from src.infrastructure.notifications.invitation_mailer import InvitationMailer

SUPER_ADMIN_EMAIL = "superadmin@example.com"
SUPER_ADMIN_PASSWORD = "IntegrationPassword123!"


@pytest.fixture
def super_admin_email() -> str:
    return SUPER_ADMIN_EMAIL


@pytest.fixture
def super_admin_password() -> str:
    return SUPER_ADMIN_PASSWORD


@pytest.fixture(scope="session")
def central_db_url() -> str:
    """Get central database URL for tests."""
    return os.environ.get("TEST_CENTRAL_DB_URL", "")


async def _reset_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        await conn.execute(text("DROP FUNCTION IF EXISTS prevent_audit_log_mutation()"))


@pytest_asyncio.fixture(scope="function")
async def migrated_db_url(central_db_url: str) -> AsyncGenerator[str, None]:
    """Provide a database URL with the central schema freshly migrated."""
    engine = create_async_engine(central_db_url, echo=False)

    await _reset_schema(engine)
    await run_central_migrations(central_db_url)

    yield central_db_url

    await _reset_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def database(migrated_db_url: str) -> AsyncGenerator[Database, None]:
    """Open a database handle on the migrated schema."""
    handle = Database(migrated_db_url, pool_size=2, max_overflow=0)
    await handle.open()
    yield handle
    await handle.close()


@pytest_asyncio.fixture(scope="function")
async def super_admin_id(database: Database) -> str:
    """Seed the Super-Admin and return its ID."""
    async with database.session() as session:
        return await seed_super_admin(
            session,
            SUPER_ADMIN_EMAIL,
            SUPER_ADMIN_PASSWORD,
            rounds=4,
        )


@pytest.fixture
def settings() -> Settings:
    """Development settings with a fast work factor."""
    settings = Settings(environment="development")
    settings.security.tenant_admin_hash_rounds = 4
    return settings


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(database: Database, settings: Settings, console_output) -> GovernanceConsole:
    """Console whose invitations go to an in-memory console stream."""
    mailer = InvitationMailer(EmailSettings(user="", password=""), stream=console_output)
    return GovernanceConsole(database, mailer, settings)


@pytest.fixture
def undeliverable_console(database: Database, settings: Settings) -> GovernanceConsole:
    """Console whose invitations always fail to deliver."""
    mailer = MagicMock()
    mailer.send = AsyncMock(return_value=False)
    return GovernanceConsole(database, mailer, settings)
