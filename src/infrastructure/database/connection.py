# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Central database connection management using SQLAlchemy async.

The central database stores governance data: Super-Admins, tenants, the
single tenant-admin per tenant, global rule versions and the audit trail.

Connections are owned by an explicit ``Database`` handle that is opened at
process start, injected into the console, and disposed at shutdown.

Uses SQLAlchemy 2.0 async API with asyncpg driver.

Example:
    from src.infrastructure.database.connection import Database

    database = Database.from_settings(settings)
    await database.open()

    async with database.session() as session:
        result = await session.execute(select(Tenant))
        tenants = result.scalars().all()

    await database.close()
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from src.core.config.settings import Settings


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class Database:
    """Handle owning the central engine and its sessionmaker.

    Attributes:
        url: Async database URL.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ) -> None:
        self.url = url
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build a handle from application settings."""
        return cls(
            url=settings.central_db.url,
            pool_size=settings.central_db.pool_size,
            max_overflow=settings.central_db.max_overflow,
            echo=settings.debug,
        )

    @property
    def is_open(self) -> bool:
        """Check whether the connection pool has been created."""
        return self._engine is not None

    async def open(self) -> None:
        """Create the connection pool.

        Calling open on an already opened handle is a no-op.

        Raises:
            DatabaseError: If connection pool creation fails.
        """
        if self._engine is not None:
            return

        try:
            self._engine = create_async_engine(
                self.url,
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
                echo=self._echo,
            )
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to initialize central database connection", e) from e

    async def close(self) -> None:
        """Dispose of all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @property
    def engine(self) -> AsyncEngine:
        """Return the async engine.

        Raises:
            DatabaseError: If the handle has not been opened.
        """
        if self._engine is None:
            raise DatabaseError("Central database not initialized. Call Database.open() first.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        """Return the async sessionmaker.

        Raises:
            DatabaseError: If the handle has not been opened.
        """
        if self._sessionmaker is None:
            raise DatabaseError("Central database not initialized. Call Database.open() first.")
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session for one unit of work.

        Services commit their own writes. Anything left pending when the
        block exits normally is committed; on error the session is rolled
        back and store failures are wrapped in DatabaseError.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If the handle is not open or a store operation fails.
        """
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if the central database is reachable."""
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
