# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Super-Admin authentication service.

Super-Admins are the only actors of the governance console. Their accounts
are seeded out-of-band and are never modified here.

Every login against a known account leaves exactly one audit entry,
LOGIN_SUCCESS or LOGIN_FAILURE. A login for an unknown email has no actor to
attribute an entry to and is only reported through the application log.

Example:
    >>> auth_service = SuperAdminAuthService(db)
    >>> context = await auth_service.login("admin@example.com", "password")
    >>> print(context.id)
"""

import logging
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.password import SEED_ROUNDS, PasswordHasher
from src.domains.system.audit_service import AuditRecorder
from src.domains.system.exceptions import InvalidCredentialsError
from src.infrastructure.database.models.central import AuditAction, SuperAdmin

logger = logging.getLogger(__name__)


class AdminContext(NamedTuple):
    """Authenticated Super-Admin identity."""

    id: str
    email: str


class SuperAdminAuthService:
    """Authentication service for Super-Admins.

    Attributes:
        _db: Central database session.
        _password_hasher: Password hashing utility.
        _audit: Governance audit recorder.
    """

    def __init__(
        self,
        db: AsyncSession,
        password_hasher: PasswordHasher | None = None,
        audit: AuditRecorder | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Central database async session.
            password_hasher: Password hasher (uses default if not provided).
            audit: Audit recorder bound to the same session.
        """
        self._db = db
        self._password_hasher = password_hasher or PasswordHasher()
        self._audit = audit or AuditRecorder(db)

    async def login(self, email: str, password: str) -> AdminContext:
        """Authenticate a Super-Admin.

        Args:
            email: Admin email address.
            password: Plain text password.

        Returns:
            AdminContext of the authenticated admin.

        Raises:
            InvalidCredentialsError: If email or password is incorrect.
            AuditWriteError: If the login outcome could not be audited.
        """
        stmt = select(SuperAdmin).where(SuperAdmin.email == email)
        result = await self._db.execute(stmt)
        admin = result.scalar_one_or_none()

        if not admin:
            logger.warning("Super admin login failed: no account for email %s", email)
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, admin.password_hash):
            await self._audit.record(
                admin.id,
                AuditAction.LOGIN_FAILURE,
                {"reason": "invalid_password"},
            )
            logger.warning("Super admin login failed: invalid password for %s", admin.id)
            raise InvalidCredentialsError()

        await self._audit.record(admin.id, AuditAction.LOGIN_SUCCESS, {})

        logger.info("Super admin logged in: %s", admin.id)

        return AdminContext(id=admin.id, email=admin.email)

    @staticmethod
    def hash_seed_password(password: str, rounds: int = SEED_ROUNDS) -> str:
        """Hash a Super-Admin password for out-of-band seeding.

        Args:
            password: Plain text password.
            rounds: bcrypt work factor used for seeding.

        Returns:
            Bcrypt hash string.
        """
        return PasswordHasher(rounds=rounds).hash(password)
