# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Central database seed data.

Super-Admin accounts are created out-of-band by this script; the governance
services only ever read them. Seeding is an upsert keyed on email, so running
it again rotates the password of an existing account.

Usage:
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD=... \
        python -m src.infrastructure.database.seeds.central
"""

import asyncio
import logging
import os

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.system.auth_service import SuperAdminAuthService
from src.infrastructure.database.connection import Database, DatabaseError
from src.infrastructure.database.models.central import SuperAdmin

logger = logging.getLogger(__name__)


async def seed_super_admin(
    session: AsyncSession,
    admin_email: str,
    admin_password: str,
    rounds: int,
) -> str:
    """Create or update a Super-Admin account.

    Args:
        session: Database session.
        admin_email: Admin email address.
        admin_password: Admin password in clear text.
        rounds: bcrypt work factor used for seeding.

    Returns:
        ID of the seeded Super-Admin.
    """
    password_hash = SuperAdminAuthService.hash_seed_password(admin_password, rounds)

    stmt = (
        insert(SuperAdmin)
        .values(email=admin_email, password_hash=password_hash)
        .on_conflict_do_update(
            index_elements=[SuperAdmin.email],
            set_={"password_hash": password_hash},
        )
        .returning(SuperAdmin.id)
    )
    result = await session.execute(stmt)
    admin_id = result.scalar_one()

    logger.info("Seeded super admin: %s", admin_email)
    return admin_id


async def seed_central_database(
    session: AsyncSession,
    admin_email: str,
    admin_password: str,
    rounds: int,
) -> dict:
    """Seed the central database with its initial Super-Admin.

    Args:
        session: Database session.
        admin_email: Admin email address.
        admin_password: Admin password in clear text.
        rounds: bcrypt work factor used for seeding.

    Returns:
        Dictionary with seeded entity IDs.
    """
    logger.info("Seeding central database...")

    admin_id = await seed_super_admin(session, admin_email, admin_password, rounds)
    await session.commit()

    logger.info("Central database seeding complete")

    return {"super_admin_id": admin_id}


async def seed_open_database(
    database: Database,
    admin_email: str,
    admin_password: str,
    rounds: int,
) -> dict:
    """Seed through an opened handle after confirming the server answers.

    Raises:
        DatabaseError: If the central database is unreachable.
    """
    if not await database.check_connection():
        raise DatabaseError("Central database is unreachable")

    async with database.session() as session:
        return await seed_central_database(
            session,
            admin_email=admin_email,
            admin_password=admin_password,
            rounds=rounds,
        )


if __name__ == "__main__":
    from src.core.config import get_settings
    from src.utils.logging import setup_logging

    async def main() -> None:
        settings = get_settings()
        setup_logging(settings)

        admin_email = os.environ.get("SEED_ADMIN_EMAIL")
        admin_password = os.environ.get("SEED_ADMIN_PASSWORD")
        if not admin_email or not admin_password:
            raise SystemExit("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")

        database = Database.from_settings(settings)
        await database.open()
        try:
            await seed_open_database(
                database,
                admin_email=admin_email,
                admin_password=admin_password,
                rounds=settings.security.seed_hash_rounds,
            )
        except DatabaseError as e:
            raise SystemExit(str(e)) from e
        finally:
            await database.close()

    asyncio.run(main())
