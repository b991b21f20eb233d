# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the central PostgreSQL database.

The central database holds every governance entity: Super-Admins, tenants,
tenant admins, global rule versions and the audit trail.

Example:
    from src.infrastructure.database import Database

    database = Database.from_settings(settings)
    await database.open()

    async with database.session() as session:
        result = await session.execute(select(Tenant))
"""

from src.infrastructure.database.connection import Database, DatabaseError

__all__ = [
    "Database",
    "DatabaseError",
]
