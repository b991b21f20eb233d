# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

Seeds the central database with its initial Super-Admin account.
"""

from src.infrastructure.database.seeds.central import seed_central_database, seed_super_admin

__all__ = ["seed_central_database", "seed_super_admin"]
