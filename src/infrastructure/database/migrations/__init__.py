# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Alembic migrations for the central governance database. They can be run
with the alembic CLI (see env.py) or programmatically through runner.py.
"""
