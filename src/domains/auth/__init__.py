# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication primitives.

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    generate_temporary_password: One-time tenant-admin secret generator.
"""

from src.domains.auth.credentials import (
    TEMPORARY_PASSWORD_LENGTH,
    generate_temporary_password,
    satisfies_policy,
)
from src.domains.auth.password import (
    SEED_ROUNDS,
    TENANT_ADMIN_ROUNDS,
    PasswordHasher,
    hash_password,
    verify_password,
)

__all__ = [
    "PasswordHasher",
    "SEED_ROUNDS",
    "TENANT_ADMIN_ROUNDS",
    "TEMPORARY_PASSWORD_LENGTH",
    "generate_temporary_password",
    "hash_password",
    "satisfies_policy",
    "verify_password",
]
