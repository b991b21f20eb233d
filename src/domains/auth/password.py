# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing utilities using bcrypt.

This module provides secure password hashing and verification
using the bcrypt library directly. Two work factors are in use:
TENANT_ADMIN_ROUNDS for issued tenant-admin credentials and SEED_ROUNDS
for administrative seeding of Super-Admin accounts.

Example:
    >>> hasher = PasswordHasher()
    >>> hashed = hasher.hash("my_password")
    >>> hasher.verify("my_password", hashed)
    True
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

TENANT_ADMIN_ROUNDS = 12
SEED_ROUNDS = 10


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        rounds: Number of bcrypt rounds for hashing.

    Example:
        >>> hasher = PasswordHasher(rounds=TENANT_ADMIN_ROUNDS)
        >>> hashed = hasher.hash("secure_password")
        >>> hasher.verify("secure_password", hashed)
        True
        >>> hasher.verify("wrong_password", hashed)
        False
    """

    def __init__(self, rounds: int = TENANT_ADMIN_ROUNDS) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
                   Default is 12 which takes ~250ms on modern hardware.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password to verify.
            password_hash: Bcrypt hash to verify against.

        Returns:
            True if password matches the hash, False otherwise.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning("Password verification failed: %s", str(e))
            return False


def hash_password(password: str, rounds: int = TENANT_ADMIN_ROUNDS) -> str:
    """Hash a password with a one-off hasher.

    Args:
        password: Plain text password to hash.
        rounds: bcrypt work factor.

    Returns:
        Bcrypt hash string.
    """
    return PasswordHasher(rounds=rounds).hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against any bcrypt hash.

    The work factor is read from the hash itself.
    """
    return PasswordHasher().verify(password, password_hash)
