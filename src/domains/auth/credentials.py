# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""One-time credential generation for tenant-admin invitations.

Generated passwords are returned to the caller once. They are hashed before
storage and must never be persisted, logged or audited in clear text.
"""

import secrets
import string

TEMPORARY_PASSWORD_LENGTH = 14

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!@#$%&*"
ALPHABET = UPPERCASE + LOWERCASE + DIGITS + SYMBOLS

_system_random = secrets.SystemRandom()


def generate_temporary_password(length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
    """Generate a random temporary password.

    The result holds at least one character of each class (uppercase,
    lowercase, digit, symbol). The remaining positions are drawn from the
    union of all classes and the whole sequence is shuffled, so class
    positions are not predictable.

    Args:
        length: Total password length, at least 4.

    Returns:
        The plaintext password.

    Raises:
        ValueError: If length cannot hold one character of every class.

    Example:
        >>> password = generate_temporary_password()
        >>> len(password)
        14
    """
    if length < 4:
        raise ValueError("Temporary password length must be at least 4")

    chars = [
        secrets.choice(UPPERCASE),
        secrets.choice(LOWERCASE),
        secrets.choice(DIGITS),
        secrets.choice(SYMBOLS),
    ]
    chars.extend(secrets.choice(ALPHABET) for _ in range(length - len(chars)))

    _system_random.shuffle(chars)
    return "".join(chars)


def satisfies_policy(password: str) -> bool:
    """Check that a password holds one character of every class and nothing else."""
    return (
        any(c in UPPERCASE for c in password)
        and any(c in LOWERCASE for c in password)
        and any(c in DIGITS for c in password)
        and any(c in SYMBOLS for c in password)
        and all(c in ALPHABET for c in password)
    )
