# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identifier helpers."""

from uuid import UUID


def normalize_uuid(value: str | UUID | None) -> str | None:
    """Return the canonical string form of a UUID, or None if malformed.

    Lookups by a malformed ID are treated as misses instead of being sent
    to PostgreSQL, which would reject them with a data error.

    Example:
        >>> normalize_uuid("550E8400-E29B-41D4-A716-446655440000")
        '550e8400-e29b-41d4-a716-446655440000'
        >>> normalize_uuid("not-a-uuid") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, UUID):
        return str(value)
    try:
        return str(UUID(str(value)))
    except ValueError:
        return None
