# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the central governance database."""

from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.central import (
    ActorType,
    AuditAction,
    AuditLog,
    GlobalRule,
    SuperAdmin,
    Tenant,
    TenantStatus,
    TenantUser,
    TenantUserStatus,
)

__all__ = [
    "Base",
    "ActorType",
    "AuditAction",
    "AuditLog",
    "GlobalRule",
    "SuperAdmin",
    "Tenant",
    "TenantStatus",
    "TenantUser",
    "TenantUserStatus",
]
