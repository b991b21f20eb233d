# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Central database models."""

from src.infrastructure.database.models.central.audit_log import ActorType, AuditAction, AuditLog
from src.infrastructure.database.models.central.global_rule import GlobalRule
from src.infrastructure.database.models.central.super_admin import SuperAdmin
from src.infrastructure.database.models.central.tenant import Tenant, TenantStatus
from src.infrastructure.database.models.central.tenant_user import (
    TENANT_ADMIN_EMAIL_CONSTRAINT,
    TENANT_ADMIN_TENANT_CONSTRAINT,
    TenantUser,
    TenantUserStatus,
)

__all__ = [
    "ActorType",
    "AuditAction",
    "AuditLog",
    "GlobalRule",
    "SuperAdmin",
    "Tenant",
    "TenantStatus",
    "TenantUser",
    "TenantUserStatus",
    "TENANT_ADMIN_EMAIL_CONSTRAINT",
    "TENANT_ADMIN_TENANT_CONSTRAINT",
]
