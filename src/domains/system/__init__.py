# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""System domain for platform-level governance.

This module provides services for:
- Super-Admin authentication
- Tenant lifecycle management
- Tenant-admin provisioning and invitations
- Global rules versioning
- The governance audit trail
- The GovernanceConsole facade over all of the above
"""

from src.domains.system.audit_service import AuditRecorder, sanitize_metadata
from src.domains.system.auth_service import AdminContext, SuperAdminAuthService
from src.domains.system.console import GovernanceConsole
from src.domains.system.exceptions import (
    AdminAlreadyExistsError,
    AdminSuspendedError,
    AuditWriteError,
    ConflictError,
    DuplicateTenantNameError,
    EmailAlreadyAssignedError,
    EmptyRulesError,
    EmptyTenantNameError,
    GovernanceError,
    InvalidCredentialsError,
    InvalidEmailFormatError,
    NotFoundError,
    RuleVersionConflictError,
    RuleVersionNotFoundError,
    StateError,
    TenantAdminNotFoundError,
    TenantNotFoundError,
    TenantSuspendedError,
    ValidationError,
)
from src.domains.system.rules_service import GlobalRulesService
from src.domains.system.tenant_admin_service import (
    IssueAccessResult,
    ResendInvitationResult,
    TenantAdminService,
    TenantAdminStatus,
)
from src.domains.system.tenant_service import TenantService

__all__ = [
    # Services
    "AuditRecorder",
    "GlobalRulesService",
    "GovernanceConsole",
    "SuperAdminAuthService",
    "TenantAdminService",
    "TenantService",
    # Results
    "AdminContext",
    "IssueAccessResult",
    "ResendInvitationResult",
    "TenantAdminStatus",
    "sanitize_metadata",
    # Errors
    "AuditWriteError",
    "GovernanceError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StateError",
    "InvalidCredentialsError",
    "InvalidEmailFormatError",
    "EmptyTenantNameError",
    "EmptyRulesError",
    "TenantNotFoundError",
    "TenantAdminNotFoundError",
    "RuleVersionNotFoundError",
    "DuplicateTenantNameError",
    "AdminAlreadyExistsError",
    "EmailAlreadyAssignedError",
    "RuleVersionConflictError",
    "TenantSuspendedError",
    "AdminSuspendedError",
]
