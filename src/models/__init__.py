# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic response models for the Governance Console."""

from src.models.governance import (
    AdminContextResponse,
    AuditLogResponse,
    GlobalRuleResponse,
    IssueAccessResponse,
    ResendInvitationResponse,
    TenantAdminResponse,
    TenantAdminStatusResponse,
    TenantResponse,
    audit_log_to_response,
    global_rule_to_response,
    tenant_admin_to_response,
    tenant_to_response,
)

__all__ = [
    "AdminContextResponse",
    "AuditLogResponse",
    "GlobalRuleResponse",
    "IssueAccessResponse",
    "ResendInvitationResponse",
    "TenantAdminResponse",
    "TenantAdminStatusResponse",
    "TenantResponse",
    "audit_log_to_response",
    "global_rule_to_response",
    "tenant_admin_to_response",
    "tenant_to_response",
]
