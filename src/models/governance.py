# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response models for the Governance Console.

These models define the plain data returned by the console. Credential
hashes never appear in them; the only plaintext secret that can be carried
is the resend fallback password, and only when the console allows it.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.utils.datetime import format_iso


class AdminContextResponse(BaseModel):
    """Authenticated Super-Admin."""

    id: str = Field(..., description="Super-Admin ID")
    email: str = Field(..., description="Super-Admin email")


class TenantResponse(BaseModel):
    """Tenant details response."""

    id: str = Field(..., description="Tenant ID")
    name: str = Field(..., description="Display name")
    status: str = Field(..., description="ACTIVE or SUSPENDED")
    created_at: str | None = Field(None, description="Creation timestamp")
    suspended_at: str | None = Field(None, description="Suspension timestamp")


class TenantAdminResponse(BaseModel):
    """Tenant admin account response."""

    id: str = Field(..., description="Tenant user ID")
    tenant_id: str = Field(..., description="Owning tenant ID")
    email: str = Field(..., description="Login email")
    must_reset_password: bool = Field(..., description="Password change required on next login")
    status: str = Field(..., description="ACTIVE or SUSPENDED")
    created_at: str | None = Field(None, description="Creation timestamp")
    invitation_sent_at: str | None = Field(None, description="First invitation timestamp")
    last_invitation_sent_at: str | None = Field(None, description="Latest invitation timestamp")
    invitation_count: int = Field(..., ge=1, description="Invitations sent so far")


class IssueAccessResponse(BaseModel):
    """Result of issuing tenant-admin access."""

    tenant_user: TenantAdminResponse
    email_sent: bool = Field(..., description="Whether the invitation was delivered")


class ResendInvitationResponse(BaseModel):
    """Result of resending a tenant-admin invitation."""

    email_sent: bool = Field(..., description="Whether the invitation was delivered")
    invitation_count: int = Field(..., ge=2, description="Invitations sent so far")
    temporary_password: str | None = Field(
        None,
        description="New temporary password, only when it must be handed over manually",
    )


class TenantAdminStatusResponse(BaseModel):
    """Whether a tenant has an admin."""

    has_admin: bool
    admin: TenantAdminResponse | None = None


class GlobalRuleResponse(BaseModel):
    """Global rule version response."""

    id: str = Field(..., description="Rule version ID")
    version: int = Field(..., ge=1, description="Version number")
    rules_json: dict[str, Any] = Field(..., description="Rule document")
    is_active: bool = Field(..., description="Whether this version is active")
    state: str = Field(..., description="DRAFT or ACTIVE")
    created_at: str | None = Field(None, description="Creation timestamp")


class AuditLogResponse(BaseModel):
    """Audit trail entry response."""

    id: str = Field(..., description="Entry ID")
    actor_type: str = Field(..., description="Always SUPER_ADMIN")
    actor_id: str = Field(..., description="Acting Super-Admin ID")
    action: str = Field(..., description="Governance action")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Action details")
    created_at: str | None = Field(None, description="Creation timestamp")


def tenant_to_response(tenant) -> TenantResponse:
    """Convert Tenant model to response."""
    return TenantResponse(
        id=tenant.id,
        name=tenant.name,
        status=tenant.status,
        created_at=format_iso(tenant.created_at),
        suspended_at=format_iso(tenant.suspended_at),
    )


def tenant_admin_to_response(tenant_user) -> TenantAdminResponse:
    """Convert TenantUser model to response."""
    return TenantAdminResponse(
        id=tenant_user.id,
        tenant_id=tenant_user.tenant_id,
        email=tenant_user.email,
        must_reset_password=tenant_user.must_reset_password,
        status=tenant_user.status,
        created_at=format_iso(tenant_user.created_at),
        invitation_sent_at=format_iso(tenant_user.invitation_sent_at),
        last_invitation_sent_at=format_iso(tenant_user.last_invitation_sent_at),
        invitation_count=tenant_user.invitation_count,
    )


def global_rule_to_response(rule) -> GlobalRuleResponse:
    """Convert GlobalRule model to response."""
    return GlobalRuleResponse(
        id=rule.id,
        version=rule.version,
        rules_json=rule.rules_json,
        is_active=rule.is_active,
        state="ACTIVE" if rule.is_active else "DRAFT",
        created_at=format_iso(rule.created_at),
    )


def audit_log_to_response(entry) -> AuditLogResponse:
    """Convert AuditLog model to response."""
    return AuditLogResponse(
        id=entry.id,
        actor_type=entry.actor_type,
        actor_id=entry.actor_id,
        action=entry.action,
        metadata=entry.metadata_json or {},
        created_at=format_iso(entry.created_at),
    )
