# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Governance audit log model.

Rows are append-only: the migration installs a trigger that rejects UPDATE
and DELETE. The actor type column only ever holds SUPER_ADMIN.
"""

from enum import Enum
from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class ActorType(str, Enum):
    """Actor classes permitted in the governance audit trail."""

    SUPER_ADMIN = "SUPER_ADMIN"


class AuditAction(str, Enum):
    """Governance actions recorded in the audit trail."""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    CREATE_TENANT = "CREATE_TENANT"
    SUSPEND_TENANT = "SUSPEND_TENANT"
    REACTIVATE_TENANT = "REACTIVATE_TENANT"
    ISSUE_TENANT_ADMIN_ACCESS = "ISSUE_TENANT_ADMIN_ACCESS"
    RESEND_TENANT_ADMIN_INVITATION = "RESEND_TENANT_ADMIN_INVITATION"
    CREATE_RULES = "CREATE_RULES"
    ACTIVATE_RULES = "ACTIVATE_RULES"


class AuditLog(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Immutable record of a governance-relevant state transition."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        CheckConstraint("actor_type = 'SUPER_ADMIN'", name="governance_actor_only"),
        Index("ix_audit_logs_created_at", "created_at"),
        Index("ix_audit_logs_action", "action"),
    )

    actor_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=ActorType.SUPER_ADMIN.value,
    )
    actor_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("super_admin.id"),
        nullable=False,
    )
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
        default=dict,
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} by {self.actor_id}>"
