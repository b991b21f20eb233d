# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant-admin user model.

Exactly one admin exists per tenant and an admin email belongs to a single
tenant. Both rules are enforced by named unique constraints so that a
violation raised under concurrent issuance can be mapped back to the
matching domain conflict.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin

TENANT_ADMIN_TENANT_CONSTRAINT = "uq_tenant_users_tenant_id"
TENANT_ADMIN_EMAIL_CONSTRAINT = "uq_tenant_users_email"


class TenantUserStatus(str, Enum):
    """Account states of a tenant admin."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class TenantUser(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """The single administrative user provisioned for a tenant."""

    __tablename__ = "tenant_users"
    __table_args__ = (
        UniqueConstraint("tenant_id", name=TENANT_ADMIN_TENANT_CONSTRAINT),
        UniqueConstraint("email", name=TENANT_ADMIN_EMAIL_CONSTRAINT),
        CheckConstraint("status IN ('ACTIVE', 'SUSPENDED')", name="valid_status"),
        CheckConstraint("invitation_count >= 1", name="positive_invitation_count"),
    )

    tenant_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(Text, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    must_reset_password: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )
    status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=TenantUserStatus.ACTIVE.value,
        server_default=TenantUserStatus.ACTIVE.value,
    )
    invitation_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_invitation_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    invitation_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default=text("1"),
    )

    @property
    def is_active(self) -> bool:
        """Check if the admin account is active."""
        return self.status == TenantUserStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<TenantUser {self.email} tenant={self.tenant_id}>"
