# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial central database schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-01-08

This migration creates all central database tables based on the
SQLAlchemy models in src/infrastructure/database/models/central/, plus the
trigger that keeps audit_logs append-only.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = ("central",)
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    """Create central database tables."""
    # ==========================================================================
    # 1. super_admin table
    # ==========================================================================
    op.create_table(
        "super_admin",
        _id_column(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        _created_at_column(),
        sa.UniqueConstraint("email", name="uq_super_admin_email"),
    )

    # ==========================================================================
    # 2. tenants table
    # ==========================================================================
    op.create_table(
        "tenants",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="ACTIVE"),
        _created_at_column(),
        sa.Column("suspended_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("name", name="uq_tenants_name"),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'SUSPENDED')",
            name="ck_tenants_valid_status",
        ),
    )
    op.create_index("ix_tenants_status", "tenants", ["status"])

    # ==========================================================================
    # 3. tenant_users table (one admin per tenant)
    # ==========================================================================
    op.create_table(
        "tenant_users",
        _id_column(),
        sa.Column(
            "tenant_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("tenants.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "must_reset_password",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("status", sa.Text, nullable=False, server_default="ACTIVE"),
        _created_at_column(),
        sa.Column("invitation_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_invitation_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "invitation_count",
            sa.Integer,
            nullable=False,
            server_default=sa.text("1"),
        ),
        sa.UniqueConstraint("tenant_id", name="uq_tenant_users_tenant_id"),
        sa.UniqueConstraint("email", name="uq_tenant_users_email"),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'SUSPENDED')",
            name="ck_tenant_users_valid_status",
        ),
        sa.CheckConstraint(
            "invitation_count >= 1",
            name="ck_tenant_users_positive_invitation_count",
        ),
    )

    # ==========================================================================
    # 4. audit_logs table (append-only)
    # ==========================================================================
    op.create_table(
        "audit_logs",
        _id_column(),
        sa.Column("actor_type", sa.String(50), nullable=False),
        sa.Column(
            "actor_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("super_admin.id"),
            nullable=False,
        ),
        sa.Column("action", sa.String(255), nullable=False),
        sa.Column("metadata", postgresql.JSONB, nullable=True),
        _created_at_column(),
        sa.CheckConstraint(
            "actor_type = 'SUPER_ADMIN'",
            name="ck_audit_logs_governance_actor_only",
        ),
    )
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])

    op.execute(
        """
        CREATE OR REPLACE FUNCTION prevent_audit_log_mutation()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'audit_logs is append-only';
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER audit_logs_append_only
        BEFORE UPDATE OR DELETE ON audit_logs
        FOR EACH ROW EXECUTE FUNCTION prevent_audit_log_mutation()
        """
    )

    # ==========================================================================
    # 5. global_rules table
    # ==========================================================================
    op.create_table(
        "global_rules",
        _id_column(),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("rules_json", postgresql.JSONB, nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        _created_at_column(),
    )
    op.create_index("ix_global_rules_version", "global_rules", ["version"], unique=True)
    op.create_index(
        "ix_global_rules_single_active",
        "global_rules",
        ["is_active"],
        unique=True,
        postgresql_where=sa.text("is_active IS TRUE"),
    )


def downgrade() -> None:
    """Drop central database tables."""
    op.drop_table("global_rules")
    op.execute("DROP TRIGGER IF EXISTS audit_logs_append_only ON audit_logs")
    op.execute("DROP FUNCTION IF EXISTS prevent_audit_log_mutation()")
    op.drop_table("audit_logs")
    op.drop_table("tenant_users")
    op.drop_table("tenants")
    op.drop_table("super_admin")
