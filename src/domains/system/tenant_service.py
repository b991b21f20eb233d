# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant lifecycle management service.

This module provides tenant lifecycle management:
- Tenant creation with unique names
- Suspension and reactivation
- Tenant listing and lookup

Tenants are never deleted. Each state change is committed first and then
audited.

Example:
    >>> tenant_service = TenantService(db)
    >>> tenant = await tenant_service.create_tenant(admin_id, "Acme")
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.system.audit_service import AuditRecorder
from src.domains.system.exceptions import (
    DuplicateTenantNameError,
    EmptyTenantNameError,
    TenantNotFoundError,
)
from src.infrastructure.database.models.central import AuditAction, Tenant, TenantStatus
from src.utils.datetime import utc_now
from src.utils.identifiers import normalize_uuid

logger = logging.getLogger(__name__)


class TenantService:
    """Tenant lifecycle management service.

    Attributes:
        _db: Central database session.
        _audit: Governance audit recorder.

    Example:
        >>> tenant_service = TenantService(db)
        >>> tenant = await tenant_service.suspend_tenant(admin_id, tenant_id)
        >>> tenant.status
        'SUSPENDED'
    """

    def __init__(self, db: AsyncSession, audit: AuditRecorder | None = None) -> None:
        """Initialize the tenant service.

        Args:
            db: Central database async session.
            audit: Audit recorder bound to the same session.
        """
        self._db = db
        self._audit = audit or AuditRecorder(db)

    async def create_tenant(self, actor_id: str, name: str) -> Tenant:
        """Create a new ACTIVE tenant.

        Names are compared exactly (case-sensitive) and stored as given.

        Args:
            actor_id: ID of the acting Super-Admin.
            name: Tenant display name.

        Returns:
            Created Tenant.

        Raises:
            EmptyTenantNameError: If name is blank.
            DuplicateTenantNameError: If a tenant with this name exists.
            AuditWriteError: If the creation could not be audited.
        """
        if not name or not name.strip():
            raise EmptyTenantNameError()

        existing = await self._get_tenant_by_name(name)
        if existing:
            raise DuplicateTenantNameError(f"Tenant with name '{name}' already exists")

        tenant = Tenant(name=name, status=TenantStatus.ACTIVE.value)
        self._db.add(tenant)

        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise DuplicateTenantNameError(f"Tenant with name '{name}' already exists") from e

        logger.info("Created tenant: %s (%s)", tenant.name, tenant.id)

        await self._audit.record(
            actor_id,
            AuditAction.CREATE_TENANT,
            {"tenant_id": tenant.id, "name": tenant.name},
        )

        return tenant

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        """Get tenant by ID.

        Args:
            tenant_id: Tenant identifier.

        Returns:
            Tenant if found, None otherwise.
        """
        tenant_id = normalize_uuid(tenant_id)
        if tenant_id is None:
            return None

        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_tenants(self) -> list[Tenant]:
        """List all tenants, newest first."""
        stmt = select(Tenant).order_by(Tenant.created_at.desc())
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def suspend_tenant(self, actor_id: str, tenant_id: str) -> Tenant:
        """Suspend a tenant.

        Suspending an already suspended tenant refreshes suspended_at and is
        audited like any other suspension.

        Args:
            actor_id: ID of the acting Super-Admin.
            tenant_id: Tenant identifier.

        Returns:
            Updated Tenant with SUSPENDED status.

        Raises:
            TenantNotFoundError: If tenant not found.
        """
        tenant = await self.get_tenant(tenant_id)
        if not tenant:
            raise TenantNotFoundError(f"Tenant not found: {tenant_id}")

        previous_status = tenant.status
        tenant.status = TenantStatus.SUSPENDED.value
        tenant.suspended_at = utc_now()

        await self._db.commit()

        logger.info("Suspended tenant: %s", tenant.id)

        await self._audit.record(
            actor_id,
            AuditAction.SUSPEND_TENANT,
            {"tenant_id": tenant.id, "previous_status": previous_status},
        )

        return tenant

    async def reactivate_tenant(self, actor_id: str, tenant_id: str) -> Tenant:
        """Reactivate a tenant.

        Args:
            actor_id: ID of the acting Super-Admin.
            tenant_id: Tenant identifier.

        Returns:
            Updated Tenant with ACTIVE status.

        Raises:
            TenantNotFoundError: If tenant not found.
        """
        tenant = await self.get_tenant(tenant_id)
        if not tenant:
            raise TenantNotFoundError(f"Tenant not found: {tenant_id}")

        previous_status = tenant.status
        tenant.status = TenantStatus.ACTIVE.value
        tenant.suspended_at = None

        await self._db.commit()

        logger.info("Reactivated tenant: %s", tenant.id)

        await self._audit.record(
            actor_id,
            AuditAction.REACTIVATE_TENANT,
            {"tenant_id": tenant.id, "previous_status": previous_status},
        )

        return tenant

    async def _get_tenant_by_name(self, name: str) -> Tenant | None:
        stmt = select(Tenant).where(Tenant.name == name)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()
