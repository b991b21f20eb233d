# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Governance Console facade.

The console is the exposed boundary of the governance core. Each operation
opens one session from the injected database handle, runs the matching
service and returns plain data:

    {"success": True, "data": {...}}
    {"success": False, "error": {"kind": ..., "code": ..., "message": ...}}

Domain failures become tagged failures. DatabaseError and AuditWriteError
are never converted and reach the caller as exceptions.

Example:
    >>> database = Database.from_settings(settings)
    >>> await database.open()
    >>> console = GovernanceConsole(database, InvitationMailer.from_settings(settings), settings)
    >>> outcome = await console.login("admin@example.com", "password")
    >>> outcome["success"]
    True
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import Settings, get_settings
from src.domains.auth.password import PasswordHasher
from src.domains.system.audit_service import DEFAULT_AUDIT_LIMIT, AuditRecorder
from src.domains.system.auth_service import SuperAdminAuthService
from src.domains.system.exceptions import GovernanceError
from src.domains.system.rules_service import GlobalRulesService
from src.domains.system.tenant_admin_service import TenantAdminService
from src.domains.system.tenant_service import TenantService
from src.infrastructure.database.connection import Database
from src.infrastructure.notifications.invitation_mailer import InvitationMailer
from src.models.governance import (
    AdminContextResponse,
    IssueAccessResponse,
    ResendInvitationResponse,
    TenantAdminStatusResponse,
    audit_log_to_response,
    global_rule_to_response,
    tenant_admin_to_response,
    tenant_to_response,
)
from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items()}
    return value


class GovernanceConsole:
    """Super-Admin facade over the governance services.

    Attributes:
        _database: Central database handle.
        _mailer: Invitation email sender.
        _settings: Application settings.
    """

    def __init__(
        self,
        database: Database,
        mailer: InvitationMailer,
        settings: Settings | None = None,
    ) -> None:
        self._database = database
        self._mailer = mailer
        self._settings = settings or get_settings()
        self._tenant_admin_hasher = PasswordHasher(
            rounds=self._settings.security.tenant_admin_hash_rounds
        )

    async def _execute(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[Any]],
    ) -> dict[str, Any]:
        bind_context(operation=operation)
        try:
            async with self._database.session() as session:
                data = await work(session)
        except GovernanceError as e:
            logger.info("%s rejected: %s", operation, e.code)
            return {"success": False, "error": e.to_dict()}
        finally:
            clear_context()

        return {"success": True, "data": data}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Authenticate a Super-Admin."""

        async def work(session: AsyncSession) -> Any:
            service = SuperAdminAuthService(session)
            context = await service.login(email, password)
            return _dump(AdminContextResponse(id=context.id, email=context.email))

        return await self._execute("login", work)

    # ------------------------------------------------------------------
    # Tenants
    # ------------------------------------------------------------------

    async def create_tenant(self, actor_id: str, name: str) -> dict[str, Any]:
        """Create a tenant."""

        async def work(session: AsyncSession) -> Any:
            tenant = await TenantService(session).create_tenant(actor_id, name)
            return _dump(tenant_to_response(tenant))

        return await self._execute("create_tenant", work)

    async def suspend_tenant(self, actor_id: str, tenant_id: str) -> dict[str, Any]:
        """Suspend a tenant."""

        async def work(session: AsyncSession) -> Any:
            tenant = await TenantService(session).suspend_tenant(actor_id, tenant_id)
            return _dump(tenant_to_response(tenant))

        return await self._execute("suspend_tenant", work)

    async def reactivate_tenant(self, actor_id: str, tenant_id: str) -> dict[str, Any]:
        """Reactivate a tenant."""

        async def work(session: AsyncSession) -> Any:
            tenant = await TenantService(session).reactivate_tenant(actor_id, tenant_id)
            return _dump(tenant_to_response(tenant))

        return await self._execute("reactivate_tenant", work)

    async def list_tenants(self) -> dict[str, Any]:
        """List tenants, newest first."""

        async def work(session: AsyncSession) -> Any:
            tenants = await TenantService(session).list_tenants()
            return _dump([tenant_to_response(t) for t in tenants])

        return await self._execute("list_tenants", work)

    # ------------------------------------------------------------------
    # Tenant admins
    # ------------------------------------------------------------------

    def _tenant_admin_service(self, session: AsyncSession) -> TenantAdminService:
        return TenantAdminService(
            session,
            self._mailer,
            password_hasher=self._tenant_admin_hasher,
        )

    async def issue_tenant_admin_access(
        self,
        actor_id: str,
        tenant_id: str,
        email: str,
    ) -> dict[str, Any]:
        """Provision the admin of a tenant and send the invitation."""

        async def work(session: AsyncSession) -> Any:
            result = await self._tenant_admin_service(session).issue_access(
                actor_id, tenant_id, email
            )
            return _dump(
                IssueAccessResponse(
                    tenant_user=tenant_admin_to_response(result.tenant_user),
                    email_sent=result.email_sent,
                )
            )

        return await self._execute("issue_tenant_admin_access", work)

    async def resend_tenant_admin_invitation(
        self,
        actor_id: str,
        tenant_user_id: str,
    ) -> dict[str, Any]:
        """Rotate a tenant admin's temporary password and re-invite.

        The new temporary password is only returned when it has to be
        handed over manually (delivery failed) or in development.
        """

        async def work(session: AsyncSession) -> Any:
            result = await self._tenant_admin_service(session).resend_invitation(
                actor_id, tenant_user_id
            )
            expose_password = self._settings.is_development or not result.email_sent
            return _dump(
                ResendInvitationResponse(
                    email_sent=result.email_sent,
                    invitation_count=result.invitation_count,
                    temporary_password=result.temporary_password if expose_password else None,
                )
            )

        return await self._execute("resend_tenant_admin_invitation", work)

    async def get_tenant_admin_status(self, tenant_id: str) -> dict[str, Any]:
        """Report whether a tenant has an admin."""

        async def work(session: AsyncSession) -> Any:
            status = await self._tenant_admin_service(session).get_status(tenant_id)
            return _dump(
                TenantAdminStatusResponse(
                    has_admin=status.has_admin,
                    admin=tenant_admin_to_response(status.admin) if status.admin else None,
                )
            )

        return await self._execute("get_tenant_admin_status", work)

    async def get_tenant_admin_batch_status(self, tenant_ids: list[str]) -> dict[str, Any]:
        """Map tenant IDs to their admins, for tenants that have one."""

        async def work(session: AsyncSession) -> Any:
            admins = await self._tenant_admin_service(session).get_batch_status(tenant_ids)
            return _dump(
                {tenant_id: tenant_admin_to_response(user) for tenant_id, user in admins.items()}
            )

        return await self._execute("get_tenant_admin_batch_status", work)

    # ------------------------------------------------------------------
    # Global rules
    # ------------------------------------------------------------------

    async def create_rules(self, actor_id: str, rules_json: dict[str, Any] | None) -> dict[str, Any]:
        """Store a new draft rule version."""

        async def work(session: AsyncSession) -> Any:
            rule = await GlobalRulesService(session).create_rules(actor_id, rules_json)
            return _dump(global_rule_to_response(rule))

        return await self._execute("create_rules", work)

    async def activate_rules(self, actor_id: str, rule_id: str) -> dict[str, Any]:
        """Activate one rule version."""

        async def work(session: AsyncSession) -> Any:
            rule = await GlobalRulesService(session).activate_rules(actor_id, rule_id)
            return _dump(global_rule_to_response(rule))

        return await self._execute("activate_rules", work)

    async def get_active_rules(self) -> dict[str, Any]:
        """Get the active rule version. Data is None when none is active."""

        async def work(session: AsyncSession) -> Any:
            rule = await GlobalRulesService(session).get_active_rules()
            return _dump(global_rule_to_response(rule)) if rule else None

        return await self._execute("get_active_rules", work)

    async def list_rule_versions(self) -> dict[str, Any]:
        """List all rule versions, newest first."""

        async def work(session: AsyncSession) -> Any:
            rules = await GlobalRulesService(session).list_versions()
            return _dump([global_rule_to_response(r) for r in rules])

        return await self._execute("list_rule_versions", work)

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    async def list_audit_logs(self, limit: int = DEFAULT_AUDIT_LIMIT) -> dict[str, Any]:
        """List the newest audit entries first."""

        async def work(session: AsyncSession) -> Any:
            entries = await AuditRecorder(session).list_recent(limit)
            return _dump([audit_log_to_response(e) for e in entries])

        return await self._execute("list_audit_logs", work)
