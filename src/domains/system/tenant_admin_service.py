# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant-admin provisioning service.

Provisions the single administrative user of a tenant:
- Issues access with a one-time temporary password
- Resends invitations with a fresh temporary password
- Reports which tenants already have an admin

Issuance follows a strict order: validate input, check the tenant and the
uniqueness rules, insert and commit the account, deliver the invitation,
then audit. A failed delivery never undoes the account; it is reported
through ``email_sent``.

Temporary passwords are hashed before storage and never logged or audited.

Example:
    >>> service = TenantAdminService(db, mailer)
    >>> result = await service.issue_access(admin_id, tenant_id, "admin@acme.com")
    >>> result.email_sent
    True
"""

import logging
import re
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.credentials import generate_temporary_password
from src.domains.auth.password import PasswordHasher
from src.domains.system.audit_service import AuditRecorder
from src.domains.system.exceptions import (
    AdminAlreadyExistsError,
    AdminSuspendedError,
    ConflictError,
    EmailAlreadyAssignedError,
    InvalidEmailFormatError,
    TenantAdminNotFoundError,
    TenantNotFoundError,
    TenantSuspendedError,
)
from src.infrastructure.database.models.central import (
    TENANT_ADMIN_EMAIL_CONSTRAINT,
    TENANT_ADMIN_TENANT_CONSTRAINT,
    AuditAction,
    Tenant,
    TenantStatus,
    TenantUser,
    TenantUserStatus,
)
from src.infrastructure.notifications.invitation_mailer import InvitationMailer
from src.utils.datetime import utc_now
from src.utils.identifiers import normalize_uuid

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class IssueAccessResult(NamedTuple):
    """Result of a tenant-admin issuance."""

    tenant_user: TenantUser
    email_sent: bool


class ResendInvitationResult(NamedTuple):
    """Result of an invitation resend.

    temporary_password is the new plaintext secret. Callers decide whether
    it may be shown to the operator.
    """

    tenant_user: TenantUser
    email_sent: bool
    temporary_password: str
    invitation_count: int


class TenantAdminStatus(NamedTuple):
    """Whether a tenant has its admin, and which one."""

    has_admin: bool
    admin: TenantUser | None = None


def is_valid_email(email: str) -> bool:
    """Check the minimal ``local@domain.tld`` email shape."""
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


class TenantAdminService:
    """Tenant-admin provisioning service.

    Attributes:
        _db: Central database session.
        _mailer: Invitation email sender.
        _password_hasher: Hasher for temporary passwords.
        _audit: Governance audit recorder.
    """

    def __init__(
        self,
        db: AsyncSession,
        mailer: InvitationMailer,
        password_hasher: PasswordHasher | None = None,
        audit: AuditRecorder | None = None,
    ) -> None:
        """Initialize the provisioning service.

        Args:
            db: Central database async session.
            mailer: Invitation email sender.
            password_hasher: Hasher for temporary passwords (12 rounds if not provided).
            audit: Audit recorder bound to the same session.
        """
        self._db = db
        self._mailer = mailer
        self._password_hasher = password_hasher or PasswordHasher()
        self._audit = audit or AuditRecorder(db)

    async def issue_access(
        self,
        actor_id: str,
        tenant_id: str,
        email: str,
    ) -> IssueAccessResult:
        """Issue tenant-admin access.

        Checks run in order and the first failure wins: email format,
        tenant existence, tenant status, existing admin, email reuse.

        Args:
            actor_id: ID of the acting Super-Admin.
            tenant_id: Target tenant ID.
            email: Login email of the new tenant admin.

        Returns:
            IssueAccessResult with the created account and delivery flag.

        Raises:
            InvalidEmailFormatError: If email is malformed.
            TenantNotFoundError: If tenant does not exist.
            TenantSuspendedError: If tenant is not ACTIVE.
            AdminAlreadyExistsError: If tenant already has an admin.
            EmailAlreadyAssignedError: If email belongs to another tenant admin.
            AuditWriteError: If the issuance could not be audited.
        """
        if not is_valid_email(email):
            raise InvalidEmailFormatError()

        tenant = None
        normalized_tenant_id = normalize_uuid(tenant_id)
        if normalized_tenant_id is not None:
            stmt = select(Tenant).where(Tenant.id == normalized_tenant_id).with_for_update()
            result = await self._db.execute(stmt)
            tenant = result.scalar_one_or_none()

        if not tenant:
            raise TenantNotFoundError(f"Tenant not found: {tenant_id}")

        if tenant.status != TenantStatus.ACTIVE.value:
            raise TenantSuspendedError("Cannot issue access to suspended tenant")

        if await self._get_admin_for_tenant(tenant.id):
            raise AdminAlreadyExistsError(
                "Tenant admin already exists. Only one admin per tenant is allowed."
            )

        if await self._get_admin_by_email(email):
            raise EmailAlreadyAssignedError("This email is already assigned to another tenant")

        temporary_password = generate_temporary_password()
        password_hash = self._password_hasher.hash(temporary_password)

        now = utc_now()
        tenant_user = TenantUser(
            tenant_id=tenant.id,
            email=email,
            password_hash=password_hash,
            must_reset_password=True,
            status=TenantUserStatus.ACTIVE.value,
            invitation_sent_at=now,
            last_invitation_sent_at=now,
            invitation_count=1,
        )
        self._db.add(tenant_user)

        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            conflict = self._conflict_from_integrity_error(e)
            if conflict is None:
                raise
            raise conflict from e

        tenant_name = tenant.name
        logger.info("Issued tenant admin access: tenant=%s user=%s", tenant.id, tenant_user.id)

        email_sent = await self._mailer.send(tenant_name, email, temporary_password)
        if not email_sent:
            logger.warning("Invitation delivery failed for tenant user %s", tenant_user.id)

        await self._audit.record(
            actor_id,
            AuditAction.ISSUE_TENANT_ADMIN_ACCESS,
            {
                "tenant_id": tenant_user.tenant_id,
                "tenant_name": tenant_name,
                "tenant_admin_email": email,
                "tenant_user_id": tenant_user.id,
                "email_sent": email_sent,
            },
        )

        return IssueAccessResult(tenant_user=tenant_user, email_sent=email_sent)

    async def resend_invitation(
        self,
        actor_id: str,
        tenant_user_id: str,
    ) -> ResendInvitationResult:
        """Rotate the temporary password of a tenant admin and re-invite.

        Args:
            actor_id: ID of the acting Super-Admin.
            tenant_user_id: ID of the tenant admin account.

        Returns:
            ResendInvitationResult with the new plaintext secret.

        Raises:
            TenantAdminNotFoundError: If the account does not exist.
            TenantSuspendedError: If the tenant is not ACTIVE.
            AdminSuspendedError: If the admin account is not ACTIVE.
            AuditWriteError: If the resend could not be audited.
        """
        row = None
        normalized_user_id = normalize_uuid(tenant_user_id)
        if normalized_user_id is not None:
            stmt = (
                select(TenantUser, Tenant)
                .join(Tenant, Tenant.id == TenantUser.tenant_id)
                .where(TenantUser.id == normalized_user_id)
                .with_for_update()
            )
            result = await self._db.execute(stmt)
            row = result.one_or_none()

        if row is None:
            raise TenantAdminNotFoundError(f"Tenant admin not found: {tenant_user_id}")

        tenant_user, tenant = row

        if tenant.status != TenantStatus.ACTIVE.value:
            raise TenantSuspendedError("Cannot resend invitation - tenant is suspended")

        if tenant_user.status != TenantUserStatus.ACTIVE.value:
            raise AdminSuspendedError("Cannot resend invitation - tenant admin is suspended")

        temporary_password = generate_temporary_password()

        invitation_count = (tenant_user.invitation_count or 1) + 1
        tenant_user.password_hash = self._password_hasher.hash(temporary_password)
        tenant_user.must_reset_password = True
        tenant_user.last_invitation_sent_at = utc_now()
        tenant_user.invitation_count = invitation_count

        await self._db.commit()

        tenant_name = tenant.name
        admin_email = tenant_user.email
        logger.info(
            "Rotated tenant admin credentials: user=%s invitation_count=%d",
            tenant_user.id,
            invitation_count,
        )

        email_sent = await self._mailer.send(tenant_name, admin_email, temporary_password)

        await self._audit.record(
            actor_id,
            AuditAction.RESEND_TENANT_ADMIN_INVITATION,
            {
                "tenant_id": tenant_user.tenant_id,
                "tenant_name": tenant_name,
                "tenant_admin_email": admin_email,
                "tenant_user_id": tenant_user.id,
                "invitation_count": invitation_count,
                "email_sent": email_sent,
            },
        )

        return ResendInvitationResult(
            tenant_user=tenant_user,
            email_sent=email_sent,
            temporary_password=temporary_password,
            invitation_count=invitation_count,
        )

    async def get_status(self, tenant_id: str) -> TenantAdminStatus:
        """Report whether a tenant has an admin."""
        normalized_tenant_id = normalize_uuid(tenant_id)
        if normalized_tenant_id is None:
            return TenantAdminStatus(has_admin=False)

        admin = await self._get_admin_for_tenant(normalized_tenant_id)
        if admin is None:
            return TenantAdminStatus(has_admin=False)
        return TenantAdminStatus(has_admin=True, admin=admin)

    async def get_batch_status(self, tenant_ids: list[str]) -> dict[str, TenantUser]:
        """Map tenant IDs to their admin, for tenants that have one.

        Args:
            tenant_ids: Tenant IDs to look up.

        Returns:
            Dictionary keyed by tenant ID. Tenants without an admin are absent.
        """
        normalized_ids = [n for n in (normalize_uuid(t) for t in tenant_ids) if n is not None]
        if not normalized_ids:
            return {}

        stmt = select(TenantUser).where(TenantUser.tenant_id.in_(normalized_ids))
        result = await self._db.execute(stmt)
        return {user.tenant_id: user for user in result.scalars().all()}

    async def _get_admin_for_tenant(self, tenant_id: str) -> TenantUser | None:
        stmt = select(TenantUser).where(TenantUser.tenant_id == tenant_id)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_admin_by_email(self, email: str) -> TenantUser | None:
        stmt = select(TenantUser).where(TenantUser.email == email)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _conflict_from_integrity_error(error: IntegrityError) -> ConflictError | None:
        """Map a unique constraint violation to its domain conflict."""
        detail = str(error.orig)
        if TENANT_ADMIN_TENANT_CONSTRAINT in detail:
            return AdminAlreadyExistsError(
                "Tenant admin already exists. Only one admin per tenant is allowed."
            )
        if TENANT_ADMIN_EMAIL_CONSTRAINT in detail:
            return EmailAlreadyAssignedError("This email is already assigned to another tenant")
        return None
