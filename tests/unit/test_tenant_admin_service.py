# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for tenant-admin provisioning service."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from src.domains.auth.password import PasswordHasher
from src.domains.system.exceptions import (
    AdminAlreadyExistsError,
    AdminSuspendedError,
    AuditWriteError,
    EmailAlreadyAssignedError,
    InvalidEmailFormatError,
    TenantAdminNotFoundError,
    TenantNotFoundError,
    TenantSuspendedError,
)
from src.domains.system.tenant_admin_service import (
    TenantAdminService,
    is_valid_email,
)
from src.infrastructure.database.models.central import AuditLog, TenantUser

TEMPORARY_PASSWORD = "Ab1!efghijklmn"
PREVIOUS_PASSWORD = "Zy9?previous00"
GENERATOR_PATH = "src.domains.system.tenant_admin_service.generate_temporary_password"


def create_mock_result(value):
    """Create a mock result with scalar_one_or_none."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def create_row_result(row):
    """Create a mock result with one_or_none."""
    result = MagicMock()
    result.one_or_none.return_value = row
    return result


def audit_entries(mock_db) -> list[AuditLog]:
    return [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], AuditLog)]


def unique_violation(constraint: str) -> IntegrityError:
    return IntegrityError(
        "INSERT INTO tenant_users",
        {},
        Exception(f'duplicate key value violates unique constraint "{constraint}"'),
    )


@pytest.fixture
def mailer():
    """Create a mailer that always delivers."""
    mailer = MagicMock()
    mailer.send = AsyncMock(return_value=True)
    return mailer


@pytest.fixture
def hasher():
    """Create a fast hasher for tests."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def service(mock_db, mailer, hasher):
    """Create provisioning service with mock database."""
    return TenantAdminService(db=mock_db, mailer=mailer, password_hasher=hasher)


@pytest.fixture
def fixed_password():
    """Pin the generated temporary password."""
    with patch(GENERATOR_PATH, return_value=TEMPORARY_PASSWORD) as generator:
        yield generator


class TestEmailValidation:
    """Tests for the email shape check."""

    @pytest.mark.parametrize(
        "email",
        ["admin@acme.com", "a.b+c@sub.example.org", "x@y.z"],
    )
    def test_valid_emails(self, email) -> None:
        assert is_valid_email(email) is True

    @pytest.mark.parametrize(
        "email",
        ["", "admin", "admin@acme", "@acme.com", "admin@.com.", "ad min@acme.com", "a@b@c.com", "admin@acme.com\n"],
    )
    def test_invalid_emails(self, email) -> None:
        assert is_valid_email(email) is False


class TestIssueAccess:
    """Tests for TenantAdminService.issue_access."""

    @pytest.mark.asyncio
    async def test_issue_access_success(
        self, service, mock_db, mailer, hasher, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that issuance creates the admin, delivers and audits."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]

        result = await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        user = result.tenant_user
        assert isinstance(user, TenantUser)
        assert result.email_sent is True
        assert user.tenant_id == sample_tenant.id
        assert user.email == "admin@acme.com"
        assert user.status == "ACTIVE"
        assert user.must_reset_password is True
        assert user.invitation_count == 1
        assert user.invitation_sent_at is not None
        assert user.invitation_sent_at == user.last_invitation_sent_at
        assert user.password_hash != TEMPORARY_PASSWORD
        assert hasher.verify(TEMPORARY_PASSWORD, user.password_hash)

        mailer.send.assert_awaited_once_with("Acme", "admin@acme.com", TEMPORARY_PASSWORD)

    @pytest.mark.asyncio
    async def test_issue_access_audit_metadata(
        self, service, mock_db, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that the audit entry is complete and holds no secret."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]

        result = await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        entries = audit_entries(mock_db)
        assert len(entries) == 1
        assert entries[0].action == "ISSUE_TENANT_ADMIN_ACCESS"
        assert entries[0].actor_id == sample_admin_id
        assert entries[0].metadata_json == {
            "tenant_id": sample_tenant.id,
            "tenant_name": "Acme",
            "tenant_admin_email": "admin@acme.com",
            "tenant_user_id": result.tenant_user.id,
            "email_sent": True,
        }
        assert TEMPORARY_PASSWORD not in str(entries[0].metadata_json)
        assert result.tenant_user.password_hash not in str(entries[0].metadata_json)

    @pytest.mark.asyncio
    async def test_commit_then_mail_then_audit(
        self, service, mock_db, mailer, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test the side-effect order of a successful issuance."""
        events = []
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]
        mock_db.commit.side_effect = lambda: events.append("commit")
        mock_db.flush.side_effect = lambda: events.append("audit")

        async def send(*args):
            events.append("mail")
            return True

        mailer.send.side_effect = send

        await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        assert events == ["commit", "mail", "audit", "commit"]

    @pytest.mark.asyncio
    async def test_tenant_row_is_locked(
        self, service, mock_db, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that the tenant is read FOR UPDATE."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]

        await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        first_stmt = mock_db.execute.await_args_list[0].args[0]
        assert first_stmt._for_update_arg is not None

    @pytest.mark.asyncio
    async def test_mail_failure_keeps_account(
        self, service, mock_db, mailer, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that a failed delivery is reported, not rolled back."""
        mailer.send.return_value = False
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]

        result = await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        assert result.email_sent is False
        mock_db.rollback.assert_not_awaited()
        assert audit_entries(mock_db)[0].metadata_json["email_sent"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["not-an-email", "admin@acme", "a b@acme.com"])
    async def test_invalid_email(self, service, mock_db, sample_admin_id, sample_tenant, email):
        """Test that malformed emails fail before any store access."""
        with pytest.raises(InvalidEmailFormatError) as exc_info:
            await service.issue_access(sample_admin_id, sample_tenant.id, email)

        assert exc_info.value.kind == "validation"
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tenant_not_found(self, service, mock_db, sample_admin_id):
        """Test that an unknown tenant is rejected."""
        mock_db.execute.side_effect = [create_mock_result(None)]

        with pytest.raises(TenantNotFoundError):
            await service.issue_access(sample_admin_id, str(uuid4()), "admin@acme.com")

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_suspended_tenant_inserts_and_audits_nothing(
        self, service, mock_db, mailer, sample_admin_id, sample_tenant
    ):
        """Test that a suspended tenant cannot receive an admin."""
        sample_tenant.status = "SUSPENDED"
        mock_db.execute.side_effect = [create_mock_result(sample_tenant)]

        with pytest.raises(TenantSuspendedError) as exc_info:
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        assert exc_info.value.kind == "state"
        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()
        mailer.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_suspension_checked_before_existing_admin(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user
    ):
        """Test that the first failing check wins."""
        sample_tenant.status = "SUSPENDED"
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(sample_tenant_user),
        ]

        with pytest.raises(TenantSuspendedError):
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

    @pytest.mark.asyncio
    async def test_admin_already_exists(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user
    ):
        """Test that a second admin for a tenant is a conflict."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(sample_tenant_user),
        ]

        with pytest.raises(AdminAlreadyExistsError) as exc_info:
            await service.issue_access(sample_admin_id, sample_tenant.id, "other@acme.com")

        assert exc_info.value.kind == "conflict"
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_already_assigned(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user
    ):
        """Test that an admin email cannot serve two tenants."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(sample_tenant_user),
        ]

        with pytest.raises(EmailAlreadyAssignedError):
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("constraint", "expected"),
        [
            ("uq_tenant_users_tenant_id", AdminAlreadyExistsError),
            ("uq_tenant_users_email", EmailAlreadyAssignedError),
        ],
    )
    async def test_unique_violation_maps_to_conflict(
        self,
        service,
        mock_db,
        mailer,
        sample_admin_id,
        sample_tenant,
        fixed_password,
        constraint,
        expected,
    ):
        """Test that a lost race surfaces as the matching domain conflict."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]
        mock_db.commit.side_effect = unique_violation(constraint)

        with pytest.raises(expected):
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

        mock_db.rollback.assert_awaited_once()
        mailer.send.assert_not_awaited()
        assert audit_entries(mock_db) == []

    @pytest.mark.asyncio
    async def test_unrelated_integrity_error_propagates(
        self, service, mock_db, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that other integrity errors are not disguised as conflicts."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]
        mock_db.commit.side_effect = unique_violation("fk_tenant_users_tenant_id_tenants")

        with pytest.raises(IntegrityError):
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")

    @pytest.mark.asyncio
    async def test_audit_failure_propagates(
        self, service, mock_db, sample_admin_id, sample_tenant, fixed_password
    ):
        """Test that an un-auditable issuance raises AuditWriteError."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_tenant),
            create_mock_result(None),
            create_mock_result(None),
        ]
        mock_db.commit.side_effect = [None, OperationalError("INSERT", {}, Exception("down"))]

        with pytest.raises(AuditWriteError):
            await service.issue_access(sample_admin_id, sample_tenant.id, "admin@acme.com")


class TestResendInvitation:
    """Tests for TenantAdminService.resend_invitation."""

    @pytest.mark.asyncio
    async def test_resend_rotates_secret(
        self,
        service,
        mock_db,
        mailer,
        hasher,
        sample_admin_id,
        sample_tenant,
        sample_tenant_user,
        fixed_password,
    ):
        """Test that resend replaces the hash and increments the count."""
        old_hash = sample_tenant_user.password_hash
        sample_tenant_user.must_reset_password = False
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        result = await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        assert result.invitation_count == 2
        assert result.email_sent is True
        assert result.temporary_password == TEMPORARY_PASSWORD
        assert sample_tenant_user.invitation_count == 2
        assert sample_tenant_user.must_reset_password is True
        assert sample_tenant_user.last_invitation_sent_at is not None
        assert sample_tenant_user.password_hash != old_hash
        assert hasher.verify(TEMPORARY_PASSWORD, sample_tenant_user.password_hash)
        mailer.send.assert_awaited_once_with("Acme", "admin@acme.com", TEMPORARY_PASSWORD)

    @pytest.mark.asyncio
    async def test_resend_invalidates_previous_password(
        self,
        service,
        mock_db,
        hasher,
        sample_admin_id,
        sample_tenant,
        sample_tenant_user,
        fixed_password,
    ):
        """Test that the previously issued password no longer verifies."""
        sample_tenant_user.password_hash = hasher.hash(PREVIOUS_PASSWORD)
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        assert not hasher.verify(PREVIOUS_PASSWORD, sample_tenant_user.password_hash)
        assert hasher.verify(TEMPORARY_PASSWORD, sample_tenant_user.password_hash)

    @pytest.mark.asyncio
    async def test_admin_row_is_locked(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user, fixed_password
    ):
        """Test that the admin and tenant rows are read FOR UPDATE."""
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        first_stmt = mock_db.execute.await_args_list[0].args[0]
        compiled = str(first_stmt.compile(dialect=postgresql.dialect()))
        assert "FOR UPDATE" in compiled

    @pytest.mark.asyncio
    async def test_resend_audit_metadata(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user, fixed_password
    ):
        """Test that the resend entry records the new count."""
        sample_tenant_user.invitation_count = 3
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        entries = audit_entries(mock_db)
        assert len(entries) == 1
        assert entries[0].action == "RESEND_TENANT_ADMIN_INVITATION"
        assert entries[0].metadata_json == {
            "tenant_id": sample_tenant.id,
            "tenant_name": "Acme",
            "tenant_admin_email": "admin@acme.com",
            "tenant_user_id": sample_tenant_user.id,
            "invitation_count": 4,
            "email_sent": True,
        }
        assert TEMPORARY_PASSWORD not in str(entries[0].metadata_json)

    @pytest.mark.asyncio
    async def test_resend_mail_failure_still_audited(
        self,
        service,
        mock_db,
        mailer,
        sample_admin_id,
        sample_tenant,
        sample_tenant_user,
        fixed_password,
    ):
        """Test that a failed delivery is reported in the result and the audit."""
        mailer.send.return_value = False
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        result = await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        assert result.email_sent is False
        assert audit_entries(mock_db)[0].metadata_json["email_sent"] is False

    @pytest.mark.asyncio
    async def test_resend_unknown_admin(self, service, mock_db, sample_admin_id):
        """Test that an unknown tenant user is rejected."""
        mock_db.execute.return_value = create_row_result(None)

        with pytest.raises(TenantAdminNotFoundError):
            await service.resend_invitation(sample_admin_id, str(uuid4()))

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resend_malformed_id(self, service, mock_db, sample_admin_id):
        """Test that a malformed ID is a miss without a query."""
        with pytest.raises(TenantAdminNotFoundError):
            await service.resend_invitation(sample_admin_id, "42")

        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resend_suspended_tenant(
        self, service, mock_db, mailer, sample_admin_id, sample_tenant, sample_tenant_user
    ):
        """Test that a suspended tenant blocks the resend."""
        sample_tenant.status = "SUSPENDED"
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        with pytest.raises(TenantSuspendedError):
            await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        assert sample_tenant_user.invitation_count == 1
        mailer.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resend_suspended_admin(
        self, service, mock_db, sample_admin_id, sample_tenant, sample_tenant_user
    ):
        """Test that a suspended admin blocks the resend."""
        sample_tenant_user.status = "SUSPENDED"
        mock_db.execute.return_value = create_row_result((sample_tenant_user, sample_tenant))

        with pytest.raises(AdminSuspendedError) as exc_info:
            await service.resend_invitation(sample_admin_id, sample_tenant_user.id)

        assert exc_info.value.kind == "state"
        mock_db.add.assert_not_called()


class TestAdminStatus:
    """Tests for admin status reads."""

    @pytest.mark.asyncio
    async def test_status_without_admin(self, service, mock_db, sample_tenant_id):
        mock_db.execute.return_value = create_mock_result(None)

        status = await service.get_status(sample_tenant_id)

        assert status.has_admin is False
        assert status.admin is None

    @pytest.mark.asyncio
    async def test_status_with_admin(
        self, service, mock_db, sample_tenant_id, sample_tenant_user
    ):
        mock_db.execute.return_value = create_mock_result(sample_tenant_user)

        status = await service.get_status(sample_tenant_id)

        assert status.has_admin is True
        assert status.admin is sample_tenant_user

    @pytest.mark.asyncio
    async def test_batch_status_empty_list_skips_store(self, service, mock_db):
        """Test that an empty batch never queries."""
        assert await service.get_batch_status([]) == {}
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_batch_status_maps_by_tenant(
        self, service, mock_db, sample_tenant_id, sample_tenant_user
    ):
        """Test that admins are keyed by tenant and missing tenants are absent."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = [sample_tenant_user]
        mock_db.execute.return_value = result

        admins = await service.get_batch_status([sample_tenant_id, str(uuid4())])

        assert admins == {sample_tenant_id: sample_tenant_user}
