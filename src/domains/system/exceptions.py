# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Governance domain exceptions.

Every domain failure carries a ``kind`` (validation, not_found, conflict,
state, invalid_credentials) and a stable ``code``. The console turns these
into tagged failures.

AuditWriteError is not a GovernanceError. An action that could not be
audited always reaches the caller as an exception.
"""


class GovernanceError(Exception):
    """Base exception for governance domain failures.

    Attributes:
        kind: Failure category.
        code: Stable machine-readable failure code.
        message: Human-readable description.
    """

    kind: str = "governance"
    code: str = "GOVERNANCE_ERROR"
    default_message: str = "Governance operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        """Return the tagged failure payload."""
        return {"kind": self.kind, "code": self.code, "message": self.message}


class ValidationError(GovernanceError):
    """Raised when input is malformed."""

    kind = "validation"
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFoundError(GovernanceError):
    """Raised when a referenced row does not exist."""

    kind = "not_found"
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(GovernanceError):
    """Raised when an operation would break a uniqueness invariant."""

    kind = "conflict"
    code = "CONFLICT"
    default_message = "Conflicting resource"


class StateError(GovernanceError):
    """Raised when an operation targets a suspended tenant or admin."""

    kind = "state"
    code = "INVALID_STATE"
    default_message = "Operation not allowed in the current state"


class InvalidCredentialsError(GovernanceError):
    """Raised when login credentials are invalid."""

    kind = "invalid_credentials"
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class InvalidEmailFormatError(ValidationError):
    code = "INVALID_EMAIL_FORMAT"
    default_message = "Invalid email format"


class EmptyTenantNameError(ValidationError):
    code = "EMPTY_TENANT_NAME"
    default_message = "Tenant name must not be empty"


class EmptyRulesError(ValidationError):
    code = "EMPTY_RULES"
    default_message = "Rules document must not be empty"


class TenantNotFoundError(NotFoundError):
    code = "TENANT_NOT_FOUND"
    default_message = "Tenant not found"


class TenantAdminNotFoundError(NotFoundError):
    code = "TENANT_ADMIN_NOT_FOUND"
    default_message = "Tenant admin not found"


class RuleVersionNotFoundError(NotFoundError):
    code = "RULE_VERSION_NOT_FOUND"
    default_message = "Rule version not found"


class DuplicateTenantNameError(ConflictError):
    code = "DUPLICATE_TENANT_NAME"
    default_message = "Tenant name already exists"


class AdminAlreadyExistsError(ConflictError):
    code = "ADMIN_ALREADY_EXISTS"
    default_message = "Tenant already has an admin"


class EmailAlreadyAssignedError(ConflictError):
    code = "EMAIL_ALREADY_ASSIGNED"
    default_message = "Email is already assigned to a tenant admin"


class RuleVersionConflictError(ConflictError):
    code = "RULE_VERSION_CONFLICT"
    default_message = "Rule version was created concurrently, retry"


class TenantSuspendedError(StateError):
    code = "TENANT_SUSPENDED"
    default_message = "Tenant is suspended"


class AdminSuspendedError(StateError):
    code = "ADMIN_SUSPENDED"
    default_message = "Tenant admin is suspended"


class AuditWriteError(Exception):
    """Raised when an audit entry could not be persisted.

    Attributes:
        action: Audit action that failed to persist.
        original_error: The underlying store error.
    """

    def __init__(self, action: str, original_error: Exception | None = None) -> None:
        self.action = action
        self.original_error = original_error
        super().__init__(f"Failed to write audit entry for {action}")

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]}: {self.original_error}"
        return self.args[0]
