# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Governance audit recorder.

Appends immutable entries to the governance audit trail. Every entry is
attributed to a Super-Admin: the actor type is fixed and cannot be chosen
by callers.

Unlike operational logging, audit writes are not best-effort. A store
failure is raised as AuditWriteError and is never retried here.

Example:
    >>> recorder = AuditRecorder(db)
    >>> await recorder.record(admin_id, AuditAction.CREATE_TENANT, {"tenant_id": tenant.id})
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.system.exceptions import AuditWriteError
from src.infrastructure.database.models.central import ActorType, AuditAction, AuditLog

logger = logging.getLogger(__name__)

_SENSITIVE_KEY_PATTERNS = ("password", "secret", "token")
_REDACTED_VALUE = "[REDACTED]"

DEFAULT_AUDIT_LIMIT = 100


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(pattern in lowered for pattern in _SENSITIVE_KEY_PATTERNS)


def sanitize_metadata(value: Any) -> Any:
    """Recursively replace values stored under secret-bearing keys.

    Args:
        value: Metadata document or nested value.

    Returns:
        A copy with sensitive values replaced by ``[REDACTED]``.
    """
    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            key = str(raw_key)
            if _is_sensitive_key(key):
                sanitized[key] = _REDACTED_VALUE
            else:
                sanitized[key] = sanitize_metadata(raw_value)
        return sanitized
    if isinstance(value, list):
        return [sanitize_metadata(item) for item in value]
    return value


class AuditRecorder:
    """Writes and reads the governance audit trail.

    Attributes:
        _db: Central database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def record(
        self,
        actor_id: str,
        action: AuditAction,
        metadata: dict[str, Any] | None = None,
        commit: bool = True,
    ) -> AuditLog:
        """Append one audit entry.

        Args:
            actor_id: ID of the acting Super-Admin.
            action: Governance action performed.
            metadata: Action details. Never include plaintext secrets.
            commit: Commit immediately. Pass False to let the entry commit
                or roll back with the caller's transaction.

        Returns:
            The persisted audit entry.

        Raises:
            AuditWriteError: If the entry could not be written.
        """
        entry = AuditLog(
            actor_type=ActorType.SUPER_ADMIN.value,
            actor_id=actor_id,
            action=action.value,
            metadata_json=sanitize_metadata(metadata or {}),
        )

        try:
            self._db.add(entry)
            await self._db.flush()
            if commit:
                await self._db.commit()
        except SQLAlchemyError as e:
            if commit:
                await self._db.rollback()
            logger.error(
                "Audit write failed: action=%s actor=%s",
                action.value,
                actor_id,
                exc_info=e,
            )
            raise AuditWriteError(action.value, e) from e

        logger.info("Audit entry recorded: action=%s actor=%s", action.value, actor_id)
        return entry

    async def list_recent(self, limit: int = DEFAULT_AUDIT_LIMIT) -> list[AuditLog]:
        """List the newest audit entries first.

        Args:
            limit: Maximum number of entries.

        Returns:
            Audit entries ordered by creation time, descending.
        """
        stmt = select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
        result = await self._db.execute(stmt)
        return list(result.scalars().all())
