# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global rules versioning service.

The global rule document is stored as numbered, immutable versions. New
versions start as drafts; activating one deactivates every other version in
the same transaction, so at most one version is active at any time.

Example:
    >>> rules_service = GlobalRulesService(db)
    >>> draft = await rules_service.create_rules(admin_id, {"retention_days": 30})
    >>> active = await rules_service.activate_rules(admin_id, draft.id)
    >>> active.version
    1
"""

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.system.audit_service import AuditRecorder
from src.domains.system.exceptions import (
    AuditWriteError,
    EmptyRulesError,
    RuleVersionConflictError,
    RuleVersionNotFoundError,
)
from src.infrastructure.database.models.central import AuditAction, GlobalRule
from src.utils.identifiers import normalize_uuid

logger = logging.getLogger(__name__)


class GlobalRulesService:
    """Versioned management of the global rule document.

    Attributes:
        _db: Central database session.
        _audit: Governance audit recorder.
    """

    def __init__(self, db: AsyncSession, audit: AuditRecorder | None = None) -> None:
        self._db = db
        self._audit = audit or AuditRecorder(db)

    async def create_rules(self, actor_id: str, rules_json: dict[str, Any] | None) -> GlobalRule:
        """Store a new draft version of the rule document.

        The version number is one more than the highest existing version,
        or 1 for the first document. Drafts are never activated implicitly.

        Args:
            actor_id: ID of the acting Super-Admin.
            rules_json: Rule document, a non-empty JSON object.

        Returns:
            Created GlobalRule draft.

        Raises:
            EmptyRulesError: If the document is missing or empty.
            RuleVersionConflictError: If the version number was taken concurrently.
            AuditWriteError: If the creation could not be audited.
        """
        if not rules_json or not isinstance(rules_json, dict):
            raise EmptyRulesError()

        result = await self._db.execute(select(func.max(GlobalRule.version)))
        next_version = (result.scalar() or 0) + 1

        rule = GlobalRule(version=next_version, rules_json=rules_json, is_active=False)
        self._db.add(rule)

        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise RuleVersionConflictError(
                f"Rule version {next_version} was created concurrently"
            ) from e

        logger.info("Created global rules draft: version=%d id=%s", rule.version, rule.id)

        await self._audit.record(
            actor_id,
            AuditAction.CREATE_RULES,
            {"rule_id": rule.id, "version": rule.version},
        )

        return rule

    async def activate_rules(self, actor_id: str, rule_id: str) -> GlobalRule:
        """Make one rule version the only active version.

        Deactivation, activation and the audit entry commit together. If the
        target does not exist nothing changes and nothing is audited.

        Args:
            actor_id: ID of the acting Super-Admin.
            rule_id: ID of the version to activate.

        Returns:
            The activated GlobalRule.

        Raises:
            RuleVersionNotFoundError: If no version has this ID.
            AuditWriteError: If the activation could not be audited.
        """
        normalized_rule_id = normalize_uuid(rule_id)
        if normalized_rule_id is None:
            raise RuleVersionNotFoundError(f"Rule version not found: {rule_id}")

        try:
            await self._db.execute(
                update(GlobalRule)
                .where(GlobalRule.is_active.is_(True))
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )

            result = await self._db.execute(
                update(GlobalRule)
                .where(GlobalRule.id == normalized_rule_id)
                .values(is_active=True)
                .returning(GlobalRule)
                .execution_options(synchronize_session=False)
            )
            rule = result.scalar_one_or_none()

            if rule is None:
                await self._db.rollback()
                raise RuleVersionNotFoundError(f"Rule version not found: {rule_id}")

            await self._audit.record(
                actor_id,
                AuditAction.ACTIVATE_RULES,
                {"rule_id": rule.id, "version": rule.version},
                commit=False,
            )

            await self._db.commit()
        except AuditWriteError:
            await self._db.rollback()
            raise

        logger.info("Activated global rules: version=%d id=%s", rule.version, rule.id)

        return rule

    async def get_active_rules(self) -> GlobalRule | None:
        """Get the active rule version, if any."""
        stmt = select(GlobalRule).where(GlobalRule.is_active.is_(True))
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_versions(self) -> list[GlobalRule]:
        """List all rule versions, newest version first."""
        stmt = select(GlobalRule).order_by(GlobalRule.version.desc())
        result = await self._db.execute(stmt)
        return list(result.scalars().all())
