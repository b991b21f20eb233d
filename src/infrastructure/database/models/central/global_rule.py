# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global rule version model.

Each row is a numbered snapshot of the global policy document. A partial
unique index guarantees that at most one row is active at any time.
"""

from typing import Any

from sqlalchemy import Boolean, Index, Integer, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class GlobalRule(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Versioned global rule document (DRAFT when inactive, ACTIVE otherwise)."""

    __tablename__ = "global_rules"
    __table_args__ = (
        Index("ix_global_rules_version", "version", unique=True),
        Index(
            "ix_global_rules_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active IS TRUE"),
        ),
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    rules_json: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    @property
    def state(self) -> str:
        """Return DRAFT or ACTIVE."""
        return "ACTIVE" if self.is_active else "DRAFT"

    def __repr__(self) -> str:
        return f"<GlobalRule v{self.version} {self.state}>"
