# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Super-Admin account model.

Super-Admins are created out-of-band by the seed script and are
read-only to the governance services.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class SuperAdmin(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Governance actor allowed to operate the console."""

    __tablename__ = "super_admin"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<SuperAdmin {self.email}>"
