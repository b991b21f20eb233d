# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires PostgreSQL)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Database Mock Fixtures
# =============================================================================


def _assign_primary_key(obj) -> None:
    """Emulate the client-side UUID default applied on flush."""
    if getattr(obj, "id", None) is None:
        obj.id = str(uuid4())


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock(side_effect=_assign_primary_key)
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_admin_id() -> str:
    """Provide a sample Super-Admin ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_tenant_id() -> str:
    """Provide a sample tenant ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def sample_tenant(sample_tenant_id):
    """Create a sample ACTIVE tenant model."""
    tenant = MagicMock()
    tenant.id = sample_tenant_id
    tenant.name = "Acme"
    tenant.status = "ACTIVE"
    tenant.created_at = None
    tenant.suspended_at = None
    return tenant


@pytest.fixture
def sample_tenant_user(sample_tenant_id):
    """Create a sample tenant admin model."""
    user = MagicMock()
    user.id = str(uuid4())
    user.tenant_id = sample_tenant_id
    user.email = "admin@acme.com"
    user.password_hash = "$2b$04$previoushashpreviousha.previoushashpreviousHASHprev"
    user.must_reset_password = True
    user.status = "ACTIVE"
    user.created_at = None
    user.invitation_sent_at = None
    user.last_invitation_sent_at = None
    user.invitation_count = 1
    return user
