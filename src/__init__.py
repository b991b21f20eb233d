"""Governance Console Backend.

Super-Admin control plane for a multi-tenant platform: tenant lifecycle,
tenant-admin provisioning, global rule versioning and an append-only
governance audit trail.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
