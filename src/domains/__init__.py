# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the Governance Console.

This package contains domain services that encapsulate business logic.
Each domain module provides services that orchestrate operations
against the central store and external collaborators.

Domains:
    auth: Password hashing and one-time credential generation.
    system: Super-Admin governance operations (login, tenants,
        tenant-admin provisioning, global rules, audit trail).
"""
