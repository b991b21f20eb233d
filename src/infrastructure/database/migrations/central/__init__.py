# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Central database migrations.

Contains migrations for governance tables:
- super_admin: Console operators (seeded out-of-band)
- tenants: Tenant registry
- tenant_users: The single admin of each tenant
- audit_logs: Append-only governance audit trail
- global_rules: Versioned global rule documents
"""
