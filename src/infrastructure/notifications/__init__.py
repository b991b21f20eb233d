# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification delivery for the Governance Console.

Exports:
    InvitationMailer: Tenant-admin invitation email sender.
"""

from src.infrastructure.notifications.invitation_mailer import InvitationMailer

__all__ = ["InvitationMailer"]
