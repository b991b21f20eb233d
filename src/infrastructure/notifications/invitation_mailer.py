# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant-admin invitation email delivery using async SMTP.

Invitations carry the tenant name, the admin login, the one-time temporary
password, the Tenant Platform URL and a mandatory password change notice.

When SMTP credentials are not configured, the invitation is written to the
console instead and counts as delivered. When SMTP delivery fails, send()
returns False; the console copy is only printed outside production.

Configuration (via environment variables, see EmailSettings):
- EMAIL_HOST: SMTP server hostname
- EMAIL_PORT: SMTP server port (default: 587)
- EMAIL_SECURE: Use implicit TLS instead of STARTTLS
- EMAIL_USER: SMTP authentication username
- EMAIL_PASSWORD: SMTP authentication password
- EMAIL_FROM: Sender header
- EMAIL_PLATFORM_URL: Tenant Platform URL shown in the invitation
"""

import asyncio
import html
import logging
import sys
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING, TextIO

import aiosmtplib

if TYPE_CHECKING:
    from src.core.config.settings import EmailSettings, Settings

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 60


class InvitationMailer:
    """Sends tenant-admin invitation emails.

    send() never raises: delivery problems are reported through its
    boolean result so that a failed email never undoes a provisioned
    account.
    """

    def __init__(
        self,
        settings: "EmailSettings",
        console_fallback_on_error: bool = True,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the mailer.

        Args:
            settings: SMTP settings.
            console_fallback_on_error: Print the invitation when SMTP fails.
            stream: Console output stream, defaults to stdout.
        """
        self._settings = settings
        self._console_fallback_on_error = console_fallback_on_error
        self._stream = stream

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InvitationMailer":
        """Build a mailer from application settings."""
        return cls(
            settings.email,
            console_fallback_on_error=not settings.is_production,
        )

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    async def send(
        self,
        tenant_name: str,
        admin_email: str,
        temporary_password: str,
    ) -> bool:
        """Deliver an invitation to a tenant admin.

        Args:
            tenant_name: Name of the tenant the access is for.
            admin_email: Recipient and login of the tenant admin.
            temporary_password: One-time password in clear text.

        Returns:
            True if the invitation was delivered (or emitted to the
            console because SMTP is not configured), False otherwise.
        """
        subject = self.build_subject(tenant_name)
        text_content = self.build_plain_text(tenant_name, admin_email, temporary_password)

        if not self.is_configured:
            logger.warning("No email credentials configured, invitation emitted to console")
            self._emit_to_console("EMAIL - CONSOLE FALLBACK", admin_email, subject, text_content)
            return True

        message = self._build_message(
            admin_email,
            subject,
            text_content,
            self.build_html(tenant_name, admin_email, temporary_password),
        )

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.user,
                password=self._settings.password.get_secret_value(),
                use_tls=self._settings.secure,
                start_tls=not self._settings.secure,
                timeout=self._settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            logger.error("Failed to send invitation to %s: %s", admin_email, str(e))
            if self._console_fallback_on_error:
                self._emit_to_console(
                    "EMAIL - FALLBACK DUE TO ERROR", admin_email, subject, text_content
                )
            return False

        logger.info("Invitation sent to %s", admin_email)
        return True

    def _emit_to_console(self, banner: str, recipient: str, subject: str, body: str) -> None:
        stream = self._stream or sys.stdout
        lines = [
            "",
            SEPARATOR,
            f"[{banner}]",
            SEPARATOR,
            f"TO: {recipient}",
            f"SUBJECT: {subject}",
            "-" * 60,
            body,
            SEPARATOR,
            "",
        ]
        print("\n".join(lines), file=stream)

    def _build_message(
        self,
        recipient: str,
        subject: str,
        text_content: str,
        html_content: str,
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self._settings.from_address
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(text_content, "plain", "utf-8"))
        message.attach(MIMEText(html_content, "html", "utf-8"))
        return message

    @staticmethod
    def build_subject(tenant_name: str) -> str:
        return f"Governance Console: Tenant Admin Access for {tenant_name}"

    def build_plain_text(
        self,
        tenant_name: str,
        admin_email: str,
        temporary_password: str,
    ) -> str:
        """Build plain text invitation body."""
        lines = [
            "Tenant Admin Access Provisioned",
            "===============================",
            "",
            "Hello,",
            "",
            f"You have been granted Tenant Admin access for {tenant_name}.",
            "",
            "CREDENTIALS:",
            f"- Tenant: {tenant_name}",
            f"- Email / Username: {admin_email}",
            f"- Temporary Password: {temporary_password}",
            "",
            "IMPORTANT SECURITY NOTICE:",
            "You will be REQUIRED TO CHANGE THIS PASSWORD on your first login.",
            "Do not share these credentials with anyone.",
            "",
            f"Tenant Platform URL: {self._settings.platform_url}",
            "",
            "If you did not expect this access, contact your administrator immediately.",
            "",
            "---",
            "This is an automated message from the Governance Console.",
            "Please do not reply to this email.",
        ]
        return "\n".join(lines)

    def build_html(
        self,
        tenant_name: str,
        admin_email: str,
        temporary_password: str,
    ) -> str:
        """Build HTML invitation body."""
        tenant = html.escape(tenant_name)
        email = html.escape(admin_email)
        password = html.escape(temporary_password)
        platform_url = html.escape(self._settings.platform_url)

        body = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;
             max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="margin: 0;">Tenant Admin Access Provisioned</h1>
    <p>Hello,</p>
    <p>You have been granted Tenant Admin access for <strong>{tenant}</strong>.</p>

    <div style="border: 1px solid #e0e0e0; border-radius: 4px; padding: 15px;">
        <p><strong>Tenant:</strong> {tenant}</p>
        <p><strong>Email / Username:</strong> {email}</p>
        <p><strong>Temporary Password:</strong> <code>{password}</code></p>
    </div>

    <div style="background: #fff3cd; border: 1px solid #ffc107; padding: 12px; margin: 15px 0;">
        <strong>Important Security Notice:</strong><br>
        You will be <strong>required to change this password</strong> on your first login.
        Do not share these credentials with anyone.
    </div>

    <p><strong>Tenant Platform URL:</strong><br>
    <a href="{platform_url}">{platform_url}</a></p>

    <p style="font-size: 12px; color: #666;">
        This is an automated message from the Governance Console.<br>
        Please do not reply to this email.
    </p>
</body>
</html>
        """
        return body.strip()
