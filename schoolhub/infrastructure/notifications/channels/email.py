# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using async SMTP.

Sends multipart (plain text + HTML) mail through aiosmtplib. The channel
is skipped, not failed, while SMTP settings are incomplete, which is the
normal state in development.

Configuration (via environment variables):
- SMTP_HOST: SMTP server hostname
- SMTP_PORT: SMTP server port (default: 587)
- SMTP_USERNAME / SMTP_PASSWORD: optional credentials
- SMTP_USE_TLS: Use STARTTLS (default: true)
- SMTP_FROM_EMAIL: Sender email address
- SMTP_FROM_NAME: Sender display name
"""

import html
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import aiosmtplib

from schoolhub.core.config.settings import SMTPSettings
from schoolhub.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class EmailChannel(BaseChannel):
    """Email notification channel using async SMTP.

    Attributes:
        _settings: SMTP configuration.
    """

    def __init__(self, settings: SMTPSettings) -> None:
        """Initialize the email channel.

        Args:
            settings: SMTP configuration.
        """
        super().__init__()
        self._settings = settings
        if not settings.is_configured:
            self.logger.warning(
                "Email notifications disabled: SMTP_HOST or SMTP_FROM_EMAIL not set"
            )

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.EMAIL

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send email notification via SMTP.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not self._settings.is_configured:
            return self.create_skipped_result("Email channel not configured")

        if not payload.recipient_email:
            return self.create_skipped_result("No recipient email address")

        message = self._build_email_message(payload)

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username or None,
                password=self._settings.password.get_secret_value() or None,
                start_tls=self._settings.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send %s email: %s",
                payload.notification_type,
                str(e),
                exc_info=True,
            )
            return self.create_failure_result(f"SMTP error: {str(e)}")

        self.logger.info("Email sent: %s", payload.notification_type)
        return self.create_success_result(message_id=message["Message-ID"])

    def _build_email_message(self, payload: NotificationPayload) -> MIMEMultipart:
        """Build MIME email message.

        Args:
            payload: Notification payload.

        Returns:
            MIMEMultipart message ready to send.
        """
        message = MIMEMultipart("alternative")
        message["From"] = f"{self._settings.from_name} <{self._settings.from_email}>"
        message["To"] = payload.recipient_email
        message["Subject"] = payload.title
        message["Message-ID"] = make_msgid()

        message.attach(MIMEText(self._build_plain_text(payload), "plain", "utf-8"))
        message.attach(MIMEText(self._build_html(payload), "html", "utf-8"))
        return message

    def _build_plain_text(self, payload: NotificationPayload) -> str:
        lines = []
        if payload.recipient_name:
            lines.extend([f"Hello {payload.recipient_name},", ""])

        lines.extend([payload.message, ""])

        if payload.action_url:
            action_text = payload.action_label or "Open"
            lines.extend([f"{action_text}: {payload.action_url}", ""])

        lines.extend(["---", f"This message was sent by {self._settings.from_name}."])
        return "\n".join(lines)

    def _build_html(self, payload: NotificationPayload) -> str:
        greeting = ""
        if payload.recipient_name:
            greeting = f"<p>Hello {html.escape(payload.recipient_name)},</p>"

        body = html.escape(payload.message).replace("\n", "<br>")

        action = ""
        if payload.action_url:
            label = html.escape(payload.action_label or "Open")
            url = html.escape(payload.action_url, quote=True)
            action = f'<p><a href="{url}">{label}</a></p>'

        sender = html.escape(self._settings.from_name)
        return (
            "<!DOCTYPE html>"
            '<html><head><meta charset="utf-8"></head><body>'
            f"<h2>{html.escape(payload.title)}</h2>"
            f"{greeting}<p>{body}</p>{action}"
            f'<p style="color:#9CA3AF;font-size:12px">This message was sent by {sender}.</p>'
            "</body></html>"
        )
