"""Email notification over SMTP.

smtplib is blocking, so every network call runs in a worker thread.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from app.config import ConfigError, EmailConfig

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


class EmailNotifier:
    """Sends reports to the configured recipients."""

    def __init__(self, config: EmailConfig, timeout: float = 30.0):
        missing = config.missing_fields()
        if missing:
            raise ConfigError(
                f"Missing email settings: {', '.join(missing)}"
            )
        self.config = config
        self.timeout = timeout

    def _open(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.smtp_port == SMTP_SSL_PORT:
            return smtplib.SMTP_SSL(cfg.smtp_server, cfg.smtp_port, timeout=self.timeout)
        return smtplib.SMTP(cfg.smtp_server, cfg.smtp_port, timeout=self.timeout)

    def _authenticate(self, server: smtplib.SMTP) -> None:
        if self.config.smtp_port != SMTP_SSL_PORT:
            server.starttls()
        server.login(self.config.username, self.config.password)

    def build_message(
        self,
        subject: str,
        body: str,
        recipients: list[str],
        html_body: str | None = None,
    ) -> EmailMessage:
        """Plain-text message, or multipart/alternative when html_body is given."""
        message = EmailMessage()
        message["From"] = self.config.from_email
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(body)
        if html_body is not None:
            message.add_alternative(html_body, subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with self._open() as server:
            self._authenticate(server)
            server.send_message(message)

    async def send(
        self,
        subject: str,
        body: str,
        recipients: list[str] | None = None,
        html_body: str | None = None,
    ) -> bool:
        """
        Send one message to all recipients.

        Args:
            subject: Subject line
            body: Plain-text body
            recipients: Override for the configured recipient list
            html_body: Optional HTML alternative

        Returns:
            True if the SMTP server accepted the message
        """
        recipients = recipients or self.config.to_emails
        if not recipients:
            logger.warning("No recipient email addresses configured")
            return False

        logger.info(f"Preparing to send email to {len(recipients)} recipients")
        message = self.build_message(subject, body, recipients, html_body)

        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Email sending failed: {e!r}")
            return False

        logger.info(f"Email sent successfully: {subject}")
        return True

    def _validate_sync(self) -> None:
        with self._open() as server:
            self._authenticate(server)
            server.noop()

    async def validate(self) -> bool:
        """Check that the SMTP server accepts our credentials."""
        try:
            await asyncio.to_thread(self._validate_sync)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Email configuration validation failed: {e!r}")
            return False

        logger.info("Email configuration validation successful")
        return True
