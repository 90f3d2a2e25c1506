"""
Outgoing account mail (new credentials, password resets).

Disabled by default: without SMTP settings the message is only logged so
the creator can hand the temporary password over manually.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from skillshots.core.config import Configuration
from skillshots.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class Mailer:

    def __init__(self, config: Configuration):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.smtp_enabled and bool(self.config.smtp_host)

    def _build(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.smtp_sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage):
        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=30) as smtp:
            smtp.starttls()
            if self.config.smtp_user:
                smtp.login(self.config.smtp_user, self.config.smtp_password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, body: str) -> bool:
        """Returns True when the message was actually handed to SMTP"""
        if not self.enabled:
            logger.info("Mail disabled, not sending '%s' to %s", subject, to)
            return False

        try:
            await asyncio.to_thread(self._deliver, self._build(to, subject, body))
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", to, e)
            raise ExternalServiceError("Could not send email. Please try again.") from e

        logger.info("Sent '%s' to %s", subject, to)
        return True

    async def send_credentials(self, name: str, email: str, temporary_password: str) -> bool:
        body = (
            f"Hi {name},\n\n"
            "An account has been created for you on SkillShots.\n\n"
            f"Email: {email}\n"
            f"Temporary password: {temporary_password}\n\n"
            "Please sign in and change your password."
        )
        return await self.send(email, "Your SkillShots account", body)

    async def send_password_reset(self, name: str, email: str, temporary_password: str) -> bool:
        body = (
            f"Hi {name},\n\n"
            f"Your new temporary password is: {temporary_password}\n"
        )
        return await self.send(email, "Password Reset", body)
