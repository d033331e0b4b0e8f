"""
SMTP transport for portal mails.

Plain text only. ``send_email`` never raises for delivery problems; the
result dict carries ``success`` and either ``message_id`` or ``error``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Any, Dict, List, Optional

import aiosmtplib

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


@dataclass(frozen=True)
class EmailServiceConfig:
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    from_email: str = "noreply@portal.local"
    from_name: str = "Business Partner Portal"
    reply_to_email: str = ""

    @classmethod
    def from_env(cls) -> "EmailServiceConfig":
        port = os.getenv("SMTP_PORT", "587").strip()
        return cls(
            smtp_host=os.getenv("SMTP_HOST", "localhost").strip(),
            smtp_port=int(port) if port.isdigit() else 0,
            smtp_username=os.getenv("SMTP_USERNAME", ""),
            smtp_password=os.getenv("SMTP_PASSWORD", ""),
            smtp_use_tls=_flag("SMTP_USE_TLS", "true"),
            smtp_use_ssl=_flag("SMTP_USE_SSL", "false"),
            from_email=os.getenv("FROM_EMAIL", "noreply@portal.local").strip(),
            from_name=os.getenv("FROM_NAME", "Business Partner Portal"),
            reply_to_email=os.getenv("REPLY_TO_EMAIL", "").strip(),
        )

    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.from_email)

    def validate(self) -> List[str]:
        errors = []
        if not self.smtp_host:
            errors.append("SMTP_HOST is required")
        if self.smtp_port <= 0:
            errors.append("SMTP_PORT must be a positive integer")
        if not self.from_email:
            errors.append("FROM_EMAIL is required")
        if self.smtp_use_ssl and self.smtp_use_tls:
            errors.append("Cannot use both SSL and TLS simultaneously")
        return errors

    def smtp_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``aiosmtplib.SMTP``; implicit TLS wins over STARTTLS."""
        return {
            "hostname": self.smtp_host,
            "port": self.smtp_port,
            "use_tls": self.smtp_use_ssl,
            "start_tls": self.smtp_use_tls and not self.smtp_use_ssl,
        }


class EmailService:
    def __init__(self, config: Optional[EmailServiceConfig] = None):
        self.config = config or EmailServiceConfig.from_env()

    def _build_message(self, to_email: str, subject: str, text_content: str, reply_to: Optional[str]) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.from_name, self.config.from_email))
        message["To"] = to_email
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self.config.from_email.rpartition("@")[2] or None)
        reply_address = reply_to or self.config.reply_to_email
        if reply_address:
            message["Reply-To"] = reply_address
        message.set_content(text_content)
        return message

    async def send_email(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.config.is_configured():
            return {"success": False, "error": "Email service not configured"}

        message = self._build_message(to_email, subject, text_content, reply_to)
        try:
            async with aiosmtplib.SMTP(**self.config.smtp_options()) as smtp:
                if self.config.smtp_username and self.config.smtp_password:
                    await smtp.login(self.config.smtp_username, self.config.smtp_password)
                smtp_result = await smtp.send_message(message)
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("mail_delivery_failed recipient=%s subject=%s", to_email, subject, exc_info=True)
            return {"success": False, "error": f"SMTP sending failed: {exc}"}

        logger.info("mail_sent recipient=%s subject=%s", to_email, subject)
        return {"success": True, "message_id": message["Message-ID"], "smtp_result": smtp_result}


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
