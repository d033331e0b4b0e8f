"""
Mailing collaborator used by the business logic.

``send_mails`` delivers one plain text mail per template name. Mail content
is a fixed subject line plus the parameters; a failed delivery is logged and
never fails the request that triggered it.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, Mapping, Optional

from portal.services.email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)

SUBJECTS: Dict[str, str] = {
    "subscription-request": "New subscription request",
    "subscription-activation": "Your subscription has been activated",
    "service-request": "New service request",
    "osp-registration-declined": "Registration declined",
    "provider-details-changed": "Provider details changed",
}


def _render_text(template: str, parameters: Mapping[str, str]) -> str:
    lines = [SUBJECTS.get(template, template), ""]
    lines.extend(f"{key}: {value}" for key, value in sorted(parameters.items()))
    return "\n".join(lines)


class MailingService:
    def __init__(self, email_service: Optional[EmailService] = None):
        self._email_service = email_service

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = get_email_service()
        return self._email_service

    async def send_mails_async(self, recipient: str, parameters: Mapping[str, str], templates: Iterable[str]) -> int:
        """Send every template to ``recipient``; returns the number delivered."""
        delivered = 0
        for template in templates:
            result = await self.email_service.send_email(
                to_email=recipient,
                subject=SUBJECTS.get(template, template),
                text_content=_render_text(template, parameters),
            )
            if result.get("success"):
                delivered += 1
            else:
                logger.warning(
                    "mail_not_sent template=%s recipient=%s error=%s",
                    template,
                    recipient,
                    result.get("error"),
                )
        return delivered

    def send_mails(self, recipient: str, parameters: Mapping[str, str], templates: Iterable[str]) -> int:
        return asyncio.run(self.send_mails_async(recipient, parameters, list(templates)))


_mailing_service: Optional[MailingService] = None


def get_mailing_service() -> MailingService:
    global _mailing_service
    if _mailing_service is None:
        _mailing_service = MailingService()
    return _mailing_service
