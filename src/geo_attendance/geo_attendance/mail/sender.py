from __future__ import annotations

import logging
import smtplib
import uuid
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True

    @classmethod
    def from_mapping(cls, m: dict) -> "SmtpSettings":
        return cls(
            host=str(m.get("host") or ""),
            port=int(m.get("port") or 587),
            user=str(m.get("user") or ""),
            password=str(m.get("password") or ""),
            sender=str(m.get("sender") or m.get("user") or ""),
            use_tls=bool(m.get("use_tls", True)),
        )


class EmailSender(Protocol):
    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        """Deliver one message; delivery problems come back as ``success=False``."""

        raise NotImplementedError


class SmtpEmailSender(EmailSender):
    def __init__(self, settings: SmtpSettings, *, timeout: float = 10.0):
        self._settings = settings
        self._timeout = timeout

    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        s = self._settings
        msg = EmailMessage()
        msg["From"] = s.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = f"<{uuid.uuid4().hex}@{s.host}>"
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(s.host, s.port, timeout=self._timeout) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.user:
                    smtp.login(s.user, s.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("email delivery failed to=%s subject=%r error=%s", to, subject, exc)
            return SendResult(success=False, error=str(exc))

        logger.info("email sent to=%s subject=%r", to, subject)
        return SendResult(success=True, message_id=msg["Message-ID"])


@dataclass
class FakeEmailSender(EmailSender):
    """Keeps messages in memory; used when SMTP is not configured and in tests."""

    fail: bool = False
    outbox: List[dict] = field(default_factory=list)

    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        if self.fail:
            return SendResult(success=False, error="delivery disabled")
        message_id = f"<fake-{len(self.outbox) + 1}@localhost>"
        self.outbox.append({"to": to, "subject": subject, "html": html, "text": text, "message_id": message_id})
        logger.debug("fake email queued to=%s subject=%r", to, subject)
        return SendResult(success=True, message_id=message_id)


def build_email_sender(mail_config: Optional[dict]) -> EmailSender:
    settings = SmtpSettings.from_mapping(mail_config or {})
    if not settings.host:
        logger.info("MAIL_HOST not set; emails are kept in memory only")
        return FakeEmailSender()
    return SmtpEmailSender(settings)
