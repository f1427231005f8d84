import logging
import re
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from fastapi.concurrency import run_in_threadpool

from geomail.config import Settings
from geomail.models import Envelope

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can deliver an envelope. Raising signals failure."""

    async def send(self, envelope: Envelope) -> None:
        ...


def html_to_text(html: str) -> str:
    text = re.sub(r"<br\s*/?>", "\n", html, flags=re.IGNORECASE)
    text = re.sub(r"</(p|li)>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def build_message(envelope: Envelope) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = envelope.sender
    msg["To"] = envelope.recipient
    msg["Subject"] = envelope.subject
    msg.set_content(html_to_text(envelope.html))
    msg.add_alternative(envelope.html, subtype="html")
    return msg


class SmtpTransport:
    """Delivers envelopes over SMTP, one connection per message."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.SMTP_USE_SSL:
            return smtplib.SMTP_SSL(
                s.SMTP_HOST, s.SMTP_PORT, context=ssl.create_default_context(), timeout=s.SMTP_TIMEOUT
            )
        conn = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT)
        try:
            conn.ehlo()
            conn.starttls(context=ssl.create_default_context())
            conn.ehlo()
        except Exception:
            conn.close()
            raise
        return conn

    def send_sync(self, envelope: Envelope) -> None:
        msg = build_message(envelope)
        with self._connect() as conn:
            if self.settings.EMAIL_USER and self.settings.EMAIL_PASS:
                conn.login(self.settings.EMAIL_USER, self.settings.EMAIL_PASS)
            conn.send_message(msg)
        logger.debug("SMTP %s:%s accepted message for %s",
                     self.settings.SMTP_HOST, self.settings.SMTP_PORT, envelope.recipient)

    async def send(self, envelope: Envelope) -> None:
        await run_in_threadpool(self.send_sync, envelope)
