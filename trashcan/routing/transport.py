"""Mail transport — delivers ``EmailMessage`` payloads over SMTP.

``create_transport(config)`` is the single construction point, so an
application (or a test) can substitute any object with a
``send_mail(message)`` method.
"""

from __future__ import annotations

import email.message
import logging
import smtplib
import ssl
from typing import Protocol, runtime_checkable

from trashcan.models.mail import EmailMessage, MailTransportConfig

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when the mail server rejects or cannot accept a message."""


@runtime_checkable
class MailTransport(Protocol):
    """Anything that can deliver an ``EmailMessage``."""

    def send_mail(self, message: EmailMessage) -> None:
        ...


def to_mime(message: EmailMessage) -> email.message.EmailMessage:
    """Build a multipart/alternative MIME message (text + optional HTML)."""
    mime = email.message.EmailMessage()
    mime["Subject"] = message.subject
    mime["From"] = message.sender
    mime["To"] = ", ".join(message.to)
    mime.set_content(message.text)
    if message.html:
        mime.add_alternative(message.html, subtype="html")
    return mime


class SmtpTransport:
    """Sends each message over a fresh SMTP connection.

    Parameters
    ----------
    config:
        Host, port, TLS mode and credentials.  ``secure`` selects implicit
        TLS (``SMTP_SSL``); ``starttls`` upgrades a plain connection.
    """

    def __init__(self, config: MailTransportConfig) -> None:
        self._config = config

    @property
    def config(self) -> MailTransportConfig:
        return self._config

    def _connect(self) -> smtplib.SMTP:
        cfg = self._config
        if cfg.secure:
            return smtplib.SMTP_SSL(
                cfg.host,
                cfg.effective_port,
                timeout=cfg.timeout,
                context=ssl.create_default_context(),
            )
        server = smtplib.SMTP(cfg.host, cfg.effective_port, timeout=cfg.timeout)
        if cfg.starttls:
            server.starttls(context=ssl.create_default_context())
        return server

    def send_mail(self, message: EmailMessage) -> None:
        auth = self._config.auth
        try:
            with self._connect() as server:
                if auth.user and auth.password:
                    server.login(auth.user, auth.password)
                server.send_message(to_mime(message))
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(
                f"SMTP delivery to {', '.join(message.to)} via "
                f"{self._config.host}:{self._config.effective_port} failed: {exc}"
            ) from exc
        logger.info("Sent error notification to %s", message.to)


def create_transport(config: MailTransportConfig) -> MailTransport:
    """Return the transport for *config* (currently always SMTP)."""
    return SmtpTransport(config)
