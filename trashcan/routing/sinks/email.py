"""Email notification sink — mails every accepted error.

The transport is built once, when the sink is created, and reused for
every notification.  Sending happens on the sink's background worker; a
failed send is logged and never reaches the code that raised the error.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable
from typing import Any, Callable, Optional

from trashcan.config import DEFAULT_MAIL_NAMESPACE, load_mail_config, require_sender
from trashcan.core.normalizer import describe, render, single_line
from trashcan.models.mail import EmailMessage, MailTransportConfig
from trashcan.routing.sinks._worker import BackgroundWorker
from trashcan.routing.transport import MailTransport, create_transport

logger = logging.getLogger(__name__)

TitleSource = Callable[[], Optional[str]]


def normalize_recipients(recipients: str | Iterable[str]) -> list[str]:
    """Return *recipients* as a non-empty list, preserving order."""
    if isinstance(recipients, str):
        return [recipients]
    addresses = list(recipients)
    if not addresses:
        raise ValueError("EmailSink needs at least one recipient")
    return addresses


class EmailSink:
    """Sends one email per accepted error.

    Parameters
    ----------
    recipients:
        One address or an ordered collection of addresses.
    config:
        Transport configuration.  Loaded from the ``mail`` namespace when
        omitted.
    transport:
        Pre-built transport; ``create_transport(config)`` is used otherwise.
    title:
        Zero-argument callable returning a fixed subject, or ``None`` to use
        the error's own description.  Read on every send.
    """

    def __init__(
        self,
        recipients: str | Iterable[str],
        config: MailTransportConfig | None = None,
        *,
        transport: MailTransport | None = None,
        title: TitleSource | None = None,
    ) -> None:
        self._recipients = normalize_recipients(recipients)
        self._config = config if config is not None else load_mail_config(DEFAULT_MAIL_NAMESPACE)
        self._sender = require_sender(self._config)
        self._transport = transport if transport is not None else create_transport(self._config)
        self._title = title
        self._worker = BackgroundWorker(self.sink_name)

    @property
    def sink_name(self) -> str:
        return "email"

    @property
    def recipients(self) -> list[str]:
        return list(self._recipients)

    @property
    def transport(self) -> MailTransport:
        return self._transport

    def build_message(self, error: Any) -> EmailMessage:
        """Build the notification for *error* without sending it."""
        rendering = render(error)
        title = self._title() if self._title is not None else None
        if title:
            title = single_line(title)
        return EmailMessage(
            to=list(self._recipients),
            sender=self._sender,
            subject=title or describe(error),
            text=rendering,
            html=self._format_html(rendering),
        )

    def accept(self, error: Any) -> None:
        """Queue one notification email for *error*."""
        message = self.build_message(error)
        self._worker.submit(self._transport.send_mail, message)
        logger.debug("EmailSink: queued notification to %s", self._recipients)

    def __call__(self, error: Any) -> EmailSink:
        self.accept(error)
        return self

    def flush(self, timeout: float | None = None) -> bool:
        return self._worker.flush(timeout)

    def close(self) -> None:
        self._worker.close()

    @staticmethod
    def _format_html(rendering: str) -> str:
        return f"<code><pre>{html.escape(rendering, quote=False)}</pre></code>"
