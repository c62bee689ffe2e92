"""Unit tests for the SMTP mail transport (smtplib is mocked)."""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from trashcan.models.mail import EmailMessage, MailAuth, MailTransportConfig
from trashcan.routing.transport import (
    MailTransport,
    SmtpTransport,
    TransportError,
    create_transport,
    to_mime,
)


def _message() -> EmailMessage:
    return EmailMessage(
        to=["a@x.com", "b@x.com"],
        sender="alerts@x.com",
        subject="boom",
        text="plain body",
        html="<code><pre>plain body</pre></code>",
    )


class TestMime:
    def test_headers(self):
        mime = to_mime(_message())
        assert mime["Subject"] == "boom"
        assert mime["From"] == "alerts@x.com"
        assert mime["To"] == "a@x.com, b@x.com"

    def test_text_and_html_alternatives(self):
        mime = to_mime(_message())
        assert mime.is_multipart()
        types = [part.get_content_type() for part in mime.iter_parts()]
        assert types == ["text/plain", "text/html"]

    def test_text_only_when_no_html(self):
        message = _message().model_copy(update={"html": ""})
        assert not to_mime(message).is_multipart()


class TestEmailMessageModel:
    def test_from_alias(self):
        message = EmailMessage.model_validate(
            {"to": ["a@x.com"], "from": "s@x.com", "subject": "s", "text": "t"}
        )
        assert message.sender == "s@x.com"
        assert message.model_dump(by_alias=True)["from"] == "s@x.com"


class TestSmtpTransport:
    def test_plain_connection_with_login(self):
        config = MailTransportConfig(
            host="smtp.x.com", auth=MailAuth(user="alerts@x.com", password="pw")
        )
        with patch("trashcan.routing.transport.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            SmtpTransport(config).send_mail(_message())

        smtp_cls.assert_called_once_with("smtp.x.com", 587, timeout=30.0)
        server.login.assert_called_once_with("alerts@x.com", "pw")
        server.send_message.assert_called_once()
        smtp_cls.return_value.starttls.assert_not_called()

    def test_secure_uses_ssl_default_port(self):
        config = MailTransportConfig(host="smtp.x.com", secure=True)
        with patch("trashcan.routing.transport.smtplib.SMTP_SSL") as ssl_cls:
            server = ssl_cls.return_value.__enter__.return_value
            SmtpTransport(config).send_mail(_message())

        args, kwargs = ssl_cls.call_args
        assert args == ("smtp.x.com", 465)
        server.login.assert_not_called()
        server.send_message.assert_called_once()

    def test_starttls_upgrade(self):
        config = MailTransportConfig(host="smtp.x.com", port=2525, starttls=True)
        with patch("trashcan.routing.transport.smtplib.SMTP") as smtp_cls:
            SmtpTransport(config).send_mail(_message())

        smtp_cls.assert_called_once_with("smtp.x.com", 2525, timeout=30.0)
        smtp_cls.return_value.starttls.assert_called_once()

    def test_smtp_failure_wrapped(self):
        config = MailTransportConfig(host="smtp.x.com")
        failing = MagicMock(side_effect=smtplib.SMTPConnectError(421, b"busy"))
        with patch("trashcan.routing.transport.smtplib.SMTP", failing):
            with pytest.raises(TransportError, match="smtp.x.com:587"):
                SmtpTransport(config).send_mail(_message())

    def test_create_transport(self):
        transport = create_transport(MailTransportConfig())
        assert isinstance(transport, SmtpTransport)
        assert isinstance(transport, MailTransport)
