"""Mail transport configuration and outgoing message models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MailAuth(BaseModel):
    """Credentials for the sending account.

    ``user`` doubles as the ``From`` address of every notification.
    """

    model_config = ConfigDict(frozen=True)

    user: str = ""
    password: str = ""


class MailTransportConfig(BaseModel):
    """Connection settings for the outgoing mail transport."""

    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int | None = None  # None → 465 when secure, else 587
    secure: bool = False  # implicit TLS (SMTP over SSL)
    starttls: bool = False
    timeout: float = 30.0
    auth: MailAuth = MailAuth()

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return 465 if self.secure else 587


class EmailMessage(BaseModel):
    """A single error notification, ready for ``MailTransport.send_mail``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: list[str]
    sender: str = Field(alias="from")
    subject: str
    text: str
    html: str = ""
