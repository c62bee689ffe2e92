"""Runtime configuration — env-driven via pydantic-settings.

Two settings groups are loaded independently:

* ``FunnelSettings`` — funnel-wide options under ``TRASHCAN_*``.
* ``MailSettings`` — mail transport options under a namespace prefix
  (``MAIL_*`` by default), with ``__`` separating nested keys::

      export MAIL_HOST=smtp.example.com
      export MAIL_SECURE=true
      export MAIL_AUTH__USER=alerts@example.com
      export MAIL_AUTH__PASSWORD=hunter2

Both also read a ``.env`` file in the working directory.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from trashcan.models.mail import MailAuth, MailTransportConfig

DEFAULT_MAIL_NAMESPACE = "mail"


class MailConfigError(ValueError):
    """Raised when the mail configuration cannot identify a sending account."""


class FunnelSettings(BaseSettings):
    """Funnel-wide settings with ``TRASHCAN_*`` environment overrides.

    ``notify`` is a JSON list in the environment, e.g.
    ``TRASHCAN_NOTIFY='["ops@example.com"]'``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TRASHCAN_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    title: str | None = None
    log_level: str = "INFO"
    log_path: Path | None = None
    notify: list[str] = []
    mail_namespace: str = DEFAULT_MAIL_NAMESPACE


class MailSettings(BaseSettings):
    """Mail transport settings; the env prefix is chosen per namespace."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MAIL_",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "localhost"
    port: int | None = None
    secure: bool = False
    starttls: bool = False
    timeout: float = 30.0
    auth: MailAuth = MailAuth()


def load_mail_config(namespace: str = DEFAULT_MAIL_NAMESPACE) -> MailTransportConfig:
    """Resolve the mail transport configuration for *namespace*.

    The namespace becomes the environment prefix, so ``"mail"`` reads
    ``MAIL_*`` and ``"alerts"`` reads ``ALERTS_*``.
    """
    settings = MailSettings(_env_prefix=f"{namespace.upper()}_")
    return MailTransportConfig.model_validate(settings.model_dump())


def require_sender(config: MailTransportConfig) -> str:
    """Return the configured sender address or raise ``MailConfigError``."""
    if not config.auth.user:
        raise MailConfigError(
            "Mail configuration has no auth.user; cannot determine the sender. "
            "Set MAIL_AUTH__USER or pass an explicit config."
        )
    return config.auth.user
