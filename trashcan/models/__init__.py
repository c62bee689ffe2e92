"""trashcan data models — all Pydantic v2, all frozen (immutable)."""

from trashcan.models.mail import EmailMessage, MailAuth, MailTransportConfig
from trashcan.models.report import ErrorReport

__all__ = [
    # mail
    "EmailMessage",
    "MailAuth",
    "MailTransportConfig",
    # report
    "ErrorReport",
]
