"""Shared test fixtures for trashcan."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from trashcan.core import guard as guard_module
from trashcan.funnel import Funnel
from trashcan.models.mail import EmailMessage, MailAuth, MailTransportConfig


class RecordingTransport:
    """A mail transport that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    def send_mail(self, message: EmailMessage) -> None:
        self.sent.append(message)


class FailingTransport:
    """A mail transport whose every send fails."""

    def __init__(self) -> None:
        self.attempts = 0

    def send_mail(self, message: EmailMessage) -> None:
        self.attempts += 1
        raise ConnectionRefusedError("mail server down")


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def funnel() -> Funnel:
    """Provide a fresh funnel with its own channel."""
    return Funnel()


@pytest.fixture
def received(funnel: Funnel) -> list[Any]:
    """Collect everything published on the funnel's ``"error"`` topic."""
    collected: list[Any] = []
    funnel.on("error", collected.append)
    return collected


@pytest.fixture
def mail_config() -> MailTransportConfig:
    """Provide a mail config with a sender account."""
    return MailTransportConfig(
        host="smtp.test.invalid",
        auth=MailAuth(user="alerts@test.invalid", password="secret"),
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def failing_transport() -> FailingTransport:
    return FailingTransport()


@pytest.fixture
def clean_guard():
    """Make sure no process guard leaks between tests."""
    existing = guard_module.active_guard()
    if existing is not None:
        existing.uninstall()
    yield
    leftover = guard_module.active_guard()
    if leftover is not None:
        leftover.uninstall()
