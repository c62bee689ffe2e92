"""Funnel — the one object an application routes all of its errors through.

Construct it once at the composition root, attach sinks, and hand it to
whatever needs to raise or wrap::

    funnel = Funnel()
    funnel.on("error", funnel.log("logs/errors.log"))
    funnel.on("error", funnel.notify("ops@example.com"))
    funnel.install_guard()

    client.fetch(url, funnel.wrap(handle_response))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Awaitable, Callable

from trashcan.config import FunnelSettings, load_mail_config
from trashcan.core.channel import ERROR_TOPIC, DispatchChannel, Listener
from trashcan.core.futures import AnyFuture, swear
from trashcan.core.guard import ProcessGuard, install_process_guard
from trashcan.core.normalizer import render
from trashcan.core.wrapper import UNSET, GuardedCallback, wrap
from trashcan.models.mail import MailTransportConfig
from trashcan.routing.sinks.email import EmailSink
from trashcan.routing.sinks.local_file import FileSink
from trashcan.routing.transport import MailTransport

logger = logging.getLogger(__name__)


class Funnel:
    """Facade over one ``DispatchChannel`` plus the built-in sink factories.

    Parameters
    ----------
    channel:
        The channel to publish on.  A fresh one is created when omitted.
    title:
        Fixed subject for email notifications.  May be changed at any time;
        email sinks read it on every send.
    """

    def __init__(
        self,
        channel: DispatchChannel | None = None,
        *,
        title: str | None = None,
    ) -> None:
        self.channel = channel if channel is not None else DispatchChannel()
        self.title = title

    @classmethod
    def from_settings(cls, settings: FunnelSettings | None = None) -> Funnel:
        """Build a funnel and attach the sinks named in *settings*."""
        settings = settings or FunnelSettings()
        funnel = cls(title=settings.title)
        if settings.log_path is not None:
            funnel.on(ERROR_TOPIC, funnel.log(settings.log_path))
        if settings.notify:
            config = load_mail_config(settings.mail_namespace)
            funnel.on(ERROR_TOPIC, funnel.notify(settings.notify, config))
        return funnel

    # ------------------------------------------------------------------
    # Channel operations
    # ------------------------------------------------------------------

    def on(self, topic: str, listener: Listener) -> Funnel:
        self.channel.subscribe(topic, listener)
        return self

    def off(self, topic: str, listener: Listener) -> Funnel:
        self.channel.unsubscribe(topic, listener)
        return self

    def emit(self, topic: str, *args: Any, **kwargs: Any) -> Funnel:
        self.channel.publish(topic, *args, **kwargs)
        return self

    def raise_(self, error: Any) -> Funnel:
        """Publish *error* to every ``"error"`` listener."""
        self.channel.raise_(error)
        return self

    @staticmethod
    def full(error: Any) -> str:
        """Return the normalized rendering sinks write for *error*."""
        return render(error)

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def wrap(self, fn: Callable[..., Any], context: Any = UNSET) -> GuardedCallback:
        """Return an error-first guarded callback around *fn*."""
        return wrap(fn, context, raise_=self.raise_, owner=self)

    def swear(
        self,
        awaitable: Awaitable[Any] | Any,
        success: Callable[[Any], Any] | None = None,
    ) -> AnyFuture:
        """Funnel the failure of a future, task or coroutine."""
        return swear(awaitable, success, raise_=self.raise_)

    def catch(self, emitter: Any) -> Funnel:
        """Forward *emitter*'s own ``"error"`` events into this funnel."""
        subscribe = getattr(emitter, "on", None)
        if not callable(subscribe):
            raise TypeError(
                f"catch() needs an emitter with an on() method, got {type(emitter).__name__}"
            )
        subscribe(ERROR_TOPIC, self.raise_)
        return self

    def install_guard(self) -> ProcessGuard:
        """Funnel uncaught exceptions process-wide (once per process)."""
        return install_process_guard(self.raise_)

    # ------------------------------------------------------------------
    # Sink factories
    # ------------------------------------------------------------------

    def log(self, path: Path | str) -> FileSink:
        """Start a log file at *path* and return a sink appending to it."""
        return FileSink(path)

    def notify(
        self,
        recipients: str | Iterable[str],
        config: MailTransportConfig | None = None,
        *,
        transport: MailTransport | None = None,
    ) -> EmailSink:
        """Return a sink that emails every error to *recipients*."""
        return EmailSink(
            recipients,
            config,
            transport=transport,
            title=lambda: self.title,
        )
