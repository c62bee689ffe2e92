"""DispatchChannel — a synchronous publish/subscribe bus for errors.

Every publish fans out to ALL listeners registered for the topic at the
moment the publish starts.  A failing listener is logged and skipped; it
never stops delivery to the listeners after it and never propagates out of
``publish``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

ERROR_TOPIC = "error"

Listener = Callable[..., Any]


def _listener_name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class DispatchChannel:
    """Topic-keyed listener registry with ordered, isolated delivery.

    ``"error"`` is the reserved primary topic; any other string is a user
    topic with identical semantics.

    Usage
    -----
    >>> channel = DispatchChannel()
    >>> seen = []
    >>> _ = channel.subscribe("error", seen.append)
    >>> _ = channel.raise_("boom")
    >>> seen
    ['boom']
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def subscribe(self, topic: str, listener: Listener) -> DispatchChannel:
        """Register *listener* under *topic*.

        Listeners fire in registration order.  Registering the same
        callable twice makes it fire twice per publish.
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        self._listeners.setdefault(topic, []).append(listener)
        logger.debug("Subscribed %s to %r", _listener_name(listener), topic)
        return self

    def unsubscribe(self, topic: str, listener: Listener) -> DispatchChannel:
        """Remove the earliest registration of *listener* under *topic*."""
        registered = self._listeners.get(topic)
        if not registered:
            return self
        try:
            registered.remove(listener)
        except ValueError:
            return self
        if not registered:
            del self._listeners[topic]
        logger.debug("Unsubscribed %s from %r", _listener_name(listener), topic)
        return self

    on = subscribe
    off = unsubscribe

    def listeners(self, topic: str) -> list[Listener]:
        """Return a copy of the listeners registered for *topic*."""
        return list(self._listeners.get(topic, ()))

    def topics(self) -> list[str]:
        """Return every topic that currently has at least one listener."""
        return list(self._listeners)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def publish(self, topic: str, *args: Any, **kwargs: Any) -> DispatchChannel:
        """Invoke every listener for *topic* with the given arguments.

        The listener list is snapshotted first: listeners added during this
        call do not fire for it, and listeners removed during it still do.
        """
        for listener in list(self._listeners.get(topic, ())):
            try:
                listener(*args, **kwargs)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Listener %s failed on topic %r", _listener_name(listener), topic
                )
        return self

    def raise_(self, error: Any) -> DispatchChannel:
        """Publish *error* on the reserved ``"error"`` topic."""
        return self.publish(ERROR_TOPIC, error)
