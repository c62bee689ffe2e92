"""Sink protocol for trashcan error routing.

Every sink has a ``sink_name``, an ``accept(error)`` method that schedules
its side effect, and is itself callable: ``sink(error)`` accepts the error
and returns the sink, so the same handle can be registered, invoked, and
re-registered freely.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every trashcan sink implements."""

    @property
    def sink_name(self) -> str:
        """Return the human-readable name of this sink."""
        ...

    def accept(self, error: Any) -> None:
        """Schedule the sink's side effect for *error*.

        Must not raise for I/O failures; those are logged by the sink.
        """
        ...

    def __call__(self, error: Any) -> BaseSink:
        ...

    def flush(self, timeout: float | None = None) -> bool:
        """Block until scheduled work finishes; ``False`` on timeout."""
        ...
