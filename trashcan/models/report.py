"""Normalized error report — the stable textual form every sink writes."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ErrorReport(BaseModel):
    """Immutable, sink-agnostic view of an arbitrary error value.

    ``error_type`` and ``traceback`` are only populated for exceptions;
    plain values (strings, numbers, dicts) carry just their ``str()`` form.
    """

    model_config = ConfigDict(frozen=True)

    error: str
    error_type: str | None = None
    traceback: list[str] = []

    def render(self) -> str:
        """Return the indented JSON listing used by file and email sinks."""
        return self.model_dump_json(indent=2)
