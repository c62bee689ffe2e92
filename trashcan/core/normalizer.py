"""Error normalization — turns any error value into stable text.

Exceptions are rendered as a listing (type, message, formatted traceback);
every other value is coerced with ``str()``.  The result is the same for a
given value no matter which sink asks for it.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any

from trashcan.models.report import ErrorReport


def qualified_name(exc: BaseException) -> str:
    cls = type(exc)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def normalize(error: Any) -> ErrorReport:
    """Build an ``ErrorReport`` for *error* without mutating it."""
    if isinstance(error, BaseException):
        lines: list[str] = []
        if error.__traceback__ is not None:
            lines = [
                line.rstrip("\n")
                for line in traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            ]
        return ErrorReport(
            error=str(error),
            error_type=qualified_name(error),
            traceback=lines,
        )
    return ErrorReport(error=str(error))


def render(error: Any) -> str:
    """Return the normalized rendering of *error*."""
    return normalize(error).render()


def single_line(text: str) -> str:
    """Collapse *text* onto one line, as mail headers require."""
    return " ".join(part.strip() for part in text.splitlines() if part.strip())


def describe(error: Any) -> str:
    """Short one-line description, used as a default email subject."""
    text = single_line(str(error))
    if text:
        return text
    if isinstance(error, BaseException):
        return qualified_name(error)
    return repr(error)


def timestamp(message: str, *, now: datetime | None = None) -> str:
    """Prefix *message* with an ISO-8601 UTC timestamp in brackets."""
    moment = now or datetime.now(timezone.utc)
    return f"[{moment.isoformat()}] {message}"
