"""Local file sink — appends normalized errors to a flat text log.

Layout: one line-prefixed entry per error::

    [2026-10-19T08:00:00+00:00] Error log started.
    [2026-10-19T08:00:03+00:00] {
      "error": "boom",
      ...
    }

The file is created (or truncated) synchronously when the sink is built.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from trashcan.core.normalizer import render, timestamp
from trashcan.routing.sinks._worker import BackgroundWorker

logger = logging.getLogger(__name__)

START_MARKER = "Error log started."


class FileSink:
    """Appends every accepted error to *path*.

    Parameters
    ----------
    path:
        The log file.  Parent directories are created as needed.
    encoding:
        Text encoding for the log.  Defaults to UTF-8.
    """

    def __init__(self, path: Path | str, *, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(timestamp(START_MARKER) + "\n", encoding=encoding)
        self._worker = BackgroundWorker(self.sink_name)
        logger.debug("FileSink: started log at %s", self._path)

    @property
    def sink_name(self) -> str:
        return "local_file"

    @property
    def path(self) -> Path:
        return self._path

    def accept(self, error: Any) -> None:
        """Queue an append of the error's rendering; returns immediately."""
        entry = timestamp(render(error)) + "\n"
        self._worker.submit(self._append, entry)

    def __call__(self, error: Any) -> FileSink:
        self.accept(error)
        return self

    def _append(self, entry: str) -> None:
        with self._path.open("a", encoding=self._encoding) as handle:
            handle.write(entry)

    def flush(self, timeout: float | None = None) -> bool:
        return self._worker.flush(timeout)

    def close(self) -> None:
        self._worker.close()

    def __repr__(self) -> str:
        return f"FileSink({str(self._path)!r})"
