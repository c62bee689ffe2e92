"""Single-worker background executor shared by the built-in sinks.

Work submitted to one ``BackgroundWorker`` runs in submission order on a
single thread.  Failures are logged and otherwise dropped; callers only
learn about completion through ``flush``.
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


class BackgroundWorker:
    """Serial fire-and-forget executor with completion tracking."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"trashcan-{name}"
        )
        self._pending: set[concurrent.futures.Future[Any]] = set()
        self._lock = threading.Lock()

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, fn: Callable[..., Any], *args: Any) -> concurrent.futures.Future[Any]:
        future = self._executor.submit(fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._settled)
        return future

    def _settled(self, future: concurrent.futures.Future[Any]) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("%s sink: background write failed: %s", self._name, exc)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for everything submitted so far; ``False`` if *timeout* hit."""
        with self._lock:
            waiting = list(self._pending)
        if not waiting:
            return True
        _, not_done = concurrent.futures.wait(waiting, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Drain queued work and stop the worker thread."""
        self._executor.shutdown(wait=True)
