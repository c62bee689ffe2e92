"""Process guard — funnels uncaught exceptions before the process dies.

The guard chains onto ``sys.excepthook`` and ``threading.excepthook``: the
exception is raised into the funnel first, then handed to the hook that was
there before, so the interpreter still prints the traceback and exits as it
would have.  It is installed explicitly by the application, at most once
per process.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from types import TracebackType
from typing import Any

from trashcan.core.wrapper import RaiseFn

logger = logging.getLogger(__name__)

_active_guard: ProcessGuard | None = None
_install_lock = threading.Lock()


class ProcessGuard:
    """Holds the installed hooks and the ones they replaced."""

    def __init__(self, raise_: RaiseFn) -> None:
        self._raise = raise_
        self._previous_excepthook: Any = None
        self._previous_threading_hook: Any = None
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def _funnel(self, exc: BaseException | None) -> None:
        if exc is None or isinstance(exc, KeyboardInterrupt):
            return
        try:
            self._raise(exc)
        except Exception:  # noqa: BLE001
            logger.exception("Process guard could not funnel %r", exc)

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        self._funnel(exc)
        previous = self._previous_excepthook or sys.__excepthook__
        previous(exc_type, exc, tb)

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        self._funnel(args.exc_value)
        previous = self._previous_threading_hook or threading.__excepthook__
        previous(args)

    def _loop_exception_handler(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        self._funnel(context.get("exception") or RuntimeError(context.get("message", "")))
        loop.default_exception_handler(context)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def install(self) -> ProcessGuard:
        if self._installed:
            return self
        self._previous_excepthook = sys.excepthook
        self._previous_threading_hook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook
        self._installed = True
        logger.info("Process guard installed.")
        return self

    def uninstall(self) -> None:
        """Restore the hooks that were active before ``install``."""
        global _active_guard
        if not self._installed:
            return
        if sys.excepthook == self._excepthook:
            sys.excepthook = self._previous_excepthook or sys.__excepthook__
        if threading.excepthook == self._threading_excepthook:
            threading.excepthook = self._previous_threading_hook or threading.__excepthook__
        self._installed = False
        with _install_lock:
            if _active_guard is self:
                _active_guard = None
        logger.info("Process guard uninstalled.")

    def watch_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Funnel errors an asyncio loop reports to its exception handler.

        This covers tasks that fail without anyone awaiting them.
        """
        loop.set_exception_handler(self._loop_exception_handler)


def install_process_guard(raise_: RaiseFn) -> ProcessGuard:
    """Install the process guard once; later calls return the same guard."""
    global _active_guard
    with _install_lock:
        if _active_guard is not None:
            if _active_guard._raise != raise_:
                logger.warning(
                    "Process guard already installed for another funnel; "
                    "uncaught exceptions keep going to the first one."
                )
            else:
                logger.debug("Process guard already installed; reusing it.")
            return _active_guard
        _active_guard = ProcessGuard(raise_).install()
        return _active_guard


def active_guard() -> ProcessGuard | None:
    """Return the installed guard, if any."""
    return _active_guard
