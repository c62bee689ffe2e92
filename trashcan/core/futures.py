"""Bridge failed futures and coroutines into the funnel.

``swear`` attaches a completion callback: an exception goes to ``raise_``,
a result goes to the optional ``success`` callback (itself guarded).
Cancelled futures are ignored.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from typing import Any, Awaitable, Callable, Union

from trashcan.core.wrapper import GuardedCallback, RaiseFn

AnyFuture = Union["asyncio.Future[Any]", "concurrent.futures.Future[Any]"]


def swear(
    awaitable: Awaitable[Any] | concurrent.futures.Future[Any],
    success: Callable[[Any], Any] | None = None,
    *,
    raise_: RaiseFn,
) -> AnyFuture:
    """Route the outcome of *awaitable* into the funnel.

    Coroutines are scheduled on the running event loop; calling ``swear``
    with a bare coroutine outside one raises ``RuntimeError``.  Returns the
    future the callback was attached to.
    """
    if isinstance(awaitable, concurrent.futures.Future):
        future: AnyFuture = awaitable
    elif inspect.iscoroutine(awaitable):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            awaitable.close()
            raise
        future = loop.create_task(awaitable)
    elif inspect.isawaitable(awaitable):
        future = asyncio.ensure_future(awaitable)
    else:
        raise TypeError(
            f"swear() needs a future or awaitable, got {type(awaitable).__name__}"
        )

    on_success = GuardedCallback(success, raise_) if success is not None else None

    def _settled(done: AnyFuture) -> None:
        if done.cancelled():
            return
        exc = done.exception()
        if exc is not None:
            raise_(exc)
        elif on_success is not None:
            on_success.exec(done.result())

    future.add_done_callback(_settled)
    return future
