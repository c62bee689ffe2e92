"""Guarded callbacks — adapt error-first callbacks into the funnel.

``wrap(fn)`` returns a ``GuardedCallback`` that can be handed to any API
expecting an ``(error, *results)`` completion callback:

* a truthy ``error`` is raised into the funnel and ``fn`` is skipped;
* otherwise ``fn(*results)`` runs, and anything it raises is funneled
  instead of propagating to the caller.

``guarded.exec(*args)`` runs ``fn(*args)`` directly with the same capture,
for call sites that are not callback-shaped.
"""

from __future__ import annotations

import functools
import logging
import types
from typing import Any, Callable

logger = logging.getLogger(__name__)

RaiseFn = Callable[[Any], Any]

UNSET: Any = object()


class GuardedCallback:
    """Error-first callback wrapper produced by :func:`wrap`.

    Parameters
    ----------
    fn:
        The function to protect.
    raise_:
        Where captured errors go, normally ``Funnel.raise_``.
    context:
        Optional object ``fn`` is bound to (passed as its leading argument).
    owner:
        Reported as ``context`` when no explicit context was given.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        raise_: RaiseFn,
        context: Any = UNSET,
        *,
        owner: Any = None,
    ) -> None:
        if not callable(fn):
            raise TypeError(f"wrap() needs a callable, got {type(fn).__name__}")
        functools.update_wrapper(self, fn, updated=())
        self._fn = fn
        self._raise = raise_
        self._name = getattr(fn, "__qualname__", None) or repr(fn)
        if context is UNSET or context is None:
            self._call = fn
            self.context = owner
        else:
            self._call = types.MethodType(fn, context)
            self.context = context

    def __call__(self, error: Any = None, *args: Any, **kwargs: Any) -> Any:
        if error:
            self._raise(error)
            return None
        return self.exec(*args, **kwargs)

    def exec(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke the wrapped function directly, funneling anything it raises."""
        try:
            return self._call(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Captured %s from %s", type(exc).__name__, self._name)
            self._raise(exc)
            return None

    def __repr__(self) -> str:
        return f"<GuardedCallback {self._name}>"


def wrap(
    fn: Callable[..., Any],
    context: Any = UNSET,
    *,
    raise_: RaiseFn,
    owner: Any = None,
) -> GuardedCallback:
    """Return a guarded, error-first version of *fn*."""
    return GuardedCallback(fn, raise_, context, owner=owner)
