"""Run a cleanup function when its owner is finished with it."""

from __future__ import annotations

import weakref
from typing import Any, Callable

__all__ = ["Finally", "SharedFinally", "make_finally", "make_shared_finally"]


def _noop() -> None:
    pass


class Finally:
    """Calls func exactly once: on run(), on leaving a with block, or when dropped.

    Ownership of the pending call can be moved to a new object with transfer().
    """

    def __init__(self, func: Callable[[], Any]) -> None:
        self._finalizer = weakref.finalize(self, func)

    def run(self) -> None:
        """Call the function now if it has not already been called or transferred."""
        self._finalizer()

    def transfer(self) -> Finally:
        """Return a new Finally that owns the pending call; this one becomes inert."""
        detached = self._finalizer.detach()
        if detached is None:
            return Finally(_noop)
        _, func, _, _ = detached
        return Finally(func)

    def __enter__(self) -> Finally:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.run()


class SharedFinally:
    """Calls func once the last reference to this object is dropped."""

    def __init__(self, func: Callable[[], Any]) -> None:
        self._finalizer = weakref.finalize(self, func)


def make_finally(func: Callable[[], Any]) -> Finally:
    """Return a Finally that will call func."""
    return Finally(func)


def make_shared_finally(func: Callable[[], Any]) -> SharedFinally:
    """Return a SharedFinally that will call func when no longer referenced."""
    return SharedFinally(func)