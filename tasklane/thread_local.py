"""A per-thread value with a common initial value."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

__all__ = ["ThreadLocal"]

T = TypeVar("T")


class ThreadLocal(Generic[T]):
    """Holds a separate value for each thread, starting at the initial value."""

    def __init__(self, initial: T | None = None) -> None:
        self._initial = initial
        self._local = threading.local()

    @property
    def value(self) -> T | None:
        """The value for the calling thread."""
        return getattr(self._local, "value", self._initial)

    @value.setter
    def value(self, new: T | None) -> None:
        self._local.value = new

    @value.deleter
    def value(self) -> None:
        self._local.__dict__.pop("value", None)