"""A mutex and a scoped lock with condition-variable wait helpers."""

from __future__ import annotations

import threading
import time
from typing import Callable

__all__ = ["Mutex", "ScopedLock"]


def _remaining(deadline: float) -> float:
    return max(0.0, deadline - time.monotonic())


class Mutex:
    """A non-reentrant mutual exclusion lock.

    Condition variables used with the wait helpers must be created with
    condition(), so that they share this mutex's lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def lock(self) -> None:
        """Block until the mutex is acquired."""
        self._lock.acquire()

    def unlock(self) -> None:
        """Release the mutex; RuntimeError if it is not held."""
        self._lock.release()

    def try_lock(self) -> bool:
        """Acquire the mutex without blocking; return whether it was acquired."""
        return self._lock.acquire(blocking=False)

    def condition(self) -> threading.Condition:
        """Return a new condition variable bound to this mutex."""
        return threading.Condition(self._lock)

    def wait_locked(self, cv: threading.Condition, predicate: Callable[[], bool]) -> None:
        """Wait on cv until predicate holds. The mutex must already be held."""
        cv.wait_for(predicate)

    def wait_until_locked(
        self,
        cv: threading.Condition,
        deadline: float,
        predicate: Callable[[], bool],
    ) -> bool:
        """Wait on cv until predicate holds or the monotonic deadline passes.

        The mutex must already be held. Returns the final value of predicate.
        """
        return bool(cv.wait_for(predicate, timeout=_remaining(deadline)))

    def __enter__(self) -> Mutex:
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()


class ScopedLock:
    """Acquires a Mutex on construction and releases it on leaving a with block."""

    def __init__(self, mutex: Mutex) -> None:
        self._mutex = mutex
        mutex.lock()
        self._owned = True

    def wait(self, cv: threading.Condition, predicate: Callable[[], bool]) -> None:
        """Wait on cv until predicate holds."""
        cv.wait_for(predicate)

    def wait_until(
        self,
        cv: threading.Condition,
        deadline: float,
        predicate: Callable[[], bool],
    ) -> bool:
        """Wait on cv until predicate holds or the monotonic deadline passes."""
        return bool(cv.wait_for(predicate, timeout=_remaining(deadline)))

    def owns_lock(self) -> bool:
        """Return whether this scoped lock currently holds the mutex."""
        return self._owned

    def lock_no_tsa(self) -> None:
        """Re-acquire the mutex."""
        self._mutex.lock()
        self._owned = True

    def unlock_no_tsa(self) -> None:
        """Release the mutex early."""
        self._mutex.unlock()
        self._owned = False

    def __enter__(self) -> ScopedLock:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._owned:
            self.unlock_no_tsa()