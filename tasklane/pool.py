"""Pools of reusable items handed out as reference-counted loans."""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable, Generic, Optional, TypeVar

from .debug import check

__all__ = ["PoolPolicy", "Loan", "BoundedPool", "UnboundedPool"]

T = TypeVar("T")

# Number of items an unbounded pool allocates at least when it runs dry.
_MIN_GROWTH = 32


class PoolPolicy(enum.Enum):
    """Whether items are rebuilt for every loan or keep their state."""

    RECONSTRUCT = "reconstruct"
    """Build a fresh item on borrow and discard it when returned."""

    PRESERVE = "preserve"
    """Build each item once; items keep their state between loans."""


class _Item:
    __slots__ = ("data", "refcount")

    def __init__(self) -> None:
        self.data: Any = None
        self.refcount = 0


class _Storage:
    """State shared between a pool and every loan taken from it."""

    def __init__(self, factory: Callable[[], Any], policy: PoolPolicy) -> None:
        self.factory = factory
        self.policy = policy
        # Reentrant, so a loan dropped while the pool is busy cannot deadlock.
        self.cond = threading.Condition(threading.RLock())
        self.free: list[_Item] = []

    def new_item(self) -> _Item:
        item = _Item()
        if self.policy is PoolPolicy.PRESERVE:
            item.data = self.factory()
        return item

    def lend(self, item: _Item) -> Loan:
        if self.policy is PoolPolicy.RECONSTRUCT:
            item.data = self.factory()
        return Loan._adopt(item, self)

    def return_(self, item: _Item) -> None:
        if self.policy is PoolPolicy.RECONSTRUCT:
            item.data = None
        with self.cond:
            self.free.append(item)
            self.cond.notify()


class Loan(Generic[T]):
    """A reference to an item borrowed from a pool.

    The item goes back to its pool when the last loan referring to it is
    reset, leaves a with block, or is dropped. An empty loan holds nothing.
    """

    def __init__(self) -> None:
        self._item: Optional[_Item] = None
        self._storage: Optional[_Storage] = None

    @classmethod
    def _adopt(cls, item: _Item, storage: _Storage) -> Loan:
        loan = cls()
        with storage.cond:
            item.refcount += 1
        loan._item = item
        loan._storage = storage
        return loan

    def get(self) -> Optional[T]:
        """Return the borrowed item, or None if this loan is empty."""
        return None if self._item is None else self._item.data

    def share(self) -> Loan:
        """Return another loan of the same item, keeping it borrowed."""
        if self._item is None or self._storage is None:
            return Loan()
        return Loan._adopt(self._item, self._storage)

    def reset(self) -> None:
        """Drop this reference; the item is returned when none remain."""
        item, storage = self._item, self._storage
        if item is None or storage is None:
            return
        self._item = None
        self._storage = None
        with storage.cond:
            item.refcount -= 1
            refs = item.refcount
        check(refs >= 0, "reset() called on zero-ref pool item")
        if refs == 0:
            storage.return_(item)

    def __bool__(self) -> bool:
        return self._item is not None

    def __enter__(self) -> Loan:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.reset()

    def __del__(self) -> None:
        if getattr(self, "_item", None) is not None:
            self.reset()


class BoundedPool(Generic[T]):
    """A pool holding at most capacity items made by factory."""

    def __init__(
        self,
        factory: Callable[[], T],
        capacity: int,
        policy: PoolPolicy = PoolPolicy.RECONSTRUCT,
    ) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._storage = _Storage(factory, policy)
        self._storage.free.extend(self._storage.new_item() for _ in range(capacity))

    def borrow(self) -> Loan:
        """Borrow one item, blocking until one is free."""
        loans: list[Loan] = []
        self.borrow_many(1, loans.append)
        return loans[0]

    def borrow_many(self, count: int, func: Callable[[Loan], Any]) -> None:
        """Borrow count items one at a time, calling func with each loan.

        Blocks whenever the pool is empty until an item is returned.
        """
        if count < 0:
            raise ValueError("count must not be negative")
        storage = self._storage
        with storage.cond:
            for _ in range(count):
                storage.cond.wait_for(lambda: bool(storage.free))
                item = storage.free.pop()
                func(storage.lend(item))

    def try_borrow(self) -> Optional[Loan]:
        """Borrow one item without blocking; None if the pool is empty."""
        storage = self._storage
        with storage.cond:
            if not storage.free:
                return None
            item = storage.free.pop()
        return storage.lend(item)


class UnboundedPool(Generic[T]):
    """A pool of items made by factory that grows whenever it runs dry."""

    def __init__(
        self,
        factory: Callable[[], T],
        policy: PoolPolicy = PoolPolicy.RECONSTRUCT,
    ) -> None:
        self._storage = _Storage(factory, policy)
        self._items: list[_Item] = []

    @property
    def size(self) -> int:
        """The number of items the pool has allocated so far."""
        return len(self._items)

    def borrow(self) -> Loan:
        """Borrow one item, allocating more if needed. Never blocks."""
        loans: list[Loan] = []
        self.borrow_many(1, loans.append)
        return loans[0]

    def borrow_many(self, count: int, func: Callable[[Loan], Any]) -> None:
        """Borrow count items, calling func with each loan. Never blocks."""
        if count < 0:
            raise ValueError("count must not be negative")
        storage = self._storage
        with storage.cond:
            for _ in range(count):
                if not storage.free:
                    growth = max(len(self._items), _MIN_GROWTH)
                    for _ in range(growth):
                        item = storage.new_item()
                        self._items.append(item)
                        storage.free.append(item)
                item = storage.free.pop()
                func(storage.lend(item))