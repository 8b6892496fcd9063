"""Tickets: serialise work in the order the tickets were taken from a queue."""

from __future__ import annotations

import collections
import threading
import weakref
from typing import Any, Callable, Optional

__all__ = ["Ticket", "TicketQueue"]

OnCall = Callable[[], Any]


def _run_inline(func: OnCall) -> None:
    func()


def _joined(first: OnCall, second: OnCall) -> OnCall:
    def call_both() -> None:
        first()
        second()

    return call_both


class _Record:
    """One node of the doubly linked list of tickets; guarded by the shared lock."""

    __slots__ = ("next", "prev", "on_call", "is_called", "is_done")

    def __init__(self) -> None:
        self.next: Optional[_Record] = None
        self.prev: Optional[_Record] = None
        self.on_call: Optional[OnCall] = None
        self.is_called = False
        self.is_done = False


class _Shared:
    """State shared between a queue and all of its tickets."""

    def __init__(self, schedule: Callable[[OnCall], Any]) -> None:
        # Reentrant, so a ticket finalised while the lock is held cannot deadlock.
        self.cond = threading.Condition(threading.RLock())
        self.tail = _Record()
        self.schedule = schedule

    def call(self, record: _Record) -> Optional[OnCall]:
        """Mark record as called and return its pending callback. Lock must be held."""
        if record.is_called:
            return None
        record.is_called = True
        callback, record.on_call = record.on_call, None
        self.cond.notify_all()
        return callback

    def finish(self, record: _Record) -> None:
        with self.cond:
            if record.is_done:
                return
            record.is_done = True
            call_next = record.next if record.prev is None else None
            if record.prev is not None:
                record.prev.next = record.next
            if record.next is not None:
                record.next.prev = record.prev
            record.prev = None
            record.next = None
            callback = self.call(call_next) if call_next is not None else None
        if callback is not None:
            self.schedule(callback)


class Ticket:
    """A place in a TicketQueue.

    A ticket is either waiting, called or finished. The first ticket taken from
    an idle queue is called at once; each later ticket is called once every
    ticket before it is finished. Dropping the last reference to an unfinished
    ticket finishes it.
    """

    def __init__(self, shared: _Shared, record: _Record) -> None:
        self._shared = shared
        self._record = record
        self._finalizer = weakref.finalize(self, shared.finish, record)
        self._finalizer.atexit = False

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the ticket is called; return False if timeout ran out first."""
        with self._shared.cond:
            return bool(
                self._shared.cond.wait_for(lambda: self._record.is_called, timeout)
            )

    def done(self) -> None:
        """Finish this ticket, calling the next one if all before it are finished."""
        self._shared.finish(self._record)

    def on_call(self, func: OnCall) -> None:
        """Have func scheduled when this ticket is called, or now if it already is."""
        record = self._record
        with self._shared.cond:
            run_now = record.is_called
            if not run_now:
                record.on_call = (
                    func if record.on_call is None else _joined(record.on_call, func)
                )
        if run_now:
            self._shared.schedule(func)


class TicketQueue:
    """Hands out tickets that are called in the order they were taken.

    Callbacks registered with Ticket.on_call are passed to schedule; by default
    they are run directly on the thread that calls the ticket.
    """

    def __init__(self, schedule: Optional[Callable[[OnCall], Any]] = None) -> None:
        self._shared = _Shared(schedule or _run_inline)

    def take(self) -> Ticket:
        """Take a single ticket from the queue."""
        taken: list[Ticket] = []
        self.take_many(1, taken.append)
        return taken[0]

    def take_many(self, count: int, func: Callable[[Ticket], Any]) -> None:
        """Take count consecutive tickets, calling func with each in order."""
        if count < 0:
            raise ValueError("count must not be negative")
        if count == 0:
            return
        shared = self._shared
        records = [_Record() for _ in range(count)]
        for earlier, later in zip(records, records[1:]):
            earlier.next = later
            later.prev = earlier
        first, last = records[0], records[-1]
        tickets = collections.deque(Ticket(shared, record) for record in records)

        callback: Optional[OnCall] = None
        with shared.cond:
            last.next = shared.tail
            first.prev = shared.tail.prev
            shared.tail.prev = last
            if first.prev is None:
                callback = shared.call(first)
            else:
                first.prev.next = first
        if callback is not None:
            shared.schedule(callback)

        while tickets:
            func(tickets.popleft())