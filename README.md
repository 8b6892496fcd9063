# tasklane

Synchronisation building blocks for task code that runs on threads. The package
also has three small programs built on them.

## Modules

- `tasklane.ticket` has `TicketQueue` and `Ticket`. Tickets are called in the
  order they were taken. The first ticket taken from an idle queue is called
  at once. Each later ticket is called once every ticket before it is
  finished.
  - `Ticket.wait(timeout=None)` blocks until the ticket is called. It returns
    `False` if the timeout ran out first.
  - `Ticket.done()` finishes the ticket.
  - `Ticket.on_call(func)` registers a callback.
  - Dropping the last reference to an unfinished ticket finishes it.
  - `TicketQueue(schedule=None)` takes a callable that runs the `on_call`
    callbacks. By default they run directly on the thread that calls the
    ticket.
  - `take()` takes one ticket. `take_many(count, func)` takes several in
    order.
- `tasklane.pool` has `BoundedPool`, `UnboundedPool`, `Loan` and
  `PoolPolicy`.
  - Each pool is built from a factory function.
  - `borrow()` and `borrow_many(count, func)` hand out reference-counted
    `Loan` objects.
  - An item goes back to its pool when its last loan is reset, leaves a
    `with` block, or is dropped.
  - `Loan.share()` gives a second reference to the same item.
  - `BoundedPool(factory, capacity, policy)` blocks when it is empty. It also
    offers `try_borrow()`, which returns `None` instead of blocking.
  - `UnboundedPool(factory, policy)` grows by at least 32 items whenever it
    runs dry.
  - `PoolPolicy.RECONSTRUCT` builds a fresh item for every loan.
    `PoolPolicy.PRESERVE` builds each item once, and the item keeps its state.
- `tasklane.finally_` has `Finally`, `SharedFinally`, `make_finally` and
  `make_shared_finally`.
  - A `Finally` calls its function exactly once. The call happens on `run()`,
    on leaving a `with` block, or when the object is dropped.
  - `transfer()` moves the pending call to a new `Finally`.
  - A `SharedFinally` calls its function when its last reference is dropped.
- `tasklane.mutex` has `Mutex` and `ScopedLock`.
  - `Mutex` is a non-reentrant lock with `lock`, `unlock` and `try_lock`.
  - `Mutex.condition()` gives condition variables bound to the mutex.
  - `wait_locked` and `wait_until_locked` are predicate waits. The deadline is
    a `time.monotonic()` value.
  - `ScopedLock` acquires a mutex on construction and releases it when its
    `with` block ends.
- `tasklane.thread_local` has `ThreadLocal`. Its `value` property holds a
  separate value for each thread, starting at a shared initial value.
- `tasklane.debug` has `fatal`, `warn`, `check` and `FatalError`.
  - `fatal` raises `FatalError` with a `%`-formatted message.
  - `warn` prints `WARNING: ...` to standard output.
  - `check(cond, msg, *args)` raises `FatalError("ASSERT: ...")` when `cond`
    is false.
- `tasklane.primes` has `is_prime` and `find_primes`. `find_primes` searches
  chunks in parallel and returns the primes in ascending order, using a
  ticket queue.
- `tasklane.fractal` renders a Julia-set fractal one row per task. It
  provides `Color`, `colorize`, `lerp`, `julia`, `render` and `write_bmp`.
  `write_bmp` writes a 24-bit BMP file.
- `tasklane.bench` has `do_some_work`, `bench_thread_counts`,
  `single_queue_executor` and `multi_queue_executor`.
  - The two executors are baseline thread executors.
  - `single_queue_executor` runs one shared queue behind a mutex.
  - `multi_queue_executor` runs one queue per thread.

## Installation

```
pip install tasklane
```

## Ordering work with tickets

```python
from concurrent.futures import ThreadPoolExecutor
from tasklane.ticket import TicketQueue

queue = TicketQueue()
results = []

def task(n, ticket):
    value = n * n          # runs concurrently
    ticket.wait()          # wait for our turn
    results.append(value)  # runs in ticket order
    ticket.done()

with ThreadPoolExecutor(4) as pool:
    for n in range(10):
        pool.submit(task, n, queue.take())

queue.take().wait()
assert results == [n * n for n in range(10)]
```

## Borrowing from a pool

```python
from tasklane.pool import BoundedPool, PoolPolicy

pool = BoundedPool(list, 2, PoolPolicy.PRESERVE)
with pool.borrow() as loan:
    loan.get().append("kept")
```

## Command-line programs

```
tasklane-primes  [--max N] [--chunk N] [--workers N]
tasklane-fractal [--width N] [--height N] [--samples N] [--workers N] [--output PATH]
tasklane-bench   [--tasks N] [--cpus N] [--full] [--repetitions N] [--filter TEXT]
```

- `tasklane-primes` prints `N is prime` lines in ascending order. By default
  it searches up to 10,000,000.
- `tasklane-fractal` writes a BMP image. The default file is `fractal.bmp`,
  at 2048×2048 with 3×3 samples per pixel.
- `tasklane-bench` times `SingleQueueTaskExecutor` and
  `MultiQueueTaskExecutor` over a range of thread counts. It prints one line
  per run, giving the mean time in milliseconds. The default task count is
  262144, and each task is a pure-Python loop. Pass a smaller `--tasks` for a
  quick run.

## What this package does not do

tasklane has no task scheduler of its own. It has no fibers, no work stealing,
and no wait-group or event types. Tasks run on ordinary Python threads, for
example through `concurrent.futures.ThreadPoolExecutor`. A ticket's `on_call`
callbacks run wherever the `schedule` callable given to `TicketQueue` sends
them.

## Running the tests

```
pip install -e .[test]
pytest
```