"""Baseline task executors that do not use tickets or pools, and a timing runner."""

from __future__ import annotations

import argparse
import collections
import os
import sys
import threading
import time
from typing import Callable, Optional, Sequence

from .mutex import Mutex

__all__ = [
    "do_some_work",
    "bench_thread_counts",
    "single_queue_executor",
    "multi_queue_executor",
    "main",
]

DEFAULT_NUM_TASKS = 0x40000
WORK_INPUT = 123

_U32 = 0xFFFFFFFF
_WORK_ITERATIONS = 100_000

Task = Callable[[int], int]


def do_some_work(x: int) -> int:
    """Run a fixed bit-shuffling loop on the 32-bit value x and return the result."""
    x &= _U32
    q = x
    for _ in range(_WORK_ITERATIONS):
        x = ((x << 4) | x) & _U32
        x |= 0x1020
        x = (x >> 2) & q
    return x


def bench_thread_counts(num_logical_cpus: int, full: bool = False) -> list[int]:
    """Return the worker thread counts to benchmark with.

    Always starts with 0 (run on the calling thread). With full, every count
    from 1 to num_logical_cpus follows; otherwise powers of two up to
    num_logical_cpus, plus num_logical_cpus itself if it is not a power of two.
    """
    if num_logical_cpus < 0:
        raise ValueError("num_logical_cpus must not be negative")
    counts = [0]
    if full:
        counts.extend(range(1, num_logical_cpus + 1))
        return counts
    threads = 1
    while threads <= num_logical_cpus:
        counts.append(threads)
        threads *= 2
    if num_logical_cpus & (num_logical_cpus - 1):
        counts.append(num_logical_cpus)
    return counts


def _validate(num_tasks: int, num_threads: int) -> None:
    if num_tasks < 0:
        raise ValueError("num_tasks must not be negative")
    if num_threads < 0:
        raise ValueError("num_threads must not be negative")


def single_queue_executor(num_tasks: int, num_threads: int) -> list[int]:
    """Run num_tasks work items from one queue shared by num_threads threads.

    Every thread takes tasks from the queue under a single mutex until it is
    empty. With no threads the caller drains the queue itself. Returns the
    results of all tasks in completion order.
    """
    _validate(num_tasks, num_threads)
    mutex = Mutex()
    results: list[int] = []
    # Hold the mutex while setting up so no thread starts early.
    mutex.lock()
    tasks: collections.deque[Task] = collections.deque(
        do_some_work for _ in range(num_tasks)
    )

    def task_runner() -> None:
        while True:
            with mutex:
                task = tasks.popleft() if tasks else None
            if task is None:
                return
            result = task(WORK_INPUT)
            with mutex:
                results.append(result)

    threads = [threading.Thread(target=task_runner) for _ in range(num_threads)]
    for thread in threads:
        thread.start()

    mutex.unlock()

    if threads:
        for thread in threads:
            thread.join()
    else:
        task_runner()
    return results


def multi_queue_executor(num_tasks: int, num_threads: int) -> list[int]:
    """Run num_tasks work items spread evenly over one queue per thread.

    Tasks are dealt round-robin to max(num_threads, 1) queues; each thread runs
    its own queue once all threads are released together. With no threads the
    caller runs the single queue. Returns the results of all tasks.
    """
    _validate(num_tasks, num_threads)
    num_queues = max(num_threads, 1)
    task_queues: list[list[Task]] = [[] for _ in range(num_queues)]
    for i in range(num_tasks):
        task_queues[i % num_queues].append(do_some_work)

    if num_threads == 0:
        return [task(WORK_INPUT) for task in task_queues[0]]

    start = threading.Event()
    per_queue: list[list[int]] = [[] for _ in range(num_queues)]

    def run_queue(index: int) -> None:
        start.wait()
        out = per_queue[index]
        for task in task_queues[index]:
            out.append(task(WORK_INPUT))

    threads = [
        threading.Thread(target=run_queue, args=(index,))
        for index in range(num_threads)
    ]
    for thread in threads:
        thread.start()

    start.set()

    for thread in threads:
        thread.join()
    return [result for out in per_queue for result in out]


_EXECUTORS: dict[str, Callable[[int, int], list[int]]] = {
    "SingleQueueTaskExecutor": single_queue_executor,
    "MultiQueueTaskExecutor": multi_queue_executor,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Time the baseline task executors.")
    parser.add_argument("--tasks", type=int, default=DEFAULT_NUM_TASKS)
    parser.add_argument("--cpus", type=int, default=os.cpu_count() or 1)
    parser.add_argument("--full", action="store_true")
    parser.add_argument("--repetitions", type=int, default=1)
    parser.add_argument("--filter", default="")
    args = parser.parse_args(argv)

    if args.tasks < 0 or args.cpus < 0 or args.repetitions <= 0:
        parser.error("--tasks and --cpus must not be negative; --repetitions must be positive")

    counts = bench_thread_counts(args.cpus, args.full)
    for name, executor in _EXECUTORS.items():
        if args.filter and args.filter not in name:
            continue
        for threads in counts:
            started = time.perf_counter()
            for _ in range(args.repetitions):
                executor(args.tasks, threads)
            elapsed = (time.perf_counter() - started) / args.repetitions
            sys.stdout.write(
                f"{name}/tasks:{args.tasks}/threads:{threads}\t{elapsed * 1000.0:.3f} ms\n"
            )
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())