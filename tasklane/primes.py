"""Find prime numbers in parallel chunks and report them in ascending order."""

from __future__ import annotations

import argparse
import math
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from .ticket import Ticket, TicketQueue

__all__ = ["is_prime", "find_primes", "main"]

SEARCH_MAX = 10_000_000
CHUNK_SIZE = 10_000


def is_prime(i: int) -> bool:
    """Return True if no integer in [2, sqrt(i)] divides i (so 0 and 1 count)."""
    return all(i % j for j in range(2, math.isqrt(i) + 1))


def _search(
    search_max: int,
    chunk_size: int,
    workers: Optional[int],
    emit: Callable[[int], object],
) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if workers is not None and workers <= 0:
        raise ValueError("workers must be positive")
    queue = TicketQueue()

    def task(base: int, ticket: Ticket) -> None:
        try:
            primes = [i for i in range(base, base + chunk_size) if is_prime(i)]
            ticket.wait()
            for prime in primes:
                emit(prime)
        finally:
            ticket.done()

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(task, base, queue.take())
            for base in range(1, search_max + 1, chunk_size)
        ]
        queue.take().wait()
    for future in futures:
        future.result()


def find_primes(
    search_max: int = SEARCH_MAX,
    chunk_size: int = CHUNK_SIZE,
    workers: Optional[int] = None,
) -> list[int]:
    """Return the primes found in chunks starting at 1, 1+chunk_size, ... up to search_max.

    Every chunk is searched in full, so the last one may reach past search_max.
    """
    found: list[int] = []
    _search(search_max, chunk_size, workers, found.append)
    return found


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print prime numbers in ascending order.")
    parser.add_argument("--max", type=int, default=SEARCH_MAX, dest="search_max")
    parser.add_argument("--chunk", type=int, default=CHUNK_SIZE)
    parser.add_argument("--workers", type=int, default=os.cpu_count())
    args = parser.parse_args(argv)

    def emit(prime: int) -> None:
        sys.stdout.write(f"{prime} is prime\n")

    _search(args.search_max, args.chunk, args.workers, emit)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())