"""Thread-based task synchronisation primitives: tickets, pools, finalizers and locks."""

__version__ = "0.1.0"
__all__ = [
    "bench",
    "debug",
    "finally_",
    "fractal",
    "mutex",
    "pool",
    "primes",
    "thread_local",
    "ticket",
]