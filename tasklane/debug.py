"""Fatal errors, warnings and runtime assertions."""

from __future__ import annotations

import sys
from typing import Any, NoReturn

__all__ = ["FatalError", "fatal", "warn", "check"]


class FatalError(RuntimeError):
    """Raised when an unrecoverable condition is detected."""


def _format(msg: str, args: tuple[Any, ...]) -> str:
    return msg % args if args else msg


def fatal(msg: str, *args: Any) -> NoReturn:
    """Raise a FatalError carrying the printf-style formatted message."""
    raise FatalError(_format(msg, args))


def warn(msg: str, *args: Any) -> None:
    """Write a formatted warning line to standard output."""
    sys.stdout.write("WARNING: " + _format(msg, args) + "\n")
    sys.stdout.flush()


def check(cond: Any, msg: str, *args: Any) -> None:
    """Raise a FatalError prefixed with 'ASSERT: ' if cond is false."""
    if not cond:
        fatal("ASSERT: " + msg, *args)