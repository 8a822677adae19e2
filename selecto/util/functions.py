"""
Selector Function Helpers
=========================

Small building blocks for assembling selectors:

- identity: the shared selector used when a memoizer is given no selectors
- with_trailing_args: curry extra positional arguments onto the end of a call
- describe: readable name of a callable for reprs and log records
"""

from typing import Any, Callable


def identity(state: Any) -> Any:
    """Return state unchanged (x => x)."""
    return state


def with_trailing_args(func: Callable, *extra: Any) -> Callable:
    """
    Wrap func so every call gets `extra` appended after the caller's arguments.

    ``with_trailing_args(f, key)(state)`` calls ``f(state, key)``. Keyword
    arguments pass through untouched.
    """

    def curried(*args, **kwargs):
        return func(*args, *extra, **kwargs)

    curried.__wrapped__ = func
    curried.__name__ = getattr(func, "__name__", curried.__name__)
    curried.__qualname__ = getattr(func, "__qualname__", curried.__qualname__)
    return curried


def describe(func: Callable) -> str:
    """Best-effort name for a callable."""
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    return name if name else repr(func)
