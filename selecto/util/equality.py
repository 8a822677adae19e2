"""
Selecto Equality Helpers
========================

Change detection in selecto is deliberately shallow. Two selector outputs are
"the same" when they are the same object, or when they are scalar values of
exactly the same type that compare equal. No coercion happens between types
(``1``, ``1.0`` and ``True`` are three different values) and containers are
never inspected structurally.

This module also provides NOTHING, the sentinel stored in cache slots that
have not seen a value yet.
"""

from typing import Any

# Exact types compared by value. Everything else is compared by identity.
SCALAR_TYPES = frozenset({int, float, complex, str, bytes, bool, type(None)})


class _Nothing:
    """
    Sentinel for an empty cache slot.

    Falsy singleton. It is never handed to user code, so a fresh cache
    can't match any real selector output.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NOTHING"

    def __bool__(self):
        return False


NOTHING = _Nothing()


def strict_equal(a: Any, b: Any) -> bool:
    """
    Compare two selector outputs without coercion.

    Args:
        a: Value produced on this call
        b: Value stored from the previous call

    Returns:
        True if the values are interchangeable for caching purposes

    Example:
        ```python
        from selecto import strict_equal

        strict_equal(1, 1)          # True
        strict_equal(1, 1.0)        # False
        strict_equal([1], [1])      # False, distinct lists
        strict_equal(float("nan"), float("nan"))  # False
        ```
    """
    kind = type(a)
    if kind is not type(b):
        return False
    if kind in SCALAR_TYPES:
        return a == b
    return a is b
