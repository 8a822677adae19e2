"""
Selecto Utils
=============

Helpers shared by the memoizer, the combinators and the keyed registry.

- equality: strict_equal and the NOTHING sentinel for empty cache slots
- functions: identity selector, trailing-argument currying, callable names
"""

from .equality import NOTHING, strict_equal
from .functions import describe, identity, with_trailing_args

__all__ = [
    "NOTHING",
    "strict_equal",
    "identity",
    "with_trailing_args",
    "describe",
]
