"""
Selecto - Memoized Selectors over Immutable State

Declare a derived value as a compute function over the outputs of one or more
selectors. The compute function only re-runs when a selector's output changed
since the previous call, compared by identity (or by value, for scalars).

Public API:
    - memoize / memoized: one memoized computation
    - memoize_handler_as / memoize_as: one independent memoized instance per key
    - serial: short-circuiting pipeline of stages
    - concurrent: independent selectors with a memoized combination
"""

import logging

from .combinators import ConcurrentCombinator, SerialPipeline, concurrent, serial
from .exceptions import SelectoError, SelectorDefinitionError
from .memoize import CacheInfo, Memoizer, memoize, memoized
from .registry import KeyedRegistry, KeyedSelector, memoize_as, memoize_handler_as
from .util.equality import strict_equal
from .util.functions import identity

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Memoizer
    "memoize",
    "memoized",
    "Memoizer",
    "CacheInfo",
    # Combinators
    "serial",
    "concurrent",
    "SerialPipeline",
    "ConcurrentCombinator",
    # Keyed registry
    "memoize_handler_as",
    "memoize_as",
    "KeyedRegistry",
    "KeyedSelector",
    # Helpers
    "strict_equal",
    "identity",
    # Exceptions
    "SelectoError",
    "SelectorDefinitionError",
]
