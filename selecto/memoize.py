"""
Memoized Selectors
==================

A memoizer pairs a fixed tuple of selectors with a compute function. Every
call runs all selectors on the call's arguments, compares each output with the
output of the same selector on the previous call, and only runs compute when
at least one of them changed.

    total = memoize(
        lambda state: state["price"],
        lambda state: state["quantity"],
        lambda price, quantity: price * quantity,
    )

    total({"price": 3, "quantity": 2})   # computes 6
    total({"price": 3, "quantity": 2})   # new dict, same outputs: cached 6

Comparison is against the previous call only, never a longer history. A
sequence A, B, A computes three times. See selecto.util.equality for what
"changed" means.
"""

import logging
from collections import namedtuple
from typing import Any, Callable, Sequence, Tuple

from .exceptions import SelectorDefinitionError
from .util.equality import NOTHING, strict_equal
from .util.functions import describe, identity

logger = logging.getLogger(__name__)

CacheInfo = namedtuple("CacheInfo", ["hits", "misses"])


def _require_callables(fns: Sequence[Any], owner: str) -> Tuple[Callable, ...]:
    """Validate constructor arguments, returning them as a tuple."""
    for position, fn in enumerate(fns):
        if not callable(fn):
            raise SelectorDefinitionError(
                f"{owner}() argument {position} must be callable, "
                f"got {type(fn).__name__}"
            )
    return tuple(fns)


class Memoizer:
    """
    Callable that recomputes only when a selector output changed.

    State Management:
        - _selectors: tuple of selectors, fixed at construction
        - _compute: called with the selector outputs, in order
        - _last_inputs: outputs of the previous call, NOTHING before the first
        - _last_result: compute's last return value, meaningful after one call
        - _hits / _misses: counters reported by cache_info()

    Instances can't grow new attributes, and selectors/compute are read-only.
    """

    __slots__ = (
        "_selectors",
        "_compute",
        "_name",
        "_last_inputs",
        "_last_result",
        "_hits",
        "_misses",
    )

    def __init__(self, selectors: Sequence[Callable], compute: Callable):
        selectors = tuple(selectors)
        self._selectors = selectors or (identity,)
        self._compute = compute
        self._name = describe(compute)
        self._last_inputs = (NOTHING,) * len(self._selectors)
        self._last_result: Any = None
        self._hits = 0
        self._misses = 0

    @property
    def selectors(self) -> Tuple[Callable, ...]:
        return self._selectors

    @property
    def compute(self) -> Callable:
        return self._compute

    def __call__(self, *args, **kwargs) -> Any:
        previous = self._last_inputs
        current = tuple(selector(*args, **kwargs) for selector in self._selectors)

        changed = False
        for now, before in zip(current, previous):
            if not strict_equal(now, before):
                changed = True
                break

        # Stored before compute runs, whether or not anything changed.
        self._last_inputs = current
        if not changed:
            self._hits += 1
            return self._last_result

        self._misses += 1
        logger.debug("Recomputing %s", self._name)
        self._last_result = self._compute(*current)
        return self._last_result

    def cache_info(self) -> CacheInfo:
        """Report how many calls reused the cached result (hits) vs. computed."""
        return CacheInfo(self._hits, self._misses)

    def __repr__(self):
        return f"{type(self).__name__}({self._name}, selectors={len(self._selectors)})"


def memoize(*fns: Callable) -> Memoizer:
    """
    Build a Memoizer from selectors followed by a compute function.

    The last argument is the compute function; the ones before it are the
    selectors. With a single argument the selector is the identity, so the
    compute function is memoized on its (first) argument.

    Args:
        *fns: selector_1, ..., selector_n, compute

    Returns:
        Memoizer accepting whatever arguments the selectors accept

    Raises:
        SelectorDefinitionError: no functions given, or one isn't callable

    Example:
        ```python
        from selecto import memoize

        area = memoize(lambda s: s.width, lambda s: s.height, lambda w, h: w * h)
        ```
    """
    if not fns:
        raise SelectorDefinitionError("memoize() requires at least a compute function")
    fns = _require_callables(fns, "memoize")
    return Memoizer(fns[:-1], fns[-1])


def memoized(*selectors: Callable) -> Callable[[Callable], Memoizer]:
    """
    Decorator form of memoize().

        @memoized(lambda s: s["todos"], lambda s: s["filter"])
        def visible_todos(todos, flt):
            return [t for t in todos if flt(t)]

    is the same as ``memoize(select_todos, select_filter, visible_todos)``.
    """
    selectors = _require_callables(selectors, "memoized")

    def decorator(compute: Callable) -> Memoizer:
        return memoize(*selectors, compute)

    return decorator

