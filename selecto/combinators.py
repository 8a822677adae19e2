"""
Selector Combinators
====================

Two ways of combining several selectors over the same state:

- serial(s1, s2, s3): a pipeline, ``s3(s2(s1(state)))``. Each stage boundary
  remembers the value that crossed it on the previous call. As soon as a
  boundary sees the same value again, the rest of the chain is skipped and
  the previous output is returned, since pure stages fed the same input
  produce the same output.

- concurrent(s1, s2, s3): independent selectors over the same arguments,
  with memoize() semantics. All selectors run on every call; the combined
  result (a tuple by default) is rebuilt only when one of them changed, so
  an unchanged call returns the very same tuple object. That makes
  concurrent() a good first stage for serial().

"Concurrent" means order-independent. Everything runs synchronously, in
declared order, on the calling thread.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .exceptions import SelectorDefinitionError
from .memoize import CacheInfo, Memoizer, _require_callables
from .util.equality import NOTHING, strict_equal
from .util.functions import describe

logger = logging.getLogger(__name__)


# ============================================================================
# SerialPipeline - short-circuiting chain
# ============================================================================


class SerialPipeline:
    """
    Chain of single-argument stages with per-boundary change tracking.

    N stages have N + 1 boundaries: boundary 0 holds the raw input, boundary
    i holds the output of stage i - 1, and boundary N holds the pipeline's
    output. A call walks the boundaries in order and stops at the first one
    whose value is unchanged from the previous call.

    If a stage raises, boundaries before it keep the values written during
    the failed call. Nothing is rolled back.
    """

    __slots__ = ("_stages", "_last_values", "_hits", "_misses")

    def __init__(self, stages: Sequence[Callable]):
        self._stages = tuple(stages)
        self._last_values: List[Any] = [NOTHING] * (len(self._stages) + 1)
        self._hits = 0
        self._misses = 0

    @property
    def stages(self) -> Tuple[Callable, ...]:
        return self._stages

    def __call__(self, state: Any) -> Any:
        previous = self._last_values
        terminal = len(self._stages)
        current = state

        for boundary in range(terminal + 1):
            unchanged = strict_equal(current, previous[boundary])
            previous[boundary] = current
            if unchanged:
                if boundary < terminal:
                    logger.debug(
                        "Pipeline unchanged at boundary %d, skipping %d stage(s)",
                        boundary,
                        terminal - boundary,
                    )
                self._hits += 1
                return previous[terminal]
            if boundary < terminal:
                current = self._stages[boundary](current)

        self._misses += 1
        return previous[terminal]

    def cache_info(self) -> CacheInfo:
        """
        Report short-circuited calls (hits) vs. calls that produced a new output.

        A call whose last stage ran but returned the same value as before
        counts as a hit.
        """
        return CacheInfo(self._hits, self._misses)

    def __repr__(self):
        names = ", ".join(describe(stage) for stage in self._stages)
        return f"SerialPipeline({names})"


# ============================================================================
# ConcurrentCombinator - independent selectors, memoized combination
# ============================================================================


class ConcurrentCombinator(Memoizer):
    """
    Memoizer whose compute step combines independent selector outputs.

    Without a combine function the outputs are packed into a tuple. Because
    the tuple is only rebuilt on change, downstream identity checks (in a
    serial pipeline or another memoizer) see an unchanged value.
    """

    __slots__ = ()

    def __repr__(self):
        if self._compute is _pack:
            return f"ConcurrentCombinator(selectors={len(self._selectors)})"
        return f"ConcurrentCombinator({self._name}, selectors={len(self._selectors)})"


def _pack(*values: Any) -> Tuple[Any, ...]:
    return values


def serial(*stages: Callable) -> SerialPipeline:
    """
    Chain stages so each receives the previous stage's output.

    Args:
        *stages: Single-argument callables, applied left to right

    Returns:
        SerialPipeline called with a single state argument. With no stages it
        returns its input.

    Example:
        ```python
        from selecto import serial

        open_count = serial(
            lambda state: state["todos"],
            lambda todos: [t for t in todos if not t.done],
            len,
        )
        ```
    """
    return SerialPipeline(_require_callables(stages, "serial"))


def concurrent(*selectors: Callable, combine: Optional[Callable] = None) -> ConcurrentCombinator:
    """
    Evaluate independent selectors and combine their outputs, memoized.

    Args:
        *selectors: Callables all given the same call arguments
        combine: Optional aggregation called with the outputs in order;
            defaults to building a tuple

    Returns:
        ConcurrentCombinator with memoize() cache semantics

    Raises:
        SelectorDefinitionError: no selectors, or a non-callable argument

    Example:
        ```python
        from selecto import concurrent, serial

        dimensions = concurrent(lambda s: s.width, lambda s: s.height)
        area = serial(dimensions, lambda wh: wh[0] * wh[1])
        ```
    """
    if not selectors:
        raise SelectorDefinitionError("concurrent() requires at least one selector")
    selectors = _require_callables(selectors, "concurrent")
    if combine is None:
        combine = _pack
    elif not callable(combine):
        raise SelectorDefinitionError(
            f"concurrent() combine must be callable, got {type(combine).__name__}"
        )
    return ConcurrentCombinator(selectors, combine)
