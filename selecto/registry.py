"""
Keyed Memoization
=================

A single memoizer only remembers one previous call. When the same derived
value is needed for many entities at once (one per todo list, per user, per
row) the calls keep invalidating each other. A KeyedRegistry avoids that by
keeping one independent instance per key:

    todo_count = memoize_handler_as(
        lambda list_id: memoize(lambda s: s["lists"][list_id], len)
    )

    todo_count("inbox")(state)
    todo_count("archive")(state)     # separate cache, "inbox" untouched

The key can also be a resolver, a callable deriving the key from the state on
every call:

    current_count = todo_count(lambda s: s["selected_list"])

Instances are created on first use and live as long as the registry. There
is no eviction.
"""

import logging
from typing import Any, Callable, Dict, Hashable, Iterator

from .exceptions import SelectorDefinitionError
from .memoize import Memoizer, _require_callables, memoize
from .util.functions import describe, with_trailing_args

logger = logging.getLogger(__name__)


class KeyedSelector:
    """Callable bound to one key (or key resolver) of a KeyedRegistry."""

    __slots__ = ("_registry", "_key", "_resolve")

    def __init__(self, registry: "KeyedRegistry", key: Any):
        self._registry = registry
        self._key = key
        self._resolve = callable(key)

    @property
    def registry(self) -> "KeyedRegistry":
        return self._registry

    @property
    def key(self) -> Any:
        """The static key, or the resolver function."""
        return self._key

    def __call__(self, state: Any) -> Any:
        key = self._key(state) if self._resolve else self._key
        return self._registry.instance_for(key)(state)

    def __repr__(self):
        if self._resolve:
            return f"KeyedSelector(resolver={describe(self._key)})"
        return f"KeyedSelector(key={self._key!r})"


class KeyedRegistry:
    """
    Lazily built, never evicted mapping from key to memoized instance.

    Keys follow dict semantics: equal, hashable values share an instance.
    Calling the registry with a key returns a KeyedSelector; a callable key
    is treated as a resolver and evaluated against each state.
    """

    __slots__ = ("_factory", "_instances")

    def __init__(self, factory: Callable[[Any], Callable]):
        self._factory = factory
        self._instances: Dict[Hashable, Callable] = {}

    @property
    def factory(self) -> Callable[[Any], Callable]:
        return self._factory

    def __call__(self, key: Any) -> KeyedSelector:
        return KeyedSelector(self, key)

    def instance_for(self, key: Hashable) -> Callable:
        """Return the instance for key, building it with the factory if needed."""
        try:
            return self._instances[key]
        except KeyError:
            pass
        logger.debug("Creating instance for key %r", key)
        instance = self._factory(key)
        self._instances[key] = instance
        return instance

    def keys(self) -> Iterator[Hashable]:
        return iter(list(self._instances))

    def __contains__(self, key: Hashable) -> bool:
        return key in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def __repr__(self):
        return f"KeyedRegistry({describe(self._factory)}, keys={len(self._instances)})"


def memoize_handler_as(factory: Callable[[Any], Callable]) -> KeyedRegistry:
    """
    Key independent memoized instances by an arbitrary value.

    Args:
        factory: Called once per distinct key to build that key's instance,
            anything callable with the state (typically a Memoizer)

    Returns:
        KeyedRegistry; ``registry(key)(state)`` routes state to key's instance

    Example:
        ```python
        from selecto import memoize, memoize_handler_as

        by_user = memoize_handler_as(
            lambda user_id: memoize(lambda s: s.users[user_id], render_profile)
        )
        by_user(42)(state)
        by_user(lambda s: s.current_user_id)(state)
        ```
    """
    if not callable(factory):
        raise SelectorDefinitionError(
            f"memoize_handler_as() factory must be callable, got {type(factory).__name__}"
        )
    return KeyedRegistry(factory)


def memoize_as(*fns: Callable) -> KeyedRegistry:
    """
    Per-key memoize(): every function also receives the key, last.

    Each key gets ``memoize(*fns)`` with the resolved key appended to every
    call, so selectors are called as ``selector(state, key)`` and the compute
    function as ``compute(*outputs, key)``.

    Example:
        ```python
        from selecto import memoize_as

        item_total = memoize_as(
            lambda state, item_id: state["items"][item_id],
            lambda state, item_id: state["tax_rate"],
            lambda item, rate, item_id: item.price * (1 + rate),
        )
        item_total("sku-1")(state)
        ```
    """
    if not fns:
        raise SelectorDefinitionError("memoize_as() requires at least a compute function")
    fns = _require_callables(fns, "memoize_as")

    def build(key: Any) -> Memoizer:
        return memoize(*(with_trailing_args(fn, key) for fn in fns))

    return KeyedRegistry(build)
