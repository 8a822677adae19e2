"""Unit tests for keyed memoization: memoize_handler_as() and memoize_as()."""

import logging

import pytest

from selecto import (
    KeyedRegistry,
    KeyedSelector,
    SelectorDefinitionError,
    memoize,
    memoize_as,
    memoize_handler_as,
)


def counting_factory(built, computed):
    """Factory that records built keys and computed (key, value) pairs."""

    def factory(key):
        built.append(key)

        def compute(value):
            computed.append((key, value))
            return f"{key}:{value}"

        return memoize(lambda state: state[key], compute)

    return factory


@pytest.mark.unit
@pytest.mark.registry
def test_static_key_routes_to_its_instance():
    """registry(key)(state) forwards the state to the key's instance"""
    built, computed = [], []
    registry = memoize_handler_as(counting_factory(built, computed))

    assert isinstance(registry, KeyedRegistry)
    assert registry("a")({"a": 1, "b": 2}) == "a:1"
    assert registry("b")({"a": 1, "b": 2}) == "b:2"
    assert built == ["a", "b"]


@pytest.mark.unit
@pytest.mark.registry
def test_keyed_instances_are_isolated():
    """Changing outputs under one key never recomputes another key"""
    built, computed = [], []
    registry = memoize_handler_as(counting_factory(built, computed))
    under_k1 = registry("k1")
    under_k2 = registry("k2")

    under_k1({"k1": 1, "k2": 10})
    under_k2({"k1": 1, "k2": 10})
    under_k1({"k1": 2, "k2": 10})
    under_k1({"k1": 3, "k2": 10})
    under_k2({"k1": 3, "k2": 10})

    assert computed == [("k1", 1), ("k2", 10), ("k1", 2), ("k1", 3)]


@pytest.mark.unit
@pytest.mark.registry
def test_one_instance_per_key_across_bound_callables():
    """Binding the same key twice shares the instance and its cache"""
    built, computed = [], []
    registry = memoize_handler_as(counting_factory(built, computed))

    registry("a")({"a": 1})
    registry("a")({"a": 1})

    assert built == ["a"]
    assert computed == [("a", 1)]
    assert len(registry) == 1


@pytest.mark.unit
@pytest.mark.registry
def test_keys_use_value_equality():
    """Equal keys share an instance even when they are different objects"""
    built = []
    registry = memoize_handler_as(lambda key: built.append(key) or (lambda state: key))

    registry(("user", 1))(None)
    registry(tuple(["user", 1]))(None)

    assert built == [("user", 1)]


@pytest.mark.unit
@pytest.mark.registry
@pytest.mark.parametrize("key", [0, "", None, False])
def test_falsy_static_keys_are_used_directly(key):
    """Falsy keys are plain static keys"""
    registry = memoize_handler_as(lambda k: (lambda state: (k, state)))

    assert registry(key)("s") == (key, "s")
    assert key in registry


@pytest.mark.unit
@pytest.mark.registry
def test_key_resolver_is_evaluated_on_every_call():
    """A callable key derives the key from each state"""
    built, computed = [], []
    registry = memoize_handler_as(counting_factory(built, computed))
    current = registry(lambda state: state["id"])

    assert current({"id": "x", "x": 1, "y": 5}) == "x:1"
    assert current({"id": "y", "x": 1, "y": 5}) == "y:5"
    assert current({"id": "x", "x": 1, "y": 5}) == "x:1"

    assert built == ["x", "y"]
    # Each key kept its own cache, so switching back to "x" did not recompute
    assert computed == [("x", 1), ("y", 5)]


@pytest.mark.unit
@pytest.mark.registry
def test_resolver_and_static_key_share_instances():
    """A resolved key and the same static key hit the same instance"""
    built, computed = [], []
    registry = memoize_handler_as(counting_factory(built, computed))
    state = {"id": "x", "x": 4}

    registry(lambda s: s["id"])(state)
    registry("x")(state)

    assert built == ["x"]
    assert computed == [("x", 4)]


@pytest.mark.unit
@pytest.mark.registry
def test_registry_introspection():
    """keys(), len() and membership reflect lazily created instances"""
    registry = memoize_handler_as(lambda key: (lambda state: key))

    assert len(registry) == 0
    assert "a" not in registry

    bound = registry("a")
    assert len(registry) == 0

    bound(None)
    registry("b")(None)

    assert list(registry.keys()) == ["a", "b"]
    assert "a" in registry
    assert len(registry) == 2


@pytest.mark.unit
@pytest.mark.registry
def test_instance_for_creates_without_invoking():
    """instance_for() builds and caches an instance without calling it"""
    built = []
    registry = memoize_handler_as(lambda key: built.append(key) or memoize(len))

    instance = registry.instance_for("a")

    assert registry.instance_for("a") is instance
    assert built == ["a"]
    assert instance.cache_info().misses == 0


@pytest.mark.unit
@pytest.mark.registry
def test_factory_errors_propagate_and_nothing_is_cached():
    """A failing factory raises to the caller and leaves no entry behind"""

    def factory(key):
        if key == "bad":
            raise LookupError(key)
        return lambda state: state

    registry = memoize_handler_as(factory)

    with pytest.raises(LookupError):
        registry("bad")(1)

    assert "bad" not in registry


@pytest.mark.unit
@pytest.mark.registry
def test_unhashable_key_raises_type_error():
    """Keys follow dict semantics"""
    registry = memoize_handler_as(lambda key: (lambda state: state))

    with pytest.raises(TypeError):
        registry(lambda state: [1, 2])(None)


@pytest.mark.unit
@pytest.mark.registry
def test_instance_creation_is_logged(caplog):
    """Creating an instance emits a DEBUG record with the key"""
    registry = memoize_handler_as(lambda key: (lambda state: state))

    with caplog.at_level(logging.DEBUG, logger="selecto"):
        registry("inbox")(1)
        registry("inbox")(2)

    messages = [r.getMessage() for r in caplog.records if r.name == "selecto.registry"]
    assert messages == ["Creating instance for key 'inbox'"]


@pytest.mark.unit
@pytest.mark.registry
def test_keyed_selector_exposes_key_and_is_read_only():
    """Bound callables know their key and can't be modified"""
    registry = memoize_handler_as(lambda key: (lambda state: state))
    bound = registry("a")

    assert isinstance(bound, KeyedSelector)
    assert bound.key == "a"
    assert bound.registry is registry
    assert repr(bound) == "KeyedSelector(key='a')"
    with pytest.raises(AttributeError):
        bound.key = "b"
    with pytest.raises(AttributeError):
        registry.factory = None


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_handler_as_rejects_non_callable_factory():
    """The factory must be callable"""
    with pytest.raises(SelectorDefinitionError):
        memoize_handler_as({"a": len})


# ============================================================================
# memoize_as()
# ============================================================================


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_as_appends_key_to_selectors_and_compute(spy):
    """Selectors get (state, key); compute gets (*outputs, key)"""
    select_item = spy(lambda state, item_id: state["items"][item_id])
    select_rate = spy(lambda state, item_id: state["rate"])
    compute = spy(lambda price, rate, item_id: (item_id, price * (1 + rate)))
    totals = memoize_as(select_item, select_rate, compute)
    state = {"items": {"a": 100, "b": 50}, "rate": 0.5}

    assert totals("a")(state) == ("a", 150.0)
    assert totals("b")(state) == ("b", 75.0)

    assert select_item.args == [(state, "a"), (state, "b")]
    assert select_rate.args == [(state, "a"), (state, "b")]
    assert compute.args == [(100, 0.5, "a"), (50, 0.5, "b")]


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_as_keys_do_not_accumulate(spy):
    """Every key's selectors see exactly one trailing key"""
    selector = spy(lambda *args: args[-1])
    per_key = memoize_as(selector, lambda key_out, key: (key_out, key))

    for key in ["a", "b", "c"]:
        assert per_key(key)("state") == (key, key)

    assert selector.args == [("state", "a"), ("state", "b"), ("state", "c")]


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_as_memoizes_per_key(spy):
    """Each key has its own cache over key-scoped selector outputs"""
    compute = spy(lambda value, key: value * 2)
    doubled = memoize_as(lambda state, key: state[key], compute)

    doubled("x")({"x": 1, "y": 2})
    doubled("y")({"x": 1, "y": 2})
    doubled("x")({"x": 1, "y": 3})
    doubled("y")({"x": 1, "y": 3})

    assert compute.args == [(1, "x"), (2, "y"), (3, "y")]


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_as_single_function_memoizes_on_state(spy):
    """With only a compute function, the state is the selector output"""
    compute = spy(lambda state, key: f"{key}:{len(state)}")
    sized = memoize_as(compute)
    state = (1, 2, 3)

    assert sized("k")(state) == "k:3"
    assert sized("k")(state) == "k:3"
    assert compute.args == [(state, "k")]


@pytest.mark.unit
@pytest.mark.registry
def test_memoize_as_requires_a_compute_function():
    """memoize_as() with no functions is a definition error"""
    with pytest.raises(SelectorDefinitionError):
        memoize_as()
