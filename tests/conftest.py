"""
Shared pytest fixtures and configuration for selecto tests.
"""

import pytest

from tests.utils import Spy


@pytest.fixture
def spy():
    """Factory wrapping a function in a call-recording Spy."""

    def make(func, name=None):
        return Spy(func, name)

    return make


@pytest.fixture
def todo_state():
    """A small state tree, never mutated by the tests."""
    return {
        "todos": (
            {"id": 1, "title": "write tests", "done": True},
            {"id": 2, "title": "ship it", "done": False},
        ),
        "filter": "all",
        "lists": {"inbox": (1, 2), "archive": ()},
    }
