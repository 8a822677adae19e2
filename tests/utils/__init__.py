"""
Test utilities for selecto.

This package contains shared testing utilities to help write
better, more maintainable tests.
"""

from .spies import Spy

__all__ = ["Spy"]
