"""
Selecto Exceptions
==================

Errors raised by selecto itself. These only cover mistakes made while
building a memoized selector. Anything raised by a selector, stage, compute
function, factory or key resolver while it runs is passed through to the
caller untouched.
"""


class SelectoError(Exception):
    """Base class for errors raised by selecto."""

    pass


class SelectorDefinitionError(SelectoError, TypeError):
    """Raised when a memoizer or combinator is built from invalid arguments."""

    pass
