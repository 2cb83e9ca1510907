"""Callable runtime values: anything with an arity that can be invoked. User-defined functions are bound to the scope
they were declared in (their closure); native functions are plain Python callables.
"""

import time
from abc import ABC, abstractmethod

from loxpy.runtime.environment import Environment


class LoxCallable(ABC):
    """Superclass of all values that can be called from lox code."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable requires."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with already-evaluated arguments (len(arguments) == arity()). Returns a lox value."""


class LoxFunction(LoxCallable):
    """Function declared in lox code, closing over the Environment active at its declaration."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure  # shared, not copied: later assignments in this scope are visible to calls

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        """A call runs in a fresh Environment enclosed by the closure (not by the caller's scope)."""
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)
        if outcome is not None:
            return outcome.value
        return None

    def __repr__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class NativeFunction(LoxCallable):
    """Built-in function implemented in Python."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __repr__(self):
        return "<native fn>"


def clock():
    """Seconds since the epoch, as a lox number."""
    return float(time.time())


NATIVES = [
    NativeFunction("clock", 0, clock),
]
