"""Chained scopes. Each Environment holds the bindings of one scope and a reference to the scope enclosing it; the
chain ends at the global Environment of a run.

Closures keep their defining Environment alive by reference, so a scope can outlive the block that created it.
"""

from loxpy.lang.error import LoxRuntimeError


class Environment:
    """Governs one scope. enclosing is fixed at creation, so chains can't be cyclic."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope only, replacing any existing binding in this scope."""
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to name token in the nearest scope defining it."""
        return self._resolve(name).values[name.lexeme]

    def assign(self, name, value):
        """Rebinds name token in the nearest scope defining it. Never creates a binding."""
        self._resolve(name).values[name.lexeme] = value

    def _resolve(self, name):
        """Returns the nearest Environment defining name token. Raises LoxRuntimeError if there is none."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment
            environment = environment.enclosing

        raise LoxRuntimeError(name, "Undefined variable '{}'.", name.lexeme)

    def __contains__(self, name):
        """Whether or not name (a str) is bound in this scope or an enclosing one."""
        environment = self
        while environment is not None:
            if name in environment.values:
                return True
            environment = environment.enclosing
        return False

    def __repr__(self):
        depth, environment = 0, self.enclosing
        while environment is not None:
            depth, environment = depth + 1, environment.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"
