"""Lexical scopes. An Environment maps names to Values and points at its parent scope; lookups walk outward to the
root. The parent is never owned: it always outlives the children created from it.
"""

from dashlang.lang.error import DashNameError


class Environment:
    """Single scope in a chain of scopes."""

    def __init__(self, parent=None):
        self.parent = parent
        self.bindings = {}

    @classmethod
    def child_of(cls, parent):
        """Returns a new scope whose parent is parent."""
        return cls(parent)

    def define(self, name, value):
        """Inserts or overwrites name in this scope only, shadowing any outer binding. Never fails."""
        self.bindings[name] = value

    def resolve(self, name):
        """Returns the nearest scope (starting from self) that binds name, or None."""
        scope = self
        while scope is not None:
            if name in scope.bindings:
                return scope
            scope = scope.parent
        return None

    def get(self, name):
        scope = self.resolve(name)
        if scope is None:
            raise DashNameError(name)
        return scope.bindings[name]

    def assign(self, name, value):
        """Mutates the nearest existing binding of name. Assignment never creates a binding."""
        scope = self.resolve(name)
        if scope is None:
            raise DashNameError(name, assignment=True)
        scope.bindings[name] = value

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return f"Environment(depth={depth}, names={sorted(self.bindings)})"
