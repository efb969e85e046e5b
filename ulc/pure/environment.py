"""Lexical scopes. Each Environment owns its own bindings and points at its parent; the chain of parents models lexical
nesting. Scopes never know about their children, so a scope lives exactly as long as something (a closure, an active
call, a child scope) still references it. Cycles through self-referencing closures are left to the garbage collector.
"""

from ulc.lang.error import UndefinedVariableError


class Environment:

    def __init__(self, parent=None):
        self.vars = {}
        self.parent = parent

    @property
    def is_root(self):
        return self.parent is None

    def extend(self):
        """Returns a new child scope of this scope."""
        return Environment(self)

    def lookup(self, name):
        """Returns the nearest scope that directly owns name, or None."""
        scope = self
        while scope is not None:
            if name in scope.vars:
                return scope
            scope = scope.parent
        return None

    def read(self, name, pos=None):
        scope = self.lookup(name)
        if scope is None:
            raise UndefinedVariableError(name, pos)
        return scope.vars[name]

    def rebind(self, name, value, pos=None):
        """Overwrites the binding in the scope that owns name. Only the root scope may create a missing binding, so a
        nested scope can never silently introduce a global.
        """
        scope = self.lookup(name)
        if scope is None:
            if not self.is_root:
                raise UndefinedVariableError(name, pos)
            scope = self
        scope.vars[name] = value
        return value

    def define(self, name, value):
        """Binds name in this scope, shadowing any outer binding."""
        self.vars[name] = value
        return value

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __repr__(self):
        content = ", ".join(self.vars)
        return f"[{content}]" + (f" < {self.parent!r}" if self.parent else "")
