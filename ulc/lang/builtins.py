"""Host functions injected into the root scope of every session. They are ordinary bindings: a program may shadow or
reassign them like any other name.
"""

import sys

from ulc.pure.environment import Environment
from ulc.pure.evaluator import Builtin, show


def make_print(out, end=""):
    def _print(value=False, *__):
        out.write(show(value) + end)
        return value
    return _print


def builtins(out=None):
    """Returns {name: Builtin} for print and println, writing to out (default: sys.stdout at call time)."""
    if out is None:
        out = _Stdout()
    return {
        "print": Builtin("print", make_print(out)),
        "println": Builtin("println", make_print(out, "\n")),
    }


def global_environment(out=None):
    """Root scope pre-seeded with builtins."""
    env = Environment()
    for name, builtin in builtins(out).items():
        env.define(name, builtin)
    return env


class _Stdout:
    """Resolves sys.stdout on every write, so that redirection after session creation is honoured."""

    def write(self, text):
        sys.stdout.write(text)
