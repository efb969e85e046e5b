"""Tree-walking evaluator for the ulc language.

Runtime values are plain Python objects: float (number), str (string), bool (boolean), plus Closure for lambdas and
Builtin for host functions injected into the root scope. Only the boolean false is falsy.

There is no tail-call elimination: every ulc call nests a few Python frames, so deep recursion is bounded by the
interpreter's recursion limit (see ulc/main.py).
"""

import math

from ulc.grammar.ast import Assign, Binary, Bool, Call, If, Lambda, Let, Num, Program, Str, Var
from ulc.lang.error import (DivisionByZeroError, GenericException, InvalidAssignmentError, NotCallableError,
                            OperandTypeError)
from ulc.pure.lexical import number_literal


class Closure:
    """A Lambda node paired with the environment active when it was evaluated."""

    def __init__(self, params, body, env, name=None):
        self.params = params
        self.body = body
        self.env = env
        self.name = name

    def __repr__(self):
        name = f" {self.name}" if self.name else ""
        return f"λ{name}({', '.join(self.params)})"


class Builtin:
    """Host function callable from ulc code. function receives the evaluated arguments positionally."""

    def __init__(self, name, function):
        self.name = name
        self.function = function

    def __call__(self, *args):
        return self.function(*args)

    def __repr__(self):
        return f"<builtin {self.name}>"


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value):
    return value is not False


def show(value):
    """Textual form of a runtime value, as written by print/println."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return number_literal(float(value))
    if isinstance(value, str):
        return value
    return repr(value)


def values_equal(left, right):
    """Strict equality: values of different types are never equal, callables compare by identity."""
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, (Closure, Builtin)):
        return left is right
    return left == right


class Evaluator:
    """Evaluates syntax tree nodes against an Environment."""

    def evaluate(self, node, env):
        if isinstance(node, (Num, Str, Bool)):
            return node.value
        if isinstance(node, Var):
            return env.read(node.name, node.pos)
        if isinstance(node, Assign):
            return self._evaluate_assign(node, env)
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_op(node.operator, left, right, node.pos)
        if isinstance(node, Lambda):
            return self.make_lambda(node, env)
        if isinstance(node, If):
            return self._evaluate_if(node, env)
        if isinstance(node, Let):
            return self._evaluate_let(node, env)
        if isinstance(node, Program):
            return self._evaluate_prog(node, env)
        if isinstance(node, Call):
            return self._evaluate_call(node, env)
        raise GenericException("can't evaluate expression {}", repr(node), internal=True)

    def _evaluate_assign(self, node, env):
        if not isinstance(node.left, Var):
            raise InvalidAssignmentError(node.left.source(), node.pos)
        return env.rebind(node.left.name, self.evaluate(node.right, env), node.pos)

    def _evaluate_if(self, node, env):
        if is_truthy(self.evaluate(node.cond, env)):
            return self.evaluate(node.then, env)
        if node.otherwise is not None:
            return self.evaluate(node.otherwise, env)
        return False

    def _evaluate_let(self, node, env):
        for name, init in node.bindings:
            scope = env.extend()
            scope.define(name, False if init is None else self.evaluate(init, env))
            env = scope
        return self.evaluate(node.body, env)

    def _evaluate_prog(self, node, env):
        value = False
        for expr in node.body:
            value = self.evaluate(expr, env)
        return value

    def _evaluate_call(self, node, env):
        func = self.evaluate(node.func, env)
        if not isinstance(func, (Closure, Builtin)):
            raise NotCallableError(node.func.source(), node.pos)

        args = [self.evaluate(arg, env) for arg in node.args]
        if isinstance(func, Builtin):
            return func(*args)
        return self.call(func, args)

    def make_lambda(self, node, env):
        """Closes node over env. A self-named lambda captures an extra scope holding its own name."""
        if node.name:
            env = env.extend()
            return env.define(node.name, Closure(node.params, node.body, env, node.name))
        return Closure(node.params, node.body, env)

    def call(self, closure, args):
        """Invokes closure. Parameters without a matching argument are bound to false; extra arguments are dropped."""
        scope = closure.env.extend()
        for idx, param in enumerate(closure.params):
            scope.define(param, args[idx] if idx < len(args) else False)
        return self.evaluate(closure.body, scope)

    @staticmethod
    def apply_op(op, left, right, pos=None):
        def num(value):
            if not is_number(value):
                raise OperandTypeError(op, show_operand(value), pos)
            return value

        def div(value):
            if num(value) == 0:
                raise DivisionByZeroError(op, pos)
            return value

        if op == "+":
            return num(left) + num(right)
        if op == "-":
            return num(left) - num(right)
        if op == "*":
            return num(left) * num(right)
        if op == "/":
            return num(left) / div(right)
        if op == "%":
            if math.isinf(num(left)):
                div(right)
                return float("nan")
            return math.fmod(left, div(right))
        if op == "&&":
            return False if left is False else right
        if op == "||":
            return right if left is False else left
        if op == "<":
            return num(left) < num(right)
        if op == ">":
            return num(left) > num(right)
        if op == "<=":
            return num(left) <= num(right)
        if op == ">=":
            return num(left) >= num(right)
        if op == "==":
            return values_equal(left, right)
        if op == "!=":
            return not values_equal(left, right)
        raise GenericException("can't apply operator '{}'", op, pos=pos, internal=True)


def show_operand(value):
    """Like show, but quotes strings so that error messages tell "1" and 1 apart."""
    if isinstance(value, str):
        return f'"{value}"'
    return show(value)


def evaluate(node, env):
    return Evaluator().evaluate(node, env)
