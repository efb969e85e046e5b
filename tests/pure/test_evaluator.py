import io
import math
import unittest

from ulc import global_environment, parse, run
from ulc.lang.error import (DivisionByZeroError, InvalidAssignmentError, NotCallableError, OperandTypeError,
                            UndefinedVariableError)
from ulc.pure.environment import Environment
from ulc.pure.evaluator import Builtin, Closure, Evaluator, show, values_equal


class ArithmeticTestCase(unittest.TestCase):

    def test_operators(self):
        should_pass = {
            "2 + 3 * 4": 14,
            "(2 + 3) * 4": 20,
            "10 - 2 - 3": 5,
            "1 / 4": 0.25,
            "7 % 3": 1,
            "(0 - 7) % 3": -1,
            "2.5 * 2": 5,
            "1 < 2": True,
            "2 <= 2": True,
            "3 > 4": False,
            "3 >= 4": False,
        }
        for case, expected in should_pass.items():
            self.assertEqual(expected, run(case), case)

    def test_infinite_remainder(self):
        overflow = "let loop(v = 10, n = 10) if n == 0 then v else loop(v * v, n - 1)"
        self.assertTrue(math.isinf(run(overflow)))
        self.assertTrue(math.isnan(run(f"({overflow}) % 2")))
        self.assertTrue(math.isnan(run(f"(0 - ({overflow})) % 3")))
        self.assertTrue(math.isnan(Evaluator.apply_op("%", float("inf"), 2.0)))
        self.assertRaises(DivisionByZeroError, run, f"({overflow}) % 0")

    def test_equality(self):
        should_pass = {
            "1 == 1": True,
            "1 != 2": True,
            '"a" == "a"': True,
            '1 == "1"': False,
            "1 == true": False,
            "0 == false": False,
            "true == true": True,
            "f = lambda() 1; f == f": True,
            "f = lambda() 1; g = lambda() 1; f == g": False,
        }
        for case, expected in should_pass.items():
            self.assertIs(expected, run(case), case)

    def test_logic(self):
        should_pass = {
            "false || 3": 3.0,
            "0 || 3": 0.0,
            '"" || 3': "",
            "1 && 2": 2.0,
            "false && 2": False,
            "true && false": False,
        }
        for case, expected in should_pass.items():
            result = run(case)
            self.assertEqual(expected, result, case)
            self.assertIs(type(expected), type(result), case)

    def test_errors(self):
        should_raise = {
            '1 + "a"': OperandTypeError,
            '"a" < 1': OperandTypeError,
            "true * 2": OperandTypeError,
            "1 / 0": DivisionByZeroError,
            "1 % 0": DivisionByZeroError,
            "false && (1 / 0)": DivisionByZeroError,  # both operands are always evaluated
            "true || (1 / 0)": DivisionByZeroError,
        }
        for case, error in should_raise.items():
            self.assertRaises(error, run, case)

    def test_error_position(self):
        with self.assertRaises(OperandTypeError) as ctx:
            run('x = 1;\nx + "a"')
        self.assertEqual("Expected number for '+' but got \"a\" (2:2)", str(ctx.exception))


class ScopeTestCase(unittest.TestCase):

    def test_root_assignment(self):
        env = global_environment()
        self.assertEqual(5, run("g = 5", env))
        self.assertEqual(5, env.read("g"))

    def test_nested_assignment(self):
        self.assertRaises(UndefinedVariableError, run, "f = lambda() undefined_name = 1; f()")
        self.assertEqual(2, run("x = 1; f = lambda() x = 2; f(); x"))

    def test_undefined(self):
        with self.assertRaises(UndefinedVariableError) as ctx:
            run("1;\n  nope")
        self.assertEqual("Undefined variable 'nope' (2:2)", str(ctx.exception))

    def test_invalid_assignment(self):
        should_raise = ["1 = 2", "f = lambda() 1; f() = 2", '"s" = 1', "(a + b) = 1"]
        for case in should_raise:
            self.assertRaises(InvalidAssignmentError, run, case)

    def test_let(self):
        should_pass = {
            "let (a = 2, b = a * 3) a + b": 8,
            "let (a) a": False,
            "a = 1; let (a = 2) a; a": 1,
            "let (a = 1) let (a = a + 1) a": 2,
            "let loop(n = 5, acc = 1) if n == 0 then acc else loop(n - 1, acc * n)": 120,
        }
        for case, expected in should_pass.items():
            self.assertEqual(expected, run(case), case)
        self.assertRaises(UndefinedVariableError, run, "let (q = 1) q; q")


class ClosureTestCase(unittest.TestCase):

    def test_closures(self):
        should_pass = {
            "adder = lambda(x) lambda(y) x + y; adder(3)(4)": 7,
            "adder = lambda(x) lambda(y) x + y; add3 = adder(3); adder(10); add3(4)": 7,
            "counter = lambda(count) lambda() count = count + 1; c = counter(0); c(); c(); c()": 3,
            "fib = lambda(n) if n < 2 then n else fib(n-1) + fib(n-2); fib(10)": 55,
            "f = λ loop(n) if n == 0 then 0 else n + loop(n - 1); f(4)": 10,
            "f = lambda(a, b) b; f(1)": False,
            "f = lambda(a) a; f(1, 2)": 1,
            "(λ(x) x * x)(9)": 81,
        }
        for case, expected in should_pass.items():
            self.assertEqual(expected, run(case), case)

    def test_mutual_recursion(self):
        source = ("even? = lambda(n) if n == 0 then true else odd?(n - 1);"
                  "odd? = lambda(n) if n == 0 then false else even?(n - 1);"
                  "even?(10)")
        self.assertIs(True, run(source))

    def test_self_name_is_local(self):
        self.assertRaises(UndefinedVariableError, run, "λ loop(n) n; loop")

    def test_not_callable(self):
        should_raise = ["x = 1; x(2)", '"s"()', "true()", "f = lambda() 1; f()()"]
        for case in should_raise:
            self.assertRaises(NotCallableError, run, case)

    def test_closure_value(self):
        closure = run("λ loop(a, b) a")
        self.assertIsInstance(closure, Closure)
        self.assertEqual(("a", "b"), closure.params)
        self.assertEqual("λ loop(a, b)", show(closure))


class ControlTestCase(unittest.TestCase):

    def test_blocks(self):
        self.assertEqual(3, run("{ 1; 2; 3 }"))
        self.assertIs(False, run("{}"))
        self.assertIs(False, run(""))

    def test_if(self):
        should_pass = {
            "if 0 then 1 else 2": 1,
            'if "" then 1 else 2': 1,
            "if false then 1 else 2": 2,
            "if false then 1": False,
            "if 1 < 2 { 3 }": 3,
        }
        for case, expected in should_pass.items():
            self.assertEqual(expected, run(case), case)


class BuiltinTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.env = global_environment(self.out)

    def test_print(self):
        result = run('print("a"); println(1 + 1); println(2.5); println(true); print(x = "z")', self.env)
        self.assertEqual("a2\n2.5\ntrue\nz", self.out.getvalue())
        self.assertEqual("z", result)
        self.assertEqual("z", self.env.read("x"))

    def test_println_returns_argument(self):
        self.assertEqual(3, run("println(3)", self.env))
        self.assertEqual("3\n", self.out.getvalue())

    def test_evaluation_order(self):
        self.assertEqual(3, run("print(1) + print(2)", self.env))
        self.assertIs(False, run('false && print("x")', self.env))
        self.assertEqual("12x", self.out.getvalue())

    def test_shadowing(self):
        self.assertEqual(2, run("print = lambda(x) x * 2; print(1)", self.env))
        self.assertEqual("", self.out.getvalue())

    def test_host_builtin(self):
        env = Environment()
        env.define("sqrt", Builtin("sqrt", lambda x: x ** 0.5))
        self.assertEqual(3, Evaluator().evaluate(parse("sqrt(9)"), env))


class ValueTestCase(unittest.TestCase):

    def test_show(self):
        cases = {14.0: "14", 2.5: "2.5", True: "true", False: "false", "text": "text", 3: "3"}
        for case, expected in cases.items():
            self.assertEqual(expected, show(case))

    def test_values_equal(self):
        self.assertTrue(values_equal(1.0, 1))
        self.assertFalse(values_equal(1.0, True))
        self.assertFalse(values_equal("1", 1.0))


if __name__ == '__main__':
    unittest.main()
