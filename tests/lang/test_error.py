import io
import unittest

from ulc.lang.error import (DivisionByZeroError, ErrorHandler, GenericException, ParseError, UndefinedVariableError)


class GenericExceptionTestCase(unittest.TestCase):

    def test_message(self):
        cases = {
            GenericException("'{}' could not be opened", "f.ulc"): "'f.ulc' could not be opened",
            GenericException("keyboard interrupt"): "keyboard interrupt",
            ParseError("Expecting punctuation: \"{}\"", ";", pos=(1, 4)): 'Expecting punctuation: ";" (1:4)',
            UndefinedVariableError("x", (3, 4)): "Undefined variable 'x' (3:4)",
            DivisionByZeroError("/"): "Division by zero in '/'",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case))

    def test_position(self):
        error = ParseError("Oops", pos=(2, 7))
        self.assertEqual(2, error.line)
        self.assertEqual(7, error.col)
        self.assertIsNone(GenericException("Oops").line)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()

    def test_fatal(self):
        with self.assertRaises(SystemExit) as ctx:
            with ErrorHandler(stream=self.stream):
                raise UndefinedVariableError("x", (1, 0))
        self.assertEqual(1, ctx.exception.code)
        self.assertIn("error: ", self.stream.getvalue())
        self.assertIn("Undefined variable", self.stream.getvalue())

    def test_non_fatal(self):
        with ErrorHandler(fatal=False, stream=self.stream):
            raise ParseError("Unexpected end of input", pos=(1, 3))
        self.assertIn("Unexpected end of input", self.stream.getvalue())

    def test_recursion(self):
        with ErrorHandler(fatal=False, stream=self.stream):
            raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", self.stream.getvalue())

    def test_internal(self):
        with self.assertRaises(ValueError):
            with ErrorHandler(fatal=False, stream=self.stream):
                raise ValueError("boom")
        self.assertIn("[internal]", self.stream.getvalue())
        self.assertIn("unknown error", self.stream.getvalue())

    def test_diagnosis(self):
        handler = ErrorHandler(fatal=False, stream=self.stream)
        handler.register_file("prog.ulc")
        handler.register_source("prog.ulc", "x = 1;\n  y + @")

        with handler:
            raise ParseError("Can't handle character: '{}'", "@", pos=(2, 6))

        output = self.stream.getvalue()
        self.assertIn("File 'prog.ulc', line 2", output)
        self.assertIn("  y + ", output)
        self.assertIn("^", output)
        self.assertIsNone(handler.traceback["prog.ulc"])

    def test_register_step(self):
        ErrorHandler(stream=self.stream).register_step("parse", "{ 1 }")
        self.assertEqual("", self.stream.getvalue())

        ErrorHandler(stream=self.stream, verbose=True).register_step("parse", "{ 1 }")
        self.assertIn("[parse]", self.stream.getvalue())
        self.assertIn("{ 1 }", self.stream.getvalue())

    def test_warn(self):
        ErrorHandler(stream=self.stream).warn("'{}' shadows a builtin", "print")
        self.assertIn("warning: ", self.stream.getvalue())
        self.assertIn("shadows a builtin", self.stream.getvalue())


if __name__ == '__main__':
    unittest.main()
