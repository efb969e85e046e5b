"""Error handling for the ulc language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every error is fatal for the program being run. Nothing inside the lexer, parser or evaluator catches them.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a ulc error. msg is a format string whose
    placeholders are filled with exprs; exprs are bolded only when the message is printed by ErrorHandler.
    """

    def __init__(self, msg, exprs=None, pos=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.pos = pos  # (line, col) or None
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.render())

    @property
    def line(self):
        return self.pos[0] if self.pos else None

    @property
    def col(self):
        return self.pos[1] if self.pos else None

    def render(self, color=False):
        """Returns message with exprs substituted, plus (line:col) if position is known."""
        if color:
            exprs = (colored(expr, attrs=["bold"]) for expr in self.exprs)
        else:
            exprs = self.exprs
        msg = self.template.format(*exprs)

        if self.pos:
            msg += f" ({self.line}:{self.col})"
        return msg


class ParseError(GenericException):
    """Lexer and parser errors. Always carries the position that was reached when the error was detected."""


class EvaluationError(GenericException):
    """Runtime errors raised while walking the syntax tree."""


class UndefinedVariableError(EvaluationError):
    def __init__(self, name, pos=None):
        super().__init__("Undefined variable '{}'", name, pos=pos)
        self.name = name


class OperandTypeError(EvaluationError):
    def __init__(self, op, value, pos=None):
        super().__init__("Expected number for '{}' but got {}", (op, value), pos=pos)


class DivisionByZeroError(EvaluationError):
    def __init__(self, op, pos=None):
        super().__init__("Division by zero in '{}'", op, pos=pos)


class InvalidAssignmentError(EvaluationError):
    def __init__(self, target, pos=None):
        super().__init__("Cannot assign to {}", target, pos=pos)


class NotCallableError(EvaluationError):
    def __init__(self, expr, pos=None):
        super().__init__("Trying to call non function expression: {}", expr, pos=pos)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom ulc errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False, stream=None):
        self.fatal = fatal
        self.verbose = verbose
        self.stream = stream
        self.traceback = {}
        self.sources = {}

    @property
    def _out(self):
        return self.stream if self.stream is not None else sys.stderr

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = None

    def register_source(self, path, source):
        """Registers the text currently being run from path. Should be called prior to Session run."""
        self.traceback[path] = source
        self.sources[path] = source.split("\n")

    def remove_source(self, path):
        """Removes source from traceback given path. Should be called after successful Session run."""
        self.traceback[path] = None

    def register_step(self, stage, text):
        """Reports a pipeline stage when verbose."""
        if self.verbose:
            print(colored(f"[{stage}] ", ErrorHandler.STEP, attrs=["bold"]) + colored(text, attrs=["dark"]),
                  file=self._out)

    @staticmethod
    def diagnose(error, source_lines, warning=False):
        """Returns the offending source line with a caret under the column the error was reported at."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        if error.line is None or not 0 < error.line <= len(source_lines):
            return None

        line = source_lines[error.line - 1]
        col = min(error.col, len(line))

        diagnosis = "  " + line[:col]
        diagnosis += colored(line[col:col + 1], color, attrs=["bold"]) + line[col + 1:] + "\n"
        diagnosis += "  " + " " * col + colored("^", color, attrs=["bold"])
        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.render(color=True)
        print(error_msg, file=self._out)

    def throw(self, error):
        """Prints error using self.traceback. error must be a GenericException. Exits when fatal."""
        error_msg = ""
        source_lines = []
        for file, source in self.traceback.items():  # assumes dict is insertion-ordered
            if source is not None:
                line = error.line if error.line else 1
                error_msg += f"  File '{file}', line {line}:\n"
                source_lines = self.sources.get(file, [])

        if error_msg:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.render(color=True)
        print(error_msg, file=self._out)

        if not error.internal and error.diagnosis:
            diagnosis = ErrorHandler.diagnose(error, source_lines)
            if diagnosis:
                print(diagnosis, file=self._out)

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.traceback[file] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (no tail-call elimination)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
