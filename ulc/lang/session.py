"""Session control for the ulc language: runs programs from files, stdin, strings or the command-line shell against
one persistent root scope.
"""

import sys

from ulc.lang.builtins import global_environment
from ulc.lang.error import GenericException
from ulc.pure.evaluator import Evaluator, show
from ulc.pure.lexical import TokenStream
from ulc.pure.parser import Parser


class Session:
    """Governs a ulc session. Top-level assignments land in the root scope and persist between runs."""
    SH_FILE = "<in>"       # command-line interpreter filename
    STDIN_FILE = "-"       # read program from stdin
    EVAL_FILE = "<eval>"   # program given on the command line

    def __init__(self, error_handler, path, cmd_line=False, source=None, out=None):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = global_environment(out)
        self.evaluator = Evaluator()

        self.to_exec = []  # sources waiting for run
        self.results = []  # values of the sources that were run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.SH_FILE:
            if not cmd_line:
                raise GenericException("'{}' is a reserved filename", Session.SH_FILE)
        elif source is not None:
            self.add(source)
        elif path == Session.STDIN_FILE:
            self.add(sys.stdin.read())
        else:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.add(file.read())
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        self.error_handler.register_file(path)

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line to the unfinished prev entry. Returns the joined entry and whether it still needs more lines,
        i.e. whether it has an unclosed '(', '{' or string literal.
        """
        entry = prev + "\n" + line if prev else line

        depth = 0
        in_string = escaped = in_comment = False
        for char in entry:
            if in_comment:
                in_comment = char != "\n"
            elif in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == "#":
                in_comment = True
            elif char == '"':
                in_string = True
            elif char in "({":
                depth += 1
            elif char in ")}":
                depth -= 1

        return entry, in_string or depth > 0

    def add(self, source):
        """Queues source text. Nothing is lexed until run is called."""
        self.to_exec.append(source)

    def run(self):
        """Lexes, parses and evaluates every queued source in order. Any error aborts the run and propagates."""
        while self.to_exec:
            source = self.to_exec.pop(0)
            self.error_handler.register_source(self.path, source)

            program = Parser(TokenStream(source)).parse()
            self.error_handler.register_step("parse", program.source())

            value = self.evaluator.evaluate(program, self.env)
            self.error_handler.register_step("eval", show(value))
            self.results.append(value)

            self.error_handler.remove_source(self.path)

    def run_source(self, source):
        """Runs source right away and returns its value."""
        self.add(source)
        self.run()
        return self.results[-1]

    def pop(self):
        """Removes the latest result and returns its textual form."""
        return show(self.results.pop())
