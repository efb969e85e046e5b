"""Handles interactive/command-line mode for the ulc interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """ulc interpreter shell."""
    intro = "ulc interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def onecmd(self, line):
        """Every non-empty line is ulc code, except for the 'help' and 'exit' commands."""
        stripped = line.strip()
        if not self._tmp_line and stripped in ("help", "exit", "EOF"):
            return super().onecmd(stripped)
        if line == "EOF":
            return self.do_EOF("")
        if not stripped and not self._tmp_line:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes arbitrary ulc code."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line)
                self.sess.run()

                if self.sess.results:
                    print(self.sess.pop(), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the ulc interpreter!\n\n"
              "ulc is a small expression language built on the untyped lambda calculus: numbers, \n"
              "strings, booleans, if/then/else, assignment, { blocks } and closures.\n\n"
              "Try it out by typing 'fib = λ(n) if n < 2 then n else fib(n - 1) + fib(n - 2)'.\n"
              "Next, try typing 'fib(10)'. Output goes through print(x) and println(x).",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
