"""Character-level cursor over raw source text. Lines are 1-based, columns are 0-based and reset on every newline."""

from ulc.lang.error import ParseError


class InputStream:
    """Walks source text one character at a time. An empty string stands for end of input."""

    def __init__(self, text):
        self.text = text
        self.index = 0
        self.line = 1
        self.col = 0

    @property
    def pos(self):
        return self.line, self.col

    def next(self):
        """Consumes and returns the next character."""
        ch = self.peek()
        if not ch:
            return ch

        self.index += 1
        if ch == "\n":
            self.line += 1
            self.col = 0
        else:
            self.col += 1
        return ch

    def peek(self, offset=0):
        """Returns the character offset places ahead without consuming anything."""
        idx = self.index + offset
        return self.text[idx] if idx < len(self.text) else ""

    def eof(self):
        return self.peek() == ""

    def croak(self, msg, exprs=None, pos=None):
        """Raises a ParseError tagged with pos, or with the current position."""
        raise ParseError(msg, exprs, pos=pos if pos is not None else self.pos)
