"""Lexical analysis for the ulc language. Turns the characters handed out by an InputStream into tokens.

Token grammar, loosely:

```
<whitespace> ::= (" " | "\t" | "\r" | "\n")+
<comment>    ::= "#" <char>* "\n"
<string>     ::= '"' (<char> | "\" <char>)* '"'      ; backslash takes the next char literally
<number>     ::= <digit>+ ("." <digit>*)?
<identifier> ::= (<letter> | "λ" | "_") <ident-char>*  ; keywords: if then else lambda λ true false let
<punctuation>::= "," | ";" | "(" | ")" | "{" | "}" | "[" | "]"
<operator>   ::= one of = || && < > <= >= == != + - * / %
```

Identifiers may contain `?` and `!`, and a run of `-`, `<`, `>`, `=` as long as a letter or `_` follows the run, so
`print-range` and `string->list` are single names while `n-1` is three tokens.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal

from ulc.pure.stream import InputStream


@dataclass(frozen=True)
class Token:
    """Superclass of every token. pos is (line, col) of the first character and is ignored by equality."""
    value: object
    pos: tuple = field(default=None, compare=False, repr=False)

    @property
    def lexeme(self):
        """Source form of this token."""
        return str(self.value)

    def __str__(self):
        return self.lexeme


class Number(Token):

    @property
    def lexeme(self):
        return number_literal(self.value)


class String(Token):

    @property
    def lexeme(self):
        return '"' + self.value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class Boolean(Token):

    @property
    def lexeme(self):
        return "true" if self.value else "false"


class Keyword(Token):
    pass


class Identifier(Token):
    pass


class Punctuation(Token):
    pass


class Operator(Token):
    pass


def number_literal(num):
    """Shortest source form of a float that lexes back to the same float, never in exponent notation."""
    if num.is_integer():
        return str(int(num))
    text = repr(num)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


class TokenStream:
    """One-token lookahead over an InputStream."""
    KEYWORDS = {"if", "then", "else", "lambda", "λ", "true", "false", "let"}
    OPERATORS = {"=", "||", "&&", "<", ">", "<=", ">=", "==", "!=", "+", "-", "*", "/", "%"}

    WHITESPACE = " \t\r\n"
    PUNCTUATION = ",;(){}[]"
    OP_CHARS = "+-*/%=&|<>!"
    IDENT_EXTRA = "_?!"
    IDENT_JOINERS = "-<>="

    def __init__(self, input_stream):
        if isinstance(input_stream, str):
            input_stream = InputStream(input_stream)
        self.input = input_stream
        self.current = None  # not yet read

    @staticmethod
    def is_id_start(ch):
        return ch.isalpha() or ch == "λ" or ch == "_"

    @staticmethod
    def is_digit(ch):
        return "0" <= ch <= "9"

    def read_while(self, predicate):
        chars = []
        while not self.input.eof() and predicate(self.input.peek()):
            chars.append(self.input.next())
        return "".join(chars)

    def skip_comment(self):
        self.read_while(lambda ch: ch != "\n")
        self.input.next()

    def read_escaped(self, end):
        pos = self.input.pos
        escaped = False
        chars = []

        self.input.next()
        while not self.input.eof():
            ch = self.input.next()
            if escaped:
                chars.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == end:
                return "".join(chars)
            else:
                chars.append(ch)

        self.input.croak("Unterminated string literal starting at {}", f"{pos[0]}:{pos[1]}")

    def read_string(self):
        pos = self.input.pos
        return String(self.read_escaped('"'), pos)

    def read_number(self):
        pos = self.input.pos
        has_dot = False

        def accept(ch):
            nonlocal has_dot
            if ch == ".":
                if has_dot:
                    return False
                has_dot = True
                return True
            return TokenStream.is_digit(ch)

        value = float(self.read_while(accept))
        if math.isinf(value):
            self.input.croak("Number literal out of range", pos=pos)
        return Number(value, pos)

    def _joiner_run(self):
        """Length of the run of joiner chars at the cursor if it is followed by a letter or '_', else 0."""
        offset = 0
        while self.input.peek(offset) and self.input.peek(offset) in TokenStream.IDENT_JOINERS:
            offset += 1
        after = self.input.peek(offset)
        if offset and after and (after.isalpha() or after == "_"):
            return offset
        return 0

    def read_ident(self):
        pos = self.input.pos
        chars = [self.input.next()]

        while not self.input.eof():
            ch = self.input.peek()
            if ch.isalnum() or ch in TokenStream.IDENT_EXTRA:
                chars.append(self.input.next())
                continue

            run = self._joiner_run()
            if not run:
                break
            for __ in range(run):
                chars.append(self.input.next())

        ident = "".join(chars)
        if ident in ("true", "false"):
            return Boolean(ident == "true", pos)
        if ident in TokenStream.KEYWORDS:
            return Keyword(ident, pos)
        return Identifier(ident, pos)

    def read_operator(self):
        pos = self.input.pos
        op = self.read_while(lambda ch: ch in TokenStream.OP_CHARS)
        if op not in TokenStream.OPERATORS:
            self.input.croak("Unknown operator '{}'", op, pos=pos)
        return Operator(op, pos)

    def read_next(self):
        """Reads a fresh token from the input, or returns None at end of input."""
        while True:
            self.read_while(lambda ch: ch in TokenStream.WHITESPACE)
            if self.input.eof():
                return None
            if self.input.peek() != "#":
                break
            self.skip_comment()

        ch = self.input.peek()
        if ch == '"':
            return self.read_string()
        if TokenStream.is_digit(ch):
            return self.read_number()
        if TokenStream.is_id_start(ch):
            return self.read_ident()
        if ch in TokenStream.PUNCTUATION:
            pos = self.input.pos
            return Punctuation(self.input.next(), pos)
        if ch in TokenStream.OP_CHARS:
            return self.read_operator()

        self.input.croak("Can't handle character: '{}'", ch)

    def peek(self):
        """Returns the next token without consuming it."""
        if self.current is None:
            self.current = self.read_next()
        return self.current

    def next(self):
        """Consumes and returns the next token."""
        token = self.current
        self.current = None
        return token if token is not None else self.read_next()

    def eof(self):
        return self.peek() is None

    def croak(self, msg, exprs=None, pos=None):
        self.input.croak(msg, exprs, pos)

    def __iter__(self):
        while not self.eof():
            yield self.next()


def tokenize(text):
    """Returns every token in text."""
    return list(TokenStream(text))


def unlex(tokens):
    """Joins the source forms of tokens with single spaces. Lexing the result gives back an equal token list."""
    return " ".join(token.lexeme for token in tokens)
