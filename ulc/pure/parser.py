"""Recursive-descent parser for the ulc language, with precedence climbing for binary operators. Consumes a TokenStream
and produces the syntax tree defined in ulc/grammar/ast.py.

Source: http://lisperator.net/pltut/ (the lambda language), https://en.wikipedia.org/wiki/Operator-precedence_parser
"""

from ulc.grammar.ast import Assign, Binary, Bool, Call, FALSE, If, Lambda, Let, Num, Program, Str, Var
from ulc.pure.lexical import Boolean, Identifier, Keyword, Number, Operator, Punctuation, String, TokenStream


class Parser:
    """Parses a whole program. Every syntax error is raised through the token stream's croak, so it carries a
    position.
    """
    PRECEDENCE = {
        "=": 1,
        "||": 2,
        "&&": 3,
        "<": 7, ">": 7, "<=": 7, ">=": 7, "==": 7, "!=": 7,
        "+": 10, "-": 10,
        "*": 20, "/": 20, "%": 20,
    }

    def __init__(self, tokens):
        if not isinstance(tokens, TokenStream):
            tokens = TokenStream(tokens)
        self.input = tokens

    def _is(self, cls, value=None):
        """Returns the next token if it is a cls (with value, if given), else None."""
        token = self.input.peek()
        if isinstance(token, cls) and (value is None or token.value == value):
            return token
        return None

    def is_punc(self, ch=None):
        return self._is(Punctuation, ch)

    def is_kw(self, kw=None):
        return self._is(Keyword, kw)

    def is_op(self, op=None):
        return self._is(Operator, op)

    def skip_punc(self, ch):
        if not self.is_punc(ch):
            self.input.croak('Expecting punctuation: "{}"', ch)
        self.input.next()

    def skip_kw(self, kw):
        if not self.is_kw(kw):
            self.input.croak('Expecting keyword: "{}"', kw)
        self.input.next()

    def unexpected(self):
        token = self.input.peek()
        if token is None:
            self.input.croak("Unexpected end of input")
        self.input.croak("Unexpected token: {}", f"{type(token).__name__} '{token.lexeme}'", pos=token.pos)

    def delimited(self, start, stop, separator, parser):
        """Parses parser() items between start and stop punctuation, separated by separator. The last separator may
        be left dangling before stop.
        """
        result = []
        first = True

        self.skip_punc(start)
        while not self.input.eof():
            if self.is_punc(stop):
                break
            if first:
                first = False
            else:
                self.skip_punc(separator)
            if self.is_punc(stop):
                break
            result.append(parser())
        self.skip_punc(stop)

        return result

    def parse(self):
        """Parses top-level expressions separated by ';' into a Program."""
        prog = []
        while not self.input.eof():
            prog.append(self.parse_expression())
            if not self.input.eof():
                self.skip_punc(";")
        return Program(tuple(prog), (1, 0))

    def parse_expression(self):
        return self.maybe_call(lambda: self.maybe_binary(self.parse_atom(), 0))

    def maybe_call(self, expr):
        expr = expr()
        while self.is_punc("("):
            expr = self.parse_call(expr)
        return expr

    def maybe_binary(self, left, my_prec):
        token = self.is_op()
        if token:
            his_prec = Parser.PRECEDENCE[token.value]
            if his_prec > my_prec:
                self.input.next()
                right = self.maybe_binary(self.parse_atom(), his_prec)

                if token.value == "=":
                    combined = Assign(left, right, token.pos)
                else:
                    combined = Binary(token.value, left, right, token.pos)
                return self.maybe_binary(combined, my_prec)
        return left

    def parse_call(self, func):
        pos = self.input.peek().pos
        return Call(func, tuple(self.delimited("(", ")", ",", self.parse_expression)), pos)

    def parse_varname(self):
        token = self.input.next()
        if not isinstance(token, Identifier):
            self.input.croak("Expecting variable name", pos=token.pos if token else None)
        return token.value

    def parse_binding(self):
        """name [= init]. A missing init is None."""
        name = self.parse_varname()
        init = None
        if self.is_op("="):
            self.input.next()
            init = self.parse_expression()
        return name, init

    def parse_lambda(self):
        pos = self.input.next().pos  # lambda / λ
        name = None
        if self._is(Identifier):
            name = self.input.next().value
        params = self.delimited("(", ")", ",", self.parse_varname)
        return Lambda(name, tuple(params), self.parse_expression(), pos)

    def parse_let(self):
        pos = self.input.next().pos  # let
        if self._is(Identifier):
            # named let: an immediately applied self-named lambda
            name = self.input.next().value
            bindings = self.delimited("(", ")", ",", self.parse_binding)
            params = tuple(var for var, __ in bindings)
            inits = tuple(FALSE if init is None else init for __, init in bindings)
            return Call(Lambda(name, params, self.parse_expression(), pos), inits, pos)

        bindings = self.delimited("(", ")", ",", self.parse_binding)
        return Let(tuple(bindings), self.parse_expression(), pos)

    def parse_if(self):
        pos = self.input.next().pos  # if
        cond = self.parse_expression()
        if not self.is_punc("{"):
            self.skip_kw("then")
        then = self.parse_expression()

        otherwise = None
        if self.is_kw("else"):
            self.input.next()
            otherwise = self.parse_expression()
        return If(cond, then, otherwise, pos)

    def parse_bool(self):
        token = self.input.next()
        return Bool(token.value, token.pos)

    def parse_prog(self):
        pos = self.input.peek().pos
        prog = self.delimited("{", "}", ";", self.parse_expression)
        if not prog:
            return Bool(False, pos)
        if len(prog) == 1:
            return prog[0]
        return Program(tuple(prog), pos)

    def parse_atom(self):
        return self.maybe_call(self._parse_atom)

    def _parse_atom(self):
        if self.is_punc("("):
            self.input.next()
            expr = self.parse_expression()
            self.skip_punc(")")
            return expr
        if self.is_punc("{"):
            return self.parse_prog()
        if self.is_kw("let"):
            return self.parse_let()
        if self.is_kw("if"):
            return self.parse_if()
        if self._is(Boolean):
            return self.parse_bool()
        if self.is_kw("lambda") or self.is_kw("λ"):
            return self.parse_lambda()

        token = self.input.peek()
        if isinstance(token, Identifier):
            self.input.next()
            return Var(token.value, token.pos)
        if isinstance(token, Number):
            self.input.next()
            return Num(token.value, token.pos)
        if isinstance(token, String):
            self.input.next()
            return Str(token.value, token.pos)
        self.unexpected()


def parse(text):
    """Parses source text into a Program."""
    return Parser(TokenStream(text)).parse()
