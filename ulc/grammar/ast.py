"""Abstract syntax tree of the ulc language. Nodes are immutable and shared read-only by every evaluation.

The grammar they are parsed from can be loosely defined as

```
<program>    ::= (<expr> (";" <expr>)*)?
<expr>       ::= <call>(<binary>)                         ; see Parser.PRECEDENCE
<binary>     ::= <atom> (<operator> <atom>)*              ; precedence climbing, equal precedence binds left
<call>       ::= <expr> ("(" (<expr> ("," <expr>)*)? ")")*
<atom>       ::= "(" <expr> ")"
               | "{" (<expr> (";" <expr>)*)? "}"          ; empty block is false, one statement is unwrapped
               | "let" <name>? "(" <binding> ("," <binding>)* ")" <expr>
               | "if" <expr> "then"? <expr> ("else" <expr>)?    ; "then" only optional before a block
               | ("lambda" | "λ") <name>? "(" (<name> ("," <name>)*)? ")" <expr>
               | "true" | "false" | <name> | <number> | <string>
<binding>    ::= <name> ("=" <expr>)?
```

pos is the (line, col) of the token the node was built from. It is only used to tag runtime errors and does not take
part in equality.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ulc.pure.lexical import number_literal


@dataclass(frozen=True)
class Node(ABC):
    """Superclass of every syntax tree node."""

    @abstractmethod
    def source(self):
        """Approximate source text of this node, used in error messages."""

    def __str__(self):
        return self.source()


@dataclass(frozen=True)
class Num(Node):
    value: float
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return number_literal(self.value)


@dataclass(frozen=True)
class Str(Node):
    value: str
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return '"' + self.value.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Bool(Node):
    value: bool
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Var(Node):
    name: str
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return self.name


@dataclass(frozen=True)
class Lambda(Node):
    """A closure literal. name, when present, is visible inside body and refers to the closure itself."""
    name: Optional[str]
    params: Tuple[str, ...]
    body: Node
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        name = f" {self.name}" if self.name else ""
        return f"λ{name}({', '.join(self.params)}) {self.body.source()}"


@dataclass(frozen=True)
class Call(Node):
    func: Node
    args: Tuple[Node, ...]
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return f"{self.func.source()}({', '.join(arg.source() for arg in self.args)})"


@dataclass(frozen=True)
class If(Node):
    cond: Node
    then: Node
    otherwise: Optional[Node] = None
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        text = f"if {self.cond.source()} then {self.then.source()}"
        if self.otherwise is not None:
            text += f" else {self.otherwise.source()}"
        return text


@dataclass(frozen=True)
class Assign(Node):
    """left is any expression here. Only a Var is accepted when the assignment is evaluated."""
    left: Node
    right: Node
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return f"{self.left.source()} = {self.right.source()}"


@dataclass(frozen=True)
class Binary(Node):
    operator: str
    left: Node
    right: Node
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return f"({self.left.source()} {self.operator} {self.right.source()})"


@dataclass(frozen=True)
class Let(Node):
    """Plain let: each (name, init) binding opens a new scope seen by the following inits and by body."""
    bindings: Tuple[Tuple[str, Optional[Node]], ...]
    body: Node
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        bindings = ", ".join(name if init is None else f"{name} = {init.source()}" for name, init in self.bindings)
        return f"let ({bindings}) {self.body.source()}"


@dataclass(frozen=True)
class Program(Node):
    body: Tuple[Node, ...]
    pos: tuple = field(default=None, compare=False, repr=False)

    def source(self):
        return "{ " + "; ".join(expr.source() for expr in self.body) + " }"


FALSE = Bool(False)
