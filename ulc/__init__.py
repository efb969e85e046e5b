"""ulc: a small dynamically-typed expression language built on the untyped lambda calculus, evaluated by walking its
syntax tree.

For reference, basic program flow:
    1. InputStream (ulc/pure/stream.py): hands out source characters, tracking line and column
    2. TokenStream (ulc/pure/lexical.py): groups characters into tokens, one token of lookahead
    3. Parser (ulc/pure/parser.py): recursive descent + precedence climbing into the tree in ulc/grammar/ast.py
    4. Evaluator (ulc/pure/evaluator.py): walks the tree against chained Environments (ulc/pure/environment.py)

Observable output only happens through the print/println builtins (ulc/lang/builtins.py).
"""

from ulc.lang.builtins import global_environment
from ulc.pure.evaluator import evaluate
from ulc.pure.lexical import tokenize
from ulc.pure.parser import parse


def run(source, env=None, out=None):
    """Lexes, parses and evaluates source. Returns the value of the last top-level expression."""
    if env is None:
        env = global_environment(out)
    return evaluate(parse(source), env)


__all__ = ["global_environment", "parse", "run", "tokenize"]
