"""
fns - a small expression-oriented scripting language.

    >>> from fns import parse, evaluate
    >>> evaluate(parse("let x = 1 + 2 * 3  x"))
    7.0
"""

__version__ = "0.1.0"

from .parser import parse, ParseError  # noqa: E402
from .lexer import LexerError  # noqa: E402
from .evaluator import evaluate, EvaluationError, ErrorKind  # noqa: E402

__all__ = [
    "parse", "evaluate",
    "LexerError", "ParseError", "EvaluationError", "ErrorKind",
    "__version__",
]
