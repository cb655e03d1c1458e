"""
fns - Interpreter Orchestrator
Runs lexing, parsing and evaluation in sequence and returns the result.
"""

import json
import sys
from typing import Any, Optional

from .environment import Environment
from .errors import FnsError
from .evaluator import Evaluator
from .lexer import tokenize
from .parser import Parser
from .prelude import install_prelude


def run_source(
    source: str,
    environment: Optional[Environment] = None,
    emit_ast: bool = False,
    debug: bool = False,
) -> Any:
    """
    Interpret fns source text.

    Parameters
    ----------
    source       : fns source code string
    environment  : bindings to run against; a fresh one with the prelude
                   installed is created when omitted
    emit_ast     : if True, return a JSON representation of the AST instead
                   of evaluating it
    debug        : print each phase summary to stderr

    Returns
    -------
    The value of the last statement (or the JSON AST if emit_ast=True)

    Raises
    ------
    LexerError, ParseError or EvaluationError from the failing phase
    """

    def log(msg):
        if debug:
            print(f"[fns] {msg}", file=sys.stderr)

    # ── Phase 1: Lexical Analysis ─────────────────────────────────────────────
    log("Phase 1: Lexical analysis")
    tokens = tokenize(source)
    log(f"  {len(tokens)-1} tokens produced")

    # ── Phase 2: Parsing ──────────────────────────────────────────────────────
    log("Phase 2: Parsing")
    program = Parser(tokens).parse()
    log(f"  {len(program.statements)} top-level statements")

    if emit_ast:
        return ast_to_json(program)

    # ── Phase 3: Evaluation ───────────────────────────────────────────────────
    log("Phase 3: Evaluation")
    if environment is None:
        environment = install_prelude(Environment())
    result = Evaluator(environment).run(program)
    log(f"  result: {result!r}")
    return result


# ── AST serialization (for --emit-ast) ────────────────────────────────────────

def ast_to_json(node) -> str:
    try:
        return json.dumps(_node_to_dict(node), indent=2)
    except RecursionError:
        raise FnsError(
            "AST is nested too deeply to serialize as JSON",
            getattr(node, "line", 0), getattr(node, "column", 0),
        ) from None


def _node_to_dict(node):
    if node is None:
        return None
    if isinstance(node, list):
        return [_node_to_dict(n) for n in node]
    if not hasattr(node, '__dataclass_fields__'):
        return node  # primitive
    d = {"_type": type(node).__name__}
    for field_name in node.__dataclass_fields__:
        val = getattr(node, field_name)
        d[field_name] = _node_to_dict(val)
    return d
