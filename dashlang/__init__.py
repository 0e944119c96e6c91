"""Dash interpreter.

Basic program flow:
    1. Grammar engine: recognizes source text against the grammar in grammar/dash.lark and produces a concrete parse
       tree (see grammar/engine.py)
    2. AST builder: turns the concrete tree into an immutable AST, resolving operator precedence along the way (see
       pure/builder.py)
    3. Evaluation: not a compiler, so the AST is walked and executed directly against a chain of lexical scopes (see
       pure/evaluator.py and pure/environment.py)

`pure` holds the core, which does no I/O of its own; `lang` holds errors, numbers, output sinks, and the session/shell
used by the dash command.
"""

from dashlang.pure.builder import parse
from dashlang.pure.evaluator import evaluate

__all__ = ["parse", "evaluate"]
