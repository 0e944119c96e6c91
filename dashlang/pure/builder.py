"""AST builder: walks the concrete parse tree produced by the grammar engine and produces the immutable Dash AST.

The grammar leaves binary expressions flat (operand, operator, operand, ...); precedence and associativity are resolved
here by precedence climbing. From lowest to highest:

```
1  ||
2  &&
3  == != < > <= >=
4  + -
5  * /
```

All binary operators associate to the left: `a - b - c` builds as `Sub(Sub(a, b), c)`. Unary `-` and `!` bind tighter
than any binary operator.
"""

from lark import Transformer, v_args
from lark.exceptions import VisitError

from dashlang.grammar.engine import parse_tree
from dashlang.lang.error import DashException, ParseError, StackOverflow
from dashlang.lang import numerical
from dashlang.pure.syntax import (Assign, BinaryOp, Break, Call, Continue, ExprStmt, FunctionDef, If, Let, Literal,
                                  Print, Program, Return, Stmt, UnaryOp, Variable, While)
from dashlang.pure.values import FALSE, TRUE, Number, String


PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3, "!=": 3, "<": 3, ">": 3, "<=": 3, ">=": 3,
    "+": 4, "-": 4,
    "*": 5, "/": 5,
}

KEYWORDS = {"let", "fn", "if", "else", "while", "break", "continue", "return", "print", "true", "false"}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\"": "\"", "\\": "\\"}


def position(meta):
    """Returns (line, column) of meta, or (None, None) if lark couldn't assign one."""
    return getattr(meta, "line", None), getattr(meta, "column", None)


def name_of(token):
    """Returns identifier of NAME token. Keywords can reach here as NAMEs where the lexer only expects an identifier."""
    if token.value in KEYWORDS:
        raise ParseError(f"'{token.value}' is a reserved word", token.line, token.column)
    return token.value


def unescape(token):
    """Returns contents of STRING token without surrounding quotes and with escape sequences replaced."""
    body = token.value[1:-1]
    result = []

    idx = 0
    while idx < len(body):
        char = body[idx]
        if char == "\\":
            escaped = body[idx + 1]
            if escaped not in ESCAPES:
                raise ParseError(f"invalid escape sequence '\\{escaped}'", token.line, token.column + idx + 1)
            result.append(ESCAPES[escaped])
            idx += 2
        else:
            result.append(char)
            idx += 1

    return "".join(result)


def climb(operands, operators):
    """Precedence climbing over a flat operand/operator sequence. operators are lark Tokens, so each BinaryOp is
    positioned at its operator.
    """
    idx = 0

    def _climb(lhs, min_prec):
        nonlocal idx
        while idx < len(operators) and PRECEDENCE[operators[idx].value] >= min_prec:
            op = operators[idx]
            rhs = operands[idx + 1]
            idx += 1

            while idx < len(operators) and PRECEDENCE[operators[idx].value] > PRECEDENCE[op.value]:
                rhs = _climb(rhs, PRECEDENCE[op.value] + 1)

            lhs = BinaryOp(op.value, lhs, rhs, op.line, op.column)
        return lhs

    return _climb(operands[0], 1)


class Builder(Transformer):
    """Transforms a lark parse tree of rule 'program' into a Program."""

    def program(self, children):
        return Program(tuple(children))

    def block(self, children):
        return tuple(children)

    @v_args(meta=True)
    def let_stmt(self, meta, children):
        name, expr = children
        return Let(name_of(name), expr, *position(meta))

    @v_args(meta=True)
    def assign_stmt(self, meta, children):
        name, expr = children
        return Assign(name_of(name), expr, *position(meta))

    @v_args(meta=True)
    def print_stmt(self, meta, children):
        return Print(children[0], *position(meta))

    @v_args(meta=True)
    def if_stmt(self, meta, children):
        cond, then, *rest = children

        orelse = rest[0] if rest else None
        if isinstance(orelse, Stmt):  # else if
            orelse = (orelse,)

        return If(cond, then, orelse, *position(meta))

    @v_args(meta=True)
    def while_stmt(self, meta, children):
        cond, body = children
        return While(cond, body, *position(meta))

    @v_args(meta=True)
    def fn_stmt(self, meta, children):
        name, *params, body = children
        params = params[0] if params and params[0] is not None else ()

        seen = set()
        for param in params:
            if param.value in seen:
                raise ParseError(f"duplicate parameter '{param.value}' in function '{name.value}'",
                                 param.line, param.column)
            seen.add(param.value)

        return FunctionDef(name_of(name), tuple(name_of(param) for param in params), body, *position(meta))

    def params(self, children):
        return tuple(children)

    @v_args(meta=True)
    def return_stmt(self, meta, children):
        expr = children[0] if children else None
        return Return(expr, *position(meta))

    @v_args(meta=True)
    def break_stmt(self, meta, children):
        return Break(*position(meta))

    @v_args(meta=True)
    def continue_stmt(self, meta, children):
        return Continue(*position(meta))

    @v_args(meta=True)
    def expr_stmt(self, meta, children):
        return ExprStmt(children[0], *position(meta))

    def expr(self, children):
        return climb(children[0::2], children[1::2])

    def binop(self, children):
        return children[0]

    @v_args(meta=True)
    def unary_op(self, meta, children):
        op, operand = children
        return UnaryOp(op.value, operand, *position(meta))

    @v_args(meta=True)
    def number(self, meta, children):
        return Literal(Number(numerical.number(children[0].value)), *position(meta))

    @v_args(meta=True)
    def string(self, meta, children):
        return Literal(String(unescape(children[0])), *position(meta))

    @v_args(meta=True)
    def true(self, meta, children):
        return Literal(TRUE, *position(meta))

    @v_args(meta=True)
    def false(self, meta, children):
        return Literal(FALSE, *position(meta))

    @v_args(meta=True)
    def var(self, meta, children):
        return Variable(name_of(children[0]), *position(meta))

    @v_args(meta=True)
    def call(self, meta, children):
        name, *args = children
        args = args[0] if args and args[0] is not None else ()
        return Call(name_of(name), args, *position(meta))

    def args(self, children):
        return tuple(children)


def build(tree):
    """Returns Program built from concrete parse tree."""
    try:
        return Builder().transform(tree)
    except VisitError as error:
        if isinstance(error.orig_exc, RecursionError):
            raise StackOverflow() from None
        if isinstance(error.orig_exc, DashException):
            raise error.orig_exc from None
        raise
    except RecursionError:
        raise StackOverflow() from None


def parse(source):
    """Returns Program given source text. Pure: no side effects, no I/O. Raises ParseError on malformed input."""
    return build(parse_tree(source))
