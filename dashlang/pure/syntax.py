"""Dash abstract syntax tree.

A Program is an ordered tuple of statements. Formally, the tree can be defined as

```
<Stmt> ::= Let(name, <Expr>)                  ; binds in the current scope only
         | Assign(name, <Expr>)               ; mutates the nearest existing binding
         | Print(<Expr>)
         | If(<Expr>, <Stmt>*, <Stmt>*?)
         | While(<Expr>, <Stmt>*)
         | FunctionDef(name, name*, <Stmt>*)
         | Return(<Expr>?)
         | Break
         | Continue
         | ExprStmt(<Expr>)

<Expr> ::= Literal(<Value>)
         | Variable(name)
         | UnaryOp(op, <Expr>)
         | BinaryOp(op, <Expr>, <Expr>)
         | Call(name, <Expr>*)
```

Nodes are frozen and children are stored in tuples: the tree is built once and never mutated afterwards. Positions
(line, column) are carried for error messages but never take part in equality.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

from dashlang.pure.values import Value


class Node:
    """Superclass for every AST node."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<attr>=<value>, <children>=[
            <Node>(...),
            ...
        ])
        """
        parts = []
        for node_field in fields(self):
            if not node_field.compare:
                continue

            value = getattr(self, node_field.name)
            if isinstance(value, Node):
                value = (value,)

            if isinstance(value, tuple) and value and all(isinstance(node, Node) for node in value):
                nodes = ",\n".join(node.display(indents + 2) for node in value)
                parts.append(f"{node_field.name}=[\n{nodes}\n{'    ' * (indents + 1)}]")
            else:
                parts.append(f"{node_field.name}={value!r}")

        return f"{'    ' * indents}{type(self).__name__}({', '.join(parts)})"

    def __str__(self):
        return self.display()


class Expr(Node):
    """Superclass for expressions."""


class Stmt(Node):
    """Superclass for statements."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Value
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Variable(Expr):
    name: str
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: str
    operand: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str
    left: Expr
    right: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Call(Expr):
    name: str
    args: Tuple[Expr, ...] = ()
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Let(Stmt):
    name: str
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Assign(Stmt):
    name: str
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Print(Stmt):
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class If(Stmt):
    cond: Expr
    then: Tuple[Stmt, ...]
    orelse: Optional[Tuple[Stmt, ...]] = None
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class While(Stmt):
    cond: Expr
    body: Tuple[Stmt, ...]
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class FunctionDef(Stmt):
    name: str
    params: Tuple[str, ...]
    body: Tuple[Stmt, ...]
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Return(Stmt):
    expr: Optional[Expr] = None
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Break(Stmt):
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Continue(Stmt):
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Program(Node):
    """Top-level ordered statements of a source text."""
    body: Tuple[Stmt, ...] = ()

    def __iter__(self):
        return iter(self.body)

    def __len__(self):
        return len(self.body)
