"""Tree-walking evaluator for the Dash AST.

Executing a statement has three possible outcomes:
    1. Completion: COMPLETED is returned
    2. Control-flow signal: a BreakSignal, ContinueSignal or ReturnSignal is returned, and every statement-sequence
       executor hands it to its caller until the construct that owns it (loop or function call) is reached
    3. Fault: a RuntimeFault is raised and aborts the evaluation

Signals are ordinary return values rather than exceptions, so each loop/function boundary has to decide explicitly
what to do with every kind of signal. A signal that reaches a boundary that can't consume it is a UseError.
"""

import operator
from dataclasses import dataclass
from typing import Optional

from dashlang.lang.error import (ArityError, DashException, DashTypeError, NumericOverflow, RuntimeFault,
                                 StackOverflow, UseError)
from dashlang.lang.numerical import divide
from dashlang.pure.environment import Environment
from dashlang.pure.syntax import (Assign, BinaryOp, Break, Call, Continue, ExprStmt, FunctionDef, If, Let, Literal,
                                  Print, Return, UnaryOp, Variable, While)
from dashlang.pure.values import FALSE, TRUE, Bool, Function, Number, String, Unit, Value, values_equal


class Completed:
    """Outcome of a statement that ran to completion."""

    def __repr__(self):
        return "COMPLETED"


COMPLETED = Completed()


@dataclass(frozen=True)
class Signal:
    """Non-local transfer of control. Position is that of the statement which raised the signal."""
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass(frozen=True)
class BreakSignal(Signal):
    keyword = "break"


@dataclass(frozen=True)
class ContinueSignal(Signal):
    keyword = "continue"


@dataclass(frozen=True)
class ReturnSignal(Signal):
    value: Value = Unit
    keyword = "return"


ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": divide,
}

COMPARISON = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}


def stray(signal):
    """Returns UseError for signal reaching a boundary that cannot consume it."""
    if isinstance(signal, ReturnSignal):
        error = UseError(signal.keyword, "a function")
    else:
        error = UseError(signal.keyword, "a loop")
    return error.locate(signal.line, signal.column)


class Evaluator:
    """Executes Programs. sink receives printed lines; checkpoint (if given) is called before every top-level
    statement and may raise to cancel the run; max_depth bounds function-call depth.
    """
    MAX_DEPTH = 100

    def __init__(self, sink, checkpoint=None, max_depth=None):
        self.sink = sink
        self.checkpoint = checkpoint
        self.max_depth = Evaluator.MAX_DEPTH if max_depth is None else max_depth
        self.depth = 0

    def run(self, program, env):
        """Runs program against global scope env. Returns value of the last top-level statement if it is an
        expression statement, Unit otherwise.
        """
        result = Unit
        try:
            for stmt in program:
                if self.checkpoint is not None:
                    self.checkpoint()

                result = Unit
                try:
                    if isinstance(stmt, ExprStmt):
                        result = self.eval_expr(stmt.expr, env)
                        continue
                    outcome = self.exec_stmt(stmt, env)
                except RuntimeFault as fault:
                    raise fault.locate(stmt.line, stmt.column)

                if outcome is not COMPLETED:
                    raise stray(outcome)

        except RecursionError:
            raise StackOverflow() from None

        return result

    def exec_block(self, stmts, env):
        """Executes stmts in order in env. Stops at (and returns) the first signal."""
        for stmt in stmts:
            try:
                outcome = self.exec_stmt(stmt, env)
            except RuntimeFault as fault:
                raise fault.locate(stmt.line, stmt.column)

            if outcome is not COMPLETED:
                return outcome
        return COMPLETED

    def exec_stmt(self, stmt, env):
        """Executes stmt in env; returns COMPLETED or a Signal."""
        if isinstance(stmt, Let):
            env.define(stmt.name, self.eval_expr(stmt.expr, env))

        elif isinstance(stmt, Assign):
            env.assign(stmt.name, self.eval_expr(stmt.expr, env))

        elif isinstance(stmt, Print):
            self.sink.write_line(self.eval_expr(stmt.expr, env).render())

        elif isinstance(stmt, If):
            branch = stmt.then if self.truth(stmt.cond, env, "if") else stmt.orelse
            if branch is not None:
                return self.exec_block(branch, Environment.child_of(env))

        elif isinstance(stmt, While):
            return self.exec_while(stmt, env)

        elif isinstance(stmt, FunctionDef):
            env.define(stmt.name, Function(stmt.name, stmt.params, stmt.body, env))

        elif isinstance(stmt, Return):
            value = Unit if stmt.expr is None else self.eval_expr(stmt.expr, env)
            return ReturnSignal(stmt.line, stmt.column, value)

        elif isinstance(stmt, Break):
            return BreakSignal(stmt.line, stmt.column)

        elif isinstance(stmt, Continue):
            return ContinueSignal(stmt.line, stmt.column)

        elif isinstance(stmt, ExprStmt):
            self.eval_expr(stmt.expr, env)

        else:
            raise DashException("cannot execute {}", type(stmt).__name__, internal=True)

        return COMPLETED

    def exec_while(self, stmt, env):
        # one scope shared by every iteration: a `let` in the body rebinds what the next condition check sees
        scope = Environment.child_of(env)

        while self.truth(stmt.cond, scope, "while"):
            outcome = self.exec_block(stmt.body, scope)

            if isinstance(outcome, BreakSignal):
                break
            elif isinstance(outcome, ContinueSignal):
                continue
            elif isinstance(outcome, ReturnSignal):
                return outcome

        return COMPLETED

    def truth(self, cond, env, context):
        """Evaluates condition cond, which must reduce to a Bool."""
        value = self.eval_expr(cond, env)
        if not isinstance(value, Bool):
            raise DashTypeError(context, value.kind, msg=f"condition of {{}} must be Bool, got {value.kind}")
        return value.value

    def eval_expr(self, expr, env):
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Variable):
            return env.get(expr.name)

        elif isinstance(expr, UnaryOp):
            return self.eval_unary(expr.op, self.eval_expr(expr.operand, env))

        elif isinstance(expr, BinaryOp):
            if expr.op in ("&&", "||"):
                return self.eval_logical(expr, env)
            left = self.eval_expr(expr.left, env)
            right = self.eval_expr(expr.right, env)
            return self.eval_binary(expr.op, left, right)

        elif isinstance(expr, Call):
            return self.eval_call(expr, env)

        raise DashException("cannot evaluate {}", type(expr).__name__, internal=True)

    @staticmethod
    def eval_unary(op, operand):
        if op == "-" and isinstance(operand, Number):
            return Number(-operand.value)
        elif op == "!" and isinstance(operand, Bool):
            return FALSE if operand.value else TRUE
        raise DashTypeError(op, operand.kind)

    def eval_logical(self, expr, env):
        """&& and || short-circuit: the right operand is only evaluated if the left doesn't decide the result."""
        left = self.eval_expr(expr.left, env)
        if not isinstance(left, Bool):
            raise DashTypeError(expr.op, left.kind)

        if (expr.op == "&&" and not left.value) or (expr.op == "||" and left.value):
            return left

        right = self.eval_expr(expr.right, env)
        if not isinstance(right, Bool):
            raise DashTypeError(expr.op, right.kind)
        return right

    @staticmethod
    def eval_binary(op, left, right):
        if op == "==":
            return TRUE if values_equal(left, right) else FALSE
        elif op == "!=":
            return FALSE if values_equal(left, right) else TRUE

        if isinstance(left, Number) and isinstance(right, Number):
            if op in ARITHMETIC:
                try:
                    return Number(ARITHMETIC[op](left.value, right.value))
                except OverflowError:
                    raise NumericOverflow(op) from None
            elif op in COMPARISON:
                return TRUE if COMPARISON[op](left.value, right.value) else FALSE

        elif isinstance(left, String) and isinstance(right, String):
            if op == "+":
                return String(left.value + right.value)
            elif op in COMPARISON:
                return TRUE if COMPARISON[op](left.value, right.value) else FALSE

        if left.kind == right.kind:
            raise DashTypeError(op, left.kind)
        raise DashTypeError(op, left.kind, right.kind)

    def eval_call(self, expr, env):
        function = env.get(expr.name)
        if not isinstance(function, Function):
            raise DashTypeError(expr.name, function.kind, msg=f"{{}} is not callable ({function.kind})")

        args = [self.eval_expr(arg, env) for arg in expr.args]  # in the caller's scope
        if len(args) != function.arity:
            raise ArityError(expr.name, function.arity, len(args))

        return self.call(function, args)

    def call(self, function, args):
        """Runs function's body in a new child scope of its defining environment (lexical scoping)."""
        if self.depth >= self.max_depth:
            raise StackOverflow(self.max_depth)

        scope = Environment.child_of(function.env)
        for param, arg in zip(function.params, args):
            scope.define(param, arg)

        self.depth += 1
        try:
            outcome = self.exec_block(function.body, scope)
        finally:
            self.depth -= 1

        if isinstance(outcome, ReturnSignal):
            return outcome.value
        elif outcome is COMPLETED:
            return Unit
        raise stray(outcome)


def evaluate(program, sink, checkpoint=None, max_depth=None):
    """Executes program against a fresh global Environment. Returns the program's result Value; raises RuntimeFault.
    """
    return Evaluator(sink, checkpoint, max_depth).run(program, Environment())
