"""
Expression evaluator for the simplexpr language.

Evaluates expression trees against an environment (dict of variable name ->
DynVal). Pure evaluation: no I/O, no side effects, the tree is never
mutated. The first failure aborts evaluation and propagates as an
``EvalError``, annotated with the span of the node closest to the
user-visible operation.

Evaluation recurses once per tree level, so trees nested deeper than the
interpreter's recursion limit allows (a few hundred levels with the default
limit of 1000) raise ``RecursionError`` rather than an ``EvalError``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from simplexpr.ast import (
    BinaryExpr,
    BinOp,
    FunctionCall,
    IfElse,
    JsonAccess,
    Literal,
    SimplExpr,
    UnaryExpr,
    UnaryOp,
    VarRef,
)
from simplexpr.config import EvalSettings, get_eval_settings
from simplexpr.dynval import DynVal
from simplexpr.errors import (
    CannotIndex,
    ConversionError,
    EvalError,
    NoVariablesAllowed,
    UnknownVariable,
    UnresolvedVariable,
)
from simplexpr.functions import FunctionSource, call_expr_function, compile_regex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Context:
    """Per-call evaluation state."""

    values: Mapping[str, DynVal]
    functions: FunctionSource | None
    trace: bool


def evaluate(
    expr: SimplExpr,
    values: Mapping[str, DynVal],
    functions: FunctionSource | None = None,
    settings: EvalSettings | None = None,
) -> DynVal:
    """Evaluate an expression against an environment.

    Args:
        expr: Expression tree.
        values: Variable name -> value.
        functions: Optional host functions, consulted after the built-ins.
        settings: Evaluation settings; read from the environment if omitted.

    Returns:
        The computed value, tagged with the span of ``expr``.

    Raises:
        EvalError: If evaluation fails.
    """
    settings = settings or get_eval_settings()
    return _interpret(expr, _Context(values=values, functions=functions, trace=settings.trace))


def evaluate_no_vars(
    expr: SimplExpr,
    functions: FunctionSource | None = None,
    settings: EvalSettings | None = None,
) -> DynVal:
    """Evaluate an expression in a context where variables are not available.

    An ``UnknownVariable`` failure, which a host function may raise after
    substituting variables with ``resolve_refs``, is reported as
    ``NoVariablesAllowed`` with the same span. ``evaluate`` itself raises
    ``UnresolvedVariable`` for a missing name; that and all other errors
    pass through unchanged.
    """
    try:
        return evaluate(expr, {}, functions, settings)
    except EvalError as exc:
        cause = exc.root_cause
        if not isinstance(cause, UnknownVariable):
            raise
        error: EvalError = NoVariablesAllowed(cause.name)
        if exc.span is not None:
            error = error.at(exc.span)
        raise error from exc


def _interpret(expr: SimplExpr, ctx: _Context) -> DynVal:
    """Dispatch evaluation to the appropriate handler and tag the result."""
    if isinstance(expr, Literal):
        value = expr.value
    elif isinstance(expr, VarRef):
        value = _interpret_var_ref(expr, ctx)
    elif isinstance(expr, BinaryExpr):
        value = _interpret_binary(expr, ctx)
    elif isinstance(expr, UnaryExpr):
        value = _interpret_unary(expr, ctx)
    elif isinstance(expr, IfElse):
        value = _interpret_if(expr, ctx)
    elif isinstance(expr, JsonAccess):
        value = _interpret_json_access(expr, ctx)
    elif isinstance(expr, FunctionCall):
        value = _interpret_func_call(expr, ctx)
    else:
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    if ctx.trace:
        logger.debug("%s @ %s => %r", expr, expr.span, value.value)
    return value.at(expr.span)


def _interpret_var_ref(expr: VarRef, ctx: _Context) -> DynVal:
    value = ctx.values.get(expr.name)
    if value is None:
        raise UnresolvedVariable(expr.name).at(expr.span)
    return value


def _interpret_binary(expr: BinaryExpr, ctx: _Context) -> DynVal:
    """Evaluate a binary expression. Both operands are always evaluated."""
    left = _interpret(expr.left, ctx)
    right = _interpret(expr.right, ctx)
    op = expr.op

    if op == BinOp.EQUALS:
        return DynVal.from_bool(left == right)
    if op == BinOp.NOT_EQUALS:
        return DynVal.from_bool(left != right)

    # Logical: both sides must coerce, even when the left one decides
    if op in (BinOp.AND, BinOp.OR):
        lhs, rhs = left.as_bool(), right.as_bool()
        return DynVal.from_bool(lhs and rhs if op == BinOp.AND else lhs or rhs)

    # Arithmetic
    if op == BinOp.PLUS:
        return _plus(left, right)
    if op == BinOp.MINUS:
        return DynVal.from_f64(left.as_f64() - right.as_f64())
    if op == BinOp.TIMES:
        return DynVal.from_f64(left.as_f64() * right.as_f64())
    if op == BinOp.DIV:
        return DynVal.from_f64(_div(left.as_f64(), right.as_f64()))
    if op == BinOp.MOD:
        return DynVal.from_f64(_mod(left.as_f64(), right.as_f64()))

    # Comparison
    if op == BinOp.GREATER_THAN:
        return DynVal.from_bool(left.as_f64() > right.as_f64())
    if op == BinOp.LESS_THAN:
        return DynVal.from_bool(left.as_f64() < right.as_f64())

    if op == BinOp.ELVIS:
        return right if left.is_empty() else left
    if op == BinOp.REGEX_MATCH:
        regex = compile_regex(right.as_string())
        return DynVal.from_bool(regex.search(left.as_string()) is not None)

    raise TypeError(f"Unknown binary op: {op}")


def _plus(left: DynVal, right: DynVal) -> DynVal:
    """Numeric addition when both sides are numbers, string concatenation otherwise."""
    try:
        return DynVal.from_f64(left.as_f64() + right.as_f64())
    except ConversionError:
        return DynVal.from_string(left.as_string() + right.as_string())


def _div(left: float, right: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 is NaN."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _mod(left: float, right: float) -> float:
    """Remainder with the sign of the dividend, NaN where it is undefined."""
    if right == 0 or math.isinf(left):
        return math.nan
    return math.fmod(left, right)


def _interpret_unary(expr: UnaryExpr, ctx: _Context) -> DynVal:
    operand = _interpret(expr.operand, ctx)
    if expr.op == UnaryOp.NOT:
        return DynVal.from_bool(not operand.as_bool())
    raise TypeError(f"Unknown unary op: {expr.op}")


def _interpret_if(expr: IfElse, ctx: _Context) -> DynVal:
    """Evaluate the condition, then only the selected branch."""
    if _interpret(expr.condition, ctx).as_bool():
        return _interpret(expr.then_branch, ctx)
    return _interpret(expr.else_branch, ctx)


def _interpret_json_access(expr: JsonAccess, ctx: _Context) -> DynVal:
    container = _interpret(expr.container, ctx)
    index = _interpret(expr.index, ctx)
    data = container.as_json_value()

    if isinstance(data, list):
        position = index.as_i32()
        item: Any = data[position] if 0 <= position < len(data) else None
        return DynVal.from_json(item)

    if isinstance(data, dict):
        key = index.as_string()
        if key in data:
            return DynVal.from_json(data[key])
        try:
            key = str(index.as_i32())
        except ConversionError:
            return DynVal.from_json(None)
        return DynVal.from_json(data.get(key))

    raise CannotIndex(str(container)).at(expr.span)


def _interpret_func_call(expr: FunctionCall, ctx: _Context) -> DynVal:
    """Evaluate the arguments left to right, then dispatch by name."""
    args = [_interpret(a, ctx) for a in expr.args]
    try:
        return call_expr_function(expr.name, args, ctx.functions)
    except EvalError as exc:
        raise exc.at(expr.span) from exc
