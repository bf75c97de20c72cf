"""
simplexpr - evaluation core for a small, dynamically typed expression language.

Hosts hand in an already-parsed expression tree and a variable environment;
simplexpr computes a single string-backed value or raises a located error.

Usage:
    from simplexpr import BinaryExpr, BinOp, DynVal, Literal, Span, VarRef, evaluate

    span = Span(lo=0, hi=5)
    expr = BinaryExpr(
        span=span,
        left=VarRef(span=span, name="a"),
        op=BinOp.PLUS,
        right=Literal(span=span, value=DynVal.of(2)),
    )
    result = evaluate(expr, {"a": DynVal.of(1)})
    # result == DynVal.of(3)
"""

from __future__ import annotations

from simplexpr._version import get_version
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
    InvalidRegex,
    NoVariablesAllowed,
    SpannedError,
    UnknownFunction,
    UnknownVariable,
    UnresolvedVariable,
    WrongArgCount,
)
from simplexpr.evaluator import evaluate, evaluate_no_vars
from simplexpr.functions import (
    BUILTIN_FUNCTIONS,
    FunctionRegistry,
    FunctionSource,
    call_expr_function,
)
from simplexpr.span import Span
from simplexpr.tree import map_terminals_into, resolve_refs, var_refs

__version__ = get_version()

__all__ = [
    "__version__",
    # Tree
    "BinaryExpr",
    "BinOp",
    "FunctionCall",
    "IfElse",
    "JsonAccess",
    "Literal",
    "SimplExpr",
    "Span",
    "UnaryExpr",
    "UnaryOp",
    "VarRef",
    "map_terminals_into",
    "resolve_refs",
    "var_refs",
    # Values
    "DynVal",
    # Evaluation
    "EvalSettings",
    "evaluate",
    "evaluate_no_vars",
    "get_eval_settings",
    # Functions
    "BUILTIN_FUNCTIONS",
    "FunctionRegistry",
    "FunctionSource",
    "call_expr_function",
    # Errors
    "CannotIndex",
    "ConversionError",
    "EvalError",
    "InvalidRegex",
    "NoVariablesAllowed",
    "SpannedError",
    "UnknownFunction",
    "UnknownVariable",
    "UnresolvedVariable",
    "WrongArgCount",
]
