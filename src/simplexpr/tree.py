"""
Structural operations over expression trees.

None of these evaluate anything: they rebuild or inspect the tree. Trees are
immutable, so every transformation returns a new tree and leaves its input
untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from simplexpr.ast import (
    BinaryExpr,
    FunctionCall,
    IfElse,
    JsonAccess,
    Literal,
    SimplExpr,
    UnaryExpr,
    VarRef,
)
from simplexpr.dynval import DynVal
from simplexpr.errors import UnknownVariable


def map_terminals_into(expr: SimplExpr, f: Callable[[SimplExpr], SimplExpr]) -> SimplExpr:
    """
    Apply ``f`` one level down the tree.

    Compound nodes are rebuilt with ``f`` applied to each direct child;
    literals and variable references are terminal and handed to ``f`` as-is.
    """
    if isinstance(expr, BinaryExpr):
        return expr.model_copy(update={"left": f(expr.left), "right": f(expr.right)})
    if isinstance(expr, UnaryExpr):
        return expr.model_copy(update={"operand": f(expr.operand)})
    if isinstance(expr, IfElse):
        return expr.model_copy(
            update={
                "condition": f(expr.condition),
                "then_branch": f(expr.then_branch),
                "else_branch": f(expr.else_branch),
            }
        )
    if isinstance(expr, JsonAccess):
        return expr.model_copy(update={"container": f(expr.container), "index": f(expr.index)})
    if isinstance(expr, FunctionCall):
        return expr.model_copy(update={"args": [f(a) for a in expr.args]})
    return f(expr)


def resolve_refs(expr: SimplExpr, variables: Mapping[str, DynVal]) -> SimplExpr:
    """
    Substitute every variable reference with a literal of its bound value.

    Args:
        expr: Tree to resolve
        variables: Variable name -> value

    Returns:
        A new tree without ``VarRef`` nodes.

    Raises:
        SpannedError: Wrapping ``UnknownVariable`` for the first unbound
            name met, depth-first left-to-right.
    """
    if isinstance(expr, VarRef):
        value = variables.get(expr.name)
        if value is None:
            raise UnknownVariable(expr.name).at(expr.span)
        return Literal(span=expr.span, value=value)
    if isinstance(expr, Literal):
        return expr
    return map_terminals_into(expr, lambda child: resolve_refs(child, variables))


def var_refs(expr: SimplExpr) -> list[str]:
    """Names of all referenced variables, depth-first left-to-right, duplicates kept."""
    if isinstance(expr, VarRef):
        return [expr.name]
    if isinstance(expr, Literal):
        return []
    if isinstance(expr, BinaryExpr):
        return var_refs(expr.left) + var_refs(expr.right)
    if isinstance(expr, UnaryExpr):
        return var_refs(expr.operand)
    if isinstance(expr, IfElse):
        return var_refs(expr.condition) + var_refs(expr.then_branch) + var_refs(expr.else_branch)
    if isinstance(expr, JsonAccess):
        return var_refs(expr.container) + var_refs(expr.index)
    if isinstance(expr, FunctionCall):
        return [name for arg in expr.args for name in var_refs(arg)]
    raise TypeError(f"Unknown expression type: {type(expr).__name__}")
