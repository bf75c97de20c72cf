"""
Expression tree for the simplexpr language.

The tree is produced by a parser living outside this package and consumed by
the evaluator. Nodes are frozen pydantic models; every node carries the span
of the source text it was parsed from.

Supports:
- Literals and variable references: "text", 42, foo
- Binary operators: == != && || + - * / % > < ?: =~
- Negation: !x
- Conditionals: if cond then a else b
- JSON indexing: obj["key"], arr[0]
- Function calls: round(x, 2), replace(s, "\\.", "-")
"""

from __future__ import annotations

import json
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from simplexpr.dynval import DynVal
from simplexpr.span import Span

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinOp(StrEnum):
    """Binary operators for expressions."""

    # Comparison
    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    # Logical
    AND = "&&"
    OR = "||"
    # Arithmetic
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIV = "/"
    MOD = "%"
    # Other
    ELVIS = "?:"
    REGEX_MATCH = "=~"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NOT = "!"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A literal value."""

    span: Span
    value: DynVal = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return json.dumps(self.value.value)


class VarRef(BaseModel):
    """Reference to a variable supplied by the host environment."""

    span: Span
    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    span: Span
    left: SimplExpr
    op: BinOp
    right: SimplExpr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    span: Span
    op: UnaryOp
    operand: SimplExpr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class IfElse(BaseModel):
    """
    Conditional expression: if cond then a else b.

    Only the branch selected by the condition is evaluated.
    """

    span: Span
    condition: SimplExpr = Field(description="If condition")
    then_branch: SimplExpr = Field(description="Value when condition is true")
    else_branch: SimplExpr = Field(description="Value when condition is false")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"(if {self.condition} then {self.then_branch} else {self.else_branch})"


class JsonAccess(BaseModel):
    """Index into a JSON array or object: container[index]."""

    span: Span
    container: SimplExpr
    index: SimplExpr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.container}[{self.index}]"


class FunctionCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    Built-in functions:
    - round(number, digits)
    - replace(subject, pattern, replacement)

    Hosts may supply further functions through a ``FunctionSource``.
    """

    span: Span
    name: str = Field(description="Function name")
    args: list[SimplExpr] = Field(default_factory=list, description="Arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

SimplExpr = Literal | VarRef | BinaryExpr | UnaryExpr | IfElse | JsonAccess | FunctionCall

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
IfElse.model_rebuild()
JsonAccess.model_rebuild()
FunctionCall.model_rebuild()
