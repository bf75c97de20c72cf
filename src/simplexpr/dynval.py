"""
Dynamic values for the expression language.

Every value is held as its canonical string and converted on demand. The
conversions are fallible and raise ``ConversionError`` rather than guessing:
``"1.0"`` is a number, ``"true"`` is a boolean, ``"[1, 2]"`` is JSON, and
anything is a string.
"""

from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from simplexpr.errors import ConversionError
from simplexpr.span import Span

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _format_f64(number: float) -> str:
    """Render a float the way the language prints numbers: ``3``, ``0.5``, ``inf``."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    return format(Decimal(repr(number)).normalize(), "f")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class DynVal(BaseModel):
    """
    A string-backed dynamic value, optionally tagged with the span it came from.

    Equality and hashing only consider the canonical string; the span is
    diagnostic metadata.
    """

    value: str = Field(description="Canonical string form")
    span: Span | None = Field(default=None, description="Origin of the value")

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_string(cls, value: str, span: Span | None = None) -> DynVal:
        return cls(value=value, span=span)

    @classmethod
    def from_bool(cls, value: bool, span: Span | None = None) -> DynVal:
        return cls(value="true" if value else "false", span=span)

    @classmethod
    def from_f64(cls, value: float, span: Span | None = None) -> DynVal:
        return cls(value=_format_f64(float(value)), span=span)

    @classmethod
    def from_json(cls, value: Any, span: Span | None = None) -> DynVal:
        """Wrap a decoded JSON value; strings unwrap, everything else is compact JSON."""
        if isinstance(value, str):
            return cls(value=value, span=span)
        return cls(
            value=json.dumps(value, separators=(",", ":"), ensure_ascii=False),
            span=span,
        )

    @classmethod
    def of(cls, value: Any, span: Span | None = None) -> DynVal:
        """Build a value from a Python scalar, container or another ``DynVal``."""
        if isinstance(value, DynVal):
            return value if span is None else value.at(span)
        if isinstance(value, bool):
            return cls.from_bool(value, span)
        if isinstance(value, int):
            return cls(value=str(value), span=span)
        if isinstance(value, float):
            return cls.from_f64(value, span)
        if isinstance(value, str):
            return cls.from_string(value, span)
        return cls.from_json(value, span)

    def at(self, span: Span) -> DynVal:
        """Return this value re-tagged with ``span``."""
        return self.model_copy(update={"span": span})

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def as_string(self) -> str:
        return self.value

    def as_bool(self) -> bool:
        if self.value == "true":
            return True
        if self.value == "false":
            return False
        raise ConversionError(self, "bool")

    def as_f64(self) -> float:
        if not _FLOAT_RE.fullmatch(self.value):
            raise ConversionError(self, "f64")
        return float(self.value)

    def as_i32(self) -> int:
        if not _INT_RE.fullmatch(self.value):
            raise ConversionError(self, "i32")
        try:
            number = int(self.value)
        except ValueError as exc:
            # Digit strings beyond the interpreter's conversion limit
            raise ConversionError(self, "i32", exc) from exc
        if not _I32_MIN <= number <= _I32_MAX:
            raise ConversionError(self, "i32", ValueError("number too large to fit in target type"))
        return number

    def as_json_value(self) -> Any:
        try:
            return json.loads(self.value, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            raise ConversionError(self, "json", exc) from exc

    def is_empty(self) -> bool:
        return self.value == ""

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynVal):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value
