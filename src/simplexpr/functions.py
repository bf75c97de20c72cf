"""
Function dispatch for expression calls.

Built-in functions are resolved first. A host can extend the language by
passing a ``FunctionSource``; it is consulted only for names the built-ins
do not define. ``FunctionRegistry`` is a ready-made source backed by a dict
of callables.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Protocol, runtime_checkable

from simplexpr.dynval import DynVal
from simplexpr.errors import InvalidRegex, UnknownFunction, WrongArgCount

logger = logging.getLogger(__name__)

HostFunction = Callable[[Sequence[DynVal]], DynVal]


@runtime_checkable
class FunctionSource(Protocol):
    """
    Capability interface for host-supplied functions.

    ``run_fn`` returns ``None`` when the source does not define ``name``.
    Any exception it raises propagates to the caller of the evaluator;
    ``EvalError`` subclasses additionally get the call's span attached.
    """

    def run_fn(self, name: str, args: Sequence[DynVal]) -> DynVal | None: ...


def compile_regex(pattern: str) -> re.Pattern[str]:
    """Compile ``pattern``, raising ``InvalidRegex`` if it is malformed."""
    try:
        return re.compile(pattern)
    except (re.error, OverflowError, RecursionError) as exc:
        raise InvalidRegex(str(exc)) from exc


# ---------------------------------------------------------------------------
# Built-ins
# ---------------------------------------------------------------------------


def _round(args: Sequence[DynVal]) -> DynVal:
    """round(number, digits): fixed-point text with ``digits`` decimals."""
    if len(args) != 2:
        raise WrongArgCount("round")
    number = args[0].as_f64()
    digits = max(args[1].as_i32(), 0)
    if math.isnan(number):
        return DynVal.from_string("NaN")
    return DynVal.from_string(f"{number:.{digits}f}")


def _replace(args: Sequence[DynVal]) -> DynVal:
    """replace(subject, pattern, replacement): regex replace-all, replacement taken literally."""
    if len(args) != 3:
        raise WrongArgCount("replace")
    subject = args[0].as_string()
    regex = compile_regex(args[1].as_string())
    # Backslashes are the only group-reference syntax in re templates
    replacement = args[2].as_string().replace("\\", "\\\\")
    return DynVal.from_string(regex.sub(replacement, subject))


BUILTIN_FUNCTIONS: dict[str, HostFunction] = {
    "round": _round,
    "replace": _replace,
}


def call_expr_function(
    name: str,
    args: Sequence[DynVal],
    functions: FunctionSource | None = None,
) -> DynVal:
    """
    Call the function ``name`` with already-evaluated arguments.

    Args:
        name: Function name as written in the expression
        args: Evaluated argument values, in call order
        functions: Optional host function source, tried after the built-ins

    Returns:
        The function result.

    Raises:
        WrongArgCount: If a built-in receives the wrong number of arguments
        UnknownFunction: If no built-in or host function matches ``name``
    """
    builtin = BUILTIN_FUNCTIONS.get(name)
    if builtin is not None:
        return builtin(args)

    if functions is not None:
        result = functions.run_fn(name, args)
        if result is not None:
            return result
        logger.debug("Function source %r does not define %s()", functions, name)

    raise UnknownFunction(name)


# ---------------------------------------------------------------------------
# Host registry
# ---------------------------------------------------------------------------


class FunctionRegistry:
    """
    Registry of host functions by name.

    Functions receive the evaluated argument list and may return a ``DynVal``
    or any Python value accepted by ``DynVal.of``.
    """

    def __init__(self) -> None:
        self._functions: dict[str, HostFunction] = {}

    def register(self, name: str, function: HostFunction) -> FunctionRegistry:
        """
        Register a function under ``name``.

        Returns:
            self for chaining

        Raises:
            ValueError: If ``name`` is a built-in or already registered
        """
        if name in BUILTIN_FUNCTIONS:
            raise ValueError(f"Function {name} is a built-in and cannot be replaced")
        if name in self._functions:
            raise ValueError(f"Function {name} already registered")
        self._functions[name] = function
        return self

    def register_all(self, functions: Mapping[str, HostFunction]) -> FunctionRegistry:
        for name, function in functions.items():
            self.register(name, function)
        return self

    def lookup(self, name: str) -> HostFunction | None:
        return self._functions.get(name)

    def has(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return sorted(self._functions)

    def run_fn(self, name: str, args: Sequence[DynVal]) -> DynVal | None:
        function = self.lookup(name)
        if function is None:
            return None
        return DynVal.of(function(args))

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"FunctionRegistry({self.names()})"
