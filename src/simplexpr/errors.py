"""
Error types for expression evaluation.

The taxonomy is closed: every failure raised by the evaluator, the tree
operations or the built-in functions is one of the classes below. Location
information travels on the error itself via ``SpannedError``, which wraps
another error without discarding it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simplexpr.dynval import DynVal
    from simplexpr.span import Span


class EvalError(Exception):
    """Base exception for all expression evaluation errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @property
    def span(self) -> Span | None:
        """Source location of the error, if one is known."""
        return None

    @property
    def root_cause(self) -> EvalError:
        """The error with all span wrappers removed."""
        return self

    def spans(self) -> list[Span]:
        """Every span attached along the wrapper chain, outermost first."""
        span = self.span
        return [span] if span is not None else []

    def at(self, span: Span) -> SpannedError:
        """Attach ``span`` to this error."""
        return SpannedError(span, self)


class NoVariablesAllowed(EvalError):
    """Raised when a variable is referenced where variables are not available."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Tried to reference variable `{name}`, but we cannot access variables here"
        )


class InvalidRegex(EvalError):
    """Raised when a regular expression pattern fails to compile."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid regex: {message}")
        self.reason = message


class UnresolvedVariable(EvalError):
    """Raised when evaluation meets a variable missing from the environment."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"got unresolved variable `{name}`")


class ConversionError(EvalError):
    """
    Raised when a value cannot be coerced to the requested type.

    Attributes:
        value: The value that failed to convert
        target_type: Name of the type the conversion aimed for
        cause: Underlying parse failure, if any
    """

    def __init__(
        self, value: DynVal, target_type: str, cause: Exception | None = None
    ) -> None:
        self.value = value
        self.target_type = target_type
        self.cause = cause
        message = f"Failed to turn `{value}` into a value of type {target_type}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)

    @property
    def span(self) -> Span | None:
        return self.value.span


class WrongArgCount(EvalError):
    """Raised when a function is called with the wrong number of arguments."""

    def __init__(self, function: str) -> None:
        self.function = function
        super().__init__(f"Incorrect number of arguments given to function: {function}")


class UnknownFunction(EvalError):
    """Raised when neither the built-ins nor the host define a function."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown function {name}")


class UnknownVariable(EvalError):
    """Raised when variable substitution meets an unbound name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown variable {name}")


class CannotIndex(EvalError):
    """Raised when indexing into a value that is neither a JSON array nor object."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Unable to index into value {value}")


class SpannedError(EvalError):
    """An error annotated with the source span closest to the failing operation."""

    def __init__(self, span: Span, inner: EvalError) -> None:
        self._span = span
        self.inner = inner
        super().__init__(inner.message)

    @property
    def span(self) -> Span:
        return self._span

    @property
    def root_cause(self) -> EvalError:
        return self.inner.root_cause

    def spans(self) -> list[Span]:
        return [self._span, *self.inner.spans()]
