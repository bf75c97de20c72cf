"""Shared pytest fixtures for simplexpr tests."""

import pytest

from simplexpr.config import SIMPLEXPR_TRACE_VAR
from simplexpr.span import Span


@pytest.fixture(autouse=True)
def _no_trace_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep evaluation settings independent of the developer's shell."""
    monkeypatch.delenv(SIMPLEXPR_TRACE_VAR, raising=False)


@pytest.fixture
def span() -> Span:
    """Return a non-trivial source span."""
    return Span(lo=4, hi=9, file_id=1)
