"""
Evaluation settings for simplexpr.

Settings are read from the process environment so a host can switch on
diagnostics without code changes:

    SIMPLEXPR_TRACE=1    log every evaluated node and its result at DEBUG

Usage:
    from simplexpr.config import get_eval_settings

    settings = get_eval_settings()
    if settings.trace:
        ...
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Environment variable names
SIMPLEXPR_TRACE_VAR = "SIMPLEXPR_TRACE"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


class EvalSettings(BaseModel):
    """Options controlling a single evaluation."""

    trace: bool = Field(default=False, description="Log each node result at DEBUG")

    model_config = ConfigDict(frozen=True)


def _read_flag(var: str) -> bool:
    raw = os.environ.get(var, "").lower().strip()
    if raw in _TRUTHY:
        return True
    if raw not in _FALSY:
        logger.warning("Unknown %s value '%s'. Treating it as disabled.", var, raw)
    return False


def get_eval_settings() -> EvalSettings:
    """Build settings from the current environment.

    Returns:
        EvalSettings with ``trace`` enabled when SIMPLEXPR_TRACE is truthy.
    """
    return EvalSettings(trace=_read_flag(SIMPLEXPR_TRACE_VAR))
