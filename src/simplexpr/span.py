"""
Source locations for expression nodes and values.

A span only ever serves diagnostics: it is produced by the parser, threaded
through evaluation and attached to errors so a host can point at the
offending source text.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Span(BaseModel):
    """Half-open byte range ``lo..hi`` within the source identified by ``file_id``."""

    lo: int = Field(description="Start offset")
    hi: int = Field(description="End offset")
    file_id: int = Field(default=0, description="Source file identifier")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def dummy(cls) -> Span:
        """Placeholder span for synthesised nodes."""
        return cls(lo=0, hi=0, file_id=0)

    def __str__(self) -> str:
        return f"{self.lo}..{self.hi}"
