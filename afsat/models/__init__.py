"""
models — API Request/Response Schemas

These Pydantic models define the JSON contract of the afsat HTTP API.
The core domain types live in afsat.argumentation.models.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from afsat.argumentation import (
    Labelling,
    Semantics,
    SkippedLine,
)


# ── Request Models ───────────────────────────────────────────────

class FrameworkRequest(BaseModel):
    """
    A framework given either as APX text or as index pairs.

    With ``attacks``, ``names`` (if given) label arguments 0..len-1 and
    fix the argument count; otherwise the count is derived from the
    highest index.
    """
    apx: Optional[str] = None
    attacks: Optional[list[tuple[int, int]]] = None
    names: Optional[list[str]] = None
    strict: bool = False

    @model_validator(mode="after")
    def exactly_one_source(self) -> "FrameworkRequest":
        if (self.apx is None) == (self.attacks is None):
            raise ValueError("Provide exactly one of 'apx' or 'attacks'")
        if self.names is not None and self.attacks is None:
            raise ValueError("'names' only applies to 'attacks'; APX text declares its own names")
        if self.attacks is not None and any(i < 0 for pair in self.attacks for i in pair):
            raise ValueError("Attack indices must be non-negative")
        if self.names is not None and len(set(self.names)) != len(self.names):
            raise ValueError("Argument names must be distinct")
        return self


# ── Response Models ──────────────────────────────────────────────

class LabellingView(BaseModel):
    statuses: list[str]
    accepted: list[str]
    rejected: list[str]
    undecided: list[str]

    @classmethod
    def from_labelling(cls, labelling: Labelling, names: list[str]) -> "LabellingView":
        return cls(**labelling.to_dict(names))


class SkippedLineView(BaseModel):
    line_no: int
    text: str
    reason: str

    @classmethod
    def from_skipped(cls, skipped: SkippedLine) -> "SkippedLineView":
        return cls(line_no=skipped.line_no, text=skipped.text, reason=skipped.reason)


class SemanticsResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: f"afs_req_{uuid.uuid4().hex[:8]}")
    semantics: Semantics
    arguments: list[str] = Field(default_factory=list)
    num_attacks: int = 0
    framework_hash: str = ""
    labellings: list[LabellingView] = Field(default_factory=list)
    skipped_lines: list[SkippedLineView] = Field(default_factory=list)
    elapsed_ms: float = 0.0


class PresetInfo(BaseModel):
    index: int
    name: str
    description: str
    apx: str
    num_arguments: int = 0
    num_attacks: int = 0


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    uptime_seconds: int = 0
    solver: str = ""
    max_arguments: int = 0
