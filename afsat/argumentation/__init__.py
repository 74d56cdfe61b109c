"""Argumentation engine — SAT-based semantics for Dung's AAF."""
from .engine import ArgumentationEngine, SearchPhase, compute_labellings
from .apx_bridge import ApxBridge, ApxParseError, ParseReport, SkippedLine
from .models import (
    Acceptability,
    Attack,
    ArgumentationFramework,
    Labelling,
    Semantics,
    SemanticsResult,
)
from .presets import PRESETS, Preset, get_preset

__all__ = [
    "ArgumentationEngine",
    "SearchPhase",
    "compute_labellings",
    "ApxBridge",
    "ApxParseError",
    "ParseReport",
    "SkippedLine",
    "Acceptability",
    "Attack",
    "ArgumentationFramework",
    "Labelling",
    "Semantics",
    "SemanticsResult",
    "PRESETS",
    "Preset",
    "get_preset",
]
