"""
Bundled example frameworks in APX text.

Small hand-picked graphs (a chain, two 2-cycles, an eight-argument
mixed graph) and a thirty-argument random graph with self-attacks,
useful as smoke tests and for trying the API.
"""

from __future__ import annotations

from dataclasses import dataclass

from .apx_bridge import ApxBridge
from .models import ArgumentationFramework


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    apx: str

    def framework(self) -> ArgumentationFramework:
        return ApxBridge(strict=True).build_framework(self.apx)


PRESETS: list[Preset] = [
    Preset(
        name="chain",
        description="a attacks b, b attacks c: a reinstates c.",
        apx="""\
arg(a).
arg(b).
arg(c).
att(a,b).
att(b,c).
""",
    ),
    Preset(
        name="two-cycles",
        description="Two independent mutual attacks: four complete choices.",
        apx="""\
arg(a).
arg(b).
arg(c).
arg(d).
att(a,b).
att(b,a).
att(c,d).
att(d,c).
""",
    ),
    Preset(
        name="mixed-8",
        description="Eight arguments with chains and an odd cycle.",
        apx="""\
arg(A).
arg(B).
arg(C).
arg(D).
arg(E).
arg(F).
arg(G).
arg(H).
att(B,H).
att(C,A).
att(G,A).
att(D,E).
att(H,D).
att(E,B).
att(C,F).
""",
    ),
    Preset(
        name="random-30",
        description="Thirty arguments, random attacks including self-attacks.",
        apx="""\
arg(A0).
arg(A1).
arg(A2).
arg(A3).
arg(A4).
arg(A5).
arg(A6).
arg(A7).
arg(A8).
arg(A9).
arg(A10).
arg(A11).
arg(A12).
arg(A13).
arg(A14).
arg(A15).
arg(A16).
arg(A17).
arg(A18).
arg(A19).
arg(A20).
arg(A21).
arg(A22).
arg(A23).
arg(A24).
arg(A25).
arg(A26).
arg(A27).
arg(A28).
arg(A29).
att(A4,A18).
att(A8,A7).
att(A11,A21).
att(A4,A15).
att(A6,A15).
att(A17,A9).
att(A12,A3).
att(A2,A17).
att(A21,A27).
att(A16,A13).
att(A6,A0).
att(A25,A25).
att(A26,A12).
att(A6,A22).
att(A14,A14).
att(A23,A17).
att(A28,A4).
att(A28,A25).
att(A17,A15).
att(A12,A6).
att(A10,A6).
att(A20,A23).
att(A23,A2).
att(A23,A13).
att(A8,A21).
att(A1,A17).
att(A20,A12).
att(A4,A12).
att(A15,A2).
att(A11,A2).
att(A9,A20).
att(A28,A13).
att(A18,A23).
att(A26,A18).
att(A13,A24).
att(A26,A0).
att(A19,A9).
att(A4,A25).
att(A18,A14).
att(A6,A9).
att(A15,A25).
att(A13,A6).
att(A6,A14).
att(A19,A25).
att(A1,A14).
""",
    ),
]


def get_preset(index: int) -> Preset:
    """Raises IndexError for an unknown index."""
    if not 0 <= index < len(PRESETS):
        raise IndexError(f"No preset {index}; {len(PRESETS)} available")
    return PRESETS[index]
