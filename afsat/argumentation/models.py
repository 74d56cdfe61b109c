"""
Argumentation Framework Models — Dung's Abstract Argumentation

Implements the formal structures the SAT-based semantics operate on:
- Arguments identified by integer index, optionally named
- The attack relation as (origin, target) index pairs
- Labellings: one Acceptability status per argument

Frameworks and labellings are immutable values. The attacker index is
always derived from the attack list, never cached.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum


class Semantics(str, Enum):
    """Argumentation semantics computed by the engine."""
    COMPLETE = "complete"
    STABLE = "stable"
    PREFERRED = "preferred"


class Acceptability(str, Enum):
    """Status of a single argument within a labelling."""
    IN = "in"        # accepted
    OUT = "out"      # rejected
    UNDEC = "undec"  # undecided


@dataclass(frozen=True)
class Attack:
    """
    An attack relation between two arguments.

    If (origin, target) is an attack, argument 'origin' attacks
    argument 'target'. Self-attacks are allowed.
    """
    origin: int
    target: int

    def __iter__(self):
        return iter((self.origin, self.target))


@dataclass(frozen=True)
class Labelling:
    """
    A total assignment of each argument to IN, OUT or UNDEC,
    aligned with argument index.
    """
    statuses: tuple[Acceptability, ...] = ()

    def __len__(self) -> int:
        return len(self.statuses)

    def __getitem__(self, index: int) -> Acceptability:
        return self.statuses[index]

    def __iter__(self):
        return iter(self.statuses)

    def _indices(self, status: Acceptability) -> frozenset[int]:
        return frozenset(i for i, s in enumerate(self.statuses) if s == status)

    @property
    def accepted(self) -> frozenset[int]:
        """The extension: indices of accepted arguments."""
        return self._indices(Acceptability.IN)

    @property
    def rejected(self) -> frozenset[int]:
        return self._indices(Acceptability.OUT)

    @property
    def undecided(self) -> frozenset[int]:
        return self._indices(Acceptability.UNDEC)

    def to_dict(self, names: Sequence[str] | None = None) -> dict:
        def label(i: int) -> str | int:
            return names[i] if names else i

        return {
            "statuses": [s.value for s in self.statuses],
            "accepted": [label(i) for i in sorted(self.accepted)],
            "rejected": [label(i) for i in sorted(self.rejected)],
            "undecided": [label(i) for i in sorted(self.undecided)],
        }

    def __repr__(self):
        return "Labelling(" + "".join(
            {"in": "I", "out": "O", "undec": "U"}[s.value] for s in self.statuses
        ) + ")"


@dataclass(frozen=True)
class ArgumentationFramework:
    """
    Dung's Abstract Argumentation Framework (AAF).

    AF = (Args, Attacks) where:
    - Args = {0, ..., num_args - 1}
    - Attacks ⊆ Args × Args is a binary attack relation

    Use the ``from_*`` constructors; they derive ``num_args``.
    """
    num_args: int = 0
    attacks: tuple[Attack, ...] = ()
    names: tuple[str, ...] | None = field(default=None, compare=False)

    @classmethod
    def from_attacks(cls, attacks: Iterable[Attack | tuple[int, int]]) -> ArgumentationFramework:
        """
        Creates a framework from an attack relation alone. The framework
        has arguments 0, 1, ..., max; where max is the highest index
        referenced by any attack.
        """
        edges = tuple(Attack(int(o), int(t)) for o, t in attacks)
        highest = max((i for a in edges for i in (a.origin, a.target)), default=-1)
        return cls(num_args=highest + 1, attacks=edges)

    @classmethod
    def from_named(
        cls,
        name_to_index: Mapping[str, int],
        attacks: Iterable[Attack | tuple[int, int]],
    ) -> ArgumentationFramework:
        """
        Creates a framework whose size is the size of the name table.
        Attacks reference indices, not names.
        """
        n = len(name_to_index)
        by_index: list[str | None] = [None] * n
        for name, index in name_to_index.items():
            if not 0 <= index < n or by_index[index] is not None:
                raise ValueError(f"Name table is not a bijection onto 0..{n - 1}: {name!r} -> {index}")
            by_index[index] = name

        edges = tuple(Attack(int(o), int(t)) for o, t in attacks)
        for a in edges:
            if not (0 <= a.origin < n and 0 <= a.target < n):
                raise ValueError(f"Attack {a.origin}->{a.target} outside named range 0..{n - 1}")
        return cls(num_args=n, attacks=edges, names=tuple(by_index))

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        attacks: Iterable[tuple[str, str]] = (),
    ) -> ArgumentationFramework:
        """Index names by first-seen order, then resolve name-pair attacks."""
        index: dict[str, int] = {}
        for name in names:
            index.setdefault(name, len(index))
        return cls.from_named(index, [(index[o], index[t]) for o, t in attacks])

    def attackers_of(self, arg: int) -> list[int]:
        """Origins of every attack whose target is ``arg``."""
        return [a.origin for a in self.attacks if a.target == arg]

    def attacker_index(self) -> list[list[int]]:
        """Attackers of every argument, aligned with argument index."""
        index: list[list[int]] = [[] for _ in range(self.num_args)]
        for a in self.attacks:
            index[a.target].append(a.origin)
        return index

    def name_of(self, arg: int) -> str | None:
        if self.names is None:
            return None
        return self.names[arg]

    def names_by_index(self) -> tuple[str, ...] | None:
        return self.names

    def display_names(self) -> list[str]:
        """Names when present, otherwise the stringified indices."""
        if self.names is not None:
            return list(self.names)
        return [str(i) for i in range(self.num_args)]

    @property
    def fingerprint(self) -> str:
        raw = f"{self.num_args}:" + ",".join(f"{a.origin}>{a.target}" for a in self.attacks)
        return f"sha256:{hashlib.sha256(raw.encode()).hexdigest()[:16]}"

    def to_dict(self) -> dict:
        return {
            "arguments": self.display_names(),
            "attacks": [[a.origin, a.target] for a in self.attacks],
            "framework_hash": self.fingerprint,
            "stats": {
                "num_arguments": self.num_args,
                "num_attacks": len(self.attacks),
            },
        }


@dataclass
class SemanticsResult:
    """
    The output of a semantics query: every labelling the framework
    admits under the requested semantics, in no particular order.
    """
    semantics: Semantics
    labellings: list[Labelling]
    framework_summary: dict      # compact AF representation
    resolution_time_ms: float = 0.0

    @property
    def extensions(self) -> list[frozenset[int]]:
        return [lab.accepted for lab in self.labellings]
