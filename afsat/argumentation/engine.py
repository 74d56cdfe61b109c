"""
Argumentation Engine — SAT-based Extension Computation

Computes labellings of Dung frameworks by reduction to SAT:
- Complete labellings: all models of the complete encoding
- Stable labellings: all models of the stable encoding
- Preferred labellings: subset-maximal complete labellings, found by
  climbing from a model towards a maximal one without enumerating
  every complete labelling first

Computational complexity:
- Complete / Stable: one SAT call per labelling, plus a final UNSAT call
- Preferred: one climb per preferred extension, each climb at most
  |Args| + 1 SAT calls

Every query opens its own solver sessions and deletes them before
returning; nothing is shared between queries. There is no timeout:
callers bound the cost by bounding the framework size.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from .encoding import (
    LabelVariables,
    accepted_indices,
    decode_labelling,
    encode_complete,
    encode_stable,
    non_empty_clause,
)
from .models import (
    Acceptability,
    ArgumentationFramework,
    Labelling,
    Semantics,
    SemanticsResult,
)
from .sat import DEFAULT_SOLVER, Formula, SatSession

logger = logging.getLogger("afsat.argumentation")


class SearchPhase(Enum):
    """Phases of the preferred-extension search."""
    START_CLIMB = "start_climb"
    FREEZE_AND_EXTEND = "freeze_and_extend"
    FIXPOINT_CHECK = "fixpoint_check"
    RECORD_AND_EXCLUDE = "record_and_exclude"
    DONE = "done"


class ArgumentationEngine:
    """
    Core engine for computing argumentation labellings.

    The engine holds no solver state; ``solver_name`` selects which
    PySAT backend each fresh session uses.
    """

    def __init__(self, solver_name: str = DEFAULT_SOLVER):
        self.solver_name = solver_name

    # ── Enumeration ─────────────────────────────────────────────

    def enumerate(self, formula: Formula, variables: LabelVariables) -> list[Labelling]:
        """
        Return the labelling of every model of ``formula``.

        After each model a blocking clause (the negation of every
        literal in the model) is added, so no model is found twice.
        The caller's formula is copied, not extended.
        """
        result: list[Labelling] = []
        with SatSession(formula.copy(), self.solver_name) as session:
            while True:
                model = session.solve()
                if model is None:
                    break
                result.append(decode_labelling(model, variables))

                blocking = [-lit for lit in model]
                if not blocking:
                    # A model over no variables is the only model.
                    break
                session.add_clause(blocking)
        return result

    # ── Complete Labellings ─────────────────────────────────────

    def complete_labellings(self, af: ArgumentationFramework) -> list[Labelling]:
        encoded = encode_complete(af)
        labellings = self.enumerate(encoded.formula, encoded.variables)
        logger.debug(f"complete: {len(labellings)} labellings for {af.num_args} args")
        return labellings

    # ── Stable Labellings ───────────────────────────────────────

    def stable_labellings(self, af: ArgumentationFramework) -> list[Labelling]:
        """Complete labellings with no UNDEC argument."""
        encoded = encode_stable(af)
        labellings = self.enumerate(encoded.formula, encoded.variables)
        logger.debug(f"stable: {len(labellings)} labellings for {af.num_args} args")
        return labellings

    # ── Preferred Labellings ────────────────────────────────────

    def preferred_labellings(self, af: ArgumentationFramework) -> list[Labelling]:
        """
        Compute the preferred labellings (complete labellings with a
        subset-maximal set of accepted arguments).

        Algorithm:
            base = complete encoding ∧ (some argument is IN)
            repeat:
                START_CLIMB         solve a fresh copy of base
                FREEZE_AND_EXTEND   fix every accepted argument IN and
                                    require one more argument IN
                FIXPOINT_CHECK      re-solve; UNSAT means the last model
                                    is maximal
                RECORD_AND_EXCLUDE  keep it, and add to base a clause
                                    requiring some argument it does
                                    not accept
            until a climb cannot start

        When no non-empty candidate exists the result is a single
        labelling with every argument UNDEC (empty for no arguments).
        """
        n = af.num_args
        if n == 0:
            return [Labelling()]

        encoded = encode_complete(af)
        variables = encoded.variables
        base = encoded.formula
        base.add_clause(non_empty_clause(variables))

        found: list[Labelling] = []
        phase = SearchPhase.START_CLIMB
        session: SatSession | None = None
        model: list[int] = []
        frozen: set[int] = set()
        climbs = 0

        try:
            while phase is not SearchPhase.DONE:
                if phase is SearchPhase.START_CLIMB:
                    climbs += 1
                    session = SatSession(base.copy(), self.solver_name)
                    frozen = set()
                    first = session.solve()
                    if first is None:
                        phase = SearchPhase.DONE
                    else:
                        model = first
                        phase = SearchPhase.FREEZE_AND_EXTEND

                elif phase is SearchPhase.FREEZE_AND_EXTEND:
                    accepted = accepted_indices(model, variables)
                    for i in sorted(accepted - frozen):
                        session.add_clause([variables.inn[i]])
                        frozen.add(i)
                    remaining = [variables.inn[i] for i in range(n) if i not in accepted]
                    if remaining:
                        session.add_clause(remaining)
                        phase = SearchPhase.FIXPOINT_CHECK
                    else:
                        phase = SearchPhase.RECORD_AND_EXCLUDE

                elif phase is SearchPhase.FIXPOINT_CHECK:
                    larger = session.solve()
                    if larger is None:
                        phase = SearchPhase.RECORD_AND_EXCLUDE
                    else:
                        model = larger
                        phase = SearchPhase.FREEZE_AND_EXTEND

                elif phase is SearchPhase.RECORD_AND_EXCLUDE:
                    session.close()
                    session = None
                    found.append(decode_labelling(model, variables))

                    accepted = accepted_indices(model, variables)
                    exclusion = [variables.inn[i] for i in range(n) if i not in accepted]
                    if exclusion:
                        base.add_clause(exclusion)
                        phase = SearchPhase.START_CLIMB
                    else:
                        phase = SearchPhase.DONE
        finally:
            if session is not None:
                session.close()

        logger.debug(f"preferred: {len(found)} labellings for {n} args in {climbs} climbs")

        if not found:
            return [Labelling((Acceptability.UNDEC,) * n)]
        return found

    # ── Dispatch ────────────────────────────────────────────────

    def labellings(self, af: ArgumentationFramework, semantics: Semantics) -> list[Labelling]:
        if semantics == Semantics.COMPLETE:
            return self.complete_labellings(af)
        if semantics == Semantics.STABLE:
            return self.stable_labellings(af)
        if semantics == Semantics.PREFERRED:
            return self.preferred_labellings(af)
        raise ValueError(f"Unsupported semantics: {semantics!r}")

    def resolve(
        self,
        af: ArgumentationFramework,
        semantics: Semantics = Semantics.COMPLETE,
    ) -> SemanticsResult:
        """Compute ``semantics`` for ``af`` and time it."""
        start = time.perf_counter()
        labellings = self.labellings(af, semantics)
        elapsed = (time.perf_counter() - start) * 1000

        logger.info(
            f"{semantics.value} | {af.num_args} args, {len(af.attacks)} attacks | "
            f"{len(labellings)} labellings | {elapsed:.2f}ms"
        )

        return SemanticsResult(
            semantics=semantics,
            labellings=labellings,
            framework_summary=af.to_dict(),
            resolution_time_ms=round(elapsed, 3),
        )


def compute_labellings(
    af: ArgumentationFramework,
    semantics: Semantics,
    solver_name: str = DEFAULT_SOLVER,
) -> list[Labelling]:
    """Labellings of ``af`` under ``semantics``, using a fresh engine."""
    return ArgumentationEngine(solver_name).labellings(af, semantics)
