"""
CNF encodings of argumentation semantics.

Each argument i gets three variables: in[i], out[i], und[i]. The clause
families below are satisfied exactly by the complete labellings
(Klein & Thimm 2020, Section 3.1):

  (1) exactly one of in/out/und per argument
  (2) unattacked arguments are IN
  (3) in[i]  <->  every attacker is OUT
  (4) out[i] <->  some attacker is IN

Stable labellings additionally forbid UNDEC.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Acceptability, ArgumentationFramework, Labelling
from .sat import Formula


@dataclass(frozen=True)
class LabelVariables:
    """Variable handles for the three statuses, aligned with argument index."""
    inn: tuple[int, ...]
    out: tuple[int, ...]
    und: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.inn)


@dataclass
class EncodedFramework:
    formula: Formula
    variables: LabelVariables


def allocate_label_variables(formula: Formula, n: int) -> LabelVariables:
    return LabelVariables(
        inn=tuple(formula.new_variables(n)),
        out=tuple(formula.new_variables(n)),
        und=tuple(formula.new_variables(n)),
    )


def encode_complete(af: ArgumentationFramework) -> EncodedFramework:
    """Build the formula whose models are the complete labellings of ``af``."""
    n = af.num_args
    formula = Formula()
    v = allocate_label_variables(formula, n)
    inn, out, und = v.inn, v.out, v.und

    # (1)
    for i in range(n):
        formula.add_clause([inn[i], out[i], und[i]])
        formula.add_clause([-inn[i], -out[i]])
        formula.add_clause([-inn[i], -und[i]])
        formula.add_clause([-out[i], -und[i]])

    for i, attackers in enumerate(af.attacker_index()):
        # (2)
        if not attackers:
            formula.add_clause([inn[i]])
            formula.add_clause([-out[i]])
            formula.add_clause([-und[i]])
            continue

        # (3)
        for j in attackers:
            formula.add_clause([-inn[i], out[j]])
        formula.add_clause([-out[j] for j in attackers] + [inn[i]])

        # (4)
        for j in attackers:
            formula.add_clause([-inn[j], out[i]])
        formula.add_clause([inn[j] for j in attackers] + [-out[i]])

    return EncodedFramework(formula=formula, variables=v)


def encode_stable(af: ArgumentationFramework) -> EncodedFramework:
    """Complete encoding with no argument left undecided."""
    encoded = encode_complete(af)
    for u in encoded.variables.und:
        encoded.formula.add_clause([-u])
    return encoded


def non_empty_clause(variables: LabelVariables) -> list[int]:
    """At least one argument is accepted. Empty when there are no arguments."""
    return list(variables.inn)


def decode_labelling(model: list[int], variables: LabelVariables) -> Labelling:
    """
    Computes a labelling from a boolean assignment.

    IN wins over OUT, OUT over UNDEC; variables absent from the model
    read as false.
    """
    true_vars = {lit for lit in model if lit > 0}
    statuses = []
    for i in range(len(variables)):
        if variables.inn[i] in true_vars:
            statuses.append(Acceptability.IN)
        elif variables.out[i] in true_vars:
            statuses.append(Acceptability.OUT)
        else:
            statuses.append(Acceptability.UNDEC)
    return Labelling(tuple(statuses))


def accepted_indices(model: list[int], variables: LabelVariables) -> set[int]:
    true_vars = {lit for lit in model if lit > 0}
    return {i for i, var in enumerate(variables.inn) if var in true_vars}
