"""
SAT backend capability.

A thin layer over PySAT giving the encoder and the search algorithms
three operations: allocate fresh variables, add clauses, solve.

- Formula: an owned CNF value (pysat.formula.CNF) plus the variable
  counter. ``copy()`` is structural, never an alias.
- SatSession: one live incremental solver bootstrapped from a formula.
  Sessions are created per query and deleted when the query ends.

Literals use the DIMACS convention: variable v is ``v``, its negation
is ``-v``. Variable 0 does not exist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pysat.formula import CNF
from pysat.solvers import Solver

logger = logging.getLogger("afsat.argumentation.sat")

DEFAULT_SOLVER = "glucose4"


class Formula:
    """A CNF formula that also allocates its own variables."""

    def __init__(self, cnf: CNF | None = None, top: int = 0):
        self.cnf = cnf if cnf is not None else CNF()
        self.top = max(top, self.cnf.nv)

    def new_variables(self, n: int) -> list[int]:
        """Allocate ``n`` fresh variables and return their handles."""
        fresh = list(range(self.top + 1, self.top + n + 1))
        self.top += n
        self.cnf.nv = max(self.cnf.nv, self.top)
        return fresh

    def add_clause(self, lits: Iterable[int]) -> None:
        clause = [int(lit) for lit in lits]
        if not clause:
            raise ValueError("Empty clause is not allowed (would make the formula UNSAT).")
        if 0 in clause:
            raise ValueError("Literal 0 is not allowed in DIMACS.")
        self.cnf.append(clause)

    @property
    def clauses(self) -> list[list[int]]:
        return self.cnf.clauses

    def copy(self) -> Formula:
        return Formula(CNF(from_clauses=[list(c) for c in self.cnf.clauses]), top=self.top)

    def __len__(self) -> int:
        return len(self.cnf.clauses)


class SatSession:
    """
    A live solver session that owns its formula.

    Clauses added through the session go to both the solver and the
    owned formula, so the formula always describes what the solver
    is solving. Use as a context manager so the solver is freed.
    """

    def __init__(self, formula: Formula, solver_name: str = DEFAULT_SOLVER):
        self.formula = formula
        self.solver_name = solver_name
        self._solver = Solver(name=solver_name, bootstrap_with=formula.clauses)
        self.solve_calls = 0

    def add_clause(self, lits: Iterable[int]) -> None:
        clause = list(lits)
        self.formula.add_clause(clause)
        self._solver.add_clause(clause)

    def solve(self) -> list[int] | None:
        """Return a model as a list of signed literals, or None if UNSAT."""
        self.solve_calls += 1
        if not self._solver.solve():
            return None
        return self._solver.get_model() or []

    def close(self) -> None:
        if self._solver is not None:
            self._solver.delete()
            self._solver = None
            logger.debug(
                f"Session closed ({self.solver_name}, {self.solve_calls} solve calls, "
                f"{len(self.formula)} clauses)"
            )

    def __enter__(self) -> SatSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
