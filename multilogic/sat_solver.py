# sat_solver.py
from __future__ import annotations
import logging
from typing import FrozenSet, Iterable, Iterator, List, Optional, Protocol, Sequence

from pysat.solvers import Solver

from cnf_builder import CNFBuilder
from cnf_errors import SolverUnavailable, Unsatisfiable


logger = logging.getLogger(__name__)

# Common PySAT names, first one that instantiates wins.
SOLVER_CANDIDATES = ["cadical153", "glucose4", "glucose3", "minisat22", "minicard"]


class Model:
    """Satisfying assignment as the set of signed literals that hold."""

    def __init__(self, lits: Iterable[int]) -> None:
        self._lits: FrozenSet[int] = frozenset(lits)

    def __contains__(self, lit: int) -> bool:
        return lit in self._lits

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._lits, key=abs))

    def __len__(self) -> int:
        return len(self._lits)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Model) and self._lits == other._lits

    def __hash__(self) -> int:
        return hash(self._lits)

    def __repr__(self) -> str:
        return f"Model({sorted(self._lits, key=abs)})"

    def value(self, var: int) -> bool:
        return var in self._lits

    def true_vars(self) -> List[int]:
        return sorted(l for l in self._lits if l > 0)


def full_model(raw: Optional[Iterable[int]], var_count: int) -> Model:
    """
    pysat only reports variables up to the highest one seen in a clause;
    the remaining allocated variables are false.
    """
    lits = set(raw or [])
    lits.update(-v for v in range(1, var_count + 1) if v not in lits and -v not in lits)
    return Model(lits)


class DecisionProcedure(Protocol):
    def solve(self, cnf: CNFBuilder, assumptions: Sequence[int] = ()) -> Optional[Model]:
        ...


def pick_solver_name(candidates: Optional[List[str]] = None) -> str:
    for name in candidates or SOLVER_CANDIDATES:
        try:
            s = Solver(name=name)
            s.delete()
            return name
        except Exception:
            logger.debug("solver backend %s not available", name)
            continue
    raise SolverUnavailable(
        "No SAT solver backend found in PySAT. Install e.g. python-sat with solvers."
    )


class SatSolver:
    """pysat-backed decision procedure. Backend errors propagate unchanged."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or pick_solver_name()

    def solve(self, cnf: CNFBuilder, assumptions: Sequence[int] = ()) -> Optional[Model]:
        if cnf.has_empty_clause:
            return None
        logger.debug("solving with %s: %s", self.name, cnf.stats())
        with Solver(name=self.name) as solver:
            for cl in cnf.clauses:
                solver.add_clause(cl)
            sat = solver.solve(assumptions=list(assumptions))
            if not sat:
                return None
            return full_model(solver.get_model(), cnf.var_count)

    def solutions(
        self,
        cnf: CNFBuilder,
        how_many: int = 1,
        interesting: Optional[Iterable[int]] = None,
    ) -> Iterator[Model]:
        """
        Yield up to `how_many` models (0 = all). After each model the
        assignment of the `interesting` variables (all of them when None) is
        blocked, so models differing only in helper variables are skipped.
        """
        if cnf.has_empty_clause:
            return
        interesting = set(interesting) if interesting is not None else None
        found = 0
        with Solver(name=self.name) as solver:
            for cl in cnf.clauses:
                solver.add_clause(cl)
            while how_many == 0 or found < how_many:
                if not solver.solve():
                    break
                model = full_model(solver.get_model(), cnf.var_count)
                found += 1
                yield model
                block = [-l for l in model if interesting is None or abs(l) in interesting]
                if not block:
                    # nothing left to distinguish further models
                    break
                solver.add_clause(block)
        logger.debug("enumerated %d model(s)", found)


def require_model(solver: DecisionProcedure, cnf: CNFBuilder, assumptions: Sequence[int] = ()) -> Model:
    model = solver.solve(cnf, assumptions)
    if model is None:
        raise Unsatisfiable("no solution exists")
    return model
