# cnf_builder.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from pysat.formula import CNF


logger = logging.getLogger(__name__)


def lit(var: int, value: bool) -> int:
    return var if value else -var


@dataclass
class CNFBuilder:
    var_count: int = 0
    clauses: List[List[int]] = field(default_factory=list)
    name2var: Dict[str, int] = field(default_factory=dict)
    has_empty_clause: bool = False

    def new_var(self, name: Optional[str] = None) -> int:
        if name is not None and name in self.name2var:
            raise ValueError(f"Variable name already exists: {name}")
        self.var_count += 1
        if name is not None:
            self.name2var[name] = self.var_count
        return self.var_count

    def new_vars(self, count: int) -> List[int]:
        return [self.new_var() for _ in range(count)]

    def var(self, name: str) -> int:
        if name not in self.name2var:
            raise KeyError(f"Unknown variable name: {name}")
        return self.name2var[name]

    def add_clause(self, lits: Sequence[int]) -> None:
        lits = list(lits)
        for l in lits:
            if l == 0:
                raise ValueError("Literal 0 is not allowed in DIMACS.")
            if abs(l) > self.var_count:
                raise ValueError(f"Literal {l} refers to an unallocated variable.")
        if not lits:
            # formula is now trivially UNSAT; callers are expected to mean it
            logger.warning("empty clause added, formula is unsatisfiable")
            self.has_empty_clause = True
        self.clauses.append(lits)

    def add_clauses(self, clauses: Iterable[Sequence[int]]) -> None:
        for cl in clauses:
            self.add_clause(cl)

    def add_unit(self, var: int, value: bool) -> None:
        self.add_clause([lit(var, value)])

    def stats(self) -> Dict[str, int]:
        return {"vars": self.var_count, "clauses": len(self.clauses)}

    def to_cnf(self) -> CNF:
        """Copy the clauses into a pysat CNF (nv kept in sync with var_count)."""
        cnf = CNF(from_clauses=[list(cl) for cl in self.clauses])
        cnf.nv = max(cnf.nv, self.var_count)
        return cnf

    def write_dimacs(self, path: str, comments: Optional[List[str]] = None) -> None:
        cnf = self.to_cnf()
        lines = [f"c {c}" for c in (comments or [])]
        # keep the symbolic names alongside the numbering
        lines += [f"c {v} {name}" for name, v in sorted(self.name2var.items(), key=lambda kv: kv[1])]
        cnf.to_file(path, comments=lines)
        logger.info("wrote DIMACS to %s (%d vars, %d clauses)", path, self.var_count, len(self.clauses))
