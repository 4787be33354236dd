#!/usr/bin/env python3
# solve_json.py
from __future__ import annotations
import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from cnf_area import Op, add_area
from cnf_builder import CNFBuilder
from cnf_dnf import CARD_ENCODINGS, DEFAULT_ENCODING, add_cardinality
from cnf_errors import EncodingError, ImpossibleConstraint, UnsupportedConstraint
from cnf_integer import IntVar, add_all_different, add_equals, add_not_equals, add_sum_all, declare_int, int_value
from puzzle_grid import Matrix
from sat_solver import Model, SatSolver


EXIT_IMPOSSIBLE = 1
EXIT_UNSAT = 2


def load_json(path: str) -> Any:
    if not os.path.isfile(path):
        raise FileNotFoundError(f"[FATAL] File not found: {path}")
    with open(path, "r") as f:
        return json.load(f)


class Problem:
    """
    Formula built from a JSON description:

      {
        "integers":  {"a": [1, 6], "b": [1, 8]},
        "booleans":  ["p", "q", "r"],
        "grids":     {"g": {"shape": [2, 2], "range": [1, 2]}},
        "constraints": [
          {"type": "sum", "args": ["a", "b"], "value": 14},
          {"type": "area", "op": "*", "args": ["a", "b"], "value": 12},
          {"type": "cardinality", "args": ["p", "q", "r"], "k": 2},
          {"type": "clause", "args": ["p", "-q"]},
          {"type": "rows_different", "grid": "g"}
        ]
      }

    Grid cells are integers named g[x,y] (row x, column y).
    """

    def __init__(self, data: Dict[str, Any], cardinality_encoding: str = DEFAULT_ENCODING) -> None:
        self.cnf = CNFBuilder()
        self.cardinality_encoding = cardinality_encoding
        self.ints: Dict[str, IntVar] = {}
        self.bools: Dict[str, int] = {}
        self.grids: Dict[str, Matrix[IntVar]] = {}

        for name, bounds in data.get("integers", {}).items():
            lo, hi = bounds
            self.ints[name] = declare_int(self.cnf, int(lo), int(hi), name)
        for name, spec in data.get("grids", {}).items():
            self.declare_grid(name, spec)
        for name in data.get("booleans", []):
            if name in self.ints or name in self.grids:
                raise ValueError(f"[FATAL] '{name}' is declared twice")
            self.bools[name] = self.cnf.new_var(name)

        for i, c in enumerate(data.get("constraints", [])):
            try:
                self.add_constraint(c)
            except EncodingError as e:
                raise type(e)(f"constraint #{i} {c}: {e}") from e

    def declare_grid(self, name: str, spec: Dict[str, Any]) -> None:
        if name in self.ints or name in self.grids:
            raise ValueError(f"[FATAL] '{name}' is declared twice")
        h, w = (int(n) for n in spec["shape"])
        lo, hi = (int(n) for n in spec["range"])
        cells = []
        for x in range(h):
            for y in range(w):
                cell = f"{name}[{x},{y}]"
                self.ints[cell] = declare_int(self.cnf, lo, hi, cell)
                cells.append(self.ints[cell])
        self.grids[name] = Matrix(cells, (h, w))

    def grid_arg(self, c: Dict[str, Any]) -> Matrix[IntVar]:
        if c.get("grid") not in self.grids:
            raise ValueError(f"[FATAL] Unknown grid {c.get('grid')!r} in {c}")
        return self.grids[c["grid"]]

    def int_args(self, c: Dict[str, Any]) -> List[IntVar]:
        try:
            return [self.ints[a] for a in c["args"]]
        except KeyError as e:
            raise ValueError(f"[FATAL] Unknown integer {e} in {c}") from None

    def bool_lit(self, ref: str) -> int:
        neg = ref.startswith("-")
        name = ref[1:] if neg else ref
        if name not in self.bools:
            raise ValueError(f"[FATAL] Unknown boolean '{name}'")
        return -self.bools[name] if neg else self.bools[name]

    def add_constraint(self, c: Dict[str, Any]) -> None:
        kind = c.get("type")
        if kind == "equals":
            value = int(c["value"])
            (x,) = self.int_args(c)
            if value not in x:
                raise ImpossibleConstraint(f"{value} is outside [{x.lo}, {x.hi}]")
            add_equals(self.cnf, x, value)
        elif kind == "not_equals":
            a, b = self.int_args(c)
            add_not_equals(self.cnf, a, b)
        elif kind == "all_different":
            add_all_different(self.cnf, self.int_args(c))
        elif kind == "sum":
            value = int(c["value"])
            total = add_sum_all(self.cnf, self.int_args(c))
            if value not in total:
                raise ImpossibleConstraint(f"sum cannot reach {value}")
            add_equals(self.cnf, total, value)
        elif kind == "rows_different":
            for line in self.grid_arg(c).lines():
                add_all_different(self.cnf, line)
        elif kind == "columns_different":
            for column in self.grid_arg(c).columns():
                add_all_different(self.cnf, column)
        elif kind == "area":
            add_area(self.cnf, self.int_args(c), Op.parse(c["op"]), int(c["value"]))
        elif kind == "cardinality":
            lits = [self.bool_lit(a) for a in c["args"]]
            add_cardinality(self.cnf, lits, int(c["k"]), self.cardinality_encoding)
        elif kind == "clause":
            self.cnf.add_clause([self.bool_lit(a) for a in c["args"]])
        else:
            raise UnsupportedConstraint(f"unknown constraint type {kind!r}")

    def interesting(self) -> List[int]:
        out = list(self.bools.values())
        for x in self.ints.values():
            out.extend(x.lits)
        return out

    def decode(self, model: Model) -> Dict[str, Any]:
        cells = {x.name for g in self.grids.values() for x in g.values}
        out: Dict[str, Any] = {name: int_value(model, x) for name, x in self.ints.items() if name not in cells}
        for name, g in self.grids.items():
            out[name] = list(g.map(lambda x: int_value(model, x)).lines())
        out.update({name: model.value(v) for name, v in self.bools.items()})
        return out


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Encode a JSON constraint problem to CNF and solve it.")
    ap.add_argument("problem", help="Path to the problem JSON")
    ap.add_argument("--solver", default=None, help="PySAT backend name (default: first available)")
    ap.add_argument("--solutions", type=int, default=1, help="Number of solutions to print (0 = all)")
    ap.add_argument("--dimacs", default=None, help="Also write the formula to this DIMACS file")
    ap.add_argument(
        "--cardinality-encoding",
        default=DEFAULT_ENCODING,
        choices=["dnf"] + sorted(CARD_ENCODINGS),
        help=f"Encoding for cardinality constraints (default {DEFAULT_ENCODING})",
    )
    args = ap.parse_args(argv)

    data = load_json(args.problem)

    try:
        problem = Problem(data, args.cardinality_encoding)
    except (ImpossibleConstraint, UnsupportedConstraint) as e:
        print(f"[FATAL] {e}")
        return EXIT_IMPOSSIBLE

    stats = problem.cnf.stats()
    print(f"[INFO] variables: {stats['vars']}  clauses: {stats['clauses']}")

    if args.dimacs:
        problem.cnf.write_dimacs(args.dimacs, comments=[f"generated from {args.problem}"])
        print(f"[INFO] DIMACS written to {args.dimacs}")

    solver = SatSolver(args.solver)
    print(f"[INFO] Using SAT solver backend: {solver.name}")

    count = 0
    for model in solver.solutions(problem.cnf, args.solutions, interesting=problem.interesting()):
        count += 1
        print(json.dumps(problem.decode(model), sort_keys=True))

    if count == 0:
        print("[RESULT] UNSAT: no solution exists.")
        return EXIT_UNSAT
    print(f"[RESULT] {count} solution(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
