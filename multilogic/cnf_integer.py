# cnf_integer.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from choose import pairs
from cnf_builder import CNFBuilder
from cnf_dnf import add_dnf, exactly_one
from sat_solver import Model


@dataclass(frozen=True)
class IntVar:
    """
    Integer restricted to [lo, hi], one-hot encoded:
    lits[i] is true iff the value is lo + i.
    """
    lo: int
    hi: int
    lits: Tuple[int, ...]
    name: Optional[str] = None

    @property
    def range(self) -> range:
        return range(self.lo, self.hi + 1)

    def __contains__(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def __getitem__(self, value: int) -> int:
        if value not in self:
            raise ValueError(f"{value} outside [{self.lo}, {self.hi}] of {self.name or 'int'}")
        return self.lits[value - self.lo]

    def values(self) -> Iterator[Tuple[int, int]]:
        """(value, literal) pairs in range order."""
        return zip(self.range, self.lits)


def intersect(a: range, b: range) -> range:
    return range(max(a.start, b.start), min(a.stop, b.stop))


def declare_int(cnf: CNFBuilder, lo: int, hi: int, name: Optional[str] = None) -> IntVar:
    if lo > hi:
        raise ValueError(f"Empty range [{lo}, {hi}]")
    lits = tuple(
        cnf.new_var(f"{name}={v}" if name is not None else None)
        for v in range(lo, hi + 1)
    )
    # at least one value, values mutually exclusive
    exactly_one(cnf, lits)
    return IntVar(lo, hi, lits, name)


def add_sum(cnf: CNFBuilder, a: IntVar, b: IntVar, name: Optional[str] = None) -> IntVar:
    """New variable r over [a.lo+b.lo, a.hi+b.hi] with r = a + b."""
    r = declare_int(cnf, a.lo + b.lo, a.hi + b.hi, name)
    terms = [
        [al, bl, r[ax + bx]]
        for ax, al in a.values()
        for bx, bl in b.values()
    ]
    add_dnf(cnf, terms)
    return r


def add_sum_all(cnf: CNFBuilder, xs: Sequence[IntVar], name: Optional[str] = None) -> IntVar:
    """Left fold of add_sum; only the final variable gets `name`."""
    if not xs:
        raise ValueError("add_sum_all needs at least one operand")
    acc = xs[0]
    for i, x in enumerate(xs[1:], start=2):
        acc = add_sum(cnf, acc, x, name if i == len(xs) else None)
    return acc


def add_equals(cnf: CNFBuilder, a: IntVar, value: int) -> None:
    # a[value] raises before anything is written
    cnf.add_clause([a[value]])


def add_not_equals(cnf: CNFBuilder, a: IntVar, b: IntVar) -> None:
    for v in intersect(a.range, b.range):
        cnf.add_clause([-a[v], -b[v]])


def add_all_different(cnf: CNFBuilder, xs: Sequence[IntVar]) -> None:
    for i, j in pairs(len(xs)):
        add_not_equals(cnf, xs[i], xs[j])


def int_value(model: Model, a: IntVar) -> int:
    found = [v for v, l in a.values() if l in model]
    if len(found) != 1:
        raise RuntimeError(
            f"SAT solver returned invalid model: {a.name or 'int'} has values {found}"
        )
    return found[0]
