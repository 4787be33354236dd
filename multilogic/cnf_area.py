# cnf_area.py
from __future__ import annotations
import logging
import operator
from enum import Enum
from functools import reduce
from itertools import product
from typing import Callable, List, Sequence

from cnf_builder import CNFBuilder
from cnf_dnf import add_dnf
from cnf_errors import ImpossibleConstraint, UnsupportedConstraint
from cnf_integer import IntVar


logger = logging.getLogger(__name__)


class Op(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIV = "/"

    @classmethod
    def parse(cls, symbol: str) -> "Op":
        symbol = symbol.strip()
        if symbol in ("x", "X"):
            symbol = "*"
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown area operator: {symbol!r}") from None

    @property
    def associative(self) -> bool:
        return self in (Op.PLUS, Op.TIMES)


# fold function and neutral element
_ASSOCIATIVE = {
    Op.PLUS: (operator.add, 0),
    Op.TIMES: (operator.mul, 1),
}


def _binary_test(op: Op, target: int) -> Callable[[int, int], bool]:
    # operands may appear in either order
    if op is Op.MINUS:
        return lambda a, b: a + target == b or b + target == a
    return lambda a, b: a * target == b or b * target == a


def associative_terms(xs: Sequence[IntVar], op: Op, target: int) -> List[List[int]]:
    """
    One term per value combination whose fold equals `target`.
    Enumerates the full cartesian product of the operand ranges.
    """
    fold, zero = _ASSOCIATIVE[op]
    terms = []
    for chosen in product(*(x.range for x in xs)):
        if reduce(fold, chosen, zero) == target:
            terms.append([x[v] for x, v in zip(xs, chosen)])
    return terms


def binary_terms(xs: Sequence[IntVar], op: Op, target: int) -> List[List[int]]:
    if len(xs) != 2:
        raise UnsupportedConstraint(f"'{op.value}' needs exactly 2 operands, got {len(xs)}")
    a, b = xs
    test = _binary_test(op, target)
    return [
        [al, bl]
        for av, al in a.values()
        for bv, bl in b.values()
        if test(av, bv)
    ]


def area_terms(xs: Sequence[IntVar], op: Op, target: int) -> List[List[int]]:
    if not xs:
        raise UnsupportedConstraint("area constraint without operands")
    if op.associative:
        terms = associative_terms(xs, op, target)
    else:
        terms = binary_terms(xs, op, target)
    if not terms:
        raise ImpossibleConstraint(f"no values reach {target}{op.value} over {len(xs)} operand(s)")
    return terms


def add_area(cnf: CNFBuilder, xs: Sequence[IntVar], op: Op, target: int) -> List[int]:
    """Constrain `target` to be the result of `op` applied across `xs`."""
    terms = area_terms(xs, op, target)
    logger.debug("area %d%s over %d operand(s): %d terms", target, op.value, len(xs), len(terms))
    return add_dnf(cnf, terms)
