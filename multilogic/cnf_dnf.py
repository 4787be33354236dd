# cnf_dnf.py
from __future__ import annotations
import logging
from typing import Iterable, List, Sequence

from pysat.card import CardEnc, EncType

from choose import Choose
from cnf_builder import CNFBuilder
from cnf_errors import ImpossibleConstraint


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "dnf"

# pysat cardinality encodings usable by add_cardinality
CARD_ENCODINGS = {
    "seqcounter": EncType.seqcounter,
    "totalizer": EncType.totalizer,
    "sortnetwrk": EncType.sortnetwrk,
    "cardnetwrk": EncType.cardnetwrk,
}


def add_dnf(cnf: CNFBuilder, terms: Iterable[Iterable[int]]) -> List[int]:
    """
    Add a constraint in disjunctive normal form, e.g. (a & b) | (c & d).

    Every term gets a helper h_i with h_i => term, which distributes to
    (-h_i | l) for each literal l of the term. The disjunction itself
    becomes the single clause (h_1 | h_2 | ...).

    Returns the helper variables. Raises ImpossibleConstraint on an empty
    disjunction, before anything is written.
    """
    terms = [list(t) for t in terms]
    if not terms:
        raise ImpossibleConstraint("DNF constraint has no terms")

    helpers: List[int] = []
    for term in terms:
        h = cnf.new_var()
        helpers.append(h)
        for l in term:
            cnf.add_clause([-h, l])

    cnf.add_clause(helpers)
    logger.debug("dnf: %d terms -> %d helpers", len(terms), len(helpers))
    return helpers


def at_least_one(cnf: CNFBuilder, lits: Sequence[int]) -> None:
    cnf.add_clause(list(lits))


def at_most_one(cnf: CNFBuilder, lits: Sequence[int]) -> None:
    # pairwise exclusion
    lits = list(lits)
    for i, a in enumerate(lits):
        for b in lits[i + 1:]:
            cnf.add_clause([-a, -b])


def exactly_one(cnf: CNFBuilder, lits: Sequence[int]) -> None:
    at_least_one(cnf, lits)
    at_most_one(cnf, lits)


def popcount_terms(lits: Sequence[int], k: int) -> List[List[int]]:
    """One term per k-subset: chosen literals positive, the others negated."""
    lits = list(lits)
    return [
        [l if chosen else -l for chosen, l in zip(pattern, lits)]
        for pattern in Choose(len(lits), k)
    ]


def add_popcount(cnf: CNFBuilder, lits: Sequence[int], k: int) -> List[int]:
    """Exactly k of `lits` are true, through the DNF encoder."""
    lits = list(lits)
    if k < 0 or k > len(lits):
        raise ImpossibleConstraint(f"cannot make {k} of {len(lits)} literals true")
    return add_dnf(cnf, popcount_terms(lits, k))


def add_cardinality(cnf: CNFBuilder, lits: Sequence[int], k: int, encoding: str = DEFAULT_ENCODING) -> None:
    """
    Exactly k of `lits` are true.

    encoding="dnf" enumerates all C(n, k) patterns (add_popcount); any key of
    CARD_ENCODINGS uses the matching pysat encoding instead, which stays
    polynomial for wide inputs.
    """
    lits = list(lits)
    n = len(lits)
    if k < 0 or k > n:
        raise ImpossibleConstraint(f"cannot make {k} of {n} literals true")

    if encoding == "dnf":
        add_popcount(cnf, lits, k)
        return
    if encoding not in CARD_ENCODINGS:
        raise ValueError(f"Unknown cardinality encoding: {encoding}")

    # the degenerate bounds are plain unit clauses
    if k == 0 or k == n:
        for l in lits:
            cnf.add_clause([l if k == n else -l])
        return

    enc = CardEnc.equals(lits=lits, bound=k, top_id=cnf.var_count, encoding=CARD_ENCODINGS[encoding])
    # pysat allocated auxiliaries above top_id
    cnf.var_count = max(cnf.var_count, enc.nv)
    cnf.add_clauses(enc.clauses)
    logger.debug("cardinality(%s): n=%d k=%d -> %d clauses", encoding, n, k, len(enc.clauses))
