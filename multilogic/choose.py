# choose.py
from __future__ import annotations
from math import comb
from typing import Iterator, List, Optional, Tuple


def first(n: int, k: int) -> Optional[List[bool]]:
    """Leading combination: the k ones packed at the front. None if k > n."""
    if k < 0:
        raise ValueError(f"k must be >= 0 (got {k})")
    if k > n:
        return None
    return [True] * k + [False] * (n - k)


def advance(state: List[bool]) -> Optional[List[bool]]:
    """
    Successor of `state` in the fixed order, or None when exhausted.

    Scanning from the end: find the last 0 that still has a 1 before it,
    move that 1 one step right (onto the run following it), clear the tail
    and re-pack the ones that were in the tail right behind the moved one.
    """
    n = len(state)
    zero = next((i for i in range(n - 1, -1, -1) if not state[i]), None)
    if zero is None:
        return None
    one = next((i for i in range(zero - 1, -1, -1) if state[i]), None)
    if one is None:
        return None
    ones_in_tail = sum(state[zero + 1:])

    r = list(state)
    r[one] = False
    for i in range(one + 1, n):
        r[i] = False
    for i in range(one + 1, one + 2 + ones_in_tail):
        r[i] = True
    return r


class Choose:
    """
    Every way to pick k positions out of n, as boolean indicator lists.

    Iterating twice starts over; nothing is shared between iterations.
    Order (n=4, k=2): 1100, 1010, 1001, 0110, 0101, 0011.
    """

    def __init__(self, n: int, k: int) -> None:
        if n < 0 or k < 0:
            raise ValueError(f"n and k must be >= 0 (got n={n}, k={k})")
        self.n = n
        self.k = k

    def __iter__(self) -> Iterator[List[bool]]:
        state = first(self.n, self.k)
        while state is not None:
            yield list(state)
            state = advance(state)

    def __len__(self) -> int:
        return comb(self.n, self.k) if self.k <= self.n else 0

    def __repr__(self) -> str:
        return f"Choose(n={self.n}, k={self.k})"


def choose(n: int, k: int) -> Iterator[List[bool]]:
    """Recursive variant, same order as Choose (pick a position before skipping it)."""
    if k > n:
        return
    acc: List[bool] = []

    def rec(n: int, k: int) -> Iterator[List[bool]]:
        if n == 0:
            yield list(acc)
            return
        if k > 0:
            acc.append(True)
            yield from rec(n - 1, k - 1)
            acc.pop()
        if k < n:
            acc.append(False)
            yield from rec(n - 1, k)
            acc.pop()

    yield from rec(n, k)


def pairs(n: int) -> Iterator[Tuple[int, int]]:
    for i in range(n):
        for j in range(i + 1, n):
            yield i, j
