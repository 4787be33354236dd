# puzzle_grid.py
"""
Fixed-shape 2D grid in row-major order. Paper puzzles are mostly grids, so
cells are addressed as m[x][y] with x the row and y the column.
"""
from __future__ import annotations
from typing import Callable, Generic, Iterator, List, Sequence, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")

Pos = Tuple[int, int]


class ShapeError(ValueError):
    pass


class Matrix(Generic[T]):
    def __init__(self, values: Sequence[T], shape: Tuple[int, int]) -> None:
        if len(values) != shape[0] * shape[1]:
            raise ShapeError(f"incorrect shape: {len(values)} values for {shape}")
        self.stride = shape[1]
        self.values: List[T] = list(values)
        self._rows = shape[0]

    @classmethod
    def filled(cls, value: T, shape: Tuple[int, int]) -> "Matrix[T]":
        return cls([value] * (shape[0] * shape[1]), shape)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[T]]) -> "Matrix[T]":
        if not rows:
            return cls([], (0, 0))
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ShapeError("rows have different lengths")
        return cls([v for r in rows for v in r], (len(rows), width))

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, x: int) -> List[T]:
        # row view is a copy; write through set()
        return self.values[x * self.stride:(x + 1) * self.stride]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Matrix) and self.shape == other.shape and self.values == other.values

    def __repr__(self) -> str:
        return f"Matrix({list(self.lines())})"

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self.stride

    def get(self, pos: Pos) -> T:
        x, y = pos
        return self.values[x * self.stride + y]

    def set(self, pos: Pos, value: T) -> None:
        x, y = pos
        self.values[x * self.stride + y] = value

    def lines(self) -> Iterator[List[T]]:
        for x in range(self._rows):
            yield self[x]

    def columns(self) -> Iterator[List[T]]:
        for y in range(self.stride):
            yield [self.values[x * self.stride + y] for x in range(self._rows)]

    def indices(self) -> Iterator[Pos]:
        h, w = self.shape
        for x in range(h):
            for y in range(w):
                yield x, y

    def neighbors(self, pos: Pos) -> List[Pos]:
        """The 3x3 block around pos (pos included), cut at the edges."""
        x, y = pos
        h, w = self.shape
        return [
            (nx, ny)
            for nx in range(max(x - 1, 0), min(x + 2, h))
            for ny in range(max(y - 1, 0), min(y + 2, w))
        ]

    def map(self, f: Callable[[T], U]) -> "Matrix[U]":
        return Matrix([f(v) for v in self.values], self.shape)

    def zip_with(self, other: "Matrix[U]", f: Callable[[T, U], V]) -> "Matrix[V]":
        if self.shape != other.shape:
            raise ShapeError(f"shape mismatch: {self.shape} vs {other.shape}")
        return Matrix([f(a, b) for a, b in zip(self.values, other.values)], self.shape)
