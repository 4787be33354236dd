# test_puzzle_grid.py
from __future__ import annotations

import pytest

from cnf_builder import CNFBuilder
from cnf_dnf import add_popcount
from puzzle_grid import Matrix, ShapeError
from sat_solver import SatSolver, require_model


def test_shape() -> None:
    with pytest.raises(ShapeError):
        Matrix([1, 2, 3], (2, 2))
    with pytest.raises(ShapeError):
        Matrix.from_rows([[1, 2], [3]])
    assert Matrix([1, 2, 3, 4, 5, 6], (3, 2)).shape == (3, 2)


def test_lines_columns_indices() -> None:
    m = Matrix([1, 2, 3, 4, 5, 6], (3, 2))
    assert list(m.lines()) == [[1, 2], [3, 4], [5, 6]]
    assert list(m.columns()) == [[1, 3, 5], [2, 4, 6]]
    assert list(Matrix.filled(None, (3, 2)).indices()) == [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)]


def test_access() -> None:
    m = Matrix.from_rows([[1, 2], [3, 4]])
    assert (m[0][0], m[0][1], m[1][0], m[1][1]) == (1, 2, 3, 4)
    m.set((1, 0), 9)
    assert m.get((1, 0)) == 9
    assert len(m) == 4


def test_neighbors() -> None:
    m = Matrix.filled(None, (4, 4))
    assert m.neighbors((0, 0)) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert m.neighbors((0, 2)) == [(0, 1), (0, 2), (0, 3), (1, 1), (1, 2), (1, 3)]
    assert m.neighbors((1, 2)) == [(0, 1), (0, 2), (0, 3), (1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)]
    assert m.neighbors((3, 3)) == [(2, 2), (2, 3), (3, 2), (3, 3)]


def test_map_zip_with() -> None:
    a = Matrix([1, 2, 3, 4], (2, 2))
    b = a.map(lambda v: v * 10)
    assert b.zip_with(a, lambda p, q: p + q) == Matrix([11, 22, 33, 44], (2, 2))
    with pytest.raises(ShapeError):
        a.zip_with(Matrix([1, 2], (1, 2)), lambda p, q: p)


def test_neighbor_counts_recover_picture() -> None:
    # count the filled cells in every 3x3 block, then ask the solver for a picture with those counts
    picture = Matrix.from_rows([
        [1, 0, 0],
        [0, 1, 1],
        [0, 0, 1],
    ])
    clues = Matrix([sum(picture.get(n) for n in picture.neighbors(p)) for p in picture.indices()], picture.shape)

    cnf = CNFBuilder()
    cells = Matrix(cnf.new_vars(len(picture)), picture.shape)
    for p in cells.indices():
        add_popcount(cnf, [cells.get(n) for n in cells.neighbors(p)], clues.get(p))
    m = require_model(SatSolver(), cnf)
    solved = cells.map(lambda v: int(m.value(v)))
    recount = Matrix([sum(solved.get(n) for n in solved.neighbors(p)) for p in solved.indices()], solved.shape)
    assert recount == clues


def main():
    test_shape()
    test_lines_columns_indices()
    test_access()
    test_neighbors()
    test_map_zip_with()
    print("[OK] Matrix")
    test_neighbor_counts_recover_picture()
    print("[OK] neighbor counts")


if __name__ == "__main__":
    main()
