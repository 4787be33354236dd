# test_solve_json.py
from __future__ import annotations
import json

import pytest

from cnf_errors import UnsupportedConstraint
from sat_solver import SatSolver
from solve_json import EXIT_IMPOSSIBLE, EXIT_UNSAT, Problem, main


def write_problem(tmp_path, data) -> str:
    path = tmp_path / "problem.json"
    path.write_text(json.dumps(data))
    return str(path)


def solution_lines(out: str):
    return [json.loads(l) for l in out.splitlines() if l.startswith("{")]


def test_sum_problem(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "integers": {"a": [1, 6], "b": [1, 8]},
        "constraints": [{"type": "sum", "args": ["a", "b"], "value": 14}],
    })
    assert main([path]) == 0
    out = capsys.readouterr().out
    assert solution_lines(out) == [{"a": 6, "b": 8}]
    assert "[RESULT] 1 solution(s)" in out


def test_all_solutions_and_dimacs(tmp_path, capsys) -> None:
    dimacs = tmp_path / "out.cnf"
    path = write_problem(tmp_path, {
        "booleans": ["p", "q", "r", "s", "t"],
        "constraints": [{"type": "cardinality", "args": ["p", "q", "r", "s", "t"], "k": 2}],
    })
    assert main([path, "--solutions", "0", "--dimacs", str(dimacs)]) == 0
    sols = solution_lines(capsys.readouterr().out)
    assert len(sols) == 10
    assert all(sum(s.values()) == 2 for s in sols)
    assert dimacs.read_text().count("p cnf") == 1


def test_seqcounter_flag(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "booleans": ["p", "q", "r", "s"],
        "constraints": [
            {"type": "cardinality", "args": ["p", "q", "r", "s"], "k": 3},
            {"type": "clause", "args": ["-p"]},
        ],
    })
    assert main([path, "--solutions", "0", "--cardinality-encoding", "seqcounter"]) == 0
    sols = solution_lines(capsys.readouterr().out)
    assert sols == [{"p": False, "q": True, "r": True, "s": True}]


def test_distinct_area_problem() -> None:
    problem = Problem({
        "integers": {"a": [1, 9], "b": [1, 9], "c": [1, 9]},
        "constraints": [
            {"type": "all_different", "args": ["a", "b", "c"]},
            {"type": "area", "op": "+", "args": ["a", "b", "c"], "value": 7},
        ],
    })
    m = SatSolver().solve(problem.cnf)
    assert sorted(problem.decode(m).values()) == [1, 2, 4]


def test_impossible_constraint(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "integers": {"a": [1, 3]},
        "constraints": [{"type": "equals", "args": ["a"], "value": 4}],
    })
    assert main([path]) == EXIT_IMPOSSIBLE
    assert "[FATAL]" in capsys.readouterr().out


def test_unsupported_constraint() -> None:
    with pytest.raises(UnsupportedConstraint):
        Problem({
            "integers": {"a": [1, 6], "b": [1, 6], "c": [1, 6]},
            "constraints": [{"type": "area", "op": "-", "args": ["a", "b", "c"], "value": 1}],
        })


def test_unsat(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "integers": {"a": [1, 2], "b": [1, 2], "c": [1, 2]},
        "constraints": [{"type": "all_different", "args": ["a", "b", "c"]}],
    })
    assert main([path]) == EXIT_UNSAT
    assert "[RESULT] UNSAT" in capsys.readouterr().out


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        main([str(tmp_path / "missing.json")])


def test_unconstrained_boolean_counts_in_all_solutions(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "booleans": ["p", "q"],
        "constraints": [{"type": "clause", "args": ["p"]}],
    })
    assert main([path, "--solutions", "0"]) == 0
    sols = solution_lines(capsys.readouterr().out)
    assert sorted(s["q"] for s in sols) == [False, True]
    assert all(s["p"] for s in sols)


def test_float_values_are_accepted() -> None:
    problem = Problem({
        "integers": {"a": [1, 6], "b": [1, 6]},
        "constraints": [
            {"type": "equals", "args": ["a"], "value": 5.0},
            {"type": "sum", "args": ["a", "b"], "value": 9.0},
        ],
    })
    assert problem.decode(SatSolver().solve(problem.cnf)) == {"a": 5, "b": 4}


def test_grid_rows_and_columns(tmp_path, capsys) -> None:
    path = write_problem(tmp_path, {
        "grids": {"g": {"shape": [3, 3], "range": [1, 3]}},
        "constraints": [
            {"type": "rows_different", "grid": "g"},
            {"type": "columns_different", "grid": "g"},
            {"type": "equals", "args": ["g[0,0]"], "value": 2},
            {"type": "equals", "args": ["g[1,1]"], "value": 3},
        ],
    })
    assert main([path, "--solutions", "0"]) == 0
    sols = solution_lines(capsys.readouterr().out)
    assert sols == [{"g": [[2, 1, 3], [1, 3, 2], [3, 2, 1]]}]


def test_unknown_grid() -> None:
    with pytest.raises(ValueError):
        Problem({"constraints": [{"type": "rows_different", "grid": "nope"}]})
