import pytest

from sudokuvision.solver import (
    DIGITS,
    format_sudoku,
    is_possible,
    read_sudoku,
    solve,
    solve_file,
    write_result,
)

PUZZLE = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)


def _blocked_grid():
    grid = ["."] * 81
    grid[0:8] = list("12345678")
    grid[1 * 9 + 8] = "9"
    return grid


def _assert_valid(grid):
    for i in range(9):
        assert set(grid[i * 9 : i * 9 + 9]) == set(DIGITS)
        assert {grid[r * 9 + i] for r in range(9)} == set(DIGITS)
    for top in range(0, 9, 3):
        for left in range(0, 9, 3):
            box = {grid[r * 9 + c] for r in range(top, top + 3) for c in range(left, left + 3)}
            assert box == set(DIGITS)


def test_is_possible_checks_row_column_and_box():
    grid = _blocked_grid()
    assert is_possible(grid, 0, 8, "1") is False
    assert is_possible(grid, 0, 8, "9") is False
    assert is_possible(grid, 5, 8, "9") is False
    assert is_possible(grid, 2, 6, "9") is False
    assert is_possible(grid, 4, 4, "9") is True


def test_is_possible_rejects_wrong_size():
    with pytest.raises(ValueError):
        is_possible(["."] * 80, 0, 0, "1")


def test_solve_puzzle():
    grid = list(PUZZLE)
    assert solve(grid) is True
    assert "." not in grid
    assert all(given == "." or given == cell for given, cell in zip(PUZZLE, grid))
    _assert_valid(grid)


def test_solve_unsolvable_leaves_grid():
    grid = _blocked_grid()
    before = list(grid)
    assert solve(grid) is False
    assert grid == before


def test_solve_full_grid_is_done():
    grid = list(PUZZLE)
    solve(grid)
    again = list(grid)
    assert solve(again) is True
    assert again == grid


def test_format_layout():
    lines = format_sudoku(["."] * 81).split("\n")
    assert len(lines) == 12
    assert lines[0] == "... ... ..."
    assert lines[3] == ""
    assert lines[7] == ""
    assert lines[-1] == ""


def test_format_then_read_round_trip(tmp_path):
    path = tmp_path / "grid"
    path.write_text(format_sudoku(list(PUZZLE)))
    assert read_sudoku(path) == list(PUZZLE)


def test_read_short_file(tmp_path):
    path = tmp_path / "grid"
    path.write_text("123 456\n")
    with pytest.raises(ValueError):
        read_sudoku(path)


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sudoku(tmp_path / "absent")


def test_write_result_name(tmp_path):
    target = write_result(tmp_path / "grid", list(PUZZLE))
    assert target == tmp_path / "grid.result"
    assert read_sudoku(target) == list(PUZZLE)


def test_solve_file(tmp_path):
    path = tmp_path / "grid"
    path.write_text(format_sudoku(list(PUZZLE)))
    target = solve_file(path)
    solved = read_sudoku(target)
    assert "." not in solved
    _assert_valid(solved)