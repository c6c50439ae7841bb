"""Backtracking sudoku solver working on grid text files."""

from __future__ import annotations

from pathlib import Path
from typing import MutableSequence, Sequence

from .imaging import PathType

EMPTY = "."
DIGITS = "123456789"
SIZE = 9
BOX = 3
RESULT_SUFFIX = ".result"


def _check(grid: Sequence[str]) -> None:
    if len(grid) != SIZE * SIZE:
        raise ValueError(f"a grid holds 81 cells, got {len(grid)}")


def is_possible(grid: Sequence[str], row: int, col: int, value) -> bool:
    """Tell whether ``value`` may go at ``(row, col)`` without a clash."""
    _check(grid)
    value = str(value)
    if any(grid[r * SIZE + col] == value for r in range(SIZE)):
        return False
    if any(grid[row * SIZE + c] == value for c in range(SIZE)):
        return False
    top, left = row - row % BOX, col - col % BOX
    return all(
        grid[r * SIZE + c] != value
        for r in range(top, top + BOX)
        for c in range(left, left + BOX)
    )


def solve(grid: MutableSequence[str]) -> bool:
    """Fill the empty cells in place; return whether a solution was found.

    On failure the grid is left as it was given.
    """
    _check(grid)
    try:
        index = list(grid).index(EMPTY)
    except ValueError:
        return True
    row, col = divmod(index, SIZE)
    for digit in DIGITS:
        if is_possible(grid, row, col, digit):
            grid[index] = digit
            if solve(grid):
                return True
            grid[index] = EMPTY
    return False


def read_sudoku(path: PathType) -> list[str]:
    """Read the first 81 cell characters of a grid file, ignoring spaces
    and newlines.

    Raises ``ValueError`` when the file holds fewer than 81 cells.
    """
    with open(path, encoding="utf-8", errors="replace") as handle:
        text = handle.read()
    cells = [char for char in text if char not in " \n"][: SIZE * SIZE]
    if len(cells) < SIZE * SIZE:
        raise ValueError(f"{path}: expected 81 cells, found {len(cells)}")
    return cells


def format_sudoku(grid: Sequence[str]) -> str:
    """Render a grid with spaces between blocks and blank lines between bands."""
    _check(grid)
    lines: list[str] = []
    for row in range(SIZE):
        cells = grid[row * SIZE : (row + 1) * SIZE]
        lines.append(
            " ".join("".join(cells[start : start + BOX]) for start in range(0, SIZE, BOX))
        )
        if row in (2, 5):
            lines.append("")
    return "\n".join(lines) + "\n"


def write_result(path: PathType, grid: Sequence[str]) -> Path:
    """Write the grid next to ``path`` with ``.result`` appended; return it."""
    source = Path(path)
    target = source.with_name(source.name + RESULT_SUFFIX)
    target.write_text(format_sudoku(grid), encoding="utf-8")
    return target


def solve_file(path: PathType) -> Path:
    """Solve the grid in ``path`` and write the result file; return its path."""
    grid = read_sudoku(path)
    solve(grid)
    return write_result(path, grid)