"""Sudoku picture processing, grid location, digit recognition and solving."""

__version__ = "0.1.0"