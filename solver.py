"""Top-level solve interface.

Expose `solve_puzzle(puzzle)` that accepts a Grid, a PuzzleConfig, or a raw
puzzle dictionary compatible with `src.nonogram.parser.parse_puzzle`.
"""

from dataclasses import replace
from typing import Any, Optional

from src.nonogram import solver_core
from src.nonogram.grid import Grid
from src.nonogram.model import PuzzleConfig
from src.nonogram.parser import parse_puzzle


def solve_puzzle(puzzle: Any, permutation_cap: Optional[int] = None) -> solver_core.SolveResult:
    """
    Solve a puzzle as far as deduction allows.
    Accepts:
      - Grid instances (used directly)
      - PuzzleConfig instances
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    A given `permutation_cap` overrides the cap carried by any of these.
    """
    if isinstance(puzzle, Grid):
        grid = puzzle
        if permutation_cap is not None:
            grid.permutation_cap = permutation_cap
    elif isinstance(puzzle, PuzzleConfig):
        if permutation_cap is not None:
            puzzle = replace(puzzle, permutation_cap=permutation_cap)
        grid = Grid.from_config(puzzle)
    elif isinstance(puzzle, dict):
        grid = Grid.from_config(parse_puzzle(puzzle, permutation_cap=permutation_cap))
    else:
        raise TypeError("solve_puzzle expects a Grid, PuzzleConfig or puzzle dictionary")

    return solver_core.solve(grid)


__all__ = ["solve_puzzle"]
