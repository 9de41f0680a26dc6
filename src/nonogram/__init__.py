"""Deduction engine, parsing and loading for grid shading (nonogram) puzzles."""

from .model import (
    Cell,
    CellState,
    Contradiction,
    CrossConsistencyViolation,
    GridReference,
    InvalidReference,
    PermutationEstimate,
    PuzzleConfig,
    PuzzleError,
)
from .sequence import Sequence
from .grid import Grid
from .solver_core import SolveResult, solve
from .parser import parse_puzzle

__all__ = [
    "Cell",
    "CellState",
    "Contradiction",
    "CrossConsistencyViolation",
    "GridReference",
    "InvalidReference",
    "PermutationEstimate",
    "PuzzleConfig",
    "PuzzleError",
    "Sequence",
    "Grid",
    "SolveResult",
    "solve",
    "parse_puzzle",
]
