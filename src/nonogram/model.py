"""Core data structures for grid shading puzzles: cells, references, config and errors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Clue = Tuple[int, ...]

DEFAULT_PERMUTATION_CAP = 5000


class PuzzleError(Exception):
    """Base class for fatal puzzle errors."""


class InvalidReference(PuzzleError, IndexError):
    """A cell position or clue index lies outside the grid."""


class Contradiction(PuzzleError):
    """A cell was asked to take the colour opposite to the one it already has."""


class CrossConsistencyViolation(PuzzleError):
    """The row view and the column view of one position disagree."""


class CellState(Enum):
    UNKNOWN = "unknown"
    BLACK = "black"
    WHITE = "white"


class Cell:
    """
    A single grid position. Starts unknown and can be determined exactly once;
    writing the same colour again is allowed, writing the other colour is not.
    """

    def __init__(self) -> None:
        self._black: Optional[bool] = None

    def __repr__(self) -> str:
        return f"Cell({self.state.value})"

    @property
    def known(self) -> bool:
        return self._black is not None

    @property
    def black(self) -> bool:
        return self._black is True

    @property
    def white(self) -> bool:
        return self._black is False

    @property
    def state(self) -> CellState:
        if self._black is None:
            return CellState.UNKNOWN
        return CellState.BLACK if self._black else CellState.WHITE

    def assign(self, black: bool) -> bool:
        """Determine the cell. Returns True when this call changed it from unknown."""
        if self._black is None:
            self._black = bool(black)
            return True
        if self._black != bool(black):
            current = "black" if self._black else "white"
            wanted = "black" if black else "white"
            raise Contradiction(f"Unable to set cell to {wanted}; is already {current}")
        return False

    def set_black(self) -> bool:
        return self.assign(True)

    def set_white(self) -> bool:
        return self.assign(False)


@dataclass(frozen=True)
class GridReference:
    row: int
    column: int


def normalize_clue(values: Sequence[int]) -> Clue:
    """Coerce run lengths to a tuple of positive ints; a lone 0 means an empty line."""
    clue = tuple(int(v) for v in values)
    if clue == (0,):
        return ()
    for run in clue:
        if run <= 0:
            raise ValueError(f"Clue run lengths must be positive, got {list(clue)}")
    return clue


@dataclass
class PuzzleConfig:
    """Everything needed to set up a grid; passed explicitly to `Grid.from_config`."""

    side_length: int
    row_clues: List[Clue]
    column_clues: List[Clue]
    initial_black: List[GridReference] = field(default_factory=list)
    permutation_cap: int = DEFAULT_PERMUTATION_CAP
    puzzle_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.side_length <= 0:
            raise ValueError("Grid side length must be a positive integer")
        self.row_clues = [normalize_clue(c) for c in self.row_clues]
        self.column_clues = [normalize_clue(c) for c in self.column_clues]


@dataclass
class PermutationEstimate:
    rows: List[int]
    columns: List[int]

    @property
    def overall(self) -> int:
        total = 1
        for estimate in self.rows + self.columns:
            total *= estimate
        return total
