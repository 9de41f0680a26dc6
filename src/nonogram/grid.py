"""The puzzle grid: shared cell storage with row and column views, and grid-wide passes."""

from typing import Iterable, List, Sequence as SequenceType, Tuple

from .model import (
    DEFAULT_PERMUTATION_CAP,
    Cell,
    CrossConsistencyViolation,
    GridReference,
    InvalidReference,
    PermutationEstimate,
    PuzzleConfig,
)
from .sequence import Sequence
from src.utils.trace import get_tracer


def reconcile_cells(reference: GridReference, row_cell: Cell, column_cell: Cell) -> None:
    """Bring the row-view and column-view cell of one position into agreement."""
    if row_cell.known and column_cell.known:
        if row_cell.black != column_cell.black:
            raise CrossConsistencyViolation(
                f"Row and column views disagree at ({reference.row},{reference.column})"
            )
        return
    if row_cell.known:
        column_cell.assign(row_cell.black)
    elif column_cell.known:
        row_cell.assign(column_cell.black)


class Grid:
    """
    A square puzzle grid. Cells live in one flat list; every row and column
    Sequence references the same Cell objects, so a value written through one
    view is immediately visible through the other.
    """

    def __init__(self, side_length: int, permutation_cap: int = DEFAULT_PERMUTATION_CAP) -> None:
        if side_length <= 0:
            raise ValueError("Grid side length must be a positive integer")
        self.side_length = side_length
        self.permutation_cap = permutation_cap

        self._cells: List[Cell] = [Cell() for _ in range(side_length * side_length)]
        self.rows: List[Sequence] = [
            Sequence([self._cells[r * side_length + c] for c in range(side_length)], name=f"row {r}")
            for r in range(side_length)
        ]
        self.columns: List[Sequence] = [
            Sequence([self._cells[r * side_length + c] for r in range(side_length)], name=f"column {c}")
            for c in range(side_length)
        ]

    @classmethod
    def from_config(cls, config: PuzzleConfig) -> "Grid":
        grid = cls(config.side_length, config.permutation_cap)
        for reference in config.initial_black:
            grid.set_cell_black(reference)
        grid.set_row_clues(config.row_clues)
        grid.set_column_clues(config.column_clues)
        grid.synchronize()
        return grid

    def lines(self) -> List[Sequence]:
        return self.rows + self.columns

    def cell(self, row: int, column: int) -> Cell:
        self._validate_indices(row, column)
        return self._cells[row * self.side_length + column]

    def set_cell_black(self, reference: GridReference) -> None:
        self._validate_indices(reference.row, reference.column)
        self.rows[reference.row].cells[reference.column].set_black()
        self._reconcile(reference.row, reference.column)

    def set_row_clues(self, clues: SequenceType[SequenceType[int]]) -> None:
        self._set_clues(self.rows, clues)

    def set_column_clues(self, clues: SequenceType[SequenceType[int]]) -> None:
        self._set_clues(self.columns, clues)

    @property
    def is_solved(self) -> bool:
        return all(cell.known for cell in self._cells)

    def attempt_instant_solve(self) -> Tuple[int, int]:
        tracer = get_tracer()
        counts = []
        for lines in (self.rows, self.columns):
            solved = 0
            for line in lines:
                if line.attempt_instant_solve():
                    solved += 1
                    tracer.log_instant_solve(line.name)
            counts.append(solved)

        self.synchronize()
        tracer.log_pass("instant_solve", sum(counts))
        return counts[0], counts[1]

    def estimate_permutations(self) -> PermutationEstimate:
        return PermutationEstimate(
            rows=[row.estimate_permutations() for row in self.rows],
            columns=[col.estimate_permutations() for col in self.columns],
        )

    def evaluate_common_cells(self) -> int:
        tracer = get_tracer()
        found = 0
        for line in self.lines():
            if line.solved or not self._within_cap(line):
                continue
            determined = line.evaluate_common_cells()
            if determined:
                found += determined
                tracer.log_common_cells(line.name, determined)
                self.synchronize()
                if line.solved:
                    tracer.log_line_solved(line.name, "common_cells")

        tracer.log_pass("common_cells", found)
        return found

    def reduce_permutations(self) -> int:
        tracer = get_tracer()
        solved_count = 0
        for line in self.lines():
            if line.solved or not self._within_cap(line):
                continue
            before = line.cache_size if line.has_cache else None
            solved = line.reduce_permutations()
            tracer.log_reduction(line.name, before, line.cache_size, solved)
            if solved:
                solved_count += 1
                self.synchronize()
                tracer.log_line_solved(line.name, "reduce")

        tracer.log_pass("reduce", solved_count)
        return solved_count

    def validate_permutations(self) -> int:
        tracer = get_tracer()
        solved_count = 0
        for line in self.lines():
            if line.solved or not line.has_cache:
                continue
            before = line.cache_size
            solved = line.validate_permutations()
            tracer.log_validation(line.name, before, line.cache_size, solved)
            if solved:
                solved_count += 1
                self.synchronize()
                tracer.log_line_solved(line.name, "validate")

        tracer.log_pass("validate", solved_count)
        return solved_count

    def evaluate_remaining_permutations(self) -> int:
        """Switch every unsolved line to exhaustive enumeration. Returns the product of cache sizes."""
        tracer = get_tracer()
        permutations = 1
        for line in self.lines():
            if line.solved:
                continue
            generated = line.generate_remaining_permutations()
            tracer.log_enumeration(line.name, generated)
            permutations *= generated

        tracer.log_pass("enumerate", permutations)
        return permutations

    def best_guess_permutations(self) -> Tuple[int, int]:
        """Product of per-line best guesses, and how many lines are still structural estimates."""
        permutations = 1
        guesses = 0
        for line in self.lines():
            count, is_guess = line.best_guess_permutations()
            permutations *= count
            if is_guess:
                guesses += 1
        return permutations, guesses

    def known_cell_percentage(self) -> int:
        self.synchronize()
        known = sum(1 for cell in self._cells if cell.known)
        return int(known * 100 / len(self._cells))

    def solved_sequence_count(self) -> Tuple[int, int]:
        return (
            sum(1 for row in self.rows if row.solved),
            sum(1 for col in self.columns if col.solved),
        )

    def synchronize(self) -> None:
        """Reconcile the row and column view of every position."""
        for row in range(self.side_length):
            for column in range(self.side_length):
                self._reconcile(row, column)

    def _reconcile(self, row: int, column: int) -> None:
        reconcile_cells(
            GridReference(row, column),
            self.rows[row].cells[column],
            self.columns[column].cells[row],
        )

    def _within_cap(self, line: Sequence) -> bool:
        # Lines that already hold a cache are no longer limited by the estimate.
        return line.has_cache or line.estimate_permutations() < self.permutation_cap

    def _set_clues(self, lines: List[Sequence], clues: Iterable[SequenceType[int]]) -> None:
        clues = list(clues)
        if len(clues) > self.side_length:
            raise InvalidReference(
                f"Got {len(clues)} clues for a grid with side length {self.side_length}"
            )
        for line, clue in zip(lines, clues):
            line.clue = clue

    def _validate_indices(self, *indices: int) -> None:
        for index in indices:
            if index < 0:
                raise InvalidReference(f"Index {index} is too small; expected minimum 0")
            if index >= self.side_length:
                raise InvalidReference(
                    f"Index {index} is too large; expected maximum {self.side_length - 1}"
                )
