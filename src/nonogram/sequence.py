"""A single row or column of the grid and the line-level deduction techniques."""

from math import comb
from operator import add
from typing import Iterator, List, Optional, Sequence as SequenceType, Tuple

from .model import Cell, Clue, normalize_clue
from .tree import Node

Permutation = Tuple[bool, ...]


def run_lengths(candidate: SequenceType[bool]) -> Clue:
    """Lengths of the maximal black runs in `candidate`, in line order."""
    runs: List[int] = []
    current = 0
    for black in candidate:
        if black:
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)
    return tuple(runs)


def space_distributions(space_count: int, available: int) -> Iterator[List[int]]:
    """
    Yield every way to lay out the blank gaps around a clue's runs.

    There are `space_count` gaps: before the first run, between runs and after
    the last run. Inner gaps hold at least one blank; the `available` spare
    blanks are shared out over all gaps. Tree values are running totals of the
    spare blanks handed out so far.
    """
    root: Node[int] = Node(0)
    for _ in range(space_count):
        root.extend(range(available + 1), combine=add)
        root.prune(lambda total: total > available)

    template = [0 if i in (0, space_count - 1) else 1 for i in range(space_count)]

    for totals in root.permutations():
        if totals[-1] != available:
            continue
        yield [template[i] + totals[i + 1] - totals[i] for i in range(space_count)]


class Sequence:
    """
    One line of the puzzle. Holds references to shared grid cells, the line's
    clue, and a lazily built cache of candidate full-line assignments.

    The cache is never invalidated automatically: cells determined through the
    crossing lines are only reflected once `reduce_permutations` runs again.
    """

    def __init__(self, cells: List[Cell], clue: SequenceType[int] = (), name: str = "") -> None:
        self.cells = cells
        self.name = name
        self._clue: Clue = normalize_clue(clue)
        self._permutations: Optional[List[Permutation]] = None

    def __repr__(self) -> str:
        return f"Sequence({self.name!r}, clue={list(self.clue)})"

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def clue(self) -> Clue:
        return self._clue

    @clue.setter
    def clue(self, values: SequenceType[int]) -> None:
        self._clue = normalize_clue(values)
        self._permutations = None

    @property
    def solved(self) -> bool:
        return all(cell.known for cell in self.cells)

    @property
    def has_cache(self) -> bool:
        return self._permutations is not None

    @property
    def cache_size(self) -> int:
        return 0 if self._permutations is None else len(self._permutations)

    @property
    def permutations(self) -> List[Permutation]:
        return list(self._permutations or [])

    def occupied_count(self) -> int:
        """Minimum number of cells the clue needs: its runs plus one blank between each pair."""
        if not self._clue:
            return 0
        return sum(self._clue) + len(self._clue) - 1

    def attempt_instant_solve(self) -> bool:
        if self.occupied_count() != len(self.cells):
            return False

        index = 0
        for run in self._clue:
            for _ in range(run):
                self.cells[index].set_black()
                index += 1
            if index < len(self.cells):
                self.cells[index].set_white()
            index += 1

        self._permutations = None
        return True

    def estimate_permutations(self) -> int:
        """Stars-and-bars upper bound on the number of candidate arrangements."""
        available = len(self.cells) - self.occupied_count()
        if available == 0:
            return 1
        if available < 0:
            return 0
        slots = len(self._clue) + 1
        return comb(available + slots - 1, available)

    def best_guess_permutations(self) -> Tuple[int, bool]:
        """Exact cache size when a cache exists, otherwise the structural estimate flagged as a guess."""
        if self._permutations is not None:
            return len(self._permutations), False
        return self.estimate_permutations(), True

    def evaluate_common_cells(self) -> int:
        """Force every unknown cell on which all candidates agree. Returns how many were newly set."""
        self._populate_permutations()
        if not self._permutations:
            return 0

        found = 0
        for index, cell in enumerate(self.cells):
            column = [candidate[index] for candidate in self._permutations]
            if all(column):
                found += cell.set_black()
            elif not any(column):
                found += cell.set_white()
        return found

    def reduce_permutations(self) -> bool:
        """Drop candidates that disagree with known cells. True when the line became solved."""
        if self.solved:
            return False
        self._populate_permutations()

        known = [(i, cell.black) for i, cell in enumerate(self.cells) if cell.known]
        self._permutations = [
            candidate
            for candidate in self._permutations
            if all(candidate[i] == black for i, black in known)
        ]
        return self._apply_single_candidate()

    def validate_permutations(self) -> bool:
        """Drop duplicate candidates and those whose runs do not match the clue."""
        if self.solved or self._permutations is None:
            return False

        unique = list(dict.fromkeys(self._permutations))
        self._permutations = [c for c in unique if run_lengths(c) == self._clue]
        return self._apply_single_candidate()

    def generate_remaining_permutations(self) -> int:
        """
        Replace the cache with every assignment of the currently unknown cells,
        known cells held at their values. The result ignores the clue and must
        be narrowed with `validate_permutations`.
        """
        root: Node[bool] = Node(False)
        unknown = [i for i, cell in enumerate(self.cells) if not cell.known]
        for _ in unknown:
            root.extend((True, False))

        base = [cell.black for cell in self.cells]
        cache: List[Permutation] = []
        for path in root.permutations():
            candidate = list(base)
            for index, black in zip(unknown, path[1:]):
                candidate[index] = black
            cache.append(tuple(candidate))

        self._permutations = cache
        return len(cache)

    def _populate_permutations(self) -> None:
        if self._permutations is not None:
            return

        available = len(self.cells) - self.occupied_count()
        if available < 0:
            self._permutations = []
            return

        self._permutations = [
            self._build_candidate(spaces)
            for spaces in space_distributions(len(self._clue) + 1, available)
        ]

    def _build_candidate(self, spaces: List[int]) -> Permutation:
        candidate: List[bool] = []
        for gap, run in zip(spaces, self._clue):
            candidate.extend([False] * gap)
            candidate.extend([True] * run)
        candidate.extend([False] * spaces[-1])
        return tuple(candidate)

    def _apply_single_candidate(self) -> bool:
        # An empty cache is left as-is; the caller sees no progress.
        if not self._permutations or len(self._permutations) != 1:
            return False

        for cell, black in zip(self.cells, self._permutations[0]):
            cell.assign(black)
        return True
