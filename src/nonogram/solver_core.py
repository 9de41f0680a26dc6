"""Deduction driver: cheap line passes to a fixpoint, then one exhaustive enumeration pass."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .grid import Grid
from src.utils.trace import get_tracer


@dataclass
class SolveResult:
    grid: Grid
    analysis: List[str] = field(default_factory=list)
    passes: int = 0
    remaining_permutations: Optional[int] = None  # Set when the exhaustive pass ran
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def solved(self) -> bool:
        return self.grid.is_solved


def solve(grid: Grid, exhaustive: bool = True) -> SolveResult:
    """
    Determine as many cells as pure deduction allows. Never guesses, so the
    grid may be left partially determined.
    """
    tracer = get_tracer()
    analysis = initial_analysis(grid)

    passes = _run_to_fixpoint(grid, _reduce_and_resolve, analysis)

    remaining = None
    if exhaustive and not grid.is_solved:
        remaining = grid.evaluate_remaining_permutations()
        analysis.append(f"Exhaustive permutations generated: {remaining}")
        passes += _run_to_fixpoint(grid, _validate_and_resolve, analysis)

    return SolveResult(
        grid=grid,
        analysis=analysis,
        passes=passes,
        remaining_permutations=remaining,
        summary=tracer.summary(),
    )


def initial_analysis(grid: Grid) -> List[str]:
    """Run the instant-solve pass and describe the size of what is left."""
    side = grid.side_length
    analysis = [f"Total permutations: {2 ** (side * side)}"]

    rows_solved, columns_solved = grid.attempt_instant_solve()
    analysis.append(f"Rows solved instantly: {rows_solved}")
    analysis.append(f"Columns solved instantly: {columns_solved}")
    analysis.append(
        f"Permutations remaining: {2 ** ((side - rows_solved) * (side - columns_solved))}"
    )

    estimate = grid.estimate_permutations()
    for index, value in enumerate(estimate.rows):
        analysis.append(f"Row {index} estimated permutations: {value}")
    for index, value in enumerate(estimate.columns):
        analysis.append(f"Column {index} estimated permutations: {value}")
    analysis.append(f"Overall permutations: {estimate.overall}")
    return analysis


def _run_to_fixpoint(grid: Grid, step: Callable[[Grid, List[str]], int], analysis: List[str]) -> int:
    passes = 0
    while not grid.is_solved:
        passes += 1
        if not step(grid, analysis):
            break
    return passes


def _reduce_and_resolve(grid: Grid, analysis: List[str]) -> int:
    # Caches must agree with the known cells before common cells are read from them.
    solved = grid.reduce_permutations()
    found = grid.evaluate_common_cells()

    analysis.append(f"Sequences solved by reduction: {solved}")
    analysis.append(f"Common cells found: {found}")
    _report_best_guess(grid, analysis)
    return found + solved


def _validate_and_resolve(grid: Grid, analysis: List[str]) -> int:
    validated = grid.validate_permutations()
    reduced = grid.reduce_permutations()
    found = grid.evaluate_common_cells()

    analysis.append(f"Sequences solved by validation: {validated}")
    analysis.append(f"Sequences solved by reduction: {reduced}")
    analysis.append(f"Common cells found: {found}")
    _report_best_guess(grid, analysis)
    return validated + reduced + found


def _report_best_guess(grid: Grid, analysis: List[str]) -> None:
    permutations, guesses = grid.best_guess_permutations()
    analysis.append(f"Estimated permutations remaining: {permutations}")
    analysis.append(f"Rows and columns that are still guesses: {guesses}")
