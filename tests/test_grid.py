"""Unit tests for grid-wide passes and the shared row/column views."""

import pytest

from src.nonogram.grid import Grid, reconcile_cells
from src.nonogram.model import (
    Cell,
    Contradiction,
    CrossConsistencyViolation,
    GridReference,
    InvalidReference,
    PuzzleConfig,
)
from src.utils.trace import get_tracer, reset_tracer


def _cross_grid(**kwargs):
    config = PuzzleConfig(
        side_length=3,
        row_clues=[[1], [3], [1]],
        column_clues=[[1], [3], [1]],
        **kwargs,
    )
    return Grid.from_config(config)


def _rows(grid):
    return [[cell.black if cell.known else None for cell in row.cells] for row in grid.rows]


def test_row_and_column_views_share_cells():
    grid = Grid(4)
    for r in range(4):
        for c in range(4):
            assert grid.rows[r].cells[c] is grid.columns[c].cells[r]
            assert grid.cell(r, c) is grid.rows[r].cells[c]


def test_set_cell_black_is_visible_from_both_views():
    grid = Grid(3)
    grid.set_cell_black(GridReference(0, 2))
    assert grid.rows[0].cells[2].black
    assert grid.columns[2].cells[0].black


@pytest.mark.parametrize("row, column", [(3, 0), (0, 3), (-1, 0), (0, -1)])
def test_out_of_range_reference_is_rejected(row, column):
    grid = Grid(3)
    with pytest.raises(InvalidReference):
        grid.set_cell_black(GridReference(row, column))


def test_out_of_range_initial_cell_fails_setup():
    with pytest.raises(InvalidReference):
        _cross_grid(initial_black=[GridReference(0, 5)])


def test_too_many_clues_is_rejected():
    grid = Grid(2)
    with pytest.raises(InvalidReference):
        grid.set_row_clues([[1], [1], [1]])


def test_reconcile_copies_known_value_across():
    row_cell, column_cell = Cell(), Cell()
    row_cell.set_black()
    reconcile_cells(GridReference(0, 0), row_cell, column_cell)
    assert column_cell.black

    row_cell, column_cell = Cell(), Cell()
    column_cell.set_white()
    reconcile_cells(GridReference(0, 0), row_cell, column_cell)
    assert row_cell.white


def test_reconcile_leaves_unknown_pair_alone():
    row_cell, column_cell = Cell(), Cell()
    reconcile_cells(GridReference(1, 1), row_cell, column_cell)
    assert not row_cell.known and not column_cell.known


def test_reconcile_disagreement_is_fatal():
    row_cell, column_cell = Cell(), Cell()
    row_cell.set_black()
    column_cell.set_white()
    with pytest.raises(CrossConsistencyViolation):
        reconcile_cells(GridReference(2, 1), row_cell, column_cell)


def test_instant_solve_fills_middle_row_and_column():
    grid = _cross_grid()
    assert grid.attempt_instant_solve() == (1, 1)

    assert _rows(grid) == [
        [None, True, None],
        [True, True, True],
        [None, True, None],
    ]
    assert grid.solved_sequence_count() == (1, 1)
    assert grid.known_cell_percentage() == 55


def test_instant_solve_conflicting_with_initial_cell():
    config = PuzzleConfig(
        side_length=3,
        row_clues=[[1, 1], [1], [1]],
        column_clues=[[1], [1], [1]],
        initial_black=[GridReference(0, 1)],
    )
    grid = Grid.from_config(config)
    with pytest.raises(Contradiction):
        grid.attempt_instant_solve()


def test_estimate_permutations():
    estimate = _cross_grid().estimate_permutations()
    assert estimate.rows == [3, 1, 3]
    assert estimate.columns == [3, 1, 3]
    assert estimate.overall == 81


def test_best_guess_before_any_cache():
    assert _cross_grid().best_guess_permutations() == (81, 6)


def test_reduce_pass_finishes_the_cross():
    grid = _cross_grid()
    grid.attempt_instant_solve()

    assert grid.reduce_permutations() == 2
    assert grid.is_solved
    assert _rows(grid) == [
        [False, True, False],
        [True, True, True],
        [False, True, False],
    ]
    assert grid.known_cell_percentage() == 100
    # Nothing left to solve.
    assert grid.reduce_permutations() == 0
    assert grid.validate_permutations() == 0


def test_common_cells_pass_counts_new_cells():
    grid = _cross_grid()
    grid.attempt_instant_solve()
    grid.reduce_permutations()
    assert grid.evaluate_common_cells() == 0


def test_lines_over_cap_are_skipped_until_enumerated():
    config = PuzzleConfig(
        side_length=5,
        row_clues=[[1]] * 5,
        column_clues=[[1]] * 5,
        permutation_cap=2,
    )
    grid = Grid.from_config(config)

    assert grid.evaluate_common_cells() == 0
    assert grid.reduce_permutations() == 0
    assert not any(line.has_cache for line in grid.lines())
    assert grid.known_cell_percentage() == 0

    assert grid.rows[0].generate_remaining_permutations() == 32
    assert grid.reduce_permutations() == 0
    assert grid.validate_permutations() == 0
    assert grid.rows[0].cache_size == 5
    assert not any(line.has_cache for line in grid.lines()[1:])


def test_evaluate_remaining_then_validate():
    grid = _cross_grid(permutation_cap=0)
    grid.attempt_instant_solve()
    assert grid.reduce_permutations() == 0

    assert grid.evaluate_remaining_permutations() == 256
    assert grid.validate_permutations() == 2
    assert grid.is_solved


def test_passes_are_traced():
    reset_tracer()
    grid = _cross_grid()
    grid.attempt_instant_solve()
    grid.reduce_permutations()

    summary = get_tracer().summary()
    assert summary["action_counts"]["instant_solve"] == 2
    assert summary["action_counts"]["line_solved"] == 2
    assert summary["num_lines_solved"] == 4
    reset_tracer()


def test_line_at_the_cap_is_skipped():
    at_cap = _cross_grid(permutation_cap=3)
    at_cap.attempt_instant_solve()
    assert at_cap.reduce_permutations() == 0
    assert not at_cap.rows[0].has_cache

    above = _cross_grid(permutation_cap=4)
    above.attempt_instant_solve()
    assert above.reduce_permutations() == 2
