import pytest

from src.nonogram.model import DEFAULT_PERMUTATION_CAP, GridReference
from src.nonogram.parser import parse_clues, parse_puzzle, parse_references, parse_size


def test_parse_clue_string():
    assert parse_clues("2,1;3;1") == [(2, 1), (3,), (1,)]
    assert parse_clues(" 1, 1 ; 2 ") == [(1, 1), (2,)]


def test_zero_or_blank_clue_line_is_empty():
    assert parse_clues("0;3;") == [(), (3,), ()]
    assert parse_clues("") == []
    assert parse_clues(None) == []


def test_parse_clue_lists():
    assert parse_clues([[1, 2], [3], 4, []]) == [(1, 2), (3,), (4,), ()]


def test_malformed_clues_are_rejected():
    with pytest.raises(ValueError):
        parse_clues("a,b;1")
    with pytest.raises(ValueError):
        parse_clues("1,-2")


def test_parse_references():
    assert parse_references("0,1;2,3") == [GridReference(0, 1), GridReference(2, 3)]
    assert parse_references([[4, 0]]) == [GridReference(4, 0)]
    assert parse_references("") == []


def test_reference_with_wrong_element_count():
    with pytest.raises(ValueError):
        parse_references("1,2,3")


@pytest.mark.parametrize(
    "raw, expected",
    [(5, 5), ("5", 5), ("5*5", 5), ("7x7", 7), ("abc", None), (None, None)],
)
def test_parse_size(raw, expected):
    assert parse_size(raw) == expected


def test_parse_puzzle_record():
    config = parse_puzzle({
        "id": 7,
        "size": "3*3",
        "rows": "1;3;1",
        "columns": [[1], [3], [1]],
        "black": "1,1",
        "permutation_cap": 10,
    })

    assert config.puzzle_id == "7"
    assert config.side_length == 3
    assert config.row_clues == [(1,), (3,), (1,)]
    assert config.column_clues == [(1,), (3,), (1,)]
    assert config.initial_black == [GridReference(1, 1)]
    assert config.permutation_cap == 10


def test_parse_puzzle_defaults():
    config = parse_puzzle({"rows": "1;1", "cols": "1;1", "initial_black": [[0, 0]]})

    assert config.side_length == 2
    assert config.column_clues == [(1,), (1,)]
    assert config.initial_black == [GridReference(0, 0)]
    assert config.permutation_cap == DEFAULT_PERMUTATION_CAP
    assert config.puzzle_id is None


def test_explicit_cap_overrides_record():
    config = parse_puzzle({"rows": "1", "columns": "1", "permutation_cap": 10}, permutation_cap=3)
    assert config.permutation_cap == 3


def test_record_cap_of_zero_is_kept():
    config = parse_puzzle({"rows": "1;3;1", "columns": "1;3;1", "permutation_cap": 0})
    assert config.permutation_cap == 0
