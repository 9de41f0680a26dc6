"""Puzzle parser: convert puzzle records and clue strings into a PuzzleConfig.

Supports:
- Clue strings: lines separated by ';', run lengths by ',' (e.g. "2,1;3;1")
- Cell strings: "row,col;row,col"
- Lists of lists for either, as produced by JSON/parquet sources
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from .model import DEFAULT_PERMUTATION_CAP, Clue, GridReference, PuzzleConfig, normalize_clue


def parse_clues(raw: Any) -> List[Clue]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return []
        lines = [part.strip() for part in raw.split(";")]
        return [_parse_clue_line(line) for line in lines]
    return [normalize_clue(_as_list(line)) for line in _as_list(raw)]


def _parse_clue_line(line: str) -> Clue:
    if not line:
        return ()
    try:
        return normalize_clue([int(v) for v in line.split(",")])
    except ValueError as e:
        raise ValueError(f"Clue string {line!r} is not a comma-separated list of integers") from e


def parse_references(raw: Any) -> List[GridReference]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return []
        pairs = [part.split(",") for part in raw.split(";") if part.strip()]
    else:
        pairs = [_as_list(p) for p in _as_list(raw)]

    references = []
    for pair in pairs:
        if len(pair) != 2:
            raise ValueError(f"Reference {pair} contains the wrong number of elements")
        references.append(GridReference(int(pair[0]), int(pair[1])))
    return references


def parse_size(raw: Any) -> Optional[int]:
    """Accept 5, "5" or "5*5" / "5x5"."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    match = re.match(r"\s*(\d+)\s*(?:[*x]\s*\d+)?\s*$", str(raw))
    if not match:
        return None
    return int(match.group(1))


def parse_puzzle(puzzle_json: Dict[str, Any], permutation_cap: Optional[int] = None) -> PuzzleConfig:
    row_clues = parse_clues(puzzle_json.get("rows"))
    column_clues = parse_clues(puzzle_json.get("columns", puzzle_json.get("cols")))

    raw_black = puzzle_json.get("black")
    if raw_black is None:
        raw_black = puzzle_json.get("initial_black")
    initial_black = parse_references(raw_black)

    size = parse_size(puzzle_json.get("size"))
    if size is None:
        size = max(len(row_clues), len(column_clues))

    if permutation_cap is None:
        raw_cap = puzzle_json.get("permutation_cap")
        permutation_cap = DEFAULT_PERMUTATION_CAP if raw_cap is None else int(raw_cap)

    puzzle_id = puzzle_json.get("id")
    return PuzzleConfig(
        side_length=size,
        row_clues=row_clues,
        column_clues=column_clues,
        initial_black=initial_black,
        permutation_cap=permutation_cap,
        puzzle_id=str(puzzle_id) if puzzle_id is not None else None,
    )


def _as_list(value: Any) -> List[Any]:
    # Parquet sources hand back numpy arrays rather than lists.
    if hasattr(value, "tolist"):
        value = value.tolist()
    if isinstance(value, (int, float)):
        return [value]
    return list(value)
