"""CLI entrypoint: load puzzle(s), run the deduction engine, and report progress."""

import argparse
import csv
import json
from pathlib import Path
from typing import List, Optional

from solver import solve_puzzle
from src.nonogram.grid import Grid
from src.nonogram.solver_core import SolveResult
from src.nonogram.loader import load_puzzles
from src.utils.io import save_json
from src.utils.trace import get_tracer, reset_tracer

CELL_SYMBOLS = {"black": "X", "white": "", "unknown": "."}


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Run the deduction engine on grid shading puzzles")
    parser.add_argument("input", type=Path, help="Path to puzzle file or directory of puzzles")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write results (.csv, or .json for a JSON document)",
    )
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=None,
        help="Optional directory to write one trace CSV per puzzle.",
    )
    parser.add_argument(
        "--permutation-cap",
        type=int,
        default=None,
        help="Lines with a larger structural estimate are left to the exhaustive pass.",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print grids and analysis.")
    return parser.parse_args(argv)


def grid_to_rows(grid: Grid) -> List[str]:
    """One string per row: '#' black, '-' white, '.' unknown."""
    symbols = {"black": "#", "white": "-", "unknown": "."}
    return ["".join(symbols[cell.state.value] for cell in row.cells) for row in grid.rows]


def format_grid(grid: Grid, col_width: int = 3) -> str:
    header = " " + "".rjust(col_width) + " ".join(
        str(i).rjust(col_width) for i in range(1, grid.side_length + 1)
    )
    lines = ["", "Current grid state:", "", header, ""]

    for index, row in enumerate(grid.rows, start=1):
        cells = " ".join(CELL_SYMBOLS[cell.state.value].rjust(col_width) for cell in row.cells)
        lines.append(f"{str(index).rjust(col_width)} {cells}")
        lines.append("")

    rows_solved, columns_solved = grid.solved_sequence_count()
    lines.extend([
        "",
        f"Completion percentage: {grid.known_cell_percentage()}%",
        f"Completed rows: {rows_solved}",
        f"Completed columns: {columns_solved}",
        "",
    ])
    return "\n".join(lines)


def format_result(puzzle_id: str, result: SolveResult, steps: int) -> dict:
    grid = result.grid
    return {
        "id": puzzle_id,
        "solved": result.solved,
        "known_percentage": grid.known_cell_percentage(),
        "grid": grid_to_rows(grid),
        "steps": steps,
    }


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solved", "known_percentage", "grid", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["solved"],
                r["known_percentage"],
                json.dumps(r["grid"], ensure_ascii=False, separators=(",", ":")),
                r["steps"]
            ])


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    puzzles = []
    results = []

    if args.input.is_file():
        puzzles = load_puzzles(str(args.input))
    elif args.input.is_dir():
        for file_path in sorted(args.input.iterdir()):
            if file_path.suffix in [".json", ".jsonl", ".parquet", ".csv"]:
                puzzles.extend(load_puzzles(str(file_path)))
    else:
        raise ValueError(f"Input path {args.input} is neither file nor directory")

    for index, puzzle in enumerate(puzzles):
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = str(puzzle.get("id", f"puzzle-{index}"))

        try:
            result = solve_puzzle(puzzle, permutation_cap=args.permutation_cap)

            if not args.quiet:
                print(f"Puzzle {puzzle_id}")
                for line in result.analysis:
                    print(line)
                print(format_grid(result.grid))

            results.append(format_result(puzzle_id, result, result.summary["total_steps"]))
        except Exception as e:
            print(f"ERROR: Failed to solve puzzle {puzzle_id}: {e}")
            results.append({
                "id": puzzle_id,
                "solved": False,
                "known_percentage": 0,
                "grid": [],
                "steps": -1
            })

        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{puzzle_id}.csv")

    if args.output:
        if args.output.suffix == ".json":
            save_json(args.output, results)
        else:
            write_results_csv(results, args.output)
    else:
        print(results)

    return results

if __name__ == "__main__":
    main()
