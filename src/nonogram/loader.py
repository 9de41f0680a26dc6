import json
import math
import os
from typing import Any, Dict, List

import pandas as pd

from src.utils.io import load_json


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .parquet, .csv, .json and .jsonl formats.
    Returns a list of raw puzzle dictionaries.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    def _is_missing(value: Any) -> bool:
        return value is None or (isinstance(value, float) and math.isnan(value))

    def _count_lines(clues: Any) -> int:
        if isinstance(clues, str):
            return len(clues.split(";")) if clues.strip() else 0
        try:
            return len(clues)
        except TypeError:
            return 0

    def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
        # Tabular sources fill absent columns with NaN.
        record = {k: v for k, v in record.items() if not _is_missing(v)}

        if "size" not in record and "rows" in record:
            record["size"] = _count_lines(record["rows"])

        return record

    # Case 1: Tabular files (parquet is binary, csv is text)
    if file_path.endswith(".parquet") or file_path.endswith(".csv"):
        try:
            if file_path.endswith(".parquet"):
                df = pd.read_parquet(file_path)
            else:
                df = pd.read_csv(file_path)
            records = df.to_dict(orient="records")
            return [_normalize_record(r) for r in records]
        except Exception as e:
            print(f"Error reading {file_path}: {e}")
            return []

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            payload = load_json(file_path)
            if isinstance(payload, list):
                return [_normalize_record(p) for p in payload if isinstance(p, dict)]
            if isinstance(payload, dict):
                return [_normalize_record(payload)]
            return []
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            pass

    # Case 3: JSONL File (Text)
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                data.append(_normalize_record(obj))
    return data
