"""Tracing module: logs deduction steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the solving process."""
    
    timestamp: float
    step_number: int
    action_type: str  # 'instant_solve', 'common_cells', 'reduce', 'validate', 'enumerate', 'line_solved', 'pass_complete'
    line: Optional[str] = None  # e.g. 'row 3', 'column 0'
    technique: Optional[str] = None  # Which deduction solved a line, or which pass completed
    cells_determined: Optional[int] = None
    candidates_before: Optional[int] = None  # None when the cache was built during this step
    candidates_after: Optional[int] = None
    is_solved: Optional[bool] = None
    result: Optional[int] = None  # Pass-level total (cells found, lines solved, permutations)


class Tracer:
    """Records solver steps for logging and analysis."""
    
    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0
    
    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))
    
    def log_instant_solve(self, line: str):
        """Log a line forced entirely by its clue."""
        self._record('instant_solve', line=line, is_solved=True)
    
    def log_common_cells(self, line: str, cells_determined: int):
        """Log cells forced because every candidate agrees on them."""
        self._record('common_cells', line=line, cells_determined=cells_determined)
    
    def log_reduction(self, line: str, candidates_before: Optional[int], candidates_after: int, solved: bool):
        """Log candidates dropped for disagreeing with known cells."""
        self._record(
            'reduce',
            line=line,
            candidates_before=candidates_before,
            candidates_after=candidates_after,
            is_solved=solved,
        )
    
    def log_validation(self, line: str, candidates_before: int, candidates_after: int, solved: bool):
        """Log candidates dropped for not matching the clue."""
        self._record(
            'validate',
            line=line,
            candidates_before=candidates_before,
            candidates_after=candidates_after,
            is_solved=solved,
        )
    
    def log_enumeration(self, line: str, candidates: int):
        """Log an exhaustive enumeration of a line's unknown cells."""
        self._record('enumerate', line=line, candidates_after=candidates)
    
    def log_line_solved(self, line: str, technique: str):
        """Log a line becoming fully determined."""
        self._record('line_solved', line=line, technique=technique, is_solved=True)
    
    def log_pass(self, technique: str, result: int):
        """Log the end of a grid-wide pass."""
        self._record('pass_complete', technique=technique, result=result)
    
    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return
        
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        
        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'line', 'technique', 'cells_determined',
            'candidates_before', 'candidates_after', 'is_solved', 'result'
        ]
        
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            
            for step in self.steps:
                writer.writerow(asdict(step))
        
        print(f"Trace written to {filepath} ({len(self.steps)} steps)")
    
    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1
        
        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_lines_solved': sum(
                1 for s in self.steps if s.action_type in ('line_solved', 'instant_solve')
            ),
            'num_cells_determined': sum(
                s.cells_determined or 0 for s in self.steps if s.action_type == 'common_cells'
            ),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None

