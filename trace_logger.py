"""
TraceLogger — Captures per-step automaton state for replay and debugging.

Logs the state before and after every symbol, how the next state was
chosen (table row, override, undefined transition, trap absorption) and a
per-run summary with state occupancy, all to a single JSONL file.
"""

import json
import os
import numpy as np
from dataclasses import dataclass, field, asdict
from typing import Optional

from dfa_engine import TRAP_STATE


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class StateOccupancy:
    """How many times each state was occupied during one run."""
    counts: list = field(default_factory=list)   # index = state id
    trap_count: int = 0
    most_visited: Optional[int] = None

    @staticmethod
    def from_path(path, num_states: int, trap_state: int = TRAP_STATE):
        """Build occupancy from a state path (initial state included)."""
        if path is None or len(path) == 0 or num_states <= 0:
            return StateOccupancy(counts=[0] * max(num_states, 0))
        a = np.asarray(path, dtype=np.int64)
        valid = a[a != trap_state]
        counts = np.bincount(valid, minlength=num_states)
        return StateOccupancy(
            counts=[int(c) for c in counts],
            trap_count=int(np.count_nonzero(a == trap_state)),
            most_visited=int(np.argmax(counts)) if valid.size else None,
        )


@dataclass
class StepRecord:
    """One logged symbol (or the init/final marker of a run)."""
    step: int
    run_id: int
    phase: str = "step"                # init | step | final
    state_before: Optional[int] = None
    symbol: Optional[str] = None
    state_after: Optional[int] = None
    via: Optional[str] = None          # table | override | undefined | absorbed
    accepting: bool = False


@dataclass
class RunSummary:
    """Outcome of one traced run."""
    run_id: int
    kind: str
    input: str
    accepted: bool
    path: list = field(default_factory=list)
    trapped_at: Optional[int] = None   # index of the symbol that entered trap
    occupancy: Optional[StateOccupancy] = None


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------

class TraceLogger:
    """Captures per-step automaton state and writes to JSONL."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = log_dir
        self.log_path = os.path.join(log_dir, "trace_log.jsonl")
        self.steps: list[StepRecord] = []
        self.runs: dict[int, RunSummary] = {}
        self._run_inputs: dict[int, tuple[str, str]] = {}   # run_id -> (kind, input)
        self._step_counter = 0
        self._run_counter = 0

    # -- Runs ----------------------------------------------------------------

    def begin_run(self, kind: str, input_word: str) -> int:
        """Open a new run and return its id."""
        run_id = self._run_counter
        self._run_counter += 1
        self._run_inputs[run_id] = (kind, input_word)
        return run_id

    def end_run(
        self,
        run_id: int,
        accepted: bool,
        path: list,
        num_states: int,
        trap_state: int = TRAP_STATE,
    ) -> RunSummary:
        """Close a run, computing where it trapped and how states were occupied."""
        kind, input_word = self._run_inputs[run_id]
        trapped_at = None
        if trap_state in path:
            # path[0] is the initial state, so path[i] follows symbol i - 1
            trapped_at = path.index(trap_state) - 1
        summary = RunSummary(
            run_id=run_id,
            kind=kind,
            input=input_word,
            accepted=accepted,
            path=list(path),
            trapped_at=trapped_at,
            occupancy=StateOccupancy.from_path(path, num_states, trap_state),
        )
        self.runs[run_id] = summary
        return summary

    # -- Step logging --------------------------------------------------------

    def log_step(
        self,
        run_id: int,
        phase: str = "step",
        state_before: int | None = None,
        symbol: str | None = None,
        state_after: int | None = None,
        via: str | None = None,
        accepting: bool = False,
    ) -> StepRecord:
        """Record a single step."""
        record = StepRecord(
            step=self._step_counter,
            run_id=run_id,
            phase=phase,
            state_before=state_before,
            symbol=symbol,
            state_after=state_after,
            via=via,
            accepting=accepting,
        )
        self.steps.append(record)
        self._step_counter += 1
        return record

    def clear(self):
        """Drop everything logged so far."""
        self.steps.clear()
        self.runs.clear()
        self._run_inputs.clear()
        self._step_counter = 0
        self._run_counter = 0

    # -- Serialization -------------------------------------------------------

    def _serialize_summary(self, summary: RunSummary) -> dict:
        d = asdict(summary)
        d["record"] = "summary"
        return d

    def to_rows(self) -> list[dict]:
        """All steps, then all run summaries, as JSON-serializable dicts."""
        rows = []
        for record in self.steps:
            d = asdict(record)
            d["record"] = "step"
            rows.append(d)
        for summary in self.runs.values():
            rows.append(self._serialize_summary(summary))
        return rows

    def save(self):
        """Write to_rows() to the JSONL file, one row per line."""
        os.makedirs(self.log_dir, exist_ok=True)
        with open(self.log_path, "w", encoding="utf-8") as f:
            for row in self.to_rows():
                f.write(json.dumps(row, separators=(",", ":")) + "\n")

    def load(self, path: str | None = None) -> list[dict]:
        """Load a JSONL trace file and return its rows."""
        p = path or self.log_path
        rows = []
        with open(p, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    rows.append(json.loads(line))
        return rows
