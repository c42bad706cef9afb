"""
data_loader.py — Loads automaton JSONL traces into structured Python objects
for the Dash replay app.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from trace_logger import TraceLogger


class TraceData:
    """Parsed trace log — provides step-by-step access for the UI."""

    def __init__(self, rows: list[dict]):
        self.steps = [r for r in rows if r.get("record", "step") == "step"]
        self.summaries = {
            r["run_id"]: r for r in rows if r.get("record") == "summary"
        }
        self.num_steps = len(self.steps)

    # -- Access helpers -------------------------------------------------------

    def get_step(self, idx: int) -> dict:
        """Get a step by index (0-based)."""
        if 0 <= idx < self.num_steps:
            return self.steps[idx]
        return {}

    def runs(self) -> list[int]:
        """Run ids in the order they first appear."""
        seen = []
        for step in self.steps:
            rid = step.get("run_id")
            if rid not in seen:
                seen.append(rid)
        return seen

    def get_run_steps(self, run_id: int) -> list[dict]:
        return [s for s in self.steps if s.get("run_id") == run_id]

    def get_summary(self, run_id: int) -> dict:
        return self.summaries.get(run_id, {})

    def get_path(self, run_id: int) -> list[dict]:
        """The state path of one run: list of {step, state, symbol, via}."""
        path = []
        for step in self.get_run_steps(run_id):
            if step.get("phase") == "final":
                continue
            path.append({
                "step": step.get("step", 0),
                "state": step.get("state_after"),
                "symbol": step.get("symbol"),
                "via": step.get("via"),
            })
        return path

    def get_state_series(self, run_id: int) -> list[int]:
        """State after each init/step record of a run."""
        return [p["state"] for p in self.get_path(run_id)]

    # -- Narrative -----------------------------------------------------------

    def generate_narrative(self, step_idx: int) -> str:
        """Human-readable description of a given step."""
        step = self.get_step(step_idx)
        if not step:
            return "No data for this step."

        lines = []
        phase = step.get("phase", "unknown")
        run_id = step.get("run_id")
        summary = self.get_summary(run_id)

        lines.append(f"Step {step.get('step', '?')} (run {run_id})")
        if summary:
            lines.append(f"INPUT: {summary.get('input')!r}")
        lines.append("")

        if phase == "init":
            lines.append("PHASE: Reset")
            lines.append(f"Starting state: q{step.get('state_after')}")
        elif phase == "final":
            lines.append("PHASE: End of input")
            verdict = "ACCEPTED" if step.get("accepting") else "REJECTED"
            lines.append(f"RESULT: {verdict} in {_state_name(step.get('state_after'))}")
        else:
            before = _state_name(step.get("state_before"))
            after = _state_name(step.get("state_after"))
            lines.append(f"INPUT SYMBOL: '{step.get('symbol')}'")
            lines.append(f"TRANSITION: {before} → {after} (via {step.get('via')})")
            if step.get("via") == "undefined":
                lines.append("No transition defined: moved to trap")
            elif step.get("via") == "absorbed":
                lines.append("Already in trap: symbol ignored")
            if step.get("accepting"):
                lines.append("Currently in an accepting state")

        return "\n".join(lines)


def _state_name(state) -> str:
    if state is None:
        return "?"
    if state < 0:
        return "trap"
    return f"q{state}"


def load_trace(path: str) -> TraceData:
    """Load a JSONL trace file written by TraceLogger.save."""
    return TraceData(TraceLogger().load(path))
