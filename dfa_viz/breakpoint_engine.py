"""
Breakpoint Engine — Conditional breakpoints for trace replay.

Define conditions (state changed, entered trap, entered a given state,
override used, accepting) and the engine scans the trace to find the steps
where those conditions trigger.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

from dfa_engine import TRAP_STATE, VIA_OVERRIDE, VIA_UNDEFINED


class ConditionType(str, Enum):
    """Supported breakpoint condition types."""
    STATE_CHANGED = "state_changed"     # state_after != state_before
    ENTERED_TRAP = "entered_trap"       # undefined transition taken
    ENTERED_STATE = "entered_state"     # state_after == state
    OVERRIDE_USED = "override_used"     # next state chosen by an override
    ACCEPTING = "accepting"             # automaton is in a final state


@dataclass
class Breakpoint:
    """A single breakpoint condition."""
    id: str
    condition: ConditionType
    state: Optional[int] = None   # target of ENTERED_STATE
    run_id: Optional[int] = None  # None = any run
    enabled: bool = True

    def to_dict(self) -> dict:
        d = asdict(self)
        d["condition"] = self.condition.value
        return d

    @staticmethod
    def from_dict(d: dict) -> "Breakpoint":
        return Breakpoint(
            id=d["id"],
            condition=ConditionType(d["condition"]),
            state=d.get("state"),
            run_id=d.get("run_id"),
            enabled=d.get("enabled", True),
        )


@dataclass
class BreakpointHit:
    """Records a breakpoint firing at a specific step."""
    breakpoint_id: str
    step: int
    run_id: int
    state: Optional[int]
    message: str


class BreakpointEngine:
    """Evaluates breakpoints against trace steps."""

    def __init__(self):
        self.breakpoints: dict[str, Breakpoint] = {}
        self._next_id = 0

    def add_breakpoint(
        self,
        condition: ConditionType,
        state: int | None = None,
        run_id: int | None = None,
        bp_id: str | None = None,
    ) -> Breakpoint:
        """Add a new breakpoint. Returns the created Breakpoint."""
        if condition == ConditionType.ENTERED_STATE and state is None:
            raise ValueError("ENTERED_STATE breakpoints need a state")
        if bp_id is None:
            bp_id = f"bp_{self._next_id}"
            self._next_id += 1
        bp = Breakpoint(
            id=bp_id,
            condition=condition,
            state=state,
            run_id=run_id,
        )
        self.breakpoints[bp_id] = bp
        return bp

    def remove_breakpoint(self, bp_id: str) -> bool:
        """Remove a breakpoint by ID. Returns True if removed."""
        if bp_id in self.breakpoints:
            del self.breakpoints[bp_id]
            return True
        return False

    def toggle_breakpoint(self, bp_id: str) -> bool:
        """Toggle a breakpoint's enabled state. Returns new state."""
        if bp_id in self.breakpoints:
            self.breakpoints[bp_id].enabled = not self.breakpoints[bp_id].enabled
            return self.breakpoints[bp_id].enabled
        return False

    def clear_all(self):
        """Remove all breakpoints."""
        self.breakpoints.clear()
        self._next_id = 0

    def evaluate_step(self, step: dict) -> list[BreakpointHit]:
        """Check all enabled breakpoints against a single step."""
        hits = []
        for bp in self.breakpoints.values():
            if not bp.enabled:
                continue
            hit = self._check_breakpoint(bp, step)
            if hit is not None:
                hits.append(hit)
        return hits

    def _check_breakpoint(self, bp: Breakpoint, step: dict) -> BreakpointHit | None:
        """Check a single breakpoint against a step."""
        if bp.run_id is not None and step.get("run_id") != bp.run_id:
            return None

        before = step.get("state_before")
        after = step.get("state_after")
        via = step.get("via")
        triggered = False
        message = ""

        if bp.condition == ConditionType.STATE_CHANGED:
            # init/final markers have no state_before
            triggered = before is not None and after != before
            message = f"State changed: {before} → {after}"

        elif bp.condition == ConditionType.ENTERED_TRAP:
            triggered = via == VIA_UNDEFINED and after == TRAP_STATE
            message = f"Entered trap from {before} on '{step.get('symbol')}'"

        elif bp.condition == ConditionType.ENTERED_STATE:
            target = bp.state
            triggered = after == target and before != target and step.get("phase") == "step"
            message = f"Entered state {target}"

        elif bp.condition == ConditionType.OVERRIDE_USED:
            triggered = via == VIA_OVERRIDE
            message = f"Override at state {before} on '{step.get('symbol')}' → {after}"

        elif bp.condition == ConditionType.ACCEPTING:
            triggered = bool(step.get("accepting"))
            message = f"Accepting in state {after}"

        if not triggered:
            return None
        return BreakpointHit(
            breakpoint_id=bp.id,
            step=step.get("step", 0),
            run_id=step.get("run_id"),
            state=after,
            message=message,
        )

    def find_next_breakpoint(
        self, steps: list[dict], from_step: int = 0
    ) -> BreakpointHit | None:
        """Scan forward from from_step to find the next triggered breakpoint."""
        for i in range(from_step, len(steps)):
            hits = self.evaluate_step(steps[i])
            if hits:
                return hits[0]
        return None

    def find_all_breakpoints(self, steps: list[dict]) -> list[BreakpointHit]:
        """Scan all steps and return all breakpoint hits."""
        all_hits = []
        for step in steps:
            all_hits.extend(self.evaluate_step(step))
        return all_hits

    def get_breakpoint_summary(self) -> list[dict]:
        """Get a summary of all breakpoints for display."""
        return [bp.to_dict() for bp in self.breakpoints.values()]
