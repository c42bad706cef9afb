"""
dfa_engine — table-driven DFA executor with an absorbing trap state.

An Automaton owns a read-only transition table (a frozen mapping holding
only the defined rows), a frozen set of final states and, for
automata whose behaviour is not a pure table, a state-keyed override
function. Any undefined transition goes to the trap state and stays there.

Automaton instances are NOT safe for concurrent use: `current_state` is
mutated by every step. Use `clone()` to hand each thread its own instance;
clones share the same immutable table.
"""

from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional


INITIAL_STATE = 0
TRAP_STATE = -1
ALPHABET_SIZE = 256

# How a step picked its next state.
VIA_TABLE = "table"
VIA_OVERRIDE = "override"
VIA_UNDEFINED = "undefined"
VIA_ABSORBED = "absorbed"


class AutomatonKind(str, Enum):
    """Concrete automaton variants built on the engine."""
    WORD = "word"
    COMMENT = "comment"
    CUSTOM = "custom"


class InvalidAutomatonError(ValueError):
    """Raised when an automaton is built from malformed parts."""


class InvalidSymbolError(ValueError):
    """Raised when step() is given something that is not a single symbol."""


def symbol_code(symbol) -> Optional[int]:
    """Map a symbol to its 8-bit code, or None if it is outside the alphabet.

    Accepts a one-character string or an int (iterating over ``bytes``
    yields ints).
    """
    if isinstance(symbol, str):
        if len(symbol) != 1:
            raise InvalidSymbolError(f"expected a single character, got {symbol!r}")
        code = ord(symbol)
    elif isinstance(symbol, int) and not isinstance(symbol, bool):
        code = symbol
    else:
        raise InvalidSymbolError(f"unsupported symbol type: {type(symbol).__name__}")
    if 0 <= code < ALPHABET_SIZE:
        return code
    return None


def symbol_label(symbol) -> str:
    """Printable label for a symbol (used in logs and graphs).

    Anything that is not a character or an 8-bit code falls back to repr().
    """
    if isinstance(symbol, str):
        return repr(symbol)[1:-1]
    if isinstance(symbol, int) and not isinstance(symbol, bool) and 0 <= symbol < ALPHABET_SIZE:
        return repr(chr(symbol))[1:-1]
    return repr(symbol)


# An override receives (state, symbol_code) and returns the next state,
# or None to fall back to the table.
Override = Callable[[int, int], Optional[int]]


class TransitionTable:
    """Immutable (state, symbol) -> state mapping.

    Only defined rows are stored, keyed by ``state * ALPHABET_SIZE + code``;
    a missing key means the transition goes to trap. Memory is linear in
    the number of rows, not in states times alphabet.
    """

    def __init__(self, num_states: int, rows: dict, trap_state: int = TRAP_STATE):
        if not isinstance(num_states, int) or num_states <= 0:
            raise InvalidAutomatonError(f"num_states must be a positive int, got {num_states!r}")
        self.num_states = num_states
        self.trap_state = trap_state

        transitions = {}
        for (state, symbol), target in rows.items():
            if not 0 <= state < num_states:
                raise InvalidAutomatonError(f"source state {state} out of range [0, {num_states})")
            if not (0 <= target < num_states or target == trap_state):
                raise InvalidAutomatonError(f"target state {target} out of range [0, {num_states})")
            code = symbol_code(symbol)
            if code is None:
                raise InvalidAutomatonError(f"symbol {symbol!r} is outside the 8-bit alphabet")
            # an explicit row to trap is the same as no row
            if target != trap_state:
                transitions[state * ALPHABET_SIZE + code] = target
        self.transitions = MappingProxyType(transitions)

    def lookup(self, state: int, code: int) -> int:
        """Next state for (state, code); trap when no row was defined."""
        return self.transitions.get(state * ALPHABET_SIZE + code, self.trap_state)

    def rows(self) -> list[tuple[int, str, int]]:
        """Defined rows as (state, symbol, target), sorted by state then symbol."""
        return [
            (key // ALPHABET_SIZE, chr(key % ALPHABET_SIZE), self.transitions[key])
            for key in sorted(self.transitions)
        ]

    def __len__(self):
        return len(self.transitions)


class Automaton:
    """A DFA instance: shared immutable structure plus a mutable current state.

    `kind` tags the variant; `override` (optional) handles the states whose
    outgoing behaviour depends on a condition rather than an exact symbol.
    """

    def __init__(
        self,
        kind: AutomatonKind,
        table: TransitionTable,
        final_states,
        override: Optional[Override] = None,
        override_states=(),
        initial_state: int = INITIAL_STATE,
        trap_state: int = TRAP_STATE,
        label: Optional[str] = None,
        override_rules=(),
    ):
        if table.trap_state != trap_state:
            raise InvalidAutomatonError("table and automaton disagree on the trap state")
        if not 0 <= initial_state < table.num_states:
            raise InvalidAutomatonError(f"initial state {initial_state} out of range")
        final_states = frozenset(final_states)
        for s in final_states:
            if not 0 <= s < table.num_states:
                raise InvalidAutomatonError(f"final state {s} out of range [0, {table.num_states})")
        override_states = frozenset(override_states)
        if override_states and override is None:
            raise InvalidAutomatonError("override_states given without an override function")

        self.kind = AutomatonKind(kind)
        self.table = table
        self.final_states = final_states
        self.override = override
        self.override_states = override_states
        self.initial_state = initial_state
        self.trap_state = trap_state
        self.label = label
        # (state, condition, target) triples describing the override, for display only
        self.override_rules = tuple(override_rules)
        self.current_state = initial_state

    @property
    def num_states(self) -> int:
        return self.table.num_states

    @property
    def is_trapped(self) -> bool:
        return self.current_state == self.trap_state

    def reset(self):
        """Reset the automaton to the initial state."""
        self.current_state = self.initial_state

    def resolve(self, state: int, symbol) -> tuple[int, str]:
        """Return (next_state, via) for one symbol without touching current_state."""
        if state == self.trap_state:
            return self.trap_state, VIA_ABSORBED
        code = symbol_code(symbol)
        if code is None:
            return self.trap_state, VIA_UNDEFINED
        if state in self.override_states:
            target = self.override(state, code)
            if target is not None:
                return target, VIA_OVERRIDE
        target = self.table.lookup(state, code)
        if target == self.trap_state:
            return target, VIA_UNDEFINED
        return target, VIA_TABLE

    def step(self, symbol):
        """Consume one symbol. Undefined transitions go to trap, which absorbs."""
        self.current_state, _ = self.resolve(self.current_state, symbol)

    def feed(self, symbols):
        """Step through several symbols without resetting first."""
        for symbol in symbols:
            if self.current_state == self.trap_state:
                break
            self.step(symbol)
        return self

    def is_accepting(self) -> bool:
        return self.current_state in self.final_states

    def run(self, input_word) -> bool:
        """Run the automaton on the whole input and return the verdict."""
        self.reset()
        self.feed(input_word)
        return self.is_accepting()

    def clone(self) -> "Automaton":
        """Fresh instance sharing this automaton's immutable structure."""
        return Automaton(
            self.kind,
            self.table,
            self.final_states,
            override=self.override,
            override_states=self.override_states,
            initial_state=self.initial_state,
            trap_state=self.trap_state,
            label=self.label,
            override_rules=self.override_rules,
        )

    def describe(self) -> dict:
        """JSON-friendly snapshot of the automaton structure."""
        return {
            "kind": self.kind.value,
            "label": self.label,
            "num_states": self.num_states,
            "initial_state": self.initial_state,
            "trap_state": self.trap_state,
            "final_states": sorted(self.final_states),
            "override_states": sorted(self.override_states),
            "rows": [list(r) for r in self.table.rows()],
            "override_rules": [list(r) for r in self.override_rules],
        }

    def __repr__(self):
        return (f"Automaton(kind={self.kind.value}, label={self.label!r}, "
                f"num_states={self.num_states}, state={self.current_state})")
