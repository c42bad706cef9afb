"""
LoggedAutomaton — wraps an Automaton so every run emits per-step
TraceLogger records with the state path and how each step was resolved.
"""

from dfa_engine import Automaton, symbol_label
from trace_logger import TraceLogger


class LoggedAutomaton:
    """Automaton wrapper with automatic per-step logging via TraceLogger."""

    def __init__(self, automaton: Automaton, log_dir="logs"):
        self.automaton = automaton
        self.logger = TraceLogger(log_dir=log_dir)

    def run_traced(self, input_word):
        """Runs the automaton on the input with full per-step logging.

        Returns (accepted, history) where history is the list of states,
        starting with the initial state and holding one entry per symbol.
        """
        dfa = self.automaton
        if isinstance(input_word, str):
            label = input_word
        else:
            # any iterable of symbols; materialize so it can be walked twice
            input_word = list(input_word)
            label = "".join(symbol_label(s) for s in input_word)
        run_id = self.logger.begin_run(dfa.kind.value, label)

        dfa.reset()
        history = [dfa.current_state]
        self.logger.log_step(
            run_id,
            phase="init",
            state_after=dfa.current_state,
            accepting=dfa.is_accepting(),
        )

        # Symbols after the trap are still logged (as "absorbed") so the
        # trace covers the whole input.
        for symbol in input_word:
            before = dfa.current_state
            after, via = dfa.resolve(before, symbol)
            dfa.current_state = after
            history.append(after)
            self.logger.log_step(
                run_id,
                state_before=before,
                symbol=symbol_label(symbol),
                state_after=after,
                via=via,
                accepting=dfa.is_accepting(),
            )

        accepted = dfa.is_accepting()
        self.logger.log_step(
            run_id,
            phase="final",
            state_after=dfa.current_state,
            accepting=accepted,
        )
        self.logger.end_run(
            run_id, accepted, history, dfa.num_states, dfa.trap_state
        )
        return accepted, history

    def run(self, input_word) -> bool:
        accepted, _ = self.run_traced(input_word)
        return accepted

    def save_log(self):
        """Write all logged steps to disk."""
        self.logger.save()
        return self.logger.log_path
