"""
word_automaton — DFA recognizing exactly one word.

Given "foo" the automaton looks like:  -> (0) -f-> (1) -o-> (2) -o-> [3]
Every other symbol, from any state including the final one, falls to trap.

`WordAutomaton(word)` is a factory function returning a plain `Automaton`
tagged `AutomatonKind.WORD`; there is no subclass per kind. The
constructor-style name is kept because callers use it as one.
"""

from dfa_engine import Automaton, AutomatonKind, InvalidAutomatonError, TransitionTable


def build_word_table(word) -> TransitionTable:
    """Table with one row (i, word[i]) -> i + 1 per symbol of the word."""
    if not isinstance(word, (str, bytes)):
        raise InvalidAutomatonError(f"word must be str or bytes, got {type(word).__name__}")
    rows = {(i, symbol): i + 1 for i, symbol in enumerate(word)}
    return TransitionTable(len(word) + 1, rows)


def WordAutomaton(word) -> Automaton:
    """Construct an automaton that accepts `word` and nothing else.

    State i means "the first i symbols of the word have been consumed";
    state len(word) is the only final state. The empty word gives a single
    state that is both initial and final.
    """
    table = build_word_table(word)
    return Automaton(
        AutomatonKind.WORD,
        table,
        final_states={len(word)},
        label=word if isinstance(word, str) else word.decode("latin-1"),
    )
