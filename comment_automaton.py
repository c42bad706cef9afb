"""
comment_automaton — DFA recognizing one source-code comment.

Three comment styles are accepted:
  1. a line comment that starts with // and ends with a newline
  2. a block comment that starts with (* and ends with *)
  3. a block comment that starts with { and ends with }

Openers are plain table rows. The bodies are handled by an override for
states 2, 4, 6 and 7, whose transitions depend on "is this the terminator"
rather than on one exact symbol:

    (0) -/-> (1) -/-> (2) --\\n--> [3]        (2) loops on anything else
    (0) -{-> (4) --}--> [3]                  (4) loops on anything else
    (0) -(-> (5) -*-> (6) -*-> (7) -)-> [3]  (6) loops on non-*, (7) loops on *,
                                             (7) returns to (6) on anything else

The final state 3 has no outgoing transitions, so trailing input rejects.

`CommentAutomaton()` is a factory function, not a class: every variant is a
plain `Automaton` tagged by `AutomatonKind`, so there is no subclass to
name. It keeps a constructor-style name because callers use it as one.
"""

from functools import lru_cache

from dfa_engine import Automaton, AutomatonKind, TransitionTable

NUM_STATES = 8
START = 0
SLASH = 1
LINE_BODY = 2
ACCEPT = 3
BRACE_BODY = 4
PAREN = 5
BLOCK_BODY = 6
BLOCK_STAR = 7

OVERRIDE_STATES = frozenset({LINE_BODY, BRACE_BODY, BLOCK_BODY, BLOCK_STAR})

_NEWLINE = ord("\n")
_CLOSE_BRACE = ord("}")
_STAR = ord("*")
_CLOSE_PAREN = ord(")")

OVERRIDE_RULES = (
    (LINE_BODY, "\\n", ACCEPT),
    (LINE_BODY, "not \\n", LINE_BODY),
    (BRACE_BODY, "}", ACCEPT),
    (BRACE_BODY, "not }", BRACE_BODY),
    (BLOCK_BODY, "*", BLOCK_STAR),
    (BLOCK_BODY, "not *", BLOCK_BODY),
    (BLOCK_STAR, ")", ACCEPT),
    (BLOCK_STAR, "*", BLOCK_STAR),
    (BLOCK_STAR, "not * or )", BLOCK_BODY),
)


def comment_override(state: int, code: int):
    """Next state for the comment-body states; None for every other state."""
    if state == LINE_BODY:
        return ACCEPT if code == _NEWLINE else LINE_BODY
    if state == BRACE_BODY:
        return ACCEPT if code == _CLOSE_BRACE else BRACE_BODY
    if state == BLOCK_BODY:
        return BLOCK_STAR if code == _STAR else BLOCK_BODY
    if state == BLOCK_STAR:
        if code == _CLOSE_PAREN:
            return ACCEPT
        if code == _STAR:
            return BLOCK_STAR
        return BLOCK_BODY
    return None


@lru_cache(maxsize=None)
def comment_table() -> TransitionTable:
    """Opener rows only; built once and shared by every CommentAutomaton."""
    rows = {
        (START, "/"): SLASH,
        (SLASH, "/"): LINE_BODY,
        (START, "{"): BRACE_BODY,
        (START, "("): PAREN,
        (PAREN, "*"): BLOCK_BODY,
    }
    return TransitionTable(NUM_STATES, rows)


def CommentAutomaton() -> Automaton:
    """Construct an automaton that accepts exactly one comment of any style."""
    return Automaton(
        AutomatonKind.COMMENT,
        comment_table(),
        final_states={ACCEPT},
        override=comment_override,
        override_states=OVERRIDE_STATES,
        label="comment",
        override_rules=OVERRIDE_RULES,
    )
