from word_automaton import WordAutomaton
from comment_automaton import CommentAutomaton


def run_word_demo():
    print("=== Word DFA Demo: 'foo' ===")

    dfa = WordAutomaton("foo")

    test_strings = [
        ("foo", True),
        ("fo", False),     # prefix
        ("fooo", False),   # extension
        ("fox", False),    # same length, wrong symbol
        ("", False),
        ("bar", False),
    ]

    for s, expected in test_strings:
        accepted = dfa.run(s)
        _report(s, accepted, expected)


def run_comment_demo():
    print("\n=== Comment DFA Demo ===")

    dfa = CommentAutomaton()

    test_strings = [
        ("// hello\n", True),
        ("{ hello }", True),
        ("(* hello *)", True),
        ("(* a ** b *)", True),
        ("(***)", True),
        ("// no newline", False),
        ("(* unterminated", False),
        ("/* not this style */", False),
        ("(+ malformed opener +)", False),
        ("{ trailing } x", False),
    ]

    for s, expected in test_strings:
        accepted = dfa.run(s)
        _report(s, accepted, expected)


def _report(s, accepted, expected):
    result_str = "ACCEPTED" if accepted else "REJECTED"
    expected_str = "ACCEPTED" if expected else "REJECTED"
    print(f"\n--- Testing string {s!r} ---")
    print(f"Result: {result_str}")
    if result_str == expected_str:
        print(">> VERIFICATION PASSED")
    else:
        print(f">> VERIFICATION FAILED (Expected {expected_str})")


if __name__ == "__main__":
    run_word_demo()
    run_comment_demo()
