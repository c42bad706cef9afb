"""
Generate a demo trace log for the visualization app.
Run: python generate_demo_log.py
"""

from comment_automaton import CommentAutomaton
from logged_automaton import LoggedAutomaton


def main():
    dfa = LoggedAutomaton(CommentAutomaton(), log_dir="logs")

    # Run several comments (good and bad) to produce a rich log
    test_strings = [
        "// hello\n",
        "{ hello }",
        "(* a ** b *)",
        "(* unterminated",
        "/* not this style */",
    ]
    for s in test_strings:
        print(f"\n--- Running {s!r} ---")
        accepted, history = dfa.run_traced(s)
        result = "ACCEPTED" if accepted else "REJECTED"
        print(f"Result: {result} | Path: {history}")

    path = dfa.save_log()
    print(f"\n✅ Log saved to: {path}")
    print(f"   Total steps logged: {len(dfa.logger.steps)}")


if __name__ == "__main__":
    main()
