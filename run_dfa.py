import argparse
import sys

import matplotlib.pyplot as plt

from word_automaton import WordAutomaton
from comment_automaton import CommentAutomaton
from logged_automaton import LoggedAutomaton
from dfa_engine import InvalidAutomatonError


def decode_escapes(text):
    """Turn backslash escapes typed on the command line (\\n, \\t, \\x41) into symbols."""
    return text.encode("latin-1", "backslashreplace").decode("unicode_escape")


def build_automaton(args):
    if args.kind == 'word':
        word = decode_escapes(args.word) if args.escapes else args.word
        return WordAutomaton(word)
    return CommentAutomaton()


def collect_inputs(args, stdin=None):
    inputs = list(args.inputs)
    if args.stdin:
        # one input per line, terminator stripped; use --escapes to feed a \n
        inputs.extend((stdin or sys.stdin).read().splitlines())
    if args.escapes:
        inputs = [decode_escapes(s) for s in inputs]
    return inputs


def plot_occupancy(summaries, num_states, out_path):
    """Bar chart of how often each state was occupied, summed over all runs."""
    totals = [0] * num_states
    trap_total = 0
    for summary in summaries:
        for state, count in enumerate(summary.occupancy.counts):
            totals[state] += count
        trap_total += summary.occupancy.trap_count

    labels = [f"q{i}" for i in range(num_states)] + ["trap"]
    plt.figure(figsize=(8, 5))
    plt.bar(labels, totals + [trap_total])
    plt.title(f"State occupancy over {len(summaries)} run(s)")
    plt.xlabel("State")
    plt.ylabel("Visits")
    plt.grid(True, axis='y')
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    print(f"Saved plot to '{out_path}'")


def main(argv=None, stdin=None):
    parser = argparse.ArgumentParser(description="Run inputs through a word or comment DFA")
    parser.add_argument('--stdin', action='store_true', help='Also read one input per line from standard input')
    parser.add_argument('--escapes', action='store_true', help='Decode backslash escapes (e.g. \\n) in arguments')
    parser.add_argument('--log-dir', default=None, help='Save a JSONL trace of every run into this directory')
    parser.add_argument('--plot', default=None, help='Save a state-occupancy bar chart to this path')
    sub = parser.add_subparsers(dest='kind', required=True)

    p_word = sub.add_parser('word', help='Recognize exactly one word')
    p_word.add_argument('word', help='Word the automaton accepts')
    p_word.add_argument('inputs', nargs='*', help='Inputs to test')

    p_comment = sub.add_parser('comment', help='Recognize // ..., { ... } and (* ... *) comments')
    p_comment.add_argument('inputs', nargs='*', help='Inputs to test')

    args = parser.parse_args(argv)

    try:
        automaton = build_automaton(args)
    except InvalidAutomatonError as e:
        parser.error(str(e))
    dfa = LoggedAutomaton(automaton, log_dir=args.log_dir or "logs")
    inputs = collect_inputs(args, stdin)
    if not inputs:
        parser.error("no inputs given")

    all_accepted = True
    for s in inputs:
        accepted, history = dfa.run_traced(s)
        all_accepted = all_accepted and accepted
        result = "ACCEPTED" if accepted else "REJECTED"
        print(f"{result}: {s!r} (Path: {history})")

    if args.log_dir:
        print(f"Saved trace to '{dfa.save_log()}'")
    if args.plot:
        plot_occupancy(list(dfa.logger.runs.values()), dfa.automaton.num_states, args.plot)

    return 0 if all_accepted else 1


if __name__ == "__main__":
    sys.exit(main())
