"""Tests for dfa_viz/data_loader.py."""

import json
import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dfa_viz.data_loader import TraceData, load_trace
from logged_automaton import LoggedAutomaton
from word_automaton import WordAutomaton


def _make_log_file(rows: list[dict]) -> str:
    """Write rows to a temp JSONL file and return the path."""
    tmpdir = tempfile.mkdtemp()
    path = os.path.join(tmpdir, "trace_log.jsonl")
    with open(path, "w") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")
    return path


SAMPLE_ROWS = [
    {"record": "step", "step": 0, "run_id": 0, "phase": "init",
     "state_before": None, "symbol": None, "state_after": 0, "via": None,
     "accepting": False},
    {"record": "step", "step": 1, "run_id": 0, "phase": "step",
     "state_before": 0, "symbol": "{", "state_after": 4, "via": "table",
     "accepting": False},
    {"record": "step", "step": 2, "run_id": 0, "phase": "step",
     "state_before": 4, "symbol": "}", "state_after": 3, "via": "override",
     "accepting": True},
    {"record": "step", "step": 3, "run_id": 0, "phase": "final",
     "state_before": None, "symbol": None, "state_after": 3, "via": None,
     "accepting": True},
    {"record": "step", "step": 4, "run_id": 1, "phase": "init",
     "state_before": None, "symbol": None, "state_after": 0, "via": None,
     "accepting": False},
    {"record": "step", "step": 5, "run_id": 1, "phase": "step",
     "state_before": 0, "symbol": "x", "state_after": -1, "via": "undefined",
     "accepting": False},
    {"record": "step", "step": 6, "run_id": 1, "phase": "step",
     "state_before": -1, "symbol": "y", "state_after": -1, "via": "absorbed",
     "accepting": False},
    {"record": "step", "step": 7, "run_id": 1, "phase": "final",
     "state_before": None, "symbol": None, "state_after": -1, "via": None,
     "accepting": False},
    {"record": "summary", "run_id": 0, "kind": "comment", "input": "{}",
     "accepted": True, "path": [0, 4, 3], "trapped_at": None,
     "occupancy": {"counts": [1, 0, 0, 1, 1, 0, 0, 0], "trap_count": 0,
                   "most_visited": 0}},
    {"record": "summary", "run_id": 1, "kind": "comment", "input": "xy",
     "accepted": False, "path": [0, -1, -1], "trapped_at": 0,
     "occupancy": {"counts": [1, 0, 0, 0, 0, 0, 0, 0], "trap_count": 2,
                   "most_visited": 0}},
]


class TestTraceData:
    def test_counts(self):
        data = TraceData(SAMPLE_ROWS)
        assert data.num_steps == 8
        assert set(data.summaries) == {0, 1}

    def test_get_step(self):
        data = TraceData(SAMPLE_ROWS)
        assert data.get_step(1)["symbol"] == "{"
        assert data.get_step(99) == {}
        assert data.get_step(-1) == {}

    def test_runs(self):
        assert TraceData(SAMPLE_ROWS).runs() == [0, 1]

    def test_run_steps(self):
        data = TraceData(SAMPLE_ROWS)
        assert len(data.get_run_steps(1)) == 4

    def test_summary(self):
        data = TraceData(SAMPLE_ROWS)
        assert data.get_summary(0)["input"] == "{}"
        assert data.get_summary(9) == {}

    def test_path_skips_final(self):
        data = TraceData(SAMPLE_ROWS)
        path = data.get_path(0)
        assert [p["state"] for p in path] == [0, 4, 3]
        assert path[2]["via"] == "override"

    def test_state_series(self):
        assert TraceData(SAMPLE_ROWS).get_state_series(1) == [0, -1, -1]

    def test_rows_without_record_key_are_steps(self):
        rows = [{k: v for k, v in r.items() if k != "record"} for r in SAMPLE_ROWS[:4]]
        assert TraceData(rows).num_steps == 4


class TestNarrative:
    def test_init(self):
        text = TraceData(SAMPLE_ROWS).generate_narrative(0)
        assert "Reset" in text
        assert "q0" in text
        assert "'{}'" in text

    def test_table_step(self):
        text = TraceData(SAMPLE_ROWS).generate_narrative(1)
        assert "q0 → q4" in text
        assert "via table" in text

    def test_accepting_step(self):
        text = TraceData(SAMPLE_ROWS).generate_narrative(2)
        assert "accepting" in text

    def test_final(self):
        assert "ACCEPTED" in TraceData(SAMPLE_ROWS).generate_narrative(3)
        assert "REJECTED in trap" in TraceData(SAMPLE_ROWS).generate_narrative(7)

    def test_trap_steps(self):
        data = TraceData(SAMPLE_ROWS)
        assert "moved to trap" in data.generate_narrative(5)
        assert "symbol ignored" in data.generate_narrative(6)

    def test_missing_step(self):
        assert TraceData([]).generate_narrative(0) == "No data for this step."


class TestLoadTrace:
    def test_load(self):
        path = _make_log_file(SAMPLE_ROWS)
        data = load_trace(path)
        assert data.num_steps == 8
        assert data.get_summary(1)["trapped_at"] == 0

    def test_blank_lines_ignored(self):
        path = _make_log_file(SAMPLE_ROWS[:2])
        with open(path, "a") as f:
            f.write("\n\n")
        assert load_trace(path).num_steps == 2

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_trace("/nonexistent/trace_log.jsonl")

    def test_reads_saved_logger_output(self):
        dfa = LoggedAutomaton(WordAutomaton("ab"), log_dir=tempfile.mkdtemp())
        dfa.run("ab")
        data = load_trace(dfa.save_log())
        assert data.num_steps == 4
        assert data.runs() == [0]
        assert data.get_summary(0)["accepted"] is True
