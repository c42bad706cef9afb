"""Tests for dfa_viz/app.py — Trace Replay app."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dfa_viz.app import (
    build_automaton, create_app, handle_run, run_trace,
    _render_graph, _render_state_chart, _render_verdict,
)
from dash import no_update

from dfa_viz.data_loader import TraceData


# ── App Creation ────────────────────────────────────────────────────────────

class TestAppCreation:
    def test_create_app(self):
        assert create_app() is not None

    def test_app_has_layout(self):
        app = create_app()
        assert app.layout is not None

    def test_create_with_trace(self):
        trace = run_trace("word", "ab", "ab")
        app = create_app(trace)
        assert app is not None


# ── Helpers ─────────────────────────────────────────────────────────────────

class TestRunTrace:
    def test_build_automaton(self):
        assert build_automaton("word", "x").kind.value == "word"
        assert build_automaton("comment").kind.value == "comment"
        assert build_automaton("word", None).num_states == 1

    def test_comment_trace(self):
        trace = run_trace("comment", "", "{ a }")
        assert trace["accepted"] is True
        assert trace["description"]["kind"] == "comment"
        assert TraceData(trace["rows"]).num_steps == 7

    def test_word_trace_rejected(self):
        trace = run_trace("word", "ab", "ax")
        assert trace["accepted"] is False

    def test_none_input(self):
        trace = run_trace("word", "", None)
        assert trace["accepted"] is True


class TestHandleRun:
    def test_run_outputs(self):
        trace, slider_max, value, result = handle_run("word", "ab", "ab")
        assert trace["accepted"] is True
        assert slider_max == 3
        assert value == 0
        assert "ACCEPTED" in result.children

    def test_invalid_word_shows_error(self):
        trace, slider_max, value, result = handle_run("word", "€", "x")
        assert trace is no_update
        assert slider_max is no_update
        assert value is no_update
        assert "8-bit alphabet" in result.children


class TestRender:
    def test_render_graph(self):
        trace = run_trace("comment", "", "(**)")
        step = TraceData(trace["rows"]).get_step(2)
        assert _render_graph(trace["description"], step) is not None

    def test_state_chart(self):
        trace = run_trace("comment", "", "(**)")
        fig = _render_state_chart(TraceData(trace["rows"]))
        assert list(fig.data[0].y) == [0, 5, 6, 7, 3]

    def test_state_chart_upto(self):
        trace = run_trace("comment", "", "(**)")
        fig = _render_state_chart(TraceData(trace["rows"]), upto=2)
        assert list(fig.data[0].y) == [0, 5, 6]

    def test_state_chart_empty(self):
        fig = _render_state_chart(TraceData([]))
        assert len(fig.data) == 0

    def test_verdict(self):
        assert "ACCEPTED" in _render_verdict({"accepted": True}).children
        assert "REJECTED" in _render_verdict({"accepted": False}).children
