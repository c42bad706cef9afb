"""
DFA Trace Replay — Interactive step-through of a word or comment automaton.

Pick an automaton, type an input and press Run; the slider then walks the
trace one symbol at a time.

Panels:
  Left sidebar: automaton choice, word, input, run result
  Right: Cytoscape state graph, step narrative, state-over-time chart
"""

import os
import sys

from dash import Dash, html, dcc, Input, Output, State, no_update
import plotly.graph_objects as go

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from word_automaton import WordAutomaton
from comment_automaton import CommentAutomaton
from logged_automaton import LoggedAutomaton
from dfa_engine import InvalidAutomatonError
from dfa_viz.data_loader import TraceData
from dfa_viz.graph_builder import create_graph_panel


_CHART_LAYOUT = dict(
    plot_bgcolor="#1a1a2e",
    paper_bgcolor="#1a1a2e",
    font={"color": "#aaa", "size": 10},
    margin={"l": 35, "r": 15, "t": 15, "b": 30},
)


def build_automaton(kind, word=""):
    if kind == "word":
        return WordAutomaton(word or "")
    return CommentAutomaton()


def run_trace(kind, word, input_word) -> dict:
    """Run one input with logging and return {description, rows, accepted}."""
    dfa = LoggedAutomaton(build_automaton(kind, word))
    accepted = dfa.run(input_word or "")
    return {
        "description": dfa.automaton.describe(),
        "rows": dfa.logger.to_rows(),
        "accepted": accepted,
    }


def handle_run(kind, word, input_text):
    """Outputs for the Run button: (trace, slider max, slider value, result).

    A word the automaton cannot be built from leaves the current trace in
    place and shows the error instead of a verdict.
    """
    try:
        trace = run_trace(kind, word, input_text)
    except InvalidAutomatonError as e:
        return no_update, no_update, no_update, _render_error(str(e))
    steps = TraceData(trace["rows"]).num_steps
    return trace, max(steps - 1, 0), 0, _render_verdict(trace)


def create_app(initial_trace=None):
    """Create and return a configured Dash app."""
    app = Dash(__name__)

    if initial_trace is None:
        initial_trace = run_trace("comment", "", "(* a ** b *)")

    # ── Styles ───────────────────────────────────────────────────────────
    dark_bg = "#0f0f1a"
    panel_bg = "#1a1a2e"
    accent = "#6366f1"
    text_color = "#e0e0ee"
    muted = "#888"

    def _panel(title, children):
        return html.Div([
            html.H3(title, style={
                "color": text_color, "margin": "0 0 12px 0",
                "fontSize": "15px", "fontWeight": "600",
            }),
            html.Div(children),
        ], style={
            "backgroundColor": panel_bg,
            "borderRadius": "12px",
            "padding": "16px",
            "border": "1px solid #2a2a4a",
            "marginBottom": "12px",
        })

    input_style = {
        "backgroundColor": "#1e1e3a", "color": text_color,
        "border": "1px solid #3a3a5a", "borderRadius": "4px",
        "padding": "5px 8px", "fontSize": "12px", "width": "100%",
    }

    # ── Layout ───────────────────────────────────────────────────────────

    app.layout = html.Div(
        style={
            "backgroundColor": dark_bg, "minHeight": "100vh",
            "padding": "20px", "fontFamily": "'Inter', 'Segoe UI', sans-serif",
            "color": text_color,
        },
        children=[
            dcc.Store(id="trace-store", data=initial_trace),
            html.H1("DFA Trace Replay", style={
                "margin": "0 0 20px 0", "fontSize": "24px", "color": accent,
            }),
            html.Div(
                style={"display": "grid",
                       "gridTemplateColumns": "320px 1fr",
                       "gap": "16px"},
                children=[
                    # ── LEFT SIDEBAR ─────────────────────────────────
                    html.Div([
                        _panel("Automaton", [
                            dcc.RadioItems(
                                id="kind",
                                options=[
                                    {"label": " comment", "value": "comment"},
                                    {"label": " word", "value": "word"},
                                ],
                                value=initial_trace["description"]["kind"],
                                style={"fontSize": "12px"},
                            ),
                            dcc.Input(id="word", type="text",
                                      placeholder="Word (word automaton only)",
                                      style={**input_style, "marginTop": "8px"}),
                        ]),
                        _panel("Input", [
                            dcc.Textarea(id="input-text",
                                         placeholder="Input (newlines allowed)",
                                         style={**input_style, "height": "80px"}),
                            html.Button("Run", id="btn-run", n_clicks=0, style={
                                "backgroundColor": "#2a4a2a", "color": text_color,
                                "border": "1px solid #3a3a5a", "borderRadius": "6px",
                                "padding": "6px 14px", "marginTop": "8px",
                                "cursor": "pointer",
                            }),
                            html.Div(id="run-result", style={
                                "fontSize": "13px", "marginTop": "8px",
                            }, children=_render_verdict(initial_trace)),
                        ]),
                    ]),

                    # ── RIGHT: Visualization ─────────────────────────
                    html.Div([
                        _panel("State Graph", [html.Div(id="graph-container")]),
                        _panel("Step", [
                            dcc.Slider(id="step-slider", min=0,
                                       max=max(TraceData(initial_trace["rows"]).num_steps - 1, 0),
                                       step=1, value=0),
                            html.Pre(id="narrative", style={
                                "color": muted, "fontSize": "12px",
                                "whiteSpace": "pre-wrap",
                            }),
                        ]),
                        _panel("State over time", [dcc.Graph(id="state-chart")]),
                    ]),
                ],
            ),
        ],
    )

    # ── Callbacks ────────────────────────────────────────────────────────

    @app.callback(
        Output("trace-store", "data"),
        Output("step-slider", "max"),
        Output("step-slider", "value"),
        Output("run-result", "children"),
        Input("btn-run", "n_clicks"),
        State("kind", "value"),
        State("word", "value"),
        State("input-text", "value"),
        prevent_initial_call=True,
    )
    def on_run(n_clicks, kind, word, input_text):
        return handle_run(kind, word, input_text)

    @app.callback(
        Output("graph-container", "children"),
        Output("narrative", "children"),
        Output("state-chart", "figure"),
        Input("step-slider", "value"),
        Input("trace-store", "data"),
    )
    def on_step(step_idx, trace):
        data = TraceData(trace["rows"])
        step_idx = step_idx or 0
        return (
            _render_graph(trace["description"], data.get_step(step_idx)),
            data.generate_narrative(step_idx),
            _render_state_chart(data, step_idx),
        )

    return app


def _render_verdict(trace):
    if trace["accepted"]:
        return html.Span("✅ ACCEPTED", style={"color": "#4ade80", "fontWeight": "bold"})
    return html.Span("❌ REJECTED", style={"color": "#f87171", "fontWeight": "bold"})


def _render_error(message):
    return html.Span(f"⚠ {message}", style={"color": "#fbbf24"})


def _render_graph(description, step=None):
    return create_graph_panel(description, step)


def _render_state_chart(data: TraceData, upto: int = None):
    """Line chart of the state after each symbol; trap drawn as -1."""
    fig = go.Figure()

    runs = data.runs()
    if runs:
        path = data.get_path(runs[0])
        if upto is not None:
            path = [p for p in path if p["step"] <= upto]
        fig.add_trace(go.Scatter(
            x=list(range(len(path))),
            y=[p["state"] for p in path],
            mode="lines+markers",
            line={"color": "#6366f1", "width": 2, "shape": "hv"},
            marker={"size": 6},
            text=[p["symbol"] or "start" for p in path],
            hovertemplate="symbol %{text}<br>state %{y}<extra></extra>",
        ))

    fig.update_layout(
        **_CHART_LAYOUT,
        xaxis={"gridcolor": "#2a2a4a", "title": "Symbols consumed", "title_font_size": 10},
        yaxis={"gridcolor": "#2a2a4a", "title": "State", "title_font_size": 10,
               "dtick": 1},
        height=220,
    )
    return fig


# ── Main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app = create_app()
    print("DFA Trace Replay starting...")
    print("   Open http://127.0.0.1:8050 in your browser")
    app.run(debug=True, port=8050)
