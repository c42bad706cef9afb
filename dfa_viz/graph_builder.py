"""
Cytoscape Graph Builder — Renders an automaton as an interactive state graph.

Nodes are states (plus the trap), edges are table rows and override rules.
The current state and the transition just taken are highlighted.
"""

import dash_cytoscape as cyto
from dash import html


# ── Cytoscape stylesheet ────────────────────────────────────────────────────

GRAPH_STYLESHEET = [
    # Default node style
    {
        "selector": "node",
        "style": {
            "label": "data(label)",
            "text-valign": "center",
            "text-halign": "center",
            "background-color": "#2a2a4a",
            "color": "#e0e0ee",
            "font-size": "12px",
            "border-width": 2,
            "border-color": "#3a3a5a",
            "width": 50,
            "height": 50,
        },
    },
    # Final state: double border look
    {
        "selector": "node.final",
        "style": {
            "border-width": 6,
            "border-style": "double",
            "border-color": "#a78bfa",
        },
    },
    # State whose outgoing edges come from an override
    {
        "selector": "node.override",
        "style": {
            "shape": "roundrectangle",
        },
    },
    # Current state
    {
        "selector": "node.current-state",
        "style": {
            "background-color": "#4f46e5",
            "border-color": "#c4b5fd",
            "width": 65,
            "height": 65,
            "font-weight": "bold",
        },
    },
    # Trap
    {
        "selector": "node.error",
        "style": {
            "background-color": "#7f1d1d",
            "border-color": "#ef4444",
        },
    },
    # Default edge style
    {
        "selector": "edge",
        "style": {
            "label": "data(label)",
            "font-size": "10px",
            "color": "#c0c0d0",
            "width": 2,
            "line-color": "#3a3a5a",
            "target-arrow-color": "#3a3a5a",
            "target-arrow-shape": "triangle",
            "curve-style": "bezier",
            "opacity": 0.8,
        },
    },
    # Override edge
    {
        "selector": "edge.override",
        "style": {
            "line-style": "dashed",
        },
    },
    # Edge taken by the current step
    {
        "selector": "edge.active",
        "style": {
            "line-color": "#6366f1",
            "target-arrow-color": "#6366f1",
            "width": 4,
            "opacity": 1,
        },
    },
]

TRAP_NODE = "trap"


def node_id(state: int, trap_state: int = -1) -> str:
    return TRAP_NODE if state == trap_state else f"q{state}"


def build_automaton_graph(description: dict, step: dict | None = None) -> list[dict]:
    """Build Cytoscape elements for an automaton.

    Args:
        description: Output of Automaton.describe().
        step: Optional trace step dict; its state_before/state_after are
            highlighted.

    Returns:
        List of Cytoscape node/edge elements.
    """
    step = step or {}
    trap = description.get("trap_state", -1)
    num_states = description["num_states"]
    finals = set(description.get("final_states", []))
    overrides = set(description.get("override_states", []))
    current = step.get("state_after")
    before = step.get("state_before")

    elements = []
    positions = _calculate_positions(num_states)

    # Nodes
    for state in range(num_states):
        classes = []
        if state == current:
            classes.append("current-state")
        if state in finals:
            classes.append("final")
        if state in overrides:
            classes.append("override")
        label = f"q{state}"
        if state == description.get("initial_state", 0):
            label = f"→q{state}"
        elements.append({
            "data": {"id": node_id(state, trap), "label": label},
            "position": positions[state],
            "classes": " ".join(classes),
        })

    trap_classes = ["error"]
    if current == trap:
        trap_classes.append("current-state")
    elements.append({
        "data": {"id": TRAP_NODE, "label": "trap"},
        "position": positions[TRAP_NODE],
        "classes": " ".join(trap_classes),
    })

    # Edges
    for src, tgt, label, kind in _collect_edges(description):
        classes = [kind] if kind == "override" else []
        if before is not None and src == before and tgt == current:
            classes.append("active")
        elements.append({
            "data": {
                "id": f"e_{src}_{tgt}_{kind}",
                "source": node_id(src, trap),
                "target": node_id(tgt, trap),
                "label": label,
            },
            "classes": " ".join(classes),
        })

    return elements


def _collect_edges(description: dict) -> list[tuple]:
    """Merge rows sharing (source, target) into one labelled edge.
    Returns list of (source, target, label, kind) tuples."""
    grouped = {}
    for src, symbol, tgt in description.get("rows", []):
        grouped.setdefault((src, tgt, "table"), []).append(repr(symbol)[1:-1])
    for src, condition, tgt in description.get("override_rules", []):
        grouped.setdefault((src, tgt, "override"), []).append(condition)
    return [
        (src, tgt, ", ".join(labels), kind)
        for (src, tgt, kind), labels in grouped.items()
    ]


def _calculate_positions(num_states: int) -> dict:
    """States on a line, trap centred below."""
    positions = {}
    for i in range(num_states):
        positions[i] = {"x": 100 + i * 130, "y": 100 + (i % 2) * 60}
    positions[TRAP_NODE] = {"x": 100 + max(num_states - 1, 0) * 65, "y": 300}
    return positions


# ── Component builders ───────────────────────────────────────────────────────

def create_graph_component(
    elements: list[dict],
    graph_id: str = "cyto-graph",
    height: str = "360px",
    layout_name: str = "preset",
) -> cyto.Cytoscape:
    """Create a Cytoscape component with the standard stylesheet."""
    return cyto.Cytoscape(
        id=graph_id,
        elements=elements,
        stylesheet=GRAPH_STYLESHEET,
        style={"width": "100%", "height": height,
               "backgroundColor": "#0f0f1a"},
        layout={"name": layout_name},
        userZoomingEnabled=True,
        userPanningEnabled=True,
        boxSelectionEnabled=False,
    )


def create_graph_panel(description: dict, step: dict | None = None) -> html.Div:
    """Graph plus a caption naming the automaton."""
    caption = f"{description.get('kind', '?')} automaton"
    if description.get("label"):
        caption += f": {description['label']!r}"
    return html.Div([
        html.Div(caption, style={"color": "#888", "fontSize": "12px",
                                 "marginBottom": "8px"}),
        create_graph_component(build_automaton_graph(description, step)),
    ])
