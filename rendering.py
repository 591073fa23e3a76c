import base64
import binascii

import graphviz
import pandas as pd

from config import Config, GraphConfig


def nfa_to_graphviz(nfa, active_ids=(), fired=(), accepted=False):
    dot = graphviz.Digraph(format='png')

    dot.attr(size=GraphConfig.GRAPH_SIZE)
    dot.attr('node', fontsize=GraphConfig.FONT_SIZE)
    dot.attr('edge', fontsize=GraphConfig.FONT_SIZE)
    dot.attr('graph', rankdir=GraphConfig.RANKDIR)

    dot.node('', shape='none')
    dot.edge('', str(nfa.start.id))

    for state in nfa.states:
        attrs = {'shape': "doublecircle" if state.is_accept else "circle"}
        if state.id in active_ids:
            color = GraphConfig.ACCEPTED_COLOR if accepted and state.is_accept else GraphConfig.ACTIVE_COLOR
            attrs.update(style='filled', fillcolor=color)
        dot.node(str(state.id), f"q{state.id}", **attrs)

    fired = set(fired)
    for t in nfa.transitions:
        attrs = {}
        if t.is_epsilon:
            attrs.update(style='dashed', color=GraphConfig.EPSILON_EDGE_COLOR)
        if t in fired:
            attrs.update(color=GraphConfig.FIRED_EDGE_COLOR, penwidth='2')
        dot.edge(str(t.source), str(t.target), label=t.label, **attrs)

    return dot


def transitions_frame(nfa):
    rows = [{"From": f"q{t.source}", "Symbol": t.label, "To": f"q{t.target}"} for t in nfa.transitions]
    return pd.DataFrame(rows, columns=["From", "Symbol", "To"])


def history_frame(simulation):
    rows = []
    for i, active in enumerate(simulation.history):
        rows.append({
            "Step": i,
            "Consumed": simulation.text[i - 1] if i > 0 else Config.EPSILON_SYMBOL,
            "Active States": ', '.join(f"q{s.id}" for s in sorted(active, key=lambda s: s.id)) or "∅",
            "Accepting": any(s.is_accept for s in active),
        })
    return pd.DataFrame(rows, columns=["Step", "Consumed", "Active States", "Accepting"]).set_index("Step")


def encode_pattern(pattern):
    return base64.urlsafe_b64encode(pattern.encode('utf-8')).decode('ascii')


def decode_pattern(encoded, default=Config.DEFAULT_PATTERN):
    try:
        return base64.urlsafe_b64decode(encoded.encode('ascii')).decode('utf-8')
    except (binascii.Error, UnicodeError, ValueError):
        return default
