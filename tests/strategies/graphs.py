# tests/strategies/graphs.py
"""Hypothesis strategies for workflow graphs.

dag_graphs() draws acyclic graphs over the built-in catalog: one entry point
and a set of console-log nodes, declared in a shuffled order. Edges only run
from a lower to a higher hidden rank, which guarantees acyclicity and keeps
the entry point a root.
"""

from __future__ import annotations

import string
from typing import Any

from hypothesis import strategies as st

from tests.fixtures.graphs import edge, entry_node, graph, node

node_ids = st.text(alphabet=string.ascii_lowercase + string.digits + "-_", min_size=1, max_size=8).map(
    lambda suffix: f"n-{suffix}"
)


@st.composite
def dag_graphs(draw: st.DrawFn, max_nodes: int = 10) -> dict[str, Any]:
    """Draw a raw graph mapping that compiles successfully.

    Returns the graph plus, under the ``_ranked`` key, node ids in rank
    order (tests pop it before compiling).
    """
    ids = draw(st.lists(node_ids, min_size=0, max_size=max_nodes, unique=True))
    ranked = ["entry", *ids]

    pairs = [(i, j) for i in range(len(ranked)) for j in range(i + 1, len(ranked))]
    chosen: list[tuple[int, int]] = draw(st.lists(st.sampled_from(pairs), unique=True)) if pairs else []

    declaration = draw(st.permutations(ranked))
    nodes = [
        entry_node() if node_id == "entry" else node(node_id, "core.console.log", params={"data": f"value of {node_id}"})
        for node_id in declaration
    ]

    edges = []
    for position, (i, j) in enumerate(chosen):
        if i == 0:
            # Data edge from the entry point's runtime input into the log label.
            edges.append(edge(f"e{position}", ranked[i], ranked[j], "fileId", "label"))
        else:
            edges.append(edge(f"e{position}", ranked[i], ranked[j]))

    result = graph(nodes, edges, name="generated")
    result["_ranked"] = ranked
    return result
