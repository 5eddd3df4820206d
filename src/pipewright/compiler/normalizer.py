# src/pipewright/compiler/normalizer.py
"""Graph normalization: the executable view of a canvas graph.

Presentation-only components (sticky notes, text annotations) live on the
canvas but must never be scheduled. Normalization builds a VIEW without
them; the input graph is left untouched.

Unknown component types are deliberately kept so that component resolution
reports them, rather than silently dropping work.
"""

from __future__ import annotations

from dataclasses import dataclass

from pipewright.contracts.components import CapabilityRegistry
from pipewright.contracts.graph import GraphEdge, GraphNode, WorkflowGraph
from pipewright.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class NormalizedGraph:
    """Executable view of a workflow graph.

    Attributes:
        node_ids: Executable node ids in declaration order
        nodes: Executable nodes by id
        edges: Edges retained for compilation (may still reference missing nodes)
        orphaned_edges: Edges dropped because an endpoint is presentation-only
        presentation_node_ids: Ids of nodes excluded from execution
    """

    node_ids: tuple[str, ...]
    nodes: dict[str, GraphNode]
    edges: tuple[GraphEdge, ...]
    orphaned_edges: tuple[GraphEdge, ...]
    presentation_node_ids: frozenset[str]


def normalize_graph(graph: WorkflowGraph, registry: CapabilityRegistry) -> NormalizedGraph:
    """Filter presentation-only nodes and the edges touching them."""
    presentation: set[str] = set()
    executable: dict[str, GraphNode] = {}

    for node in graph.nodes:
        component = registry.get(node.type)
        if component is not None and component.presentation_only:
            presentation.add(node.id)
            continue
        executable[node.id] = node

    retained: list[GraphEdge] = []
    orphaned: list[GraphEdge] = []
    for edge in graph.edges:
        if edge.source in presentation or edge.target in presentation:
            orphaned.append(edge)
        else:
            retained.append(edge)

    if presentation:
        logger.debug(
            "presentation_nodes_excluded",
            node_ids=sorted(presentation),
            orphaned_edges=[edge.id for edge in orphaned],
        )

    return NormalizedGraph(
        node_ids=tuple(executable),
        nodes=executable,
        edges=tuple(retained),
        orphaned_edges=tuple(orphaned),
        presentation_node_ids=frozenset(presentation),
    )
