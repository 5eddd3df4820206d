# src/pipewright/compiler/dependencies.py
"""Dependency graph construction and topological ordering.

Nodes are addressed by a dense integer index assigned in declaration order.
In-degree and adjacency are plain lists indexed by that integer; string refs
are only mapped back when results leave this module.

Ordering uses Kahn's algorithm with a FIFO queue seeded in declaration
order, so a fixed graph always yields the same order. That stability makes
compiled definitions reproducible and diffable.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import networkx as nx

from pipewright.compiler.models import CyclicGraphError, UnknownNodeReferenceError
from pipewright.contracts.graph import GraphEdge


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """Adjacency view of the executable graph.

    Attributes:
        node_ids: Executable node ids; position is the node's index
        incoming: In-degree per node index (one per edge, duplicates counted)
        adjacency: Neighbor indices per node index, in edge order
        edges_by_target: Incoming edges per node index, in edge order
    """

    node_ids: tuple[str, ...]
    incoming: tuple[int, ...]
    adjacency: tuple[tuple[int, ...], ...]
    edges_by_target: tuple[tuple[GraphEdge, ...], ...]

    def index_of(self, node_id: str) -> int:
        return self.node_ids.index(node_id)

    def incoming_edges(self, node_id: str) -> tuple[GraphEdge, ...]:
        return self.edges_by_target[self.index_of(node_id)]

    def dependencies(self, node_id: str) -> list[str]:
        """Distinct source refs of edges targeting ``node_id``, in first-edge order."""
        return list(dict.fromkeys(edge.source for edge in self.incoming_edges(node_id)))

    def in_degree(self, node_id: str) -> int:
        return self.incoming[self.index_of(node_id)]


def build_dependency_graph(node_ids: tuple[str, ...], edges: tuple[GraphEdge, ...]) -> DependencyGraph:
    """Build adjacency structures and validate every edge endpoint.

    Raises:
        UnknownNodeReferenceError: If an edge source or target is not an executable node
    """
    index = {node_id: position for position, node_id in enumerate(node_ids)}
    incoming = [0] * len(node_ids)
    adjacency: list[list[int]] = [[] for _ in node_ids]
    edges_by_target: list[list[GraphEdge]] = [[] for _ in node_ids]

    for edge in edges:
        if edge.source not in index:
            raise UnknownNodeReferenceError(edge.id, edge.source, "source")
        if edge.target not in index:
            raise UnknownNodeReferenceError(edge.id, edge.target, "target")

        source_index = index[edge.source]
        target_index = index[edge.target]
        incoming[target_index] += 1
        adjacency[source_index].append(target_index)
        edges_by_target[target_index].append(edge)

    return DependencyGraph(
        node_ids=node_ids,
        incoming=tuple(incoming),
        adjacency=tuple(tuple(neighbors) for neighbors in adjacency),
        edges_by_target=tuple(tuple(target_edges) for target_edges in edges_by_target),
    )


def topological_order(graph: DependencyGraph) -> list[str]:
    """Return node ids in dependency-respecting, deterministic order.

    Raises:
        CyclicGraphError: If the graph has at least one cycle
    """
    remaining = list(graph.incoming)
    queue: deque[int] = deque(position for position, degree in enumerate(remaining) if degree == 0)
    ordered: list[int] = []

    while queue:
        current = queue.popleft()
        ordered.append(current)
        for neighbor in graph.adjacency[current]:
            remaining[neighbor] -= 1
            if remaining[neighbor] == 0:
                queue.append(neighbor)

    if len(ordered) < len(graph.node_ids):
        emitted = set(ordered)
        stuck = [position for position in range(len(graph.node_ids)) if position not in emitted]
        raise CyclicGraphError(
            node_ids=[graph.node_ids[position] for position in stuck],
            cycle=_find_cycle(graph, stuck),
        )

    return [graph.node_ids[position] for position in ordered]


def _find_cycle(graph: DependencyGraph, stuck: list[int]) -> list[str]:
    """Name one concrete cycle among the nodes Kahn's algorithm could not emit."""
    stuck_set = set(stuck)
    subgraph: nx.DiGraph[int] = nx.DiGraph()
    subgraph.add_nodes_from(stuck)
    for position in stuck:
        subgraph.add_edges_from((position, neighbor) for neighbor in graph.adjacency[position] if neighbor in stuck_set)
    try:
        cycle_edges = nx.find_cycle(subgraph)
    except nx.NetworkXNoCycle:
        return []
    return [graph.node_ids[source] for source, _target in cycle_edges]
