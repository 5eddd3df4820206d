# src/pipewright/compiler/mapping.py
"""Input mapping and manual-override reconciliation.

Each incoming data edge becomes an input mapping keyed by the target port.
A port can also carry a manual value (from ``params`` or ``inputOverrides``).
When both exist, the port's value priority decides:

    connection-first (default)  manual value discarded, connection wins
    manual-first                manual value kept alongside the mapping

Required ports are enforced AFTER reconciliation, so a manual value that
was discarded in favour of a connection still counts as satisfied.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pipewright.compiler.models import MissingRequiredInputError
from pipewright.contracts.components import ResolvedPorts
from pipewright.contracts.definition import SELF_HANDLE, InputMapping
from pipewright.contracts.graph import GraphEdge


@dataclass(frozen=True, slots=True)
class ResolvedInputs:
    """Reconciled inputs of one action."""

    params: dict[str, Any]
    input_overrides: dict[str, Any]
    input_mappings: dict[str, InputMapping]


def edge_target_handle(edge: GraphEdge) -> str | None:
    """Target port of an edge; falls back to the source handle when unset."""
    return edge.target_handle if edge.target_handle is not None else edge.source_handle


def edge_source_handle(edge: GraphEdge) -> str:
    """Source port of an edge; ``__self__`` maps the source's whole output."""
    return edge.source_handle if edge.source_handle is not None else SELF_HANDLE


def is_control_edge(edge: GraphEdge) -> bool:
    """An edge with no handles orders execution but carries no data."""
    return edge.source_handle is None and edge.target_handle is None


def build_input_mappings(incoming: tuple[GraphEdge, ...]) -> dict[str, InputMapping]:
    """Map each connected target port to its source; control edges are skipped.

    If two edges feed the same port the later edge wins here. The validator
    reports that case as an error before a definition is produced.
    """
    mappings: dict[str, InputMapping] = {}
    for edge in incoming:
        target_handle = edge_target_handle(edge)
        if target_handle is None:
            continue
        mappings[target_handle] = InputMapping(source_ref=edge.source, source_handle=edge_source_handle(edge))
    return mappings


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def resolve_inputs(
    node_id: str,
    ports: ResolvedPorts,
    incoming: tuple[GraphEdge, ...],
    params: Mapping[str, Any],
    input_overrides: Mapping[str, Any],
) -> ResolvedInputs:
    """Reconcile connections with manual values and enforce required inputs.

    Args:
        node_id: Node being compiled
        ports: The node's effective ports
        incoming: Edges targeting the node, in edge order
        params: Component params (scheduling keys already removed)
        input_overrides: Per-port manual values

    Raises:
        MissingRequiredInputError: If a required input has neither a mapping nor a value
    """
    mappings = build_input_mappings(incoming)
    resolved_params = dict(params)
    resolved_overrides = dict(input_overrides)

    for port_id in mappings:
        port = ports.input(port_id)
        if port is not None and port.manual_first:
            continue
        resolved_params.pop(port_id, None)
        resolved_overrides.pop(port_id, None)

    for port in ports.inputs:
        if not port.required or port.id in mappings:
            continue
        if _has_value(resolved_overrides.get(port.id)) or _has_value(resolved_params.get(port.id)):
            continue
        raise MissingRequiredInputError(node_id, port.id, port.label)

    return ResolvedInputs(
        params=resolved_params,
        input_overrides=resolved_overrides,
        input_mappings=mappings,
    )
