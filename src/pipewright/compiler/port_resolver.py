# src/pipewright/compiler/port_resolver.py
"""Effective port resolution per node.

A component's static ports can be replaced by a dynamic resolution computed
from the node's current params (e.g. an entry point whose outputs are its
configured runtime inputs). The resolver callback is third-party code: a
failure is isolated to its own node, which falls back to static ports and
carries a warning. It never aborts compilation of the graph.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pipewright.compiler.models import ValidationIssue
from pipewright.contracts.components import ComponentSpec, ResolvedPorts
from pipewright.contracts.enums import Severity
from pipewright.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PortResolution:
    """Result of resolving one node's ports.

    ``warning`` is set when dynamic resolution failed and static ports were used.
    """

    ports: ResolvedPorts
    dynamic: bool = False
    warning: ValidationIssue | None = None


def resolve_node_ports(node_id: str, component: ComponentSpec, params: Mapping[str, Any]) -> PortResolution:
    """Resolve the effective ports of one node."""
    if component.resolve_ports is None:
        return PortResolution(ports=component.static_ports)

    try:
        # The resolver gets its own copy so it cannot mutate node config.
        resolved = component.resolve_ports(copy.deepcopy(dict(params)))
        if not isinstance(resolved, ResolvedPorts):
            raise TypeError(f"resolve_ports returned {type(resolved).__name__}, expected ResolvedPorts")
    except Exception as exc:
        logger.warning(
            "dynamic_port_resolution_failed",
            node_id=node_id,
            component_id=component.id,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return PortResolution(
            ports=component.static_ports,
            warning=ValidationIssue(
                node=node_id,
                field="ports",
                message=f"Dynamic port resolution failed for '{component.id}' ({type(exc).__name__}: {exc}); using static ports",
                severity=Severity.WARNING,
                suggestion="Check the node parameters that drive this component's ports",
            ),
        )

    return PortResolution(ports=resolved, dynamic=True)

