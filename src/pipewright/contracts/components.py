# src/pipewright/contracts/components.py
"""Component capability contracts.

The compiler never imports a concrete registry. It depends on the
CapabilityRegistry protocol below, which returns a closed ComponentSpec
record, or None for an unknown component type.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pipewright.contracts.ports import ParameterMetadata, PortMetadata


@dataclass(frozen=True, slots=True)
class ResolvedPorts:
    """Effective input and output ports of one component instance."""

    inputs: tuple[PortMetadata, ...] = ()
    outputs: tuple[PortMetadata, ...] = ()

    def input(self, port_id: str) -> PortMetadata | None:
        return next((port for port in self.inputs if port.id == port_id), None)

    def output(self, port_id: str) -> PortMetadata | None:
        return next((port for port in self.outputs if port.id == port_id), None)


# Recomputes a component's ports from the node's current params.
# Treated as untrusted: it may raise, and a failure only affects its own node.
type PortResolver = Callable[[Mapping[str, Any]], ResolvedPorts]


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """Static capability metadata for a registered component type.

    Attributes:
        id: Component type id referenced by graph nodes (e.g. "core.file.loader")
        label: Human-readable name
        inputs: Static input ports
        outputs: Static output ports
        parameters: Configuration parameters (used for secret checks)
        presentation_only: Canvas-only component (annotations); never scheduled
        resolve_ports: Optional dynamic port resolution from current params
        description: One-line description for listings
    """

    id: str
    label: str
    inputs: tuple[PortMetadata, ...] = ()
    outputs: tuple[PortMetadata, ...] = ()
    parameters: tuple[ParameterMetadata, ...] = ()
    presentation_only: bool = False
    resolve_ports: PortResolver | None = None
    description: str = ""

    def __post_init__(self) -> None:
        for direction, ports in (("input", self.inputs), ("output", self.outputs)):
            seen: set[str] = set()
            for port in ports:
                if port.id in seen:
                    raise ValueError(f"Component '{self.id}' declares duplicate {direction} port '{port.id}'")
                seen.add(port.id)

    @property
    def static_ports(self) -> ResolvedPorts:
        return ResolvedPorts(inputs=self.inputs, outputs=self.outputs)

    @property
    def has_dynamic_ports(self) -> bool:
        return self.resolve_ports is not None

    def secret_parameters(self) -> tuple[ParameterMetadata, ...]:
        return tuple(param for param in self.parameters if param.is_secret)

    def declares_parameter(self, parameter_id: str) -> bool:
        return any(param.id == parameter_id for param in self.parameters)


@runtime_checkable
class CapabilityRegistry(Protocol):
    """Lookup of component capabilities by component type id."""

    def get(self, component_id: str) -> ComponentSpec | None: ...

    def list_components(self) -> list[ComponentSpec]: ...
