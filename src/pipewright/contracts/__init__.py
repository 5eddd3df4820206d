"""Shared contracts for cross-boundary data types.

Everything that crosses the compiler boundary lives here: the graph the
canvas sends in, the port type algebra and component capabilities the
registry exposes, and the compiled definition handed to the execution engine.

This package is a LEAF MODULE with no outbound dependencies to core/compiler.

Import patterns:
    from pipewright.contracts import WorkflowGraph, WorkflowDefinition, Ports
"""

from pipewright.contracts.components import (
    CapabilityRegistry,
    ComponentSpec,
    PortResolver,
    ResolvedPorts,
)
from pipewright.contracts.definition import (
    DEFAULT_ENTRY_COMPONENT_ID,
    DEFINITION_VERSION,
    SELF_HANDLE,
    CompiledEdge,
    DefinitionConfig,
    EntrypointRef,
    InputMapping,
    NodeMetadata,
    WorkflowAction,
    WorkflowDefinition,
)
from pipewright.contracts.enums import (
    EdgeKind,
    JoinStrategy,
    PortKind,
    PrimitiveName,
    Severity,
    ValuePriority,
)
from pipewright.contracts.graph import (
    SCHEDULING_KEYS,
    GraphEdge,
    GraphNode,
    NodeConfig,
    NodeData,
    WorkflowGraph,
)
from pipewright.contracts.ports import (
    ContractPort,
    ListPort,
    MapPort,
    ParameterMetadata,
    PortMetadata,
    Ports,
    PortType,
    PrimitivePort,
    describe_port_type,
    is_compatible,
    parse_port_type,
    port_type_to_dict,
    runtime_input_type_to_port_type,
)

__all__ = [
    "DEFAULT_ENTRY_COMPONENT_ID",
    "DEFINITION_VERSION",
    "SCHEDULING_KEYS",
    "SELF_HANDLE",
    "CapabilityRegistry",
    "CompiledEdge",
    "ComponentSpec",
    "ContractPort",
    "DefinitionConfig",
    "EdgeKind",
    "EntrypointRef",
    "GraphEdge",
    "GraphNode",
    "InputMapping",
    "JoinStrategy",
    "ListPort",
    "MapPort",
    "NodeConfig",
    "NodeData",
    "NodeMetadata",
    "ParameterMetadata",
    "PortKind",
    "PortMetadata",
    "PortResolver",
    "PortType",
    "Ports",
    "PrimitiveName",
    "PrimitivePort",
    "ResolvedPorts",
    "Severity",
    "ValuePriority",
    "WorkflowAction",
    "WorkflowDefinition",
    "WorkflowGraph",
    "describe_port_type",
    "is_compatible",
    "parse_port_type",
    "port_type_to_dict",
    "runtime_input_type_to_port_type",
]
