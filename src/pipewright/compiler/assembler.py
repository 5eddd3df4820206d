# src/pipewright/compiler/assembler.py
"""Definition assembly: the compile pipeline end to end.

Stages run strictly in order, each consuming the previous stage's output:

    parse -> normalize -> resolve components -> dependency graph -> sort
          -> per node (metadata, ports, input mapping) -> entry point
          -> assemble -> semantic validation

Structural failures raise at the stage that detects them. Semantic problems
are collected by the validator and raised together. Nothing is cached
between calls: the same inputs always produce the same definition.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pipewright.compiler.dependencies import build_dependency_graph, topological_order
from pipewright.compiler.entrypoint import select_entrypoint
from pipewright.compiler.mapping import resolve_inputs
from pipewright.compiler.metadata import compile_node_metadata
from pipewright.compiler.models import (
    SemanticValidationError,
    UnknownComponentError,
    ValidationIssue,
    _suggest_similar,
)
from pipewright.compiler.normalizer import NormalizedGraph, normalize_graph
from pipewright.compiler.port_resolver import resolve_node_ports
from pipewright.compiler.validator import validate_definition
from pipewright.contracts.components import CapabilityRegistry, ComponentSpec, ResolvedPorts
from pipewright.contracts.definition import (
    CompiledEdge,
    DefinitionConfig,
    NodeMetadata,
    WorkflowAction,
    WorkflowDefinition,
)
from pipewright.contracts.graph import WorkflowGraph
from pipewright.core.canonical import definition_hash
from pipewright.core.config import CompilerSettings
from pipewright.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """A compiled definition with the warnings raised while compiling it."""

    definition: WorkflowDefinition
    warnings: tuple[ValidationIssue, ...] = ()
    definition_hash: str = ""


def resolve_components(normalized: NormalizedGraph, registry: CapabilityRegistry) -> dict[str, ComponentSpec]:
    """Look up the component of every executable node.

    Raises:
        UnknownComponentError: If a node's type is not registered
    """
    components: dict[str, ComponentSpec] = {}
    for node_id in normalized.node_ids:
        node = normalized.nodes[node_id]
        component = registry.get(node.type)
        if component is None:
            known = [spec.id for spec in registry.list_components()]
            raise UnknownComponentError(node_id, node.type, _suggest_similar(node.type, known))
        components[node_id] = component
    return components


def _coerce_graph(graph: WorkflowGraph | Mapping[str, Any]) -> WorkflowGraph:
    if isinstance(graph, WorkflowGraph):
        return graph
    return WorkflowGraph.model_validate(graph)


def compile_workflow(
    graph: WorkflowGraph | Mapping[str, Any],
    registry: CapabilityRegistry,
    *,
    settings: CompilerSettings | None = None,
) -> CompilationResult:
    """Compile a workflow graph into a validated definition.

    Args:
        graph: Workflow graph model, or its camelCase JSON mapping
        registry: Component capability lookup
        settings: Compiler settings (defaults when omitted)

    Returns:
        The definition plus every compilation warning

    Raises:
        pydantic.ValidationError: If a raw graph mapping is malformed
        WorkflowCompilationError: If the graph cannot be compiled
    """
    settings = settings or CompilerSettings()
    workflow = _coerce_graph(graph)
    log = logger.bind(workflow=workflow.name)

    normalized = normalize_graph(workflow, registry)
    components = resolve_components(normalized, registry)
    log.debug("components_resolved", node_count=len(components))

    dependency_graph = build_dependency_graph(normalized.node_ids, normalized.edges)
    order = topological_order(dependency_graph)
    log.debug("graph_sorted", order=order)

    stage_warnings: list[ValidationIssue] = []
    actions: list[WorkflowAction] = []
    nodes: dict[str, NodeMetadata] = {}
    ports: dict[str, ResolvedPorts] = {}

    for node_id in order:
        node = normalized.nodes[node_id]
        # Deep copies keep the compiled definition independent of the input graph.
        compiled = compile_node_metadata(node, copy.deepcopy(node.config.effective_params()))
        stage_warnings.extend(compiled.warnings)
        nodes[node_id] = compiled.metadata

        resolution = resolve_node_ports(node_id, components[node_id], compiled.params)
        if resolution.warning is not None:
            stage_warnings.append(resolution.warning)
        ports[node_id] = resolution.ports

        inputs = resolve_inputs(
            node_id,
            resolution.ports,
            dependency_graph.incoming_edges(node_id),
            compiled.params,
            copy.deepcopy(node.config.input_overrides),
        )
        actions.append(
            WorkflowAction(
                ref=node_id,
                component_id=node.type,
                params=inputs.params,
                input_overrides=inputs.input_overrides,
                depends_on=dependency_graph.dependencies(node_id),
                input_mappings=inputs.input_mappings,
            )
        )

    entrypoint = select_entrypoint(actions, settings.entry_component_id)

    definition = WorkflowDefinition(
        version=settings.definition_version,
        title=workflow.name,
        description=workflow.description,
        entrypoint=entrypoint,
        nodes=nodes,
        edges=[
            CompiledEdge(
                id=edge.id,
                source_ref=edge.source,
                target_ref=edge.target,
                source_handle=edge.source_handle,
                target_handle=edge.target_handle,
                kind=edge.kind,
            )
            for edge in normalized.edges
        ],
        dependency_counts={action.ref: len(action.depends_on) for action in actions},
        actions=actions,
        config=DefinitionConfig(environment=settings.environment, timeout_seconds=settings.timeout_seconds),
    )

    result = validate_definition(
        definition,
        graph_edges=workflow.edges,
        retained_edges=normalized.edges,
        orphaned_edges=normalized.orphaned_edges,
        ports=ports,
        components=components,
        extra_warnings=stage_warnings,
        fail_on_warnings=settings.fail_on_warnings,
    )
    if not result.is_valid:
        log.debug("validation_failed", error_count=len(result.errors))
        raise SemanticValidationError(result.errors)

    for warning in result.warnings:
        log.warning("compilation_warning", node=warning.node, field=warning.field, message=warning.message)

    digest = definition_hash(definition)
    log.info(
        "workflow_compiled",
        action_count=len(actions),
        edge_count=len(definition.edges),
        warning_count=len(result.warnings),
        entrypoint=entrypoint.ref,
        definition_hash=digest,
    )
    return CompilationResult(definition=definition, warnings=result.warnings, definition_hash=digest)


def compile_workflow_graph(
    graph: WorkflowGraph | Mapping[str, Any],
    registry: CapabilityRegistry,
    *,
    settings: CompilerSettings | None = None,
) -> WorkflowDefinition:
    """Compile a workflow graph and return only the definition.

    Warnings are logged; use compile_workflow() to receive them.
    """
    return compile_workflow(graph, registry, settings=settings).definition
