# src/pipewright/compiler/validator.py
"""Holistic semantic validation of a compiled definition.

Runs after the structural stages have produced a candidate definition and
collects EVERY problem instead of stopping at the first, so the canvas can
show all of them at once. Errors block the definition; warnings travel with it.

Rules:
    errors    duplicate edge ids
              several edges feeding one input port
              data edge naming a missing source or target port
              data edge joining incompatible port types
              required parameter missing
              required secret parameter missing
              secret parameter holding a raw credential
              entry point runtimeInputs malformed
    warnings  edges orphaned by presentation-only nodes
              edge with a sourceHandle but no targetHandle
              secret reference that may be malformed
              entry point with no runtimeInputs
              maxConcurrency below 1
"""

from __future__ import annotations

import dataclasses
import re
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pipewright.compiler.mapping import edge_source_handle, edge_target_handle, is_control_edge
from pipewright.compiler.models import ValidationIssue, ValidationResult
from pipewright.contracts.components import ComponentSpec, ResolvedPorts
from pipewright.contracts.definition import SELF_HANDLE, WorkflowAction, WorkflowDefinition
from pipewright.contracts.enums import Severity
from pipewright.contracts.graph import GraphEdge
from pipewright.contracts.ports import describe_port_type, is_compatible

_UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

# Shapes of well-known provider credentials.
_RAW_CREDENTIAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^AIza[A-Za-z0-9_-]{35}$"),  # Google API key
    re.compile(r"^sk-[A-Za-z0-9]{48}$"),  # Stripe / OpenAI style secret key
    re.compile(r"^ghp_[A-Za-z0-9]{36}$"),  # GitHub personal access token
    re.compile(r"^xoxb-[0-9]+-[0-9]+-[A-Za-z0-9]{24}$"),  # Slack bot token
    re.compile(r"^[A-Za-z0-9]{32,}$"),  # long opaque alphanumeric
)
_KEY_LIKE = re.compile(r"[A-Za-z0-9_-]{20,}")
_MAX_SECRET_REFERENCE_LENGTH = 100

_RUNTIME_INPUTS_PARAMETER = "runtimeInputs"
_RUNTIME_INPUT_FIELDS = ("id", "label", "type")


def is_secret_reference(value: str) -> bool:
    """Whether ``value`` looks like a secret-store reference rather than a raw secret.

    UUIDs are always accepted. Known credential shapes are rejected. Anything
    else is accepted if it has a sane identifier length.
    """
    if _UUID_PATTERN.match(value):
        return True
    if any(pattern.match(value) for pattern in _RAW_CREDENTIAL_PATTERNS):
        return False
    return 1 <= len(value) <= _MAX_SECRET_REFERENCE_LENGTH


def _looks_like_raw_credential(value: str) -> bool:
    return len(value) > 20 and (value.startswith(("AIza", "sk-")) or _KEY_LIKE.search(value) is not None)


class _Issues:
    """Accumulator for errors and warnings."""

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []

    def error(self, node: str, field: str, message: str, suggestion: str | None = None) -> None:
        self.errors.append(ValidationIssue(node, field, message, Severity.ERROR, suggestion))

    def warning(self, node: str, field: str, message: str, suggestion: str | None = None) -> None:
        self.warnings.append(ValidationIssue(node, field, message, Severity.WARNING, suggestion))


def validate_definition(
    definition: WorkflowDefinition,
    *,
    graph_edges: Sequence[GraphEdge],
    retained_edges: Sequence[GraphEdge],
    orphaned_edges: Sequence[GraphEdge],
    ports: Mapping[str, ResolvedPorts],
    components: Mapping[str, ComponentSpec],
    extra_warnings: Iterable[ValidationIssue] = (),
    fail_on_warnings: bool = False,
) -> ValidationResult:
    """Validate a candidate definition against the graph it was compiled from.

    Args:
        definition: Candidate definition
        graph_edges: Every edge of the input graph (for duplicate id checks)
        retained_edges: Edges between executable nodes
        orphaned_edges: Edges dropped with presentation-only nodes
        ports: Effective ports per node ref
        components: Component spec per node ref
        extra_warnings: Warnings raised by earlier stages
        fail_on_warnings: Promote every warning to an error
    """
    issues = _Issues()

    _check_duplicate_edge_ids(graph_edges, issues)
    _check_orphaned_edges(orphaned_edges, issues)
    _check_port_fan_in(retained_edges, ports, issues)
    _check_edge_ports(retained_edges, ports, issues)
    for action in definition.actions:
        component = components[action.ref]
        checks_runtime_inputs = action.ref == definition.entrypoint.ref and component.declares_parameter(
            _RUNTIME_INPUTS_PARAMETER
        )
        _check_required_parameters(
            action,
            component,
            issues,
            reported_elsewhere={_RUNTIME_INPUTS_PARAMETER} if checks_runtime_inputs else set(),
        )
        _check_secret_parameters(action, component, issues)
        if checks_runtime_inputs:
            _check_runtime_inputs(action, issues)
    _check_concurrency(definition, issues)

    warnings = [*extra_warnings, *issues.warnings]
    if fail_on_warnings:
        promoted = [dataclasses.replace(issue, severity=Severity.ERROR) for issue in warnings]
        return ValidationResult(errors=(*issues.errors, *promoted), warnings=())
    return ValidationResult(errors=tuple(issues.errors), warnings=tuple(warnings))


def _check_duplicate_edge_ids(edges: Sequence[GraphEdge], issues: _Issues) -> None:
    counts = Counter(edge.id for edge in edges)
    for edge_id, count in counts.items():
        if count > 1:
            issues.error(
                "graph",
                "edges",
                f"Duplicate edge id '{edge_id}' ({count} edges)",
                "Give every edge a unique id",
            )


def _check_orphaned_edges(edges: Sequence[GraphEdge], issues: _Issues) -> None:
    for edge in edges:
        issues.warning(
            edge.target,
            "edges",
            f"Edge '{edge.id}' ({edge.source} -> {edge.target}) touches a presentation-only node and was ignored",
            "Remove the edge; annotation nodes never run",
        )


def _check_port_fan_in(edges: Sequence[GraphEdge], ports: Mapping[str, ResolvedPorts], issues: _Issues) -> None:
    feeds: Counter[tuple[str, str]] = Counter()
    for edge in edges:
        target_handle = edge_target_handle(edge)
        if target_handle is not None:
            feeds[(edge.target, target_handle)] += 1

    for (target, port_id), count in feeds.items():
        if count < 2:
            continue
        port = ports[target].input(port_id)
        label = port.label if port is not None else port_id
        issues.error(
            target,
            "inputMappings",
            f"Multiple edges detected for input port '{label}'. Only one edge allowed per input.",
            "Combine the sources with a transformer node, or give each source its own input",
        )


def _check_edge_ports(edges: Sequence[GraphEdge], ports: Mapping[str, ResolvedPorts], issues: _Issues) -> None:
    for edge in edges:
        if is_control_edge(edge):
            continue

        if edge.target_handle is None:
            issues.warning(
                edge.target,
                "inputMappings",
                f"Edge '{edge.id}' has sourceHandle '{edge.source_handle}' but no targetHandle; "
                f"mapped to input '{edge.source_handle}'",
                "Set targetHandle to name the receiving input port",
            )

        source_handle = edge_source_handle(edge)
        target_handle = edge_target_handle(edge) or source_handle

        target_port = ports[edge.target].input(target_handle)
        if target_port is None:
            issues.error(
                edge.target,
                "inputMappings",
                f"Target port '{target_handle}' not found on {edge.target}",
                "Connect to a valid input port on the target component",
            )
            continue

        if source_handle == SELF_HANDLE:
            # Whole-output mappings carry no port type to compare.
            continue

        source_port = ports[edge.source].output(source_handle)
        if source_port is None:
            issues.error(
                edge.target,
                "inputMappings",
                f"Source port '{source_handle}' not found on {edge.source}",
                "Confirm the source component exposes this output port",
            )
            continue

        if not is_compatible(source_port.data_type, target_port.data_type):
            issues.error(
                edge.target,
                "inputMappings",
                f"Type mismatch: {describe_port_type(source_port.data_type)} "
                f"({edge.source}.{source_handle}) cannot connect to "
                f"{describe_port_type(target_port.data_type)} ({edge.target}.{target_handle})",
                "Use matching port types or add a transformer component",
            )


def _check_required_parameters(
    action: WorkflowAction,
    component: ComponentSpec,
    issues: _Issues,
    reported_elsewhere: set[str],
) -> None:
    for parameter in component.parameters:
        if not parameter.required or parameter.is_secret or parameter.id in reported_elsewhere:
            continue
        if parameter.id in action.input_mappings:
            continue
        value = action.params.get(parameter.id)
        if value is None or value == "":
            issues.error(
                action.ref,
                parameter.id,
                f"Required parameter '{parameter.label}' is missing",
                "Configure this parameter in the node configuration panel",
            )


def _check_secret_parameters(action: WorkflowAction, component: ComponentSpec, issues: _Issues) -> None:
    for parameter in component.secret_parameters():
        value = action.params.get(parameter.id)
        if not value:
            if parameter.required:
                issues.error(
                    action.ref,
                    parameter.id,
                    f"Required secret parameter '{parameter.label}' is missing",
                    "Configure this parameter in the node configuration panel",
                )
            continue
        if not isinstance(value, str) or is_secret_reference(value):
            continue
        if _looks_like_raw_credential(value):
            issues.error(
                action.ref,
                parameter.id,
                f"Invalid secret reference: '{value[:10]}...' appears to be a raw credential",
                "Store the credential in the secrets manager and reference it by name",
            )
        else:
            issues.warning(
                action.ref,
                parameter.id,
                f"Secret reference '{value[:10]}...' may not exist or may be malformed",
                "Verify the secret exists in the secrets manager",
            )


def _check_runtime_inputs(action: WorkflowAction, issues: _Issues) -> None:
    runtime_inputs: Any = action.params.get(_RUNTIME_INPUTS_PARAMETER)
    if not isinstance(runtime_inputs, list):
        issues.error(
            action.ref,
            "runtimeInputs",
            "Entry point requires a runtimeInputs list",
            "Configure the inputs collected when the workflow is triggered",
        )
        return
    if not runtime_inputs:
        issues.warning(
            action.ref,
            "runtimeInputs",
            "Entry point has no runtime inputs configured",
            "Add runtime inputs if the workflow needs data when triggered",
        )
        return
    for position, runtime_input in enumerate(runtime_inputs):
        if isinstance(runtime_input, Mapping):
            missing = [field for field in _RUNTIME_INPUT_FIELDS if not runtime_input.get(field)]
        else:
            missing = list(_RUNTIME_INPUT_FIELDS)
        if missing:
            issues.error(
                action.ref,
                "runtimeInputs",
                f"Runtime input #{position} is missing required fields: {', '.join(missing)}",
                "Give each runtime input an id, a label and a type",
            )


def _check_concurrency(definition: WorkflowDefinition, issues: _Issues) -> None:
    for ref, metadata in definition.nodes.items():
        if metadata.max_concurrency is not None and metadata.max_concurrency < 1:
            issues.warning(
                ref,
                "maxConcurrency",
                f"maxConcurrency {metadata.max_concurrency} is below 1; the node may never be scheduled",
                "Use a positive concurrency limit or remove the setting",
            )
