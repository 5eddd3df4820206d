# src/pipewright/compiler/__init__.py
"""Workflow graph compiler.

Turns a user-authored canvas graph into a validated, topologically ordered
WorkflowDefinition for the execution engine.

Import patterns:
    from pipewright.compiler import compile_workflow, WorkflowCompilationError
"""

from pipewright.compiler.assembler import (
    CompilationResult,
    compile_workflow,
    compile_workflow_graph,
    resolve_components,
)
from pipewright.compiler.dependencies import DependencyGraph, build_dependency_graph, topological_order
from pipewright.compiler.entrypoint import select_entrypoint
from pipewright.compiler.mapping import ResolvedInputs, build_input_mappings, resolve_inputs
from pipewright.compiler.metadata import CompiledNodeMetadata, compile_node_metadata
from pipewright.compiler.models import (
    CyclicGraphError,
    InvalidEntrypointError,
    MissingEntrypointError,
    MissingRequiredInputError,
    SemanticValidationError,
    UnknownComponentError,
    UnknownNodeReferenceError,
    ValidationIssue,
    ValidationResult,
    WorkflowCompilationError,
)
from pipewright.compiler.normalizer import NormalizedGraph, normalize_graph
from pipewright.compiler.port_resolver import PortResolution, resolve_node_ports
from pipewright.compiler.validator import is_secret_reference, validate_definition

__all__ = [
    "CompilationResult",
    "CompiledNodeMetadata",
    "CyclicGraphError",
    "DependencyGraph",
    "InvalidEntrypointError",
    "MissingEntrypointError",
    "MissingRequiredInputError",
    "NormalizedGraph",
    "PortResolution",
    "ResolvedInputs",
    "SemanticValidationError",
    "UnknownComponentError",
    "UnknownNodeReferenceError",
    "ValidationIssue",
    "ValidationResult",
    "WorkflowCompilationError",
    "build_dependency_graph",
    "build_input_mappings",
    "compile_node_metadata",
    "compile_workflow",
    "compile_workflow_graph",
    "is_secret_reference",
    "normalize_graph",
    "resolve_components",
    "resolve_inputs",
    "resolve_node_ports",
    "select_entrypoint",
    "topological_order",
    "validate_definition",
]
