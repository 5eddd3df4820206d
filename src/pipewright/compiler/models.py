# src/pipewright/compiler/models.py
"""Types, constants, and exceptions for workflow compilation.

Depends only on contracts.enums, to prevent import cycles.
"""

from __future__ import annotations

from dataclasses import dataclass

from pipewright.contracts.enums import Severity


class WorkflowCompilationError(ValueError):
    """Base for every error that aborts a compile call.

    All compilation errors are terminal for the call. The compiler keeps no
    state, so callers fix the graph and compile again.
    """


class UnknownComponentError(WorkflowCompilationError):
    """A node references a component type that is not registered."""

    def __init__(self, node_id: str, component_id: str, suggestions: list[str] | None = None) -> None:
        self.node_id = node_id
        self.component_id = component_id
        self.suggestions = list(suggestions or [])
        hint = f" Did you mean: {', '.join(self.suggestions)}?" if self.suggestions else ""
        super().__init__(f"Component not registered: {component_id} (node '{node_id}').{hint}")


class UnknownNodeReferenceError(WorkflowCompilationError):
    """An edge names a node that is not part of the executable graph."""

    def __init__(self, edge_id: str, node_id: str, endpoint: str) -> None:
        self.edge_id = edge_id
        self.node_id = node_id
        self.endpoint = endpoint
        super().__init__(f"Edge '{edge_id}' references unknown {endpoint} node '{node_id}'")


class CyclicGraphError(WorkflowCompilationError):
    """The graph contains at least one cycle, so no execution order exists."""

    def __init__(self, node_ids: list[str], cycle: list[str] | None = None) -> None:
        self.node_ids = list(node_ids)
        self.cycle = list(cycle or [])
        if self.cycle:
            path = " -> ".join([*self.cycle, self.cycle[0]])
            detail = f": {path}"
        else:
            detail = f"; unsortable nodes: {', '.join(self.node_ids)}"
        super().__init__(f"Workflow graph contains a cycle{detail}")


class MissingRequiredInputError(WorkflowCompilationError):
    """A required input port has neither a connection nor a manual value."""

    def __init__(self, node_id: str, port_id: str, port_label: str | None = None) -> None:
        self.node_id = node_id
        self.port_id = port_id
        self.port_label = port_label or port_id
        super().__init__(
            f"Node '{node_id}' is missing required input '{self.port_label}' ({port_id}). "
            "Hint: provide a manual value or connect a port."
        )


class MissingEntrypointError(WorkflowCompilationError):
    """No node uses the designated entry component."""

    def __init__(self, entry_component_id: str) -> None:
        self.entry_component_id = entry_component_id
        super().__init__(
            f"Workflow has no entry point: add a '{entry_component_id}' component to define how the workflow is invoked"
        )


class InvalidEntrypointError(WorkflowCompilationError):
    """The entry point exists but is ambiguous or misplaced."""

    def __init__(self, message: str, *, expected_component_id: str, found_component_id: str | None = None) -> None:
        self.expected_component_id = expected_component_id
        self.found_component_id = found_component_id
        super().__init__(f"{message} (expected component '{expected_component_id}', found '{found_component_id}')")


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One finding from semantic validation.

    Errors block compilation; warnings are reported alongside the definition.
    """

    node: str
    field: str
    message: str
    severity: Severity = Severity.ERROR
    suggestion: str | None = None

    def format_line(self) -> str:
        line = f"[{self.node}] {self.field}: {self.message}"
        if self.suggestion:
            line += f" (suggestion: {self.suggestion})"
        return line


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of the holistic semantic validator."""

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


class SemanticValidationError(WorkflowCompilationError):
    """Aggregated semantic validation errors; lists every error line."""

    def __init__(self, errors: list[ValidationIssue] | tuple[ValidationIssue, ...]) -> None:
        self.errors = tuple(errors)
        lines = "\n".join(f"  - {issue.format_line()}" for issue in self.errors)
        super().__init__(f"Workflow validation failed with {len(self.errors)} error(s):\n{lines}")


def _suggest_similar(name: str, candidates: list[str]) -> list[str]:
    """Suggest similar names for unknown-reference errors."""
    import difflib

    return difflib.get_close_matches(name, candidates, n=3, cutoff=0.6)
